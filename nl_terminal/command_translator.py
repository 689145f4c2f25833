"""Natural-language to shell command translation.

Translation is a deterministic lookup against the phrase catalog: a direct
containment match first, then word-overlap scoring, then a help message.
"""

import asyncio
import random
from typing import List, Mapping, Optional, Tuple

from . import logger
from .models import PhraseEntry, SafetyLevel, Translation
from .phrase_catalog import PHRASE_CATALOG
from .safety_validator import SafetyValidator

DIRECT_MATCH_CONFIDENCE = 0.95
FUZZY_BASE_CONFIDENCE = 0.7
FUZZY_WORD_CONFIDENCE = 0.1
FALLBACK_CONFIDENCE = 0.3

MAX_ALTERNATIVES = 3
MAX_SUGGESTIONS = 5
MIN_SUGGESTION_INPUT = 2
MIN_FUZZY_WORD_LENGTH = 3

FALLBACK_COMMAND = 'echo "Command not recognized. Try: list files, show disk space, git status"'
FALLBACK_ALTERNATIVES = ("list files", "show disk space", "running processes", "git status")


def _words_overlap(word: str, key_word: str) -> bool:
    # Short words ("a", "in", "ip") only count when they match exactly
    if word == key_word:
        return True
    if min(len(word), len(key_word)) < MIN_FUZZY_WORD_LENGTH:
        return False
    return key_word in word or word in key_word


def _fuzzy_words(text: str) -> List[str]:
    return [word for word in text.split() if len(word) >= MIN_FUZZY_WORD_LENGTH]


class CommandTranslator:
    """Translates natural-language requests into shell commands."""

    def __init__(
        self,
        catalog: Mapping[str, PhraseEntry] = PHRASE_CATALOG,
        validator: Optional[SafetyValidator] = None,
        delay_range: Tuple[float, float] = (0.5, 1.0)
    ):
        """
        Initialize CommandTranslator.

        Args:
            catalog: Ordered phrase catalog.
            validator: Safety validator (default patterns if not provided).
            delay_range: Min/max seconds of simulated processing time.
                Use (0, 0) to answer immediately.
        """
        self.catalog = catalog
        self.validator = validator or SafetyValidator()
        self.delay_range = delay_range

    async def translate(self, natural_language: str, safety_level=SafetyLevel.MODERATE) -> Translation:
        """
        Translate a natural-language request into a shell command.

        Args:
            natural_language: What the user typed.
            safety_level: Safety level passed on to the validator.

        Returns:
            Translation with the command, explanation, confidence and safety verdict.
        """
        await self._simulate_processing()

        normalized = natural_language.strip().lower()

        entry = self._direct_match(normalized)
        if entry is not None:
            logger.debug(f"직접 매칭: {entry.phrase_key!r}")
            return self._build(natural_language, entry, DIRECT_MATCH_CONFIDENCE, None, safety_level)

        entry, score = self._best_fuzzy_match(normalized)
        if entry is not None:
            logger.debug(f"유사 매칭: {entry.phrase_key!r} (score={score})")
            # Not clamped: three or more overlapping words push this past 1.0
            confidence = FUZZY_BASE_CONFIDENCE + score * FUZZY_WORD_CONFIDENCE
            alternatives = self._find_alternatives(normalized)
            return self._build(natural_language, entry, confidence, alternatives, safety_level)

        logger.info(f"번역 실패: {natural_language!r}")
        return Translation(
            original_query=natural_language,
            shell_command=FALLBACK_COMMAND,
            explanation=(
                f"I couldn't find a direct translation for \"{natural_language}\". "
                "Here are some things I can help with: file operations, system info, "
                "process management, network commands, and git operations."
            ),
            confidence=FALLBACK_CONFIDENCE,
            alternatives=FALLBACK_ALTERNATIVES,
            safety_check=self.validator.validate(FALLBACK_COMMAND, safety_level)
        )

    def suggest(self, partial_input: str) -> List[str]:
        """
        Get phrase suggestions for partial input.

        Args:
            partial_input: What the user has typed so far.

        Returns:
            Up to 5 phrase keys in catalog order; empty for inputs under 2 characters.
        """
        normalized = partial_input.strip().lower()
        if len(normalized) < MIN_SUGGESTION_INPUT:
            return []

        suggestions = [
            key for key in self.catalog
            if key.startswith(normalized) or normalized in key
        ]
        return suggestions[:MAX_SUGGESTIONS]

    async def _simulate_processing(self) -> None:
        low, high = self.delay_range
        if high > 0:
            await asyncio.sleep(random.uniform(low, high))

    def _direct_match(self, normalized: str) -> Optional[PhraseEntry]:
        if not normalized:
            return None
        for key, entry in self.catalog.items():
            if key and (key in normalized or normalized in key):
                return entry
        return None

    def _best_fuzzy_match(self, normalized: str) -> Tuple[Optional[PhraseEntry], int]:
        words = normalized.split()
        best_entry = None
        best_score = 0

        for key, entry in self.catalog.items():
            key_words = key.split()
            score = sum(
                1 for word in words
                if any(_words_overlap(word, kw) for kw in key_words)
            )
            if score > best_score:
                best_entry, best_score = entry, score

        return best_entry, best_score

    def _find_alternatives(self, normalized: str) -> Tuple[str, ...]:
        words = _fuzzy_words(normalized)
        alternatives: List[str] = []

        for key, entry in self.catalog.items():
            if len(alternatives) >= MAX_ALTERNATIVES:
                break
            if entry.shell_command in alternatives:
                continue
            if any(word in key for word in words):
                alternatives.append(entry.shell_command)

        return tuple(alternatives)

    def _build(self, query, entry, confidence, alternatives, safety_level) -> Translation:
        return Translation(
            original_query=query,
            shell_command=entry.shell_command,
            explanation=entry.explanation,
            confidence=confidence,
            alternatives=alternatives,
            safety_check=self.validator.validate(entry.shell_command, safety_level)
        )
