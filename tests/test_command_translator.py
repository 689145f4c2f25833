# tests/test_command_translator.py

import pytest
from unittest.mock import patch, AsyncMock

from nl_terminal.command_translator import (
    FALLBACK_ALTERNATIVES,
    FALLBACK_COMMAND,
    CommandTranslator,
)
from nl_terminal.models import PhraseEntry, RiskLevel, SafetyLevel
from nl_terminal.phrase_catalog import PHRASE_CATALOG


def test_catalog_keys_are_normalized():
    for key, entry in PHRASE_CATALOG.items():
        assert key == key.strip().lower()
        assert key
        assert entry.phrase_key == key


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        PHRASE_CATALOG["new"] = PhraseEntry("new", "true", "noop")


@pytest.mark.parametrize("level", ["strict", "moderate", "permissive"])
async def test_direct_match(translator, level):
    result = await translator.translate("list all files", level)
    assert result.shell_command == "ls -la"
    assert result.confidence == 0.95
    assert result.alternatives is None
    assert result.original_query == "list all files"
    assert result.safety_check.risk_level == RiskLevel.SAFE


async def test_direct_match_is_case_and_space_insensitive(translator):
    result = await translator.translate("   Show Disk Space please ")
    assert result.shell_command == "df -h"
    assert result.confidence == 0.95
    assert result.original_query == "   Show Disk Space please "


async def test_input_contained_in_key_matches(translator):
    # "git sta" is a substring of the "git status" key
    result = await translator.translate("git sta")
    assert result.shell_command == "git status"


async def test_first_key_in_table_order_wins(translator):
    # Both "list files" and "show files" appear in the input
    result = await translator.translate("show files or list files")
    assert result.shell_command == "ls -la"
    assert result.explanation == PHRASE_CATALOG["list files"].explanation


async def test_fuzzy_match(translator):
    result = await translator.translate("show me disk stuff", "moderate")
    assert result.shell_command in ("df -h", "du -sh *")
    assert 0.7 <= result.confidence < 1.3
    assert result.alternatives
    assert len(result.alternatives) <= 3
    assert len(set(result.alternatives)) == len(result.alternatives)


async def test_fuzzy_confidence_grows_with_overlap(translator):
    result = await translator.translate("memory display show")
    assert result.shell_command == "free -h"
    assert result.confidence == pytest.approx(0.9)


async def test_fuzzy_confidence_is_not_clamped():
    # Known quirk: three matching words give 1.0, more would exceed it
    catalog = {
        "alpha bravo charlie delta": PhraseEntry("alpha bravo charlie delta", "true", "test"),
    }
    translator = CommandTranslator(catalog=catalog, delay_range=(0, 0))
    result = await translator.translate("alphas bravos charlies deltas")
    assert result.confidence == pytest.approx(1.1)
    assert result.confidence > 1.0


async def test_fuzzy_ties_go_to_first_key():
    catalog = {
        "red apple": PhraseEntry("red apple", "echo first", "first"),
        "green apple": PhraseEntry("green apple", "echo second", "second"),
    }
    translator = CommandTranslator(catalog=catalog, delay_range=(0, 0))
    result = await translator.translate("apples")
    assert result.shell_command == "echo first"
    assert result.confidence == pytest.approx(0.8)


async def test_short_words_match_only_exactly(translator):
    result = await translator.translate("ip config")
    assert result.shell_command == "ip addr show"
    assert result.confidence == pytest.approx(0.8)

    # "in" from "search in files" must not match inside "thing"
    result = await translator.translate("zzz not a thing")
    assert result.shell_command == FALLBACK_COMMAND


async def test_fallback(translator):
    result = await translator.translate("zzz not a thing", "moderate")
    assert result.shell_command == FALLBACK_COMMAND
    assert result.confidence == 0.3
    assert result.alternatives == FALLBACK_ALTERNATIVES
    assert "zzz not a thing" in result.explanation
    assert result.safety_check.is_safe is True
    assert result.safety_check.risk_level == RiskLevel.SAFE


async def test_blank_input_falls_back(translator):
    result = await translator.translate("   ")
    assert result.shell_command == FALLBACK_COMMAND


async def test_resolved_command_is_validated(translator):
    # "delete file" maps to "rm filename": no risky pattern
    result = await translator.translate("delete file", SafetyLevel.STRICT)
    assert result.shell_command == "rm filename"
    assert result.safety_check.is_safe is True

    # "move file" maps to "mv source destination": also no trailing slash
    result = await translator.translate("move file", SafetyLevel.STRICT)
    assert result.safety_check.risk_level == RiskLevel.SAFE


async def test_custom_catalog_runs_through_validator():
    catalog = {"power off": PhraseEntry("power off", "shutdown -h now", "Turns the machine off.")}
    translator = CommandTranslator(catalog=catalog, delay_range=(0, 0))
    result = await translator.translate("power off", "permissive")
    assert result.safety_check.is_safe is False
    assert result.safety_check.risk_level == RiskLevel.DANGER


async def test_translation_delay_is_applied():
    translator = CommandTranslator(delay_range=(0.5, 1.0))
    with patch("nl_terminal.command_translator.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await translator.translate("pwd please")
    sleep.assert_awaited_once()
    delay = sleep.await_args.args[0]
    assert 0.5 <= delay <= 1.0


async def test_zero_delay_skips_sleep(translator):
    with patch("nl_terminal.command_translator.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await translator.translate("list files")
    sleep.assert_not_awaited()


def test_suggest(translator):
    suggestions = translator.suggest("li")
    assert suggestions
    assert len(suggestions) <= 5
    for item in suggestions:
        assert item.startswith("li") or "li" in item


def test_suggest_keeps_catalog_order(translator):
    assert translator.suggest("file") == [
        "list files", "list all files", "show files", "delete file", "copy file",
    ]


def test_suggest_short_input(translator):
    assert translator.suggest("l") == []
    assert translator.suggest("  l  ") == []
    assert translator.suggest("") == []


def test_suggest_normalizes_input(translator):
    assert translator.suggest("  GIT ") == ["git status", "git history"]


def test_suggest_no_match(translator):
    assert translator.suggest("xyz") == []
