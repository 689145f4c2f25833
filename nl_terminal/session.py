"""Terminal session: translate, check, run and explain one request at a time."""

import dataclasses
from pathlib import Path
from typing import List, Optional

from . import logger
from .command_translator import CommandTranslator
from .config import ConfigManager
from .exceptions import SessionBusyError, ValidationError
from .executor import ShellExecutor
from .history_manager import HistoryManager
from .models import HistoryEntry, HistoryStatus, Settings, Translation
from .safety_validator import sanitize_for_display


class TerminalSession:
    """Sequences translation, safety gate, execution and explanation."""

    def __init__(
        self,
        translator: CommandTranslator,
        executor,
        explainer,
        history: Optional[HistoryManager] = None,
        settings: Optional[Settings] = None,
        config_manager: Optional[ConfigManager] = None
    ):
        """
        Initialize TerminalSession.

        Args:
            translator: Natural-language translator.
            executor: Object with an async execute(command) -> ExecutionResult.
            explainer: Object with an async explain(command, output, is_error) -> str.
            history: History store (created if not provided).
            settings: Initial settings. Taken from config_manager when omitted.
            config_manager: Persists settings changes when given.
        """
        self.translator = translator
        self.executor = executor
        self.explainer = explainer
        self.history = history if history is not None else HistoryManager()
        self.config_manager = config_manager
        if settings is None:
            settings = config_manager.get_settings() if config_manager else Settings()
        self.settings = settings

        self.processing = False
        self.current_input = ""
        self.current_translation: Optional[Translation] = None
        self.search_query = ""
        self._history_index = -1

    @property
    def history_index(self) -> int:
        """Recall cursor; -1 when not browsing history."""
        return self._history_index

    async def submit(self, user_input: str) -> Optional[HistoryEntry]:
        """
        Process one natural-language request.

        Appends exactly one history entry per accepted request.

        Args:
            user_input: What the user typed.

        Returns:
            The new history entry, or None for blank input.

        Raises:
            SessionBusyError: If another request is still being processed.
        """
        if not user_input.strip():
            return None
        if self.processing:
            raise SessionBusyError("A command is already running")

        self.processing = True
        self.current_input = ""
        self._history_index = -1

        try:
            translation = await self.translator.translate(user_input, self.settings.safety_level)
            self.current_translation = translation

            if not translation.safety_check.is_safe:
                return self._record_blocked(user_input, translation)

            command = translation.shell_command
            result = await self.executor.execute(command)
            is_error = not result.success
            output = result.display_output

            explanation = await self.explainer.explain(command, output, is_error)

            if is_error:
                logger.error(f"명령어 실패: {sanitize_for_display(command)} (exit={result.exit_code})")

            return self.history.add(HistoryEntry(
                natural_language=user_input,
                shell_command=command,
                output=output,
                status=HistoryStatus.ERROR if is_error else HistoryStatus.SUCCESS,
                ai_explanation=explanation,
                execution_time=result.execution_time
            ))

        except Exception as e:
            logger.exception(f"예상치 못한 오류: {e}")
            return self.history.add(HistoryEntry(
                natural_language=user_input,
                shell_command="",
                output=f"Error: {str(e) or 'Unknown error occurred'}",
                status=HistoryStatus.ERROR
            ))

        finally:
            self.processing = False
            self.current_translation = None

    def _record_blocked(self, user_input: str, translation: Translation) -> HistoryEntry:
        check = translation.safety_check
        logger.warning(
            f"명령어 차단: {sanitize_for_display(translation.shell_command)} "
            f"({', '.join(check.blocked_patterns) or check.risk_level.value})"
        )
        output = (
            "Command blocked for safety:\n"
            + "\n".join(check.blocked_patterns)
            + "\n\nSuggestions:\n"
            + "\n".join(check.suggestions)
        )
        return self.history.add(HistoryEntry(
            natural_language=user_input,
            shell_command=translation.shell_command,
            output=output,
            status=HistoryStatus.BLOCKED,
            ai_explanation=translation.explanation
        ))

    def update_suggestions(self, text: str) -> List[str]:
        """Track the input buffer and return phrase suggestions for it."""
        self.current_input = text
        if not self.settings.show_suggestions:
            return []
        return self.translator.suggest(text)

    def navigate_history(self, direction: str) -> str:
        """
        Recall previous requests into the input buffer.

        Args:
            direction: "up" for older, "down" for newer.

        Returns:
            The input buffer after moving.
        """
        if direction not in ("up", "down"):
            raise ValidationError(f"Invalid direction: {direction}")

        count = len(self.history)
        if count == 0:
            return self.current_input

        if direction == "up":
            if self._history_index < count - 1:
                self._history_index += 1
        else:
            self._history_index = self._history_index - 1 if self._history_index > 0 else -1

        if self._history_index == -1:
            self.current_input = ""
        else:
            self.current_input = self.history[count - 1 - self._history_index].natural_language
        return self.current_input

    def clear(self) -> None:
        """Clear history, the input buffer and any pending translation."""
        self.history.clear()
        self.current_input = ""
        self.current_translation = None
        self._history_index = -1

    def search(self, query: str) -> None:
        """Set the filter used by filtered_history."""
        self.search_query = query

    @property
    def filtered_history(self) -> List[HistoryEntry]:
        """History narrowed by the current search query."""
        if not self.search_query:
            return self.history.get_all()
        return self.history.search(self.search_query)

    def update_settings(self, **changes) -> Settings:
        """
        Apply a partial settings update on top of the session's settings.

        Only the changed keys are persisted, so per-run overrides (such as a
        safety level given on the command line) survive unrelated changes.
        Timing and output limits take effect on the next request.

        Raises:
            ValidationError: If a key is unknown or a value is invalid.
            ConfigError: If the config file cannot be written.
        """
        unknown = set(changes) - {f.name for f in dataclasses.fields(Settings)}
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        updated = dataclasses.replace(self.settings, **changes)
        if self.config_manager is not None:
            self.config_manager.update_settings(**changes)
        self.settings = updated
        self._apply_runtime_settings(changes)
        return self.settings

    def _apply_runtime_settings(self, changes: dict) -> None:
        if "translation_delay" in changes and isinstance(self.translator, CommandTranslator):
            self.translator.delay_range = self.settings.translation_delay
        if isinstance(self.executor, ShellExecutor):
            self.executor.timeout = self.settings.command_timeout
            self.executor.max_output_bytes = self.settings.max_output_bytes

    def export_history(self, directory: str = ".") -> Path:
        """Write history to terminal-history-<date>.json in directory."""
        return self.history.export(directory)
