#!/usr/bin/env python3
"""Natural-language terminal - interactive REPL."""

import argparse
import asyncio
import dataclasses
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.formatted_text.html import html_escape
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import print_formatted_text

from . import logger
from .command_translator import CommandTranslator
from .config import ConfigManager
from .exceptions import ConfigError, KeychainError, SessionBusyError, ValidationError
from .executor import MockExecutor, ShellExecutor
from .models import HistoryEntry, HistoryStatus
from .output_explainer import MockExplainer
from .session import TerminalSession

STATUS_STYLES = {
    HistoryStatus.SUCCESS: "ansigreen",
    HistoryStatus.ERROR: "ansired",
    HistoryStatus.BLOCKED: "ansiyellow",
    HistoryStatus.PENDING: "ansiblue",
}

HELP_TEXT = """Type what you want to do, e.g. "list files" or "show disk space".
  :history [query]    show (or search) history
  :clear              clear history
  :export [dir]       write history to terminal-history-<date>.json
  :settings [k=v ...] show or change settings
  :help               show this help
  :quit               exit"""


class SuggestionCompleter(Completer):
    """Completes input with phrases from the catalog."""

    def __init__(self, session: TerminalSession):
        self.session = session

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if text.startswith(":"):
            return
        for phrase in self.session.update_suggestions(text):
            yield Completion(phrase, start_position=-len(text))


class TerminalApp:
    """Interactive front end for a TerminalSession."""

    def __init__(self, session: TerminalSession):
        self.session = session
        self.running = True
        self.prompt = PromptSession(
            completer=SuggestionCompleter(session),
            key_bindings=self._build_key_bindings(),
            complete_while_typing=True
        )

    def _build_key_bindings(self) -> KeyBindings:
        """Up/down recall previous requests."""
        bindings = KeyBindings()

        @bindings.add("up")
        def _(event):
            event.current_buffer.text = self.session.navigate_history("up")
            event.current_buffer.cursor_position = len(event.current_buffer.text)

        @bindings.add("down")
        def _(event):
            event.current_buffer.text = self.session.navigate_history("down")
            event.current_buffer.cursor_position = len(event.current_buffer.text)

        return bindings

    async def run(self) -> None:
        """Start the main input loop."""
        logger.info("터미널 시작")
        self._print(HTML("<b>nl-terminal</b> - type :help for commands"))

        with patch_stdout():
            while self.running:
                try:
                    text = await self.prompt.prompt_async("› ")
                except (EOFError, KeyboardInterrupt):
                    break
                await self.handle_line(text)

        logger.info("터미널 종료")

    async def handle_line(self, text: str) -> None:
        """Dispatch one line of input."""
        stripped = text.strip()
        if not stripped:
            return

        if stripped.startswith(":"):
            self.handle_builtin(stripped[1:].split())
            return

        try:
            entry = await self.session.submit(stripped)
        except SessionBusyError as e:
            self._print(HTML(f"<ansired>{html_escape(str(e))}</ansired>"))
            return

        if entry is not None:
            self.show_entry(entry)

    def handle_builtin(self, args: List[str]) -> None:
        """Run a :command."""
        name, rest = (args[0], args[1:]) if args else ("help", [])

        if name in ("quit", "exit"):
            self.running = False
        elif name == "history":
            self.session.search(" ".join(rest))
            entries = self.session.filtered_history
            if not entries:
                self._print("No history.")
            for entry in entries:
                self.show_entry(entry, brief=True)
        elif name == "clear":
            self.session.clear()
            self._print("History cleared.")
        elif name == "export":
            try:
                path = self.session.export_history(rest[0] if rest else ".")
            except OSError as e:
                logger.error(f"히스토리 내보내기 실패: {e}")
                self._print(HTML(f"<ansired>Export failed: {html_escape(str(e))}</ansired>"))
                return
            self._print(f"History written to {path}")
        elif name == "settings":
            self.handle_settings(rest)
        else:
            self._print(HELP_TEXT)

    def handle_settings(self, assignments: List[str]) -> None:
        """Show settings, or apply key=value changes."""
        if not assignments:
            for key, value in self.session.settings.to_dict().items():
                self._print(f"  {key} = {value}")
            return

        changes = {}
        for item in assignments:
            key, sep, value = item.partition("=")
            if not sep:
                self._print(HTML(f"<ansired>Expected key=value, got {html_escape(item)}</ansired>"))
                return
            changes[key] = _parse_setting_value(value)

        try:
            self.session.update_settings(**changes)
        except (ValidationError, ConfigError) as e:
            self._print(HTML(f"<ansired>{html_escape(str(e))}</ansired>"))
            return
        self._print("Settings updated.")

    def show_entry(self, entry: HistoryEntry, brief: bool = False) -> None:
        """Print a history entry."""
        style = STATUS_STYLES[entry.status]
        command = html_escape(entry.shell_command or "-")
        header = f"<{style}>[{entry.status.value}]</{style}> <b>{command}</b>"
        if entry.execution_time is not None:
            header += f" <i>({entry.execution_time} ms)</i>"

        if brief:
            self._print(HTML(f"{html_escape(entry.natural_language)} → {header}"))
            return

        self._print(HTML(header))
        if entry.output:
            self._print(entry.output)
        if entry.ai_explanation and self.session.settings.show_ai_panel:
            self._print(HTML(f"<ansicyan>{html_escape(entry.ai_explanation)}</ansicyan>"))

    def _print(self, message) -> None:
        print_formatted_text(message)


def _parse_setting_value(value: str):
    lowered = value.lower()
    if lowered in ("true", "on", "yes"):
        return True
    if lowered in ("false", "off", "no"):
        return False
    if "," in value:
        return tuple(float(part) for part in value.split(","))
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def build_session(
    config_path: Optional[str] = None,
    mock: bool = False,
    safety_level: Optional[str] = None
) -> TerminalSession:
    """
    Wire a TerminalSession from the stored configuration.

    Args:
        config_path: Config file, default location when omitted.
        mock: Use MockExecutor instead of the host shell.
        safety_level: Override for this run only, not persisted.
    """
    config_manager = ConfigManager(config_path)
    settings = config_manager.get_settings()
    if safety_level:
        settings = dataclasses.replace(settings, safety_level=safety_level)

    translator = CommandTranslator(delay_range=settings.translation_delay)
    if mock:
        executor = MockExecutor()
    else:
        executor = ShellExecutor(
            timeout=settings.command_timeout,
            max_output_bytes=settings.max_output_bytes
        )

    try:
        explainer = config_manager.build_explainer()
    except KeychainError as e:
        logger.error(f"키체인 접근 실패: {e}")
        explainer = MockExplainer()

    return TerminalSession(
        translator=translator,
        executor=executor,
        explainer=explainer,
        settings=settings,
        config_manager=config_manager
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(prog="nl-terminal", description="Natural-language terminal")
    parser.add_argument("--config", help="path to config.json")
    parser.add_argument("--mock", action="store_true", help="use canned outputs instead of a real shell")
    parser.add_argument("--safety-level", choices=("strict", "moderate", "permissive"))
    args = parser.parse_args(argv)

    try:
        session = build_session(args.config, mock=args.mock, safety_level=args.safety_level)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    asyncio.run(TerminalApp(session).run())
    return 0
