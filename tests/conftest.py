# tests/conftest.py
#
# Shared fixtures. NL_TERMINAL_HOME is pointed at a scratch directory before
# the package is imported so the debug log never lands in the real home.

import os
import tempfile

os.environ.setdefault("NL_TERMINAL_HOME", tempfile.mkdtemp(prefix="nl-terminal-tests-"))

import pytest
from unittest.mock import AsyncMock

from nl_terminal.command_translator import CommandTranslator
from nl_terminal.models import ExecutionResult, Settings
from nl_terminal.session import TerminalSession


@pytest.fixture
def translator():
    """Translator that answers without the simulated delay."""
    return CommandTranslator(delay_range=(0, 0))


@pytest.fixture
def fake_executor():
    """Executor spy that always succeeds."""
    executor = AsyncMock()
    executor.execute.return_value = ExecutionResult(
        success=True, output="file_a\nfile_b", execution_time=42, exit_code=0
    )
    return executor


@pytest.fixture
def fake_explainer():
    explainer = AsyncMock()
    explainer.explain.return_value = "Looks fine."
    return explainer


@pytest.fixture
def session(translator, fake_executor, fake_explainer):
    return TerminalSession(
        translator=translator,
        executor=fake_executor,
        explainer=fake_explainer,
        settings=Settings(translation_delay=(0, 0))
    )
