# tests/test_models.py

import pytest

from nl_terminal.exceptions import ValidationError
from nl_terminal.models import (
    ExecutionResult,
    HistoryEntry,
    HistoryStatus,
    SafetyLevel,
    Settings,
)


def test_default_settings():
    settings = Settings()
    assert settings.shell_type == "bash"
    assert settings.safety_level == SafetyLevel.MODERATE
    assert settings.theme == "dark"
    assert settings.font_size == 14
    assert settings.show_ai_panel is True
    assert settings.show_suggestions is True
    assert settings.sound_effects is False
    assert settings.auto_execute_safe is False
    assert settings.explainer == "mock"
    assert settings.command_timeout == 30.0
    assert settings.max_output_bytes == 1024 * 1024


def test_settings_coerce_safety_level_string():
    assert Settings(safety_level="STRICT").safety_level == SafetyLevel.STRICT


@pytest.mark.parametrize("kwargs", [
    {"shell_type": "fish"},
    {"theme": "light"},
    {"safety_level": "lax"},
    {"font_size": 0},
    {"explainer": "gpt"},
    {"translation_delay": (1.0, 0.5)},
    {"command_timeout": 0},
    {"font_size": "big"},
    {"font_size": True},
    {"translation_delay": 1},
    {"translation_delay": ("a", "b")},
    {"command_timeout": "soon"},
    {"max_output_bytes": 1.5},
    {"show_ai_panel": "yes"},
])
def test_settings_validation(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)


def test_settings_to_dict_is_json_friendly():
    data = Settings(translation_delay=[0, 0]).to_dict()
    assert data["safety_level"] == "moderate"
    assert data["translation_delay"] == [0, 0]


def test_blocked_entry_cannot_have_execution_time():
    with pytest.raises(ValueError):
        HistoryEntry(
            natural_language="x", shell_command="reboot", output="blocked",
            status=HistoryStatus.BLOCKED, execution_time=5
        )


def test_execution_time_cannot_be_negative():
    with pytest.raises(ValueError):
        HistoryEntry(
            natural_language="x", shell_command="ls", output="",
            status=HistoryStatus.SUCCESS, execution_time=-1
        )


def test_entries_get_unique_ids():
    first = HistoryEntry("a", "ls", "", HistoryStatus.SUCCESS)
    second = HistoryEntry("a", "ls", "", HistoryStatus.SUCCESS)
    assert first.id != second.id


def test_display_output_prefers_stderr_on_failure():
    failed = ExecutionResult(success=False, output="partial", stderr="boom", execution_time=1, exit_code=1)
    failed_quiet = ExecutionResult(success=False, output="partial", stderr="", execution_time=1, exit_code=1)
    ok = ExecutionResult(success=True, output="out", stderr="warn", execution_time=1, exit_code=0)

    assert failed.display_output == "boom"
    assert failed_quiet.display_output == "partial"
    assert ok.display_output == "out"
