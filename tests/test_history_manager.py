# tests/test_history_manager.py

import json
from datetime import date, datetime

import pytest

from nl_terminal.history_manager import HistoryManager
from nl_terminal.models import HistoryEntry, HistoryStatus


@pytest.fixture
def populated():
    manager = HistoryManager()
    manager.add(HistoryEntry(
        natural_language="list files",
        shell_command="ls -la",
        output="a\nb",
        status=HistoryStatus.SUCCESS,
        ai_explanation="Listed.",
        execution_time=12,
        timestamp=datetime(2025, 1, 24, 10, 30, 0, 123456)
    ))
    manager.add(HistoryEntry(
        natural_language="wipe disk",
        shell_command="rm -rf /",
        output="Command blocked for safety:\nRecursive force delete from root",
        status=HistoryStatus.BLOCKED,
        ai_explanation="Deletes everything."
    ))
    manager.add(HistoryEntry(
        natural_language="broken",
        shell_command="",
        output="Error: boom",
        status=HistoryStatus.ERROR
    ))
    return manager


def test_add_keeps_insertion_order(populated):
    assert [e.natural_language for e in populated.get_all()] == ["list files", "wipe disk", "broken"]
    assert populated.get_count() == 3
    assert populated[-1].natural_language == "broken"


def test_get_all_returns_a_copy(populated):
    entries = populated.get_all()
    entries.clear()
    assert len(populated) == 3


def test_search_matches_request_or_command(populated):
    assert [e.natural_language for e in populated.search("WIPE")] == ["wipe disk"]
    assert [e.natural_language for e in populated.search("ls -")] == ["list files"]
    assert populated.search("nothing here") == []
    assert len(populated.search("")) == 3


def test_clear_is_idempotent(populated):
    populated.clear()
    assert populated.get_all() == []
    populated.clear()
    assert populated.get_count() == 0


def test_json_round_trip(populated):
    text = populated.to_json()
    restored = HistoryManager.parse_json(text)

    assert restored == populated.get_all()
    assert [e.status for e in restored] == [
        HistoryStatus.SUCCESS, HistoryStatus.BLOCKED, HistoryStatus.ERROR,
    ]
    assert restored[0].timestamp == datetime(2025, 1, 24, 10, 30, 0, 123456)


def test_json_is_pretty_printed_array(populated):
    text = populated.to_json()
    data = json.loads(text)

    assert isinstance(data, list)
    assert "\n  " in text
    assert data[0]["naturalLanguage"] == "list files"
    assert data[0]["executionTime"] == 12
    assert data[0]["timestamp"] == "2025-01-24T10:30:00.123456"
    assert "executionTime" not in data[1]
    assert "aiExplanation" not in data[2]


def test_export_writes_dated_file(populated, tmp_path):
    path = populated.export(str(tmp_path / "exports"), today=date(2025, 1, 24))

    assert path == tmp_path / "exports" / "terminal-history-2025-01-24.json"
    restored = HistoryManager.parse_json(path.read_text(encoding="utf-8"))
    assert restored == populated.get_all()


def test_export_empty_history(tmp_path):
    path = HistoryManager().export(str(tmp_path), today=date(2025, 2, 1))
    assert json.loads(path.read_text()) == []


def test_entries_are_immutable(populated):
    with pytest.raises(AttributeError):
        populated[0].output = "changed"
