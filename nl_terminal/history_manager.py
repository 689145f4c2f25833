"""Command history for the natural-language terminal."""

import json
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from . import logger
from .models import HistoryEntry

EXPORT_FILENAME = "terminal-history-{date}.json"


class HistoryManager:
    """Append-only, in-memory log of submitted requests."""

    def __init__(self, entries: Optional[Iterable[HistoryEntry]] = None):
        self._history: List[HistoryEntry] = list(entries or [])

    def add(self, entry: HistoryEntry) -> HistoryEntry:
        """Append an entry and return it."""
        self._history.append(entry)
        return entry

    def get_all(self) -> List[HistoryEntry]:
        """
        Get all history entries.

        Returns:
            Entries in submission order (oldest first).
        """
        return list(self._history)

    def search(self, query: str) -> List[HistoryEntry]:
        """
        Search history by request text or shell command.

        Args:
            query: Case-insensitive substring. Empty returns everything.

        Returns:
            Matching entries in submission order.
        """
        query_lower = query.lower()
        return [
            entry for entry in self._history
            if query_lower in entry.natural_language.lower()
            or query_lower in entry.shell_command.lower()
        ]

    def clear(self) -> None:
        """Clear all history entries."""
        self._history = []

    def get_count(self) -> int:
        """Get total number of history entries."""
        return len(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._history[index]

    def to_json(self) -> str:
        """Serialize history as a pretty-printed JSON array."""
        return json.dumps([entry.to_dict() for entry in self._history], indent=2, ensure_ascii=False)

    @staticmethod
    def parse_json(text: str) -> List[HistoryEntry]:
        """Parse entries previously written by to_json()."""
        return [HistoryEntry.from_dict(item) for item in json.loads(text)]

    def export(self, directory: str = ".", today: Optional[date] = None) -> Path:
        """
        Write history to terminal-history-<date>.json.

        Args:
            directory: Target directory (created if missing).
            today: Date used in the file name. Defaults to today.

        Returns:
            Path of the written file.
        """
        today = today or date.today()
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / EXPORT_FILENAME.format(date=today.isoformat())

        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())

        logger.info(f"히스토리 내보내기 완료: {path} ({len(self._history)}개)")
        return path
