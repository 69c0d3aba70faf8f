"""
Core task data models.

A Task is produced once per parse pass and never mutated afterwards. The
raw line is kept alongside the decomposed prefix (indent, list marker) and
tail so that a writer can regenerate the line after a state change.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Literal, Optional, Tuple

Priority = Literal["high", "med", "low"]

# Priority token letter → priority value
PRIORITY_BY_LETTER: Dict[str, Priority] = {
    "A": "high",
    "B": "med",
    "C": "low",
}


@dataclass(frozen=True)
class Task:
    """
    A single task recognised in a note file.

    ``(path, line)`` is the natural key: downstream consumers use it to
    re-locate the task after edits.
    """

    path: str
    line: int
    raw_text: str
    indent: str
    list_marker: str
    text: str
    state: str
    completed: bool
    priority: Optional[Priority] = None
    scheduled_date: Optional[datetime] = None
    deadline_date: Optional[datetime] = None
    tail: str = ""
    urgency: Optional[float] = None
    tags: Tuple[str, ...] = ()
    is_daily_note: bool = False
    daily_note_date: Optional[datetime] = None
    quote_nesting_level: int = 0
    footnote_marker: Optional[str] = None
    footnote_reference: Optional[str] = None
    embed_reference: Optional[str] = None

    @property
    def ref(self) -> str:
        """Task reference in 'path:line' format."""
        return f"{self.path}:{self.line}"

    @property
    def is_bulleted(self) -> bool:
        return bool(self.list_marker.strip())

    def with_changes(self, **changes: Any) -> Task:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict (dates as ISO 8601 strings)."""
        return {
            "path": self.path,
            "line": self.line,
            "raw_text": self.raw_text,
            "indent": self.indent,
            "list_marker": self.list_marker,
            "text": self.text,
            "state": self.state,
            "completed": self.completed,
            "priority": self.priority,
            "scheduled_date": _iso(self.scheduled_date),
            "deadline_date": _iso(self.deadline_date),
            "tail": self.tail,
            "urgency": self.urgency,
            "tags": list(self.tags),
            "is_daily_note": self.is_daily_note,
            "daily_note_date": _iso(self.daily_note_date),
            "quote_nesting_level": self.quote_nesting_level,
            "footnote_marker": self.footnote_marker,
            "footnote_reference": self.footnote_reference,
            "embed_reference": self.embed_reference,
        }


@dataclass(frozen=True)
class DailyNoteInfo:
    """Result of daily-note detection for one file."""

    is_daily_note: bool = False
    daily_note_date: Optional[datetime] = None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None
