"""
Daily-note detection.

A resolver maps a file path to DailyNoteInfo. The default resolver treats a
file whose name (without extension) parses with a date format as a daily
note for that day. Resolvers supplied by callers may fail; parsers always go
through safe_daily_note_info so a failure degrades to "not a daily note".
"""

import logging
from datetime import datetime
from pathlib import PurePath
from typing import Callable, Optional

from notetasks.models.task import DailyNoteInfo

log = logging.getLogger(__name__)

DailyNoteResolver = Callable[[str], DailyNoteInfo]

NOT_A_DAILY_NOTE = DailyNoteInfo()


def detect_daily_note(path: str, date_format: str = "%Y-%m-%d") -> DailyNoteInfo:
    """Return daily-note info when the file stem is a date in ``date_format``."""
    if not path:
        return NOT_A_DAILY_NOTE
    stem = PurePath(path).stem
    try:
        parsed = datetime.strptime(stem, date_format)
    except ValueError:
        return NOT_A_DAILY_NOTE
    return DailyNoteInfo(is_daily_note=True, daily_note_date=parsed)


def safe_daily_note_info(resolver: Optional[DailyNoteResolver], path: str) -> DailyNoteInfo:
    if resolver is None:
        return NOT_A_DAILY_NOTE
    try:
        info = resolver(path)
    except Exception:
        log.warning("Daily note detection failed for %s", path, exc_info=True)
        return NOT_A_DAILY_NOTE
    return info if isinstance(info, DailyNoteInfo) else NOT_A_DAILY_NOTE
