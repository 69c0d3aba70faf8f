"""
Date parsing utilities for task metadata lines.

Pure functions, no external dependencies. All datetimes are naive local
values: a date-only token becomes midnight, a token with a time carries that
time and nothing else.
"""

import logging
import re
from datetime import datetime
from typing import Optional

log = logging.getLogger(__name__)

_DOW = r"(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun)"

# Tried in order; the first match wins.
DATE_PATTERNS = (
    ("date_dow_time", re.compile(rf"^<(?P<date>\d{{4}}-\d{{2}}-\d{{2}})\s+{_DOW}\s+(?P<time>\d{{1,2}}:\d{{2}})>")),
    ("date_dow", re.compile(rf"^<(?P<date>\d{{4}}-\d{{2}}-\d{{2}})\s+{_DOW}>")),
    ("date_time", re.compile(r"^<(?P<date>\d{4}-\d{2}-\d{2})\s+(?P<time>\d{1,2}:\d{2})>")),
    ("date", re.compile(r"^<(?P<date>\d{4}-\d{2}-\d{2})>")),
)

_INACTIVE_RE = re.compile(r"^\[(?P<inner>[^\]]*)\]")


def normalize_date_content(content: str) -> str:
    """Rewrite an inactive ``[YYYY-MM-DD ...]`` timestamp to ``<...>`` form."""
    content = content.strip()
    return _INACTIVE_RE.sub(lambda m: f"<{m.group('inner')}>", content, count=1)


def parse_date(content: str) -> Optional[datetime]:
    """
    Parse a bracketed org-style timestamp into a naive local datetime.

    Supports:
    - "<2026-02-12 Thu 09:30>"
    - "<2026-02-12 Thu>"
    - "<2026-02-12 09:30>"
    - "<2026-02-12>"
    - the same forms in inactive "[...]" brackets

    Returns:
        datetime (midnight when no time is given) or None if unparseable.
        Impossible calendar dates such as 2026-02-30 return None.
    """
    if not content:
        return None
    content = normalize_date_content(content)
    for name, pattern in DATE_PATTERNS:
        m = pattern.match(content)
        if not m:
            continue
        time_part = m.groupdict().get("time")
        try:
            year, month, day = (int(p) for p in m.group("date").split("-"))
            if time_part:
                hours, minutes = (int(p) for p in time_part.split(":"))
                return datetime(year, month, day, hours, minutes)
            return datetime(year, month, day)
        except ValueError as e:
            log.warning("Invalid %s timestamp %r: %s", name, content, e)
            return None
    return None


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (start_of_day(later) - start_of_day(earlier)).days
