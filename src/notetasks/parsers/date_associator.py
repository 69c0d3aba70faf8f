"""
SCHEDULED / DEADLINE association.

Dates live on the lines after a task, not on the task line itself:

    - TODO Write report
      SCHEDULED: <2026-02-12 Thu>
      DEADLINE: <2026-02-14>

Scanning starts at the line after the task. The first SCHEDULED and the
first DEADLINE win; an unparseable date is logged and left as None.
Properties drawers (:PROPERTIES: ... :END:) are skipped entirely.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from notetasks.utils.dates import parse_date

log = logging.getLogger(__name__)

DateTuple = Tuple[Optional[datetime], Optional[datetime]]

PROPERTIES_START_RE = re.compile(r"^\s*:PROPERTIES:\s*$")
PROPERTIES_END_RE = re.compile(r"^\s*:END:\s*$")

# Markdown: one keyword per line, after optional indent / quote markers
DATE_LINE_RE = re.compile(r"^(?P<prefix>[ \t>]*)(?P<kind>SCHEDULED|DEADLINE):[ \t]*(?P<content>.*)$")

# Org: planning line with one or more SCHEDULED / DEADLINE / CLOSED stamps
ORG_PLANNING_LINE_RE = re.compile(r"^\s*(?:SCHEDULED|DEADLINE|CLOSED):")
ORG_PLANNING_ITEM_RE = re.compile(r"(?P<kind>SCHEDULED|DEADLINE|CLOSED):\s*(?P<stamp>[<\[][^>\]]*[>\]])")
ORG_HEADLINE_RE = re.compile(r"^\*+(?:\s|$)")

QUOTE_PREFIX_RE = re.compile(r"^[ \t>]*")


def _parse_stamp(kind: str, content: str, line_number: int) -> Optional[datetime]:
    date = parse_date(content)
    if date is None:
        log.warning("Invalid %s date at line %d: %r", kind.lower(), line_number + 1, content.strip())
    return date


def find_task_dates(
    lines: Sequence[str],
    start: int,
    indent: str = "",
    quoted: bool = False,
) -> DateTuple:
    """
    Find dates for a markdown task.

    Args:
        lines: All lines of the file
        start: Index of the first line after the task
        indent: The task's indent; unquoted date lines must start with it
        quoted: True when the task sits in a quote or callout. Scanning then
            stops at the first line that is not quoted.

    Returns:
        (scheduled_date, deadline_date)
    """
    scheduled = None
    deadline = None
    scheduled_seen = False
    deadline_seen = False
    in_drawer = False

    for index in range(start, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        if quoted and not line.lstrip(" \t").startswith(">"):
            break
        bare = line[len(QUOTE_PREFIX_RE.match(line).group()):]
        if PROPERTIES_START_RE.match(bare):
            in_drawer = True
            continue
        if in_drawer:
            if PROPERTIES_END_RE.match(bare):
                in_drawer = False
            continue

        m = DATE_LINE_RE.match(line)
        if m is None or (not quoted and not m.group("prefix").startswith(indent)):
            break
        kind = m.group("kind")
        if kind == "SCHEDULED" and not scheduled_seen:
            scheduled = _parse_stamp(kind, m.group("content"), index)
            scheduled_seen = scheduled is not None
        elif kind == "DEADLINE" and not deadline_seen:
            deadline = _parse_stamp(kind, m.group("content"), index)
            deadline_seen = deadline is not None
        if scheduled_seen and deadline_seen:
            break

    return scheduled, deadline


def find_org_task_dates(lines: Sequence[str], start: int) -> DateTuple:
    """
    Find dates for an org headline.

    Body text between the headline and its planning lines is allowed; the
    scan ends at the next headline or once both dates are found. CLOSED
    stamps are recognised and ignored.
    """
    scheduled = None
    deadline = None
    in_drawer = False

    for index in range(start, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        if PROPERTIES_START_RE.match(line):
            in_drawer = True
            continue
        if in_drawer:
            if PROPERTIES_END_RE.match(line):
                in_drawer = False
            continue
        if ORG_HEADLINE_RE.match(line):
            break
        if not ORG_PLANNING_LINE_RE.match(line):
            continue

        for kind, stamp in _planning_items(line):
            if kind == "SCHEDULED" and scheduled is None:
                scheduled = _parse_stamp(kind, stamp, index)
            elif kind == "DEADLINE" and deadline is None:
                deadline = _parse_stamp(kind, stamp, index)
        if scheduled is not None and deadline is not None:
            break

    return scheduled, deadline


def _planning_items(line: str) -> List[Tuple[str, str]]:
    return [(m.group("kind"), m.group("stamp")) for m in ORG_PLANNING_ITEM_RE.finditer(line)]
