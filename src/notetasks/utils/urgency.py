"""
Urgency scoring.

Urgency is a weighted sum of independent terms:

    deadline   coefficient x linear gradient over [-14, +7] days overdue
    priority   coefficient for high / medium / low
    scheduled  coefficient if the scheduled date is today or earlier
    active     coefficient if the state is an active keyword
    age        coefficient x age factor (daily notes age over a year)
    tags       coefficient x bucket(tag count)
    waiting    coefficient if the state is a waiting keyword

Completed tasks have no urgency. Any failure during computation yields None
for that task only.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Union

from notetasks.models.config import UrgencyCoefficients
from notetasks.models.task import Task
from notetasks.utils.dates import days_between, start_of_day
from notetasks.utils.keywords import BUILTIN_ACTIVE_KEYWORDS, BUILTIN_WAITING_KEYWORDS

log = logging.getLogger(__name__)

DEADLINE_MIN_DAYS = -14
DEADLINE_MAX_DAYS = 7
AGE_MAX_DAYS = 365
SECONDS_PER_DAY = 86400

# Tag count -> factor; three or more tags use the last bucket.
TAG_BUCKETS = (0.0, 0.8, 0.9, 1.0)

# Task fields whose change invalidates a computed urgency
URGENCY_FIELDS = frozenset({
    "priority",
    "scheduled_date",
    "deadline_date",
    "state",
    "completed",
    "tags",
    "is_daily_note",
    "daily_note_date",
})


@dataclass(frozen=True)
class UrgencyContext:
    """Keyword sets that select the active and waiting terms."""

    active_states: FrozenSet[str] = frozenset(BUILTIN_ACTIVE_KEYWORDS)
    waiting_states: FrozenSet[str] = frozenset(BUILTIN_WAITING_KEYWORDS)


DEFAULT_CONTEXT = UrgencyContext()


# ---------------------------------------------------------------------------
# Individual terms
# ---------------------------------------------------------------------------

def deadline_factor(deadline: Optional[datetime], today: datetime) -> float:
    """
    Linear gradient: ((days_overdue + 14) * 0.8 / 21) + 0.2.

    7+ days overdue -> 1.0, due today -> ~0.847, 14+ days out -> 0.2.
    No deadline -> 0.

    Only ``today`` is truncated to midnight; a deadline later today counts
    as -1 days overdue.
    """
    if deadline is None:
        return 0.0
    elapsed = start_of_day(today) - deadline
    overdue = math.floor(elapsed.total_seconds() / SECONDS_PER_DAY)
    overdue = max(DEADLINE_MIN_DAYS, min(DEADLINE_MAX_DAYS, overdue))
    return ((overdue - DEADLINE_MIN_DAYS) * 0.8 / 21.0) + 0.2


def scheduled_factor(scheduled: Optional[datetime], today: datetime) -> float:
    if scheduled is None:
        return 0.0
    return 1.0 if scheduled <= today else 0.0


def age_factor(task: Task, today: datetime) -> float:
    """Fraction of a year since the daily note's date; 1.0 for other files."""
    if not task.is_daily_note or task.daily_note_date is None:
        return 1.0
    age = days_between(today, task.daily_note_date)
    return min(age / AGE_MAX_DAYS, 1.0)


def tag_factor(tag_count: int) -> float:
    return TAG_BUCKETS[min(tag_count, len(TAG_BUCKETS) - 1)]


def priority_weight(task: Task, coefficients: UrgencyCoefficients) -> float:
    if task.priority == "high":
        return coefficients.priority_high
    if task.priority == "med":
        return coefficients.priority_medium
    if task.priority == "low":
        return coefficients.priority_low
    return 0.0


# ---------------------------------------------------------------------------
# Score
# ---------------------------------------------------------------------------

def calculate_urgency(
    task: Task,
    coefficients: Optional[UrgencyCoefficients] = None,
    context: Optional[UrgencyContext] = None,
    today: Optional[datetime] = None,
) -> Optional[float]:
    """
    Compute the urgency score for a task.

    Args:
        task: Task to score
        coefficients: Term weights (defaults when omitted)
        context: Active/waiting keyword sets (built-in keywords when omitted)
        today: Reference day; its time of day is ignored (defaults to now)

    Returns:
        The score, or None when the task is completed or scoring fails.
    """
    if task.completed:
        return None
    coefficients = coefficients or UrgencyCoefficients()
    context = context or DEFAULT_CONTEXT
    try:
        day = start_of_day(today or datetime.now())
        urgency = coefficients.deadline * deadline_factor(task.deadline_date, day)
        urgency += priority_weight(task, coefficients)
        urgency += coefficients.scheduled * scheduled_factor(task.scheduled_date, day)
        if task.state in context.active_states:
            urgency += coefficients.active
        urgency += coefficients.age * age_factor(task, day)
        urgency += coefficients.tags * tag_factor(len(task.tags))
        if task.state in context.waiting_states:
            urgency += coefficients.waiting
        return urgency
    except Exception:
        log.warning("Failed to calculate urgency for %s", task.ref, exc_info=True)
        return None


def needs_urgency_recalculation(changed_fields: Iterable[str]) -> bool:
    """True if any changed task field feeds into the urgency score."""
    return any(name in URGENCY_FIELDS for name in changed_fields)


# ---------------------------------------------------------------------------
# urgency.ini
# ---------------------------------------------------------------------------

_INI_LINE_RE = re.compile(
    r"^urgency\.(?P<category>\w+)(?:\.(?P<sub>\w+))?\.coefficient\s*=\s*(?P<value>[-+]?\d*\.?\d+)\s*$"
)

# (category, subcategory) -> coefficient field
_INI_FIELDS = {
    ("priority", "high"): "priority_high",
    ("priority", "medium"): "priority_medium",
    ("priority", "low"): "priority_low",
    ("scheduled", None): "scheduled",
    ("deadline", None): "deadline",
    ("due", None): "deadline",
    ("active", None): "active",
    ("age", None): "age",
    ("tags", None): "tags",
    ("waiting", None): "waiting",
}


def parse_urgency_coefficients(content: str) -> UrgencyCoefficients:
    """
    Parse ``urgency.ini`` content.

    Lines look like ``urgency.priority.high.coefficient = 6.0`` or
    ``urgency.deadline.coefficient = 12.0``. ``#`` starts a comment line,
    ``due`` is accepted for ``deadline``, and anything unrecognised is
    ignored. Missing entries keep their defaults.
    """
    values: Dict[str, float] = {}
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _INI_LINE_RE.match(line)
        if not m:
            log.debug("Ignoring urgency.ini line: %s", line)
            continue
        field_name = _INI_FIELDS.get((m.group("category"), m.group("sub")))
        if field_name is None:
            log.debug("Unknown urgency coefficient: %s", line)
            continue
        values[field_name] = float(m.group("value"))
    return UrgencyCoefficients(**values)


def load_urgency_coefficients(path: Union[str, Path]) -> UrgencyCoefficients:
    """Read an urgency.ini file, falling back to defaults on any error."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Could not read urgency coefficients from %s: %s", path, e)
        return UrgencyCoefficients()
    return parse_urgency_coefficients(content)
