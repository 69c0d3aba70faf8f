"""
Tests for utils/urgency.py.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from notetasks.models.config import ParserConfig, UrgencyCoefficients
from notetasks.models.task import Task
from notetasks.utils.urgency import (
    UrgencyContext,
    age_factor,
    calculate_urgency,
    deadline_factor,
    load_urgency_coefficients,
    needs_urgency_recalculation,
    parse_urgency_coefficients,
    tag_factor,
)

TODAY = datetime(2026, 2, 12)

# Only the selected term contributes
ZERO = dict(
    priority_high=0, priority_medium=0, priority_low=0, scheduled=0,
    deadline=0, active=0, age=0, tags=0, waiting=0,
)


def _task(**overrides) -> Task:
    fields = dict(
        path="a.md", line=0, raw_text="TODO x", indent="", list_marker="",
        text="x", state="TODO", completed=False,
    )
    fields.update(overrides)
    return Task(**fields)


def _only(**coefficients) -> UrgencyCoefficients:
    values = dict(ZERO)
    values.update(coefficients)
    return UrgencyCoefficients(**values)


# ---------------------------------------------------------------------------
# Deadline gradient
# ---------------------------------------------------------------------------

class TestDeadline:
    def test_seven_days_overdue(self):
        assert deadline_factor(TODAY - timedelta(days=7), TODAY) == pytest.approx(1.0)

    def test_due_today(self):
        assert deadline_factor(TODAY, TODAY) == pytest.approx(14 * 0.8 / 21 + 0.2)

    def test_fourteen_days_out(self):
        assert deadline_factor(TODAY + timedelta(days=14), TODAY) == pytest.approx(0.2)

    def test_clamped_both_ends(self):
        assert deadline_factor(TODAY - timedelta(days=30), TODAY) == pytest.approx(1.0)
        assert deadline_factor(TODAY + timedelta(days=60), TODAY) == pytest.approx(0.2)

    def test_deadline_later_today_is_minus_one_day(self):
        due = datetime(2026, 2, 12, 9, 30)
        assert deadline_factor(due, TODAY) == pytest.approx(13 * 0.8 / 21 + 0.2)

    def test_reference_time_of_day_ignored(self):
        due = datetime(2026, 2, 12, 9, 30)
        assert deadline_factor(due, datetime(2026, 2, 12, 18, 0)) == deadline_factor(due, TODAY)

    def test_timed_deadline_from_note(self):
        from notetasks.parsers.task_parser import TaskParser

        content = "- TODO call\n  DEADLINE: <2026-02-12 Thu 09:30>"
        t = TaskParser(ParserConfig(urgency_coefficients=_only(deadline=21.0))).parse_file(
            content, "a.md", today=TODAY
        )[0]
        # 21 * ((-1 + 14) * 0.8 / 21 + 0.2) + age 0
        assert t.urgency == pytest.approx(13 * 0.8 + 4.2)

    def test_absent(self):
        assert deadline_factor(None, TODAY) == 0.0

    def test_weighted_term(self):
        task = _task(deadline_date=TODAY - timedelta(days=7))
        assert calculate_urgency(task, _only(deadline=12.0), today=TODAY) == pytest.approx(12.0)


# ---------------------------------------------------------------------------
# Other terms
# ---------------------------------------------------------------------------

class TestTerms:
    @pytest.mark.parametrize("priority, expected", [("high", 6.0), ("med", 3.9), ("low", 1.8), (None, 0.0)])
    def test_priority(self, priority, expected):
        coeffs = _only(priority_high=6.0, priority_medium=3.9, priority_low=1.8)
        assert calculate_urgency(_task(priority=priority), coeffs, today=TODAY) == pytest.approx(expected)

    def test_scheduled_today_counts(self):
        task = _task(scheduled_date=TODAY)
        assert calculate_urgency(task, _only(scheduled=5.0), today=TODAY) == pytest.approx(5.0)

    def test_scheduled_future_does_not_count(self):
        task = _task(scheduled_date=TODAY + timedelta(days=1))
        assert calculate_urgency(task, _only(scheduled=5.0), today=TODAY) == 0.0

    def test_active_and_waiting(self):
        coeffs = _only(active=4.0, waiting=-3.0)
        assert calculate_urgency(_task(state="DOING"), coeffs, today=TODAY) == pytest.approx(4.0)
        assert calculate_urgency(_task(state="WAIT"), coeffs, today=TODAY) == pytest.approx(-3.0)
        assert calculate_urgency(_task(state="TODO"), coeffs, today=TODAY) == 0.0

    def test_context_sets(self):
        context = UrgencyContext(active_states=frozenset({"REVIEW"}), waiting_states=frozenset())
        coeffs = _only(active=4.0, waiting=-3.0)
        assert calculate_urgency(_task(state="REVIEW"), coeffs, context, TODAY) == pytest.approx(4.0)
        assert calculate_urgency(_task(state="WAIT"), coeffs, context, TODAY) == 0.0

    @pytest.mark.parametrize("count, factor", [(0, 0.0), (1, 0.8), (2, 0.9), (3, 1.0), (7, 1.0)])
    def test_tag_buckets(self, count, factor):
        assert tag_factor(count) == factor

    def test_age_non_daily_note(self):
        assert age_factor(_task(), TODAY) == 1.0

    def test_age_daily_note(self):
        task = _task(is_daily_note=True, daily_note_date=TODAY - timedelta(days=73))
        assert age_factor(task, TODAY) == pytest.approx(0.2)

    def test_age_capped(self):
        task = _task(is_daily_note=True, daily_note_date=TODAY - timedelta(days=800))
        assert age_factor(task, TODAY) == 1.0

    def test_defaults_sum(self):
        task = _task(
            state="DOING",
            priority="high",
            scheduled_date=TODAY,
            deadline_date=TODAY - timedelta(days=7),
            tags=("a", "b", "c"),
        )
        # deadline 12 + priority 6 + scheduled 5 + active 4 + age 2 + tags 1
        assert calculate_urgency(task, today=TODAY) == pytest.approx(30.0)


# ---------------------------------------------------------------------------
# Failure handling
# ---------------------------------------------------------------------------

class TestFailures:
    def test_completed_has_no_urgency(self):
        assert calculate_urgency(_task(completed=True), today=TODAY) is None

    def test_malformed_date_returns_none(self):
        task = _task(deadline_date="2026-02-12")
        assert calculate_urgency(task, today=TODAY) is None


# ---------------------------------------------------------------------------
# urgency.ini
# ---------------------------------------------------------------------------

INI = """
# Custom weights
urgency.priority.high.coefficient = 8.5
urgency.priority.medium.coefficient = 4
urgency.due.coefficient = 10.0
urgency.waiting.coefficient = -1.5
urgency.unknown.coefficient = 99
not a setting
urgency.tags.coefficient = lots
"""


class TestIni:
    def test_parse(self):
        c = parse_urgency_coefficients(INI)
        assert c.priority_high == 8.5
        assert c.priority_medium == 4.0
        assert c.deadline == 10.0
        assert c.waiting == -1.5
        # untouched and malformed entries keep defaults
        assert c.priority_low == 1.8
        assert c.tags == 1.0

    def test_empty_content_defaults(self):
        assert parse_urgency_coefficients("") == UrgencyCoefficients()

    def test_load_file(self, tmp_path):
        path = tmp_path / "urgency.ini"
        path.write_text("urgency.age.coefficient = 0.5\n", encoding="utf-8")
        assert load_urgency_coefficients(path).age == 0.5

    def test_load_missing_file(self, tmp_path):
        assert load_urgency_coefficients(tmp_path / "missing.ini") == UrgencyCoefficients()


def test_needs_recalculation():
    assert needs_urgency_recalculation(["text", "deadline_date"])
    assert not needs_urgency_recalculation(["text", "indent"])
    assert not needs_urgency_recalculation([])
