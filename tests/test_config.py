"""
Tests for models/config.py and utils/daily_notes.py.
"""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from notetasks.models.config import ParserConfig, UrgencyCoefficients, normalize_keywords
from notetasks.models.task import DailyNoteInfo
from notetasks.utils.daily_notes import NOT_A_DAILY_NOTE, detect_daily_note, safe_daily_note_info


# ---------------------------------------------------------------------------
# Urgency coefficients
# ---------------------------------------------------------------------------

class TestCoefficients:
    def test_defaults(self):
        c = UrgencyCoefficients()
        assert (c.priority_high, c.priority_medium, c.priority_low) == (6.0, 3.9, 1.8)
        assert (c.scheduled, c.deadline, c.active) == (5.0, 12.0, 4.0)
        assert (c.age, c.tags, c.waiting) == (2.0, 1.0, -3.0)

    def test_invalid_value_falls_back_per_field(self):
        c = UrgencyCoefficients.model_validate({"deadline": "soon", "active": 7})
        assert c.deadline == 12.0
        assert c.active == 7.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_falls_back(self, value):
        assert UrgencyCoefficients(waiting=value).waiting == -3.0

    def test_aliases(self):
        c = UrgencyCoefficients.model_validate({"priorityHigh": 9, "priorityLow": 0.5})
        assert c.priority_high == 9.0
        assert c.priority_low == 0.5


# ---------------------------------------------------------------------------
# Parser config
# ---------------------------------------------------------------------------

class TestParserConfig:
    def test_defaults(self):
        config = ParserConfig()
        assert config.include_code_blocks is False
        assert config.include_comment_blocks is False
        assert config.include_callout_blocks is True
        assert config.language_comment_support.enabled is True

    def test_camel_case_settings(self):
        config = ParserConfig.model_validate({
            "includeCodeBlocks": True,
            "additionalTaskKeywords": ["FIXME"],
            "additionalInactiveKeywords": ["SOMEDAY"],
            "urgencyCoefficients": {"deadline": 20},
        })
        assert config.include_code_blocks is True
        assert config.additional_task_keywords == ["FIXME"]
        assert config.additional_pending_keywords == ["SOMEDAY"]
        assert config.urgency_coefficients.deadline == 20.0

    def test_keyword_lists_normalised(self):
        config = ParserConfig(additional_task_keywords=[" FIXME ", "", 3, "FIXME", "HACK"])
        assert config.additional_task_keywords == ["FIXME", "HACK"]

    def test_non_list_keywords_dropped(self):
        assert ParserConfig(additional_active_keywords="STARTED").additional_active_keywords == []

    def test_normalize_keywords(self):
        assert normalize_keywords(None) == []
        assert normalize_keywords(("A", "A", " B")) == ["A", "B"]


class TestFromEnv:
    def test_empty_environment(self):
        assert ParserConfig.from_env({}) == ParserConfig()

    def test_flags_and_keywords(self):
        config = ParserConfig.from_env({
            "NOTETASKS_INCLUDE_CODE_BLOCKS": "true",
            "NOTETASKS_INCLUDE_CALLOUT_BLOCKS": "0",
            "NOTETASKS_LANGUAGE_COMMENTS": "no",
            "NOTETASKS_KEYWORDS": "FIXME, HACK,,",
        })
        assert config.include_code_blocks is True
        assert config.include_callout_blocks is False
        assert config.language_comment_support.enabled is False
        assert config.additional_task_keywords == ["FIXME", "HACK"]

    def test_urgency_ini(self, tmp_path):
        ini = tmp_path / "urgency.ini"
        ini.write_text("urgency.deadline.coefficient = 15\n", encoding="utf-8")
        config = ParserConfig.from_env({"NOTETASKS_URGENCY_INI": str(ini)})
        assert config.urgency_coefficients.deadline == 15.0


# ---------------------------------------------------------------------------
# Daily notes
# ---------------------------------------------------------------------------

class TestDailyNotes:
    def test_dated_file_name(self):
        info = detect_daily_note("journal/2026-02-01.md")
        assert info.is_daily_note
        assert info.daily_note_date == datetime(2026, 2, 1)

    def test_plain_file_name(self):
        assert detect_daily_note("projects/plan.md") == NOT_A_DAILY_NOTE

    def test_custom_format(self):
        info = detect_daily_note("01.02.2026.md", date_format="%d.%m.%Y")
        assert info.daily_note_date == datetime(2026, 2, 1)

    def test_failing_resolver_degrades(self):
        def boom(path):
            raise RuntimeError("vault offline")

        assert safe_daily_note_info(boom, "x.md") == NOT_A_DAILY_NOTE

    def test_resolver_result_passed_through(self):
        info = DailyNoteInfo(is_daily_note=True, daily_note_date=datetime(2026, 1, 1))
        assert safe_daily_note_info(lambda path: info, "x.md") is info

    def test_no_resolver(self):
        assert safe_daily_note_info(None, "x.md") == NOT_A_DAILY_NOTE
