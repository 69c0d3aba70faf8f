"""
Tests for utils/keywords.py.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from notetasks.models.config import ParserConfig
from notetasks.utils.keywords import KeywordManager


class TestBuiltins:
    def test_order(self):
        assert KeywordManager().get_all_keywords() == [
            "TODO", "LATER",
            "DOING", "NOW", "IN-PROGRESS",
            "WAIT", "WAITING",
            "DONE", "CANCELED", "CANCELLED",
            "ARCHIVED",
        ]

    def test_groups(self):
        km = KeywordManager()
        assert km.get_group("LATER") == "pending"
        assert km.get_group("NOW") == "active"
        assert km.get_group("WAITING") == "waiting"
        assert km.get_group("CANCELLED") == "completed"
        assert km.get_group("ARCHIVED") == "archived"
        assert km.get_group("todo") is None

    def test_no_custom_keywords(self):
        assert KeywordManager().custom_keywords() == []


class TestAdditions:
    def test_generic_keywords_are_pending(self):
        km = KeywordManager(ParserConfig(additional_task_keywords=["FIXME"]))
        assert km.is_pending("FIXME")
        assert km.is_known("FIXME")
        assert km.custom_keywords() == ["FIXME"]

    def test_grouped_additions(self):
        km = KeywordManager(ParserConfig(
            additional_active_keywords=["STARTED"],
            additional_waiting_keywords=["BLOCKED"],
            additional_completed_keywords=["SHIPPED"],
        ))
        assert km.is_active("STARTED")
        assert km.is_waiting("BLOCKED")
        assert km.is_completed("SHIPPED")
        assert "STARTED" in km.get_active_set()
        assert "BLOCKED" in km.get_waiting_set()
        assert "SHIPPED" in km.get_completed_set()

    def test_completed_wins_over_generic(self):
        km = KeywordManager(ParserConfig(
            additional_task_keywords=["SHIPPED"],
            additional_completed_keywords=["SHIPPED"],
        ))
        assert not km.is_pending("SHIPPED")
        assert km.is_completed("SHIPPED")

    def test_duplicates_of_builtins_not_repeated(self):
        km = KeywordManager(ParserConfig(additional_pending_keywords=["TODO", " REVIEW "]))
        keywords = km.get_all_keywords()
        assert keywords.count("TODO") == 1
        assert "REVIEW" in keywords

    def test_update_config_replaces_additions(self):
        km = KeywordManager(ParserConfig(additional_task_keywords=["FIXME"]))
        km.update_config(ParserConfig())
        assert not km.is_known("FIXME")
