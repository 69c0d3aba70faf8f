"""
Tests for tools/task_tools.py.

Exercises the MCP tool handler functions directly (bypasses transport).
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from notetasks.parsers.registry import create_default_registry
from notetasks.tools.task_tools import (
    handle_has_keywords,
    handle_parse_content,
    handle_parse_file,
    register_task_tools,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _FakeMCP:
    """Minimal fake to capture tool registrations."""

    def __init__(self):
        self._tools = {}

    def tool(self, *args, **kwargs):
        """Decorator that records functions by name."""
        def decorator(fn):
            self._tools[fn.__name__] = fn
            return fn
        return decorator

    def get(self, name: str):
        return self._tools[name]


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def mcp(registry):
    fake = _FakeMCP()
    register_task_tools(fake, registry)
    return fake


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

class TestParseContent:
    def test_markdown(self, registry):
        result = handle_parse_content(registry, content="- TODO a\n- DONE b\ntext")
        assert result["parser"] == "markdown"
        assert result["count"] == 2
        assert [t["state"] for t in result["tasks"]] == ["TODO", "DONE"]
        assert result["tasks"][1]["urgency"] is None

    def test_org_by_path(self, registry):
        result = handle_parse_content(registry, content="* TODO x", path="plan.org")
        assert result["parser"] == "org-mode"
        assert result["tasks"][0]["path"] == "plan.org"

    def test_unsupported_extension(self, registry):
        result = handle_parse_content(registry, content="- TODO x", path="a.txt")
        assert "error" in result

    def test_dates_serialised(self, registry):
        content = "- TODO x\n  DEADLINE: <2026-02-20 Fri>"
        task = handle_parse_content(registry, content=content)["tasks"][0]
        assert task["deadline_date"] == "2026-02-20T00:00:00"
        assert task["scheduled_date"] is None


class TestParseFile:
    def test_reads_file(self, registry, tmp_path):
        note = tmp_path / "inbox.md"
        note.write_text("- [ ] TODO write tests #dev\n", encoding="utf-8")
        result = handle_parse_file(registry, file_path=str(note))
        assert result["count"] == 1
        assert result["tasks"][0]["tags"] == ["dev"]
        assert result["path"] == str(note)

    def test_missing_file(self, registry, tmp_path):
        result = handle_parse_file(registry, file_path=str(tmp_path / "gone.md"))
        assert result["error"].startswith("File not found")

    def test_unsupported_file(self, registry, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("TODO x", encoding="utf-8")
        assert "No parser" in handle_parse_file(registry, file_path=str(path))["error"]

    def test_undecodable_file(self, registry, tmp_path):
        path = tmp_path / "bad.md"
        path.write_bytes(b"\xff\xfe TODO \xff")
        assert "Could not read" in handle_parse_file(registry, file_path=str(path))["error"]


def test_has_keywords(registry):
    assert handle_has_keywords(registry, content="- TODO x") == {"has_keywords": True}
    assert handle_has_keywords(registry, content="nothing here") == {"has_keywords": False}


# ---------------------------------------------------------------------------
# MCP wrappers
# ---------------------------------------------------------------------------

class TestRegisteredTools:
    def test_all_tools_registered(self, mcp):
        for name in ("tasks_parse_content", "tasks_parse_file", "tasks_has_keywords"):
            assert callable(mcp.get(name))

    def test_parse_content_returns_json(self, mcp):
        data = json.loads(mcp.get("tasks_parse_content")("- NOW [#A] ship it"))
        assert data["path"] == "note.md"
        assert data["tasks"][0]["priority"] == "high"
        assert data["tasks"][0]["urgency"] > 0

    def test_parse_file_returns_json(self, mcp, tmp_path):
        note = tmp_path / "agenda.org"
        note.write_text("* WAIT reply\n", encoding="utf-8")
        data = json.loads(mcp.get("tasks_parse_file")(str(note)))
        assert data["tasks"][0]["state"] == "WAIT"

    def test_has_keywords_with_path(self, mcp):
        data = json.loads(mcp.get("tasks_has_keywords")("* DONE x", path="a.org"))
        assert data["has_keywords"] is True
