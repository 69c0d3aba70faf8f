"""
Task tool handlers.

Core logic lives in handle_* functions (return dicts).
MCP wrappers in register_task_tools() serialize to JSON strings.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from notetasks.parsers.registry import ParserRegistry

log = logging.getLogger(__name__)

DEFAULT_CONTENT_PATH = "note.md"


# ---------------------------------------------------------------------------
# Handler functions (return dicts)
# ---------------------------------------------------------------------------


def handle_parse_content(registry: ParserRegistry, *, content: str, path: str = DEFAULT_CONTENT_PATH) -> dict:
    parser = registry.parser_for_path(path)
    if parser is None:
        return {"error": f"No parser for '{path}'"}
    tasks = parser.parse_file(content, path)
    return {
        "path": path,
        "parser": parser.parser_id,
        "count": len(tasks),
        "tasks": [t.to_dict() for t in tasks],
    }


def handle_parse_file(registry: ParserRegistry, *, file_path: str) -> dict:
    fp = Path(file_path)
    if registry.parser_for_path(file_path) is None:
        return {"error": f"No parser for '{file_path}'"}
    if not fp.is_file():
        return {"error": f"File not found: {file_path}"}
    try:
        content = fp.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Failed to read %s: %s", file_path, e)
        return {"error": f"Could not read '{file_path}': {e}"}
    return handle_parse_content(registry, content=content, path=str(fp))


def handle_has_keywords(registry: ParserRegistry, *, content: str, path: str = DEFAULT_CONTENT_PATH) -> dict:
    parser = registry.parser_for_path(path)
    if parser is None:
        return {"error": f"No parser for '{path}'"}
    return {"has_keywords": parser.has_any_keyword(content)}


# ---------------------------------------------------------------------------
# MCP tool registration (thin wrappers)
# ---------------------------------------------------------------------------


def register_task_tools(mcp: FastMCP, registry: ParserRegistry) -> None:
    """Register all task MCP tools onto the FastMCP instance."""

    @mcp.tool()
    def tasks_parse_content(content: str, path: Optional[str] = None) -> str:
        """
        Extract tasks from note text.

        Args:
            content: Full note content
            path: File path used for parser selection (by extension), daily-note
                  detection and the task's path field. Default: "note.md"

        Returns JSON with the tasks in line order. Each task carries state,
        text, priority (high/med/low), scheduled/deadline dates (ISO 8601),
        tags and urgency (null when completed).
        """
        return json.dumps(
            handle_parse_content(registry, content=content, path=path or DEFAULT_CONTENT_PATH),
            indent=2,
        )

    @mcp.tool()
    def tasks_parse_file(file_path: str) -> str:
        """
        Read one .md or .org file and extract its tasks.

        Args:
            file_path: Absolute path to the note file
        """
        return json.dumps(handle_parse_file(registry, file_path=file_path), indent=2)

    @mcp.tool()
    def tasks_has_keywords(content: str, path: Optional[str] = None) -> str:
        """
        Quick check whether content contains any task keyword.

        False means parsing the content would return no tasks.
        """
        return json.dumps(
            handle_has_keywords(registry, content=content, path=path or DEFAULT_CONTENT_PATH)
        )
