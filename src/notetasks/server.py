"""
notetasks MCP server entry point.

Startup sequence:
1. Build ParserConfig from NOTETASKS_* environment variables
2. Create the parser registry (.md and .org parsers)
3. Register MCP tools
4. Run MCP server (stdio transport)

Environment:
    NOTETASKS_DAILY_NOTE_FORMAT  strptime format for daily-note file names
                                 (default "%Y-%m-%d"; empty disables detection)
    See ParserConfig.from_env for the parser settings.
"""

import logging
import os
import sys
from functools import partial

from mcp.server.fastmcp import FastMCP

from notetasks.models.config import ParserConfig
from notetasks.parsers.registry import create_default_registry
from notetasks.tools import register_task_tools
from notetasks.utils.daily_notes import detect_daily_note

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stderr,
)
log = logging.getLogger(__name__)


def main() -> None:
    config = ParserConfig.from_env()
    daily_format = os.environ.get("NOTETASKS_DAILY_NOTE_FORMAT", "%Y-%m-%d")
    resolver = partial(detect_daily_note, date_format=daily_format) if daily_format else None

    log.info(
        "Code blocks: %s, comment blocks: %s, callouts: %s",
        config.include_code_blocks,
        config.include_comment_blocks,
        config.include_callout_blocks,
    )
    if config.additional_task_keywords:
        log.info("Extra keywords: %s", ", ".join(config.additional_task_keywords))

    registry = create_default_registry(config, daily_note_resolver=resolver)

    mcp = FastMCP("notetasks")
    register_task_tools(mcp, registry)

    log.info("Starting notetasks server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
