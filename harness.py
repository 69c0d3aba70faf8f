"""
Interactive harness for trying the task parser without MCP integration.

Usage:
    python harness.py <FILE> [--explain] [--include-code] [--include-comments]

Parses one .md or .org file, prints its tasks ordered by urgency, and with
--explain prints what happened to every line.
"""

import sys
from pathlib import Path

# Add src/ to path so imports work
sys.path.insert(0, str(Path(__file__).parent / "src"))

from notetasks.models.config import ParserConfig
from notetasks.parsers.registry import create_default_registry
from notetasks.utils.daily_notes import detect_daily_note


def print_tasks(tasks) -> None:
    ranked = sorted(tasks, key=lambda t: (t.urgency is None, -(t.urgency or 0.0), t.line))
    print(f"\n=== {len(tasks)} tasks ===")
    for t in ranked:
        urgency = "  done" if t.urgency is None else f"{t.urgency:6.2f}"
        priority = f" [{t.priority}]" if t.priority else ""
        dates = ""
        if t.scheduled_date:
            dates += f"  scheduled={t.scheduled_date:%Y-%m-%d}"
        if t.deadline_date:
            dates += f"  deadline={t.deadline_date:%Y-%m-%d}"
        tags = f"  tags={','.join(t.tags)}" if t.tags else ""
        print(f"  {urgency}  L{t.line + 1:<4d} {t.state:10s}{priority} {t.text}{dates}{tags}")


def print_explanation(parser, content: str, path: str) -> None:
    lines = content.split("\n")
    print("\n=== Line by line ===")
    for outcome in parser.explain_file(content, path):
        if outcome.task is not None:
            verdict = f"TASK {outcome.task.state}"
        else:
            verdict = outcome.skip_reason.value
        print(f"  {outcome.line + 1:4d}  {verdict:24s} {lines[outcome.line][:60]}")


def main(argv) -> int:
    if not argv or argv[0].startswith("-"):
        print(__doc__)
        return 1

    path = Path(argv[0])
    if not path.is_file():
        print(f"Not a file: {path}")
        return 1

    config = ParserConfig(
        include_code_blocks="--include-code" in argv,
        include_comment_blocks="--include-comments" in argv,
    )
    registry = create_default_registry(config, daily_note_resolver=detect_daily_note)
    parser = registry.parser_for_path(str(path))
    if parser is None:
        print(f"No parser for {path.suffix or path.name}")
        return 1

    content = path.read_text(encoding="utf-8")
    print(f"Parser: {parser.parser_id}")
    print(f"Keywords present: {parser.has_any_keyword(content)}")
    print_tasks(parser.parse_file(content, str(path)))
    if "--explain" in argv:
        print_explanation(parser, content, str(path))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
