"""
Markdown task parser.

Main API:
    TaskParser.parse_file(content, path)          → List[Task]
    TaskParser.explain_file(content, path)        → List[LineOutcome]
    TaskParser.parse_line(line, line_number, path) → Optional[Task]
    TaskParser.is_task_line(line)                  → bool
    TaskParser.has_any_keyword(content)            → bool

Recognised task lines:

    TODO Plain keyword line
    - [ ] TODO Checkbox with keyword [#A]
    1. DOING Numbered item #project
    > [!note] WAIT Callout header task
    [^1]: TODO Footnote definition body
    %% LATER Hidden comment task %%          (include_comment_blocks)
    // TODO Code comment in a ```ts fence     (include_code_blocks)

Each pass runs a BlockContextTracker over the lines, gates and matches every
line with a TaskLineParser, then attaches dates from the lines that follow
and scores incomplete tasks.
"""

from datetime import datetime
from typing import List, Optional

from notetasks.models.task import Task
from notetasks.parsers.base import BaseTaskParser, split_lines
from notetasks.parsers.block_context import BlockContextTracker
from notetasks.parsers.date_associator import find_task_dates
from notetasks.parsers.line_parser import LineOutcome, TaskLineParser
from notetasks.utils.languages import DEFAULT_REGISTRY, LanguageRegistry
from notetasks.utils.patterns import FOOTNOTE_DEFINITION_RE


class TaskParser(BaseTaskParser):
    """Parser for markdown notes."""

    parser_id = "markdown"
    supported_extensions = (".md",)

    def __init__(self, config=None, keyword_manager=None, regex_cache=None,
                 daily_note_resolver=None, languages: Optional[LanguageRegistry] = None):
        self.languages = languages or DEFAULT_REGISTRY
        super().__init__(config, keyword_manager, regex_cache, daily_note_resolver)

    def _configure(self) -> None:
        self.line_parser = TaskLineParser(
            self.keyword_manager,
            self.grammar,
            self.config,
            self.regex_cache,
            self.languages,
        )

    # -- public API ----------------------------------------------------------

    def explain_file(self, content: str, path: str, today: Optional[datetime] = None) -> List[LineOutcome]:
        """
        Parse every line and report what happened to it.

        Returns one LineOutcome per line: the task, or the reason the line
        was skipped.
        """
        line_parser = self.line_parser
        lines = split_lines(content)
        tracker = BlockContextTracker(self.languages, self.regex_cache)
        daily = None
        outcomes: List[LineOutcome] = []

        for index, line in enumerate(lines):
            context = tracker.advance(line)
            result = line_parser.parse(line, context)
            if result.task_match is None:
                outcomes.append(LineOutcome(line=index, skip_reason=result.skip_reason))
                continue
            if daily is None:
                daily = self._daily_note_info(path)
            match = result.task_match
            dates = find_task_dates(
                lines,
                index + 1,
                indent=match.indent,
                quoted=context.in_quote,
            )
            task = self._make_task(match, path, index, line, dates, daily, today)
            outcomes.append(LineOutcome(line=index, task=task))

        return outcomes

    def parse_line(self, line: str, line_number: int, path: str) -> Optional[Task]:
        """
        Parse one line on its own, without surrounding block context.

        Dates are not attached since they live on following lines.
        """
        context = BlockContextTracker(self.languages, self.regex_cache).advance(line)
        result = self.line_parser.parse(line, context)
        if result.task_match is None:
            return None
        daily = self._daily_note_info(path)
        return self._make_task(result.task_match, path, line_number, line, (None, None), daily, None)

    def is_task_line(self, line: str) -> bool:
        body = FOOTNOTE_DEFINITION_RE.sub("", line, count=1)
        return self.grammar.test.match(body) is not None
