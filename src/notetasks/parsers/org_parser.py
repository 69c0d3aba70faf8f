"""
Org-mode task parser.

Tasks are headlines whose first word is a keyword:

    * TODO [#B] Call Bob
      SCHEDULED: <2026-02-12 Thu> DEADLINE: <2026-02-14 Sat>
      :PROPERTIES:
      :ID: 1234
      :END:
    ** DONE Sub-task

The asterisk count is the nesting level. Priority brackets are optional
(``#A`` and ``[#A]`` both work). Planning lines may appear anywhere below
the headline until the next headline.
"""

from datetime import datetime
from typing import List, Optional

from notetasks.models.task import Task
from notetasks.parsers.base import BaseTaskParser, split_lines
from notetasks.parsers.date_associator import find_org_task_dates
from notetasks.parsers.line_parser import LineOutcome, SkipReason, TaskMatch
from notetasks.utils.patterns import extract_org_priority, extract_tags, split_trailing_references


class OrgModeTaskParser(BaseTaskParser):
    """Parser for .org files."""

    parser_id = "org-mode"
    supported_extensions = (".org",)

    def explain_file(self, content: str, path: str, today: Optional[datetime] = None) -> List[LineOutcome]:
        grammar = self.grammar
        lines = split_lines(content)
        daily = None
        outcomes: List[LineOutcome] = []

        for index, line in enumerate(lines):
            match, reason = self._match_headline(line, grammar)
            if match is None:
                outcomes.append(LineOutcome(line=index, skip_reason=reason))
                continue
            if daily is None:
                daily = self._daily_note_info(path)
            dates = find_org_task_dates(lines, index + 1)
            outcomes.append(LineOutcome(
                line=index,
                task=self._make_task(match, path, index, line, dates, daily, today),
            ))

        return outcomes

    def parse_line(self, line: str, line_number: int, path: str) -> Optional[Task]:
        match, _ = self._match_headline(line, self.grammar)
        if match is None:
            return None
        daily = self._daily_note_info(path)
        return self._make_task(match, path, line_number, line, (None, None), daily, None)

    def is_task_line(self, line: str) -> bool:
        return self.grammar.org_headline.match(line) is not None

    def _match_headline(self, line, grammar):
        if not line.strip():
            return None, SkipReason.BLANK
        if not any(k in line for k in grammar.keywords):
            return None, SkipReason.NO_KEYWORD
        m = grammar.org_headline.match(line)
        if m is None:
            return None, SkipReason.NO_MATCH

        stars = m.group("stars")
        state = m.group("state")
        body, footnote_ref, embed_ref = split_trailing_references(m.group("body"))
        priority, text = extract_org_priority(body)
        return TaskMatch(
            indent=stars,
            list_marker="",
            state=state,
            text=text,
            completed=self.keyword_manager.is_completed(state),
            priority=priority,
            tags=tuple(extract_tags(text)),
            quote_nesting_level=len(stars),
            footnote_reference=footnote_ref,
            embed_reference=embed_ref,
        ), None
