"""
Behaviour shared by the markdown and org-mode parsers.

A parser owns a compiled grammar derived from a KeywordManager, the urgency
coefficients and an optional daily-note resolver. ``update_config`` swaps
these wholesale; a parse pass reads them once at the start, so a pass that
is already running keeps the configuration it started with.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from notetasks.models.config import ParserConfig, UrgencyCoefficients
from notetasks.models.task import DailyNoteInfo, Task
from notetasks.parsers.line_parser import LineOutcome, TaskMatch
from notetasks.utils.daily_notes import DailyNoteResolver, safe_daily_note_info
from notetasks.utils.keywords import KeywordManager
from notetasks.utils.patterns import Grammar, build_grammar
from notetasks.utils.regex_cache import RegexCache
from notetasks.utils.urgency import UrgencyContext, calculate_urgency

log = logging.getLogger(__name__)


class BaseTaskParser(ABC):
    """Common surface: parse_file, explain_file, has_any_keyword, update_config."""

    parser_id: str = ""
    supported_extensions: Tuple[str, ...] = ()

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        keyword_manager: Optional[KeywordManager] = None,
        regex_cache: Optional[RegexCache] = None,
        daily_note_resolver: Optional[DailyNoteResolver] = None,
    ):
        self.regex_cache = regex_cache or RegexCache()
        self.keyword_manager = keyword_manager or KeywordManager()
        self.daily_note_resolver = daily_note_resolver
        self.grammar: Optional[Grammar] = None
        self.update_config(config or ParserConfig())

    # -- configuration -----------------------------------------------------

    def update_config(self, config: ParserConfig) -> None:
        """Apply a new configuration, rebuilding the grammar if keywords changed."""
        self.config = config
        self.keyword_manager.update_config(config)
        self.coefficients: UrgencyCoefficients = config.urgency_coefficients
        self.urgency_context = UrgencyContext(
            active_states=self.keyword_manager.get_active_set(),
            waiting_states=self.keyword_manager.get_waiting_set(),
        )
        keywords = tuple(self.keyword_manager.get_all_keywords())
        if self.grammar is None or self.grammar.keywords != keywords:
            self.grammar = build_grammar(keywords, self.regex_cache)
            log.debug("%s grammar rebuilt for %d keywords", self.parser_id, len(keywords))
        self._configure()

    def _configure(self) -> None:
        """Hook for subclasses to rebuild per-config helpers."""

    # -- parsing -----------------------------------------------------------

    def has_any_keyword(self, content: str) -> bool:
        """
        Fast pre-filter: substring scan for any known keyword.

        False guarantees that parse_file returns no tasks.
        """
        return any(keyword in content for keyword in self.grammar.keywords)

    def parse_file(self, content: str, path: str, today: Optional[datetime] = None) -> List[Task]:
        """Parse file content into tasks, in line order."""
        if not self.has_any_keyword(content):
            return []
        return [o.task for o in self.explain_file(content, path, today=today) if o.task is not None]

    @abstractmethod
    def explain_file(self, content: str, path: str, today: Optional[datetime] = None) -> List[LineOutcome]:
        """One LineOutcome per line of ``content``."""

    @abstractmethod
    def parse_line(self, line: str, line_number: int, path: str) -> Optional[Task]:
        """Parse one line without surrounding context; no dates are attached."""

    @abstractmethod
    def is_task_line(self, line: str) -> bool:
        """Cheap syntactic check that a line looks like a task."""

    # -- task assembly -----------------------------------------------------

    def _daily_note_info(self, path: str) -> DailyNoteInfo:
        return safe_daily_note_info(self.daily_note_resolver, path)

    def _make_task(
        self,
        match: TaskMatch,
        path: str,
        index: int,
        raw_text: str,
        dates: Tuple[Optional[datetime], Optional[datetime]],
        daily: DailyNoteInfo,
        today: Optional[datetime],
    ) -> Task:
        scheduled, deadline = dates
        task = Task(
            path=path,
            line=index,
            raw_text=raw_text,
            indent=match.indent,
            list_marker=match.list_marker,
            text=match.text,
            state=match.state,
            completed=match.completed,
            priority=match.priority,
            scheduled_date=scheduled,
            deadline_date=deadline,
            tail=match.tail,
            tags=tuple(match.tags),
            is_daily_note=daily.is_daily_note,
            daily_note_date=daily.daily_note_date,
            quote_nesting_level=match.quote_nesting_level,
            footnote_marker=match.footnote_marker,
            footnote_reference=match.footnote_reference,
            embed_reference=match.embed_reference,
        )
        if task.completed:
            return task
        urgency = calculate_urgency(task, self.coefficients, self.urgency_context, today)
        return task.with_changes(urgency=urgency)


def split_lines(content: str) -> Sequence[str]:
    """Split on newlines only; lines keep any trailing carriage return."""
    return content.split("\n")
