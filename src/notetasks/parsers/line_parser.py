"""
Single-line task extraction.

TaskLineParser takes one line and the BlockContext it sits in, decides
whether the line may hold a task at all (gating), picks the grammar for
that context and decomposes a match into a TaskMatch. Every line gets a
LineResult: either a match or the reason it was skipped.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from notetasks.models.config import ParserConfig
from notetasks.models.task import Priority, Task
from notetasks.parsers.block_context import BlockContext
from notetasks.utils.keywords import KeywordManager
from notetasks.utils.languages import DEFAULT_REGISTRY, LanguageRegistry
from notetasks.utils.patterns import (
    CHECKED_GLYPH,
    UNCHECKED_GLYPH,
    FOOTNOTE_DEFINITION_RE,
    Grammar,
    extract_priority,
    extract_tags,
    quote_depth,
    split_trailing_references,
)
from notetasks.utils.regex_cache import RegexCache


class SkipReason(enum.Enum):
    """Why a line produced no task."""

    BLANK = "blank"
    NO_MATCH = "no_match"
    FENCE_DELIMITER = "fence_delimiter"
    MATH_BLOCK = "math_block"
    CODE_BLOCK_EXCLUDED = "code_block_excluded"
    COMMENT_BLOCK_EXCLUDED = "comment_block_excluded"
    CALLOUT_EXCLUDED = "callout_excluded"
    NO_KEYWORD = "no_keyword"


@dataclass(frozen=True)
class TaskMatch:
    """The parts of a task that come from its own line."""

    indent: str
    list_marker: str
    state: str
    text: str
    completed: bool
    tail: str = ""
    priority: Optional[Priority] = None
    tags: Tuple[str, ...] = ()
    quote_nesting_level: int = 0
    footnote_marker: Optional[str] = None
    footnote_reference: Optional[str] = None
    embed_reference: Optional[str] = None


@dataclass(frozen=True)
class LineResult:
    task_match: Optional[TaskMatch] = None
    skip_reason: Optional[SkipReason] = None

    @property
    def is_task(self) -> bool:
        return self.task_match is not None


def _skip(reason: SkipReason) -> LineResult:
    return LineResult(skip_reason=reason)


class TaskLineParser:
    """Gate, match and decompose one line."""

    def __init__(
        self,
        keywords: KeywordManager,
        grammar: Grammar,
        config: ParserConfig,
        cache: RegexCache,
        languages: Optional[LanguageRegistry] = None,
    ):
        self.keywords = keywords
        self.grammar = grammar
        self.config = config
        self.cache = cache
        self.languages = languages or DEFAULT_REGISTRY

    def parse(self, line: str, context: BlockContext) -> LineResult:
        reason = self.gate(line, context)
        if reason is not None:
            return _skip(reason)

        footnote_marker = None
        body = line
        if context.is_footnote_definition:
            m = FOOTNOTE_DEFINITION_RE.match(line)
            footnote_marker = m.group()
            body = line[m.end():]

        pattern = self.select_pattern(context)
        m = pattern.match(body)
        if m is None:
            return _skip(SkipReason.NO_MATCH)
        return LineResult(task_match=self._build_match(m, footnote_marker))

    def gate(self, line: str, context: BlockContext) -> Optional[SkipReason]:
        """Return the reason a line cannot hold a task, or None if it may."""
        if not line.strip():
            return SkipReason.BLANK
        if context.in_math_block:
            return SkipReason.MATH_BLOCK
        if context.is_fence_delimiter:
            return SkipReason.FENCE_DELIMITER
        if context.in_code_block and not self.config.include_code_blocks:
            return SkipReason.CODE_BLOCK_EXCLUDED
        if context.in_comment_block and not self.config.include_comment_blocks:
            return SkipReason.COMMENT_BLOCK_EXCLUDED
        if context.in_callout and not self.config.include_callout_blocks:
            return SkipReason.CALLOUT_EXCLUDED
        if not any(k in line for k in self.grammar.keywords):
            return SkipReason.NO_KEYWORD
        return None

    def select_pattern(self, context: BlockContext) -> re.Pattern[str]:
        """
        Pick the grammar for a line.

        Known-language fences use comment forms only; lines in %% blocks use
        the comment-block form; everything else uses the generic line grammar.
        """
        if context.in_code_block and self.config.language_comment_support.enabled:
            language = self.languages.get(context.language)
            if language is not None:
                grammar = self.grammar.language(language, self.cache)
                if context.in_code_comment:
                    return grammar.interior
                if grammar.comment is not None:
                    return grammar.comment
                return self.cache.get(r"(?!)")
        if context.in_comment_block:
            return self.grammar.comment_block
        return self.grammar.capture

    # -- decomposition -----------------------------------------------------

    def _build_match(self, m: re.Match[str], footnote_marker: Optional[str]) -> TaskMatch:
        groups = m.groupdict()
        indent = groups.get("indent") or ""
        state = groups["state"]
        glyph = groups.get("glyph")

        body, footnote_ref, embed_ref = split_trailing_references(groups.get("body") or "")
        priority, text = extract_priority(body)

        # Only " " and "x" decide completion; other glyphs defer to the keyword
        if glyph == CHECKED_GLYPH:
            completed = True
        elif glyph == UNCHECKED_GLYPH:
            completed = False
        else:
            completed = self.keywords.is_completed(state)

        return TaskMatch(
            indent=indent,
            list_marker=groups.get("marker") or "",
            state=state,
            text=text,
            completed=completed,
            tail=groups.get("tail") or "",
            priority=priority,
            tags=tuple(extract_tags(text)),
            quote_nesting_level=quote_depth(indent),
            footnote_marker=footnote_marker,
            footnote_reference=footnote_ref,
            embed_reference=embed_ref,
        )


@dataclass(frozen=True)
class LineOutcome:
    """Per-line parse result: the task, or why the line was skipped."""

    line: int
    task: Optional[Task] = None
    skip_reason: Optional[SkipReason] = None
