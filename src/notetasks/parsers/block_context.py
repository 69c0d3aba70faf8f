"""
Per-line block context for markdown notes.

BlockContextTracker walks a file once, top to bottom, and yields one
BlockContext per line. Block kinds can overlap (a fenced code block inside a
callout, a multi-line code comment inside a fence), so the context is a set
of independent flags rather than a single state.

Tracked blocks:
    fenced code     ``` or ~~~ (closed by the same character, at least as long)
    code comments   multi-line comments of the fence's language, if known
    quotes          depth re-derived from each line's own ``>`` prefix
    callouts        ``> [!type]`` header, membership lasts while lines stay quoted
    comment blocks  %% ... %% on one line, or spanning lines
    math blocks     $$ ... $$ on one line, or spanning lines
    footnotes       ``[^n]:`` definition lines
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from notetasks.utils.languages import DEFAULT_REGISTRY, CommentPatterns, LanguageRegistry
from notetasks.utils.regex_cache import RegexCache

FENCE_RE = re.compile(r"^[ \t>]*(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^\s`]*)")
QUOTE_PREFIX_RE = re.compile(r"^[ \t>]*")
CALLOUT_HEADER_RE = re.compile(r"^\[!(?P<type>[\w-]+)\](?P<fold>[-+]?)")
FOOTNOTE_DEFINITION_RE = re.compile(r"^\[\^\d+\]:")

COMMENT_MARKER = "%%"
MATH_MARKER = "$$"


@dataclass(frozen=True)
class BlockContext:
    """
    Where a single line sits in the document.

    ``in_code_comment`` describes the state at the start of the line: True
    when an earlier line opened a multi-line code comment that is still open.
    """

    in_code_block: bool = False
    is_fence_delimiter: bool = False
    language: Optional[str] = None
    in_code_comment: bool = False
    quote_depth: int = 0
    in_callout: bool = False
    callout_type: Optional[str] = None
    is_callout_header: bool = False
    in_comment_block: bool = False
    in_math_block: bool = False
    is_footnote_definition: bool = False

    @property
    def in_quote(self) -> bool:
        return self.quote_depth > 0


class BlockContextTracker:
    """
    Forward-only state machine over the lines of one file.

    Create one tracker per parse pass; it holds the open-block state between
    calls to ``advance``.
    """

    def __init__(self, languages: Optional[LanguageRegistry] = None, cache: Optional[RegexCache] = None):
        self._languages = languages or DEFAULT_REGISTRY
        self._cache = cache or RegexCache()
        self.reset()

    def reset(self) -> None:
        self._fence: Optional[str] = None
        self._language: Optional[str] = None
        self._comment_tokens: Optional[CommentTokens] = None
        self._in_code_comment = False
        self._in_callout = False
        self._callout_type: Optional[str] = None
        self._in_comment_block = False
        self._in_math_block = False

    def iter_contexts(self, lines: Iterable[str]) -> Iterator[BlockContext]:
        for line in lines:
            yield self.advance(line)

    def advance(self, line: str) -> BlockContext:
        """Consume one line and return its context."""
        prefix = QUOTE_PREFIX_RE.match(line).group()
        depth = prefix.count(">")
        content = line[len(prefix):]

        callout_header = self._update_callout(depth, content)
        callout = dict(
            quote_depth=depth,
            in_callout=self._in_callout,
            callout_type=self._callout_type,
            is_callout_header=callout_header,
        )

        if self._fence is not None:
            return self._advance_in_fence(line, callout)
        if self._in_math_block:
            if MATH_MARKER in line:
                self._in_math_block = False
            return BlockContext(in_math_block=True, **callout)
        if self._in_comment_block:
            if COMMENT_MARKER in line:
                self._in_comment_block = False
            return BlockContext(in_comment_block=True, **callout)

        fence = FENCE_RE.match(line)
        if fence:
            self._open_fence(fence.group("fence"), fence.group("info"))
            return BlockContext(is_fence_delimiter=True, language=self._language, **callout)

        if content.startswith(MATH_MARKER):
            if MATH_MARKER not in content[len(MATH_MARKER):]:
                self._in_math_block = True
            return BlockContext(in_math_block=True, **callout)

        if content.startswith(COMMENT_MARKER):
            if COMMENT_MARKER not in content[len(COMMENT_MARKER):]:
                self._in_comment_block = True
            return BlockContext(in_comment_block=True, **callout)

        return BlockContext(
            is_footnote_definition=depth == 0 and bool(FOOTNOTE_DEFINITION_RE.match(line)),
            **callout,
        )

    # -- fenced code ---------------------------------------------------------

    def _open_fence(self, fence: str, info: str) -> None:
        self._fence = fence
        self._language = info or None
        language = self._languages.get(info)
        self._comment_tokens = compile_comment_tokens(language.patterns, self._cache) if language else None
        self._in_code_comment = False

    def _advance_in_fence(self, line: str, callout: dict) -> BlockContext:
        fence = FENCE_RE.match(line)
        if (
            fence
            and not fence.group("info")
            and fence.group("fence")[0] == self._fence[0]
            and len(fence.group("fence")) >= len(self._fence)
        ):
            language = self._language
            self._fence = None
            self._language = None
            self._comment_tokens = None
            self._in_code_comment = False
            return BlockContext(is_fence_delimiter=True, language=language, **callout)

        was_in_comment = self._in_code_comment
        if self._comment_tokens is not None:
            self._in_code_comment = _scan_code_comments(line, self._comment_tokens, was_in_comment)
        return BlockContext(
            in_code_block=True,
            language=self._language,
            in_code_comment=was_in_comment,
            **callout,
        )

    # -- callouts ------------------------------------------------------------

    def _update_callout(self, depth: int, content: str) -> bool:
        """Update callout membership; returns True for a callout header line."""
        if depth == 0:
            self._in_callout = False
            self._callout_type = None
            return False
        header = CALLOUT_HEADER_RE.match(content)
        if header:
            self._in_callout = True
            self._callout_type = header.group("type").lower()
            return True
        return False


@dataclass(frozen=True)
class CommentTokens:
    """Compiled comment tokens for the language of an open fence."""

    start: Optional[re.Pattern[str]]
    end: Optional[re.Pattern[str]]
    single: Optional[re.Pattern[str]]


def compile_comment_tokens(patterns: CommentPatterns, cache: RegexCache) -> CommentTokens:
    def _get(source: Optional[str]) -> Optional[re.Pattern[str]]:
        return cache.get(source) if source else None

    return CommentTokens(
        start=_get(patterns.multi_line_start),
        end=_get(patterns.multi_line_end),
        single=_get(patterns.single_line),
    )


def _scan_code_comments(line: str, tokens: CommentTokens, in_comment: bool) -> bool:
    """
    Return whether a multi-line comment is open at the end of ``line``.

    Tokens are consumed left to right, so ``/* a */ b /* c`` ends open and a
    single-line comment hides any opener that follows it.
    """
    if tokens.start is None or tokens.end is None:
        return False
    start_re, end_re, single_re = tokens.start, tokens.end, tokens.single

    pos = 0
    while pos <= len(line):
        if in_comment:
            end = end_re.search(line, pos)
            if not end:
                return True
            in_comment = False
            pos = end.end()
            continue
        start = start_re.search(line, pos)
        if not start:
            return False
        if single_re is not None:
            single = single_re.search(line, pos)
            if single and single.start() < start.start():
                return False
        in_comment = True
        pos = start.end()
    return in_comment
