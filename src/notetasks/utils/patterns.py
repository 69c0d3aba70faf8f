"""
Task grammar construction.

A Grammar is an immutable bundle of compiled patterns built from one keyword
list. It is rebuilt only when the keyword set changes; compiled patterns are
shared through a RegexCache keyed by pattern source.

Named groups used by every task pattern:
    indent  - everything before the list marker (whitespace, quote markers,
              callout header, comment-open token, leading code)
    marker  - list marker or checkbox marker, with trailing whitespace
    glyph   - checkbox glyph when the marker is a checkbox
    state   - the keyword
    body    - task text after the keyword
    tail    - closing comment token preserved for round-trip rewriting
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from notetasks.models.task import PRIORITY_BY_LETTER, Priority
from notetasks.utils.languages import LanguageDefinition
from notetasks.utils.regex_cache import RegexCache

# ---------------------------------------------------------------------------
# Grammar fragments
# ---------------------------------------------------------------------------

# -, *, +, 1. 2) a. B) (A1)
LIST_MARKER = r"(?:[-*+]|\d+[.)]|[A-Za-z][.)]|\([A-Za-z0-9]+\))"

# - [ ]  - [x]  1. [-]  * [+]  + [*]
CHECKBOX_MARKER = LIST_MARKER + r"[ \t]*\[(?P<glyph>[ \-+*x])\]"

MARKER_PART = rf"(?P<marker>(?:{CHECKBOX_MARKER}|{LIST_MARKER})[ \t]+)?"

# Whitespace and quote markers, optionally followed by a callout header
GENERIC_PREFIX = r"(?P<indent>[ \t>]*(?:\[![\w-]+\][-+]?[ \t]*)?)"

BODY_AND_END = r"[ \t]+(?P<body>.*?)[ \t\r]*$"

CHECKED_GLYPH = "x"
UNCHECKED_GLYPH = " "

# ---------------------------------------------------------------------------
# Line-level patterns that do not depend on keywords
# ---------------------------------------------------------------------------

PRIORITY_TOKEN_RE = re.compile(r"(\s*)\[#([ABC])\](\s*)")
ORG_PRIORITY_RE = re.compile(r"(?:\[#(?P<bracketed>[ABC])\]|(?<!\S)#(?P<bare>[ABC])(?!\S))\s*")
FOOTNOTE_DEFINITION_RE = re.compile(r"^\[\^\d+\]:[ \t]*")
TRAILING_EMBED_RE = re.compile(r"(?:^|[ \t]+)(?P<ref>\^[A-Za-z0-9-]+)[ \t\r]*$")
TRAILING_FOOTNOTE_RE = re.compile(r"(?:^|[ \t]*)(?P<ref>\[\^[^\]\s]+\])[ \t\r]*$")
TAG_RE = re.compile(r"(?<![\w#&/])#(?P<tag>[\w/-]+)")
WIKILINK_RE = re.compile(r"\[\[.*?\]\]")
WHITESPACE_RUN_RE = re.compile(r"[ \t]+")
QUOTE_PREFIX_RE = re.compile(r"^[ \t>]*")

_PRIORITY_LETTERS = frozenset(PRIORITY_BY_LETTER)


def escape_keywords(keywords: Iterable[str]) -> str:
    """Build one alternation from keywords, escaping regex metacharacters."""
    return "|".join(re.escape(k) for k in keywords)


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LanguageGrammar:
    """Task patterns for one source language inside a fenced code block."""

    language: str
    comment: Optional[re.Pattern[str]]
    interior: re.Pattern[str]


@dataclass(frozen=True)
class Grammar:
    """Compiled task patterns for one keyword set."""

    keywords: Tuple[str, ...]
    alternation: str
    test: re.Pattern[str]
    capture: re.Pattern[str]
    comment_block: re.Pattern[str]
    org_headline: re.Pattern[str]

    def language(self, language: LanguageDefinition, cache: RegexCache) -> LanguageGrammar:
        return build_language_regex(self.alternation, language, cache)


def build_grammar(keywords: Iterable[str], cache: Optional[RegexCache] = None) -> Grammar:
    """
    Build the task grammar for a keyword list.

    Keywords keep their given order in the alternation. Patterns come from
    ``cache`` so identical keyword sets reuse compiled objects.
    """
    cache = cache or RegexCache()
    ordered = tuple(dict.fromkeys(k for k in keywords if k))
    alternation = escape_keywords(ordered) or r"(?!)"
    keyword_group = rf"(?P<state>{alternation})"

    test = cache.get(rf"^{GENERIC_PREFIX}{MARKER_PART}(?:{alternation})[ \t]+")
    capture = cache.get(rf"^{GENERIC_PREFIX}{MARKER_PART}{keyword_group}{BODY_AND_END}")
    comment_block = cache.get(
        rf"^(?P<indent>[ \t>]*(?:%%[ \t]*)?){MARKER_PART}{keyword_group}"
        r"[ \t]+(?P<body>.*?)(?P<tail>[ \t]*%%)?[ \t\r]*$"
    )
    org_headline = build_org_headline_regex(ordered, cache)
    return Grammar(
        keywords=ordered,
        alternation=alternation,
        test=test,
        capture=capture,
        comment_block=comment_block,
        org_headline=org_headline,
    )


def build_org_headline_regex(keywords: Iterable[str], cache: Optional[RegexCache] = None) -> re.Pattern[str]:
    """
    Org headline pattern: ``^(\\*+)\\s+(KEYWORD)\\s+(.*)$``.

    Groups: stars, state, body.
    """
    alternation = escape_keywords(keywords) or r"(?!)"
    source = rf"^(?P<stars>\*+)[ \t]+(?P<state>{alternation})[ \t]+(?P<body>.*?)[ \t\r]*$"
    return (cache or RegexCache()).get(source)


def build_language_regex(alternation: str, language: LanguageDefinition, cache: RegexCache) -> LanguageGrammar:
    """
    Build the comment-form task patterns for one language.

    ``comment`` matches a keyword right after a single-line comment token or a
    multi-line comment opener, either at line start or after code and
    whitespace. ``interior`` matches lines inside an open multi-line comment.
    """
    patterns = language.patterns
    openers = [p for p in (patterns.single_line, patterns.multi_line_start) if p]
    keyword_group = rf"(?P<state>{alternation})"
    if patterns.multi_line_end:
        tail = rf"(?P<tail>[ \t]*(?:{patterns.multi_line_end}))?"
    else:
        tail = r"(?P<tail>(?!))?"
    end = rf"[ \t]+(?P<body>.*?){tail}[ \t\r]*$"

    comment = None
    if openers:
        opener = "|".join(f"(?:{p})" for p in openers)
        comment = cache.get(
            rf"^(?P<indent>(?:[ \t]*|.*?[ \t]+)(?:{opener})[ \t]*){MARKER_PART}{keyword_group}{end}"
        )

    mid = rf"(?:(?:{patterns.multiline_mid})[ \t]*)?" if patterns.multiline_mid else ""
    interior = cache.get(rf"^(?P<indent>[ \t]*{mid}){MARKER_PART}{keyword_group}{end}")
    return LanguageGrammar(language=language.name, comment=comment, interior=interior)


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def _priority_for(letter: Optional[str]) -> Optional[Priority]:
    return PRIORITY_BY_LETTER.get(letter) if letter else None


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RUN_RE.sub(" ", text).strip()


def extract_priority(text: str) -> Tuple[Optional[Priority], str]:
    """
    Remove the first ``[#A]``/``[#B]``/``[#C]`` token.

    Returns (priority, cleaned_text). Whitespace around the token collapses
    to one space.
    """
    match = PRIORITY_TOKEN_RE.search(text)
    if not match:
        return None, collapse_whitespace(text)
    cleaned = text[: match.start()] + " " + text[match.end():]
    return _priority_for(match.group(2)), collapse_whitespace(cleaned)


def extract_org_priority(text: str) -> Tuple[Optional[Priority], str]:
    """Org variant: brackets around ``#A`` are optional."""
    match = ORG_PRIORITY_RE.search(text)
    if not match:
        return None, collapse_whitespace(text)
    letter = match.group("bracketed") or match.group("bare")
    cleaned = text[: match.start()] + " " + text[match.end():]
    return _priority_for(letter), collapse_whitespace(cleaned)


def extract_tags(text: str) -> List[str]:
    """
    Return ``#tag`` names in order of appearance, without duplicates.

    Wiki-links are masked first so ``[[Note#Section]]`` is not read as a tag.
    Priority letters and purely numeric tokens are not tags.
    """
    masked = WIKILINK_RE.sub(lambda m: " " * len(m.group()), text)
    tags: List[str] = []
    for m in TAG_RE.finditer(masked):
        tag = m.group("tag")
        if tag in _PRIORITY_LETTERS or tag.isdigit() or tag in tags:
            continue
        tags.append(tag)
    return tags


def split_trailing_references(text: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Split trailing ``^block-id`` and ``[^n]`` markers off the task text.

    Returns (text, footnote_reference, embed_reference).
    """
    footnote_ref = None
    embed_ref = None
    while True:
        m = TRAILING_EMBED_RE.search(text)
        if m and embed_ref is None:
            embed_ref = m.group("ref")
            text = text[: m.start()]
            continue
        m = TRAILING_FOOTNOTE_RE.search(text)
        if m and footnote_ref is None:
            footnote_ref = m.group("ref")
            text = text[: m.start()]
            continue
        return text, footnote_ref, embed_ref


def quote_depth(prefix: str) -> int:
    """Count ``>`` markers in the leading whitespace/quote run of ``prefix``."""
    return QUOTE_PREFIX_RE.match(prefix).group().count(">")
