"""
Registry of source-language comment syntaxes.

Each language supplies regex fragments (without anchors) for its comment
tokens. The fragments are composed into per-language task grammars by
utils.patterns.build_language_regex and drive multi-line comment tracking in
parsers.block_context.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CommentPatterns:
    """Regex fragments for one comment syntax. ``None`` means unsupported."""

    single_line: Optional[str] = None
    multi_line_start: Optional[str] = None
    multi_line_end: Optional[str] = None
    multiline_mid: Optional[str] = None


@dataclass(frozen=True)
class LanguageDefinition:
    name: str
    patterns: CommentPatterns
    aliases: Tuple[str, ...] = field(default_factory=tuple)


C_STYLE_COMMENTS = CommentPatterns(
    single_line=r"//",
    multi_line_start=r"/\*{1,2}",
    multi_line_end=r"\*/",
    multiline_mid=r"\*(?!/)",
)

HASH_STYLE_COMMENTS = CommentPatterns(single_line=r"#")

DEFAULT_LANGUAGES: Tuple[LanguageDefinition, ...] = (
    LanguageDefinition("c", C_STYLE_COMMENTS),
    LanguageDefinition("cpp", C_STYLE_COMMENTS, ("c++",)),
    LanguageDefinition("csharp", replace(C_STYLE_COMMENTS, single_line=r"///?"), ("cs",)),
    LanguageDefinition("dockerfile", HASH_STYLE_COMMENTS),
    LanguageDefinition("go", C_STYLE_COMMENTS, ("golang",)),
    LanguageDefinition("ini", CommentPatterns(single_line=r"[;#]")),
    LanguageDefinition("java", C_STYLE_COMMENTS),
    LanguageDefinition("javascript", C_STYLE_COMMENTS, ("js",)),
    LanguageDefinition("kotlin", C_STYLE_COMMENTS, ("kt",)),
    LanguageDefinition(
        "powershell",
        CommentPatterns(
            single_line=r"#(?!>)",
            multi_line_start=r"<#",
            multi_line_end=r"#>",
            multiline_mid=r"#(?!>)",
        ),
        ("ps1", "pwsh"),
    ),
    LanguageDefinition(
        "python",
        CommentPatterns(
            single_line=r"#",
            multi_line_start=r"'''|\"\"\"",
            multi_line_end=r"'''|\"\"\"",
        ),
        ("py",),
    ),
    LanguageDefinition("r", HASH_STYLE_COMMENTS),
    LanguageDefinition(
        "ruby",
        CommentPatterns(single_line=r"#", multi_line_start=r"=begin", multi_line_end=r"=end"),
        ("rb",),
    ),
    LanguageDefinition(
        "rust",
        CommentPatterns(
            single_line=r"//[/!]?",
            multi_line_start=r"/\*\*?",
            multi_line_end=r"\*/",
            multiline_mid=r"\*(?!/)",
        ),
        ("rs",),
    ),
    LanguageDefinition("shell", HASH_STYLE_COMMENTS, ("sh", "bash", "zsh")),
    LanguageDefinition(
        "sql",
        CommentPatterns(
            single_line=r"--",
            multi_line_start=r"/\*+",
            multi_line_end=r"\*/",
            multiline_mid=r"\*(?!/)",
        ),
    ),
    LanguageDefinition("swift", replace(C_STYLE_COMMENTS, single_line=r"///?")),
    LanguageDefinition("toml", HASH_STYLE_COMMENTS),
    LanguageDefinition("typescript", C_STYLE_COMMENTS, ("ts",)),
    LanguageDefinition("yaml", HASH_STYLE_COMMENTS, ("yml",)),
)


class LanguageRegistry:
    """Case-insensitive lookup of languages by name or alias."""

    def __init__(self, languages=DEFAULT_LANGUAGES):
        self._by_identifier: Dict[str, LanguageDefinition] = {}
        for language in languages:
            self.register_language(language)

    def register_language(self, language: LanguageDefinition) -> None:
        self._by_identifier[language.name.lower()] = language
        for alias in language.aliases:
            self._by_identifier[alias.lower()] = language

    def get(self, identifier: Optional[str]) -> Optional[LanguageDefinition]:
        """Return the language for a fence tag, or None when it is unknown."""
        if not identifier:
            return None
        return self._by_identifier.get(identifier.strip().lower())


DEFAULT_REGISTRY = LanguageRegistry()
