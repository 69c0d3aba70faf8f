"""
Parser lookup by file extension.

Extensions are matched case-insensitively; a leading dot is optional when
looking one up.
"""

import logging
from pathlib import PurePath
from typing import Dict, List, Optional

from notetasks.models.config import ParserConfig
from notetasks.parsers.base import BaseTaskParser
from notetasks.parsers.org_parser import OrgModeTaskParser
from notetasks.parsers.task_parser import TaskParser
from notetasks.utils.daily_notes import DailyNoteResolver
from notetasks.utils.keywords import KeywordManager
from notetasks.utils.regex_cache import RegexCache

log = logging.getLogger(__name__)


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    return extension if extension.startswith(".") else "." + extension


class ParserRegistry:
    """Maps parser ids and file extensions to parser instances."""

    def __init__(self):
        self._parsers: Dict[str, BaseTaskParser] = {}
        self._by_extension: Dict[str, BaseTaskParser] = {}

    def register(self, parser: BaseTaskParser) -> None:
        self._parsers[parser.parser_id] = parser
        for ext in parser.supported_extensions:
            key = _normalize_extension(ext)
            if key in self._by_extension:
                log.warning(
                    "Extension %s already registered, overwriting with %s",
                    key, parser.parser_id,
                )
            self._by_extension[key] = parser

    def unregister(self, parser_id: str) -> None:
        parser = self._parsers.pop(parser_id, None)
        if parser is None:
            return
        for ext in parser.supported_extensions:
            key = _normalize_extension(ext)
            if self._by_extension.get(key) is parser:
                del self._by_extension[key]

    def get_parser(self, parser_id: str) -> Optional[BaseTaskParser]:
        return self._parsers.get(parser_id)

    def parser_for_extension(self, extension: str) -> Optional[BaseTaskParser]:
        return self._by_extension.get(_normalize_extension(extension))

    def parser_for_path(self, path: str) -> Optional[BaseTaskParser]:
        """Return the parser for a file path, or None if its extension is unknown."""
        suffix = PurePath(path).suffix
        if not suffix:
            return None
        return self.parser_for_extension(suffix)

    def supported_extensions(self) -> List[str]:
        return list(self._by_extension)

    def all_parsers(self) -> List[BaseTaskParser]:
        return list(self._parsers.values())

    def update_config(self, config: ParserConfig) -> None:
        """Reconfigure every registered parser."""
        for parser in self._parsers.values():
            parser.update_config(config)


def create_default_registry(
    config: Optional[ParserConfig] = None,
    daily_note_resolver: Optional[DailyNoteResolver] = None,
) -> ParserRegistry:
    """Markdown parser for .md and org-mode parser for .org, sharing one regex cache."""
    config = config or ParserConfig()
    cache = RegexCache()
    keywords = KeywordManager(config)
    registry = ParserRegistry()
    registry.register(TaskParser(config, keywords, cache, daily_note_resolver))
    registry.register(OrgModeTaskParser(config, keywords, cache, daily_note_resolver))
    return registry
