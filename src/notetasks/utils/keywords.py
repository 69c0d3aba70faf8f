"""
Task-state keyword taxonomy.

Keywords fall into five groups: pending, active, waiting, completed and
archived. Each group is the built-in set plus any user additions. A
KeywordManager is reconfigured wholesale; it is never mutated one keyword
at a time.
"""

from typing import FrozenSet, List, Optional, Tuple

from notetasks.models.config import ParserConfig, normalize_keywords

BUILTIN_PENDING_KEYWORDS: Tuple[str, ...] = ("TODO", "LATER")
BUILTIN_ACTIVE_KEYWORDS: Tuple[str, ...] = ("DOING", "NOW", "IN-PROGRESS")
BUILTIN_WAITING_KEYWORDS: Tuple[str, ...] = ("WAIT", "WAITING")
BUILTIN_COMPLETED_KEYWORDS: Tuple[str, ...] = ("DONE", "CANCELED", "CANCELLED")
BUILTIN_ARCHIVED_KEYWORDS: Tuple[str, ...] = ("ARCHIVED",)

_BUILTIN_ALL = frozenset(
    BUILTIN_PENDING_KEYWORDS
    + BUILTIN_ACTIVE_KEYWORDS
    + BUILTIN_WAITING_KEYWORDS
    + BUILTIN_COMPLETED_KEYWORDS
    + BUILTIN_ARCHIVED_KEYWORDS
)


def _ordered_union(*groups) -> Tuple[str, ...]:
    seen: List[str] = []
    for group in groups:
        for keyword in group:
            if keyword not in seen:
                seen.append(keyword)
    return tuple(seen)


class KeywordManager:
    """
    Owns the keyword groups and answers classification questions.

    Generic ``additional_task_keywords`` behave as pending keywords. Invalid or
    empty addition lists silently leave only the built-in keywords.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.update_config(config or ParserConfig())

    def update_config(self, config: ParserConfig) -> None:
        self._generic = tuple(normalize_keywords(config.additional_task_keywords))
        self._pending = _ordered_union(
            BUILTIN_PENDING_KEYWORDS, normalize_keywords(config.additional_pending_keywords)
        )
        self._active = _ordered_union(
            BUILTIN_ACTIVE_KEYWORDS, normalize_keywords(config.additional_active_keywords)
        )
        self._waiting = _ordered_union(
            BUILTIN_WAITING_KEYWORDS, normalize_keywords(config.additional_waiting_keywords)
        )
        self._completed = _ordered_union(
            BUILTIN_COMPLETED_KEYWORDS, normalize_keywords(config.additional_completed_keywords)
        )
        self._archived = _ordered_union(
            BUILTIN_ARCHIVED_KEYWORDS, normalize_keywords(config.additional_archived_keywords)
        )

        self._completed_set = frozenset(self._completed)
        self._active_set = frozenset(self._active)
        self._waiting_set = frozenset(self._waiting)
        self._archived_set = frozenset(self._archived)
        self._pending_set = frozenset(self._pending + self._generic) - (
            self._completed_set | self._active_set | self._waiting_set | self._archived_set
        )
        self._all = _ordered_union(
            self._pending, self._active, self._waiting, self._generic,
            self._completed, self._archived,
        )

    # -- queries -----------------------------------------------------------

    def get_all_keywords(self) -> List[str]:
        """All keywords: pending, active, waiting, additions, completed, archived."""
        return list(self._all)

    def is_completed(self, state: str) -> bool:
        return state in self._completed_set

    def is_active(self, state: str) -> bool:
        return state in self._active_set

    def is_waiting(self, state: str) -> bool:
        return state in self._waiting_set

    def is_pending(self, state: str) -> bool:
        return state in self._pending_set

    def is_archived(self, state: str) -> bool:
        return state in self._archived_set

    def is_known(self, state: str) -> bool:
        return state in self._all

    def get_group(self, state: str) -> Optional[str]:
        """Return the group name for a keyword, or None if unknown."""
        if self.is_pending(state):
            return "pending"
        if self.is_active(state):
            return "active"
        if self.is_waiting(state):
            return "waiting"
        if self.is_completed(state):
            return "completed"
        if self.is_archived(state):
            return "archived"
        return None

    def get_active_set(self) -> FrozenSet[str]:
        return self._active_set

    def get_waiting_set(self) -> FrozenSet[str]:
        return self._waiting_set

    def get_completed_set(self) -> FrozenSet[str]:
        return self._completed_set

    def custom_keywords(self) -> List[str]:
        """Keywords that are not built in."""
        return [k for k in self._all if k not in _BUILTIN_ALL]
