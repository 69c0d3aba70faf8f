from .task import Task, DailyNoteInfo, Priority, PRIORITY_BY_LETTER
from .config import (
    LanguageCommentSupport,
    ParserConfig,
    UrgencyCoefficients,
    normalize_keywords,
)

__all__ = [
    "Task",
    "DailyNoteInfo",
    "Priority",
    "PRIORITY_BY_LETTER",
    "LanguageCommentSupport",
    "ParserConfig",
    "UrgencyCoefficients",
    "normalize_keywords",
]
