from .line_parser import LineOutcome, SkipReason
from .task_parser import TaskParser
from .org_parser import OrgModeTaskParser
from .registry import ParserRegistry, create_default_registry

__all__ = [
    "LineOutcome",
    "SkipReason",
    "TaskParser",
    "OrgModeTaskParser",
    "ParserRegistry",
    "create_default_registry",
]
