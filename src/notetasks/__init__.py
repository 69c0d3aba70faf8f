"""Task extraction and urgency scoring for markdown and org-mode notes."""

from .models import ParserConfig, Task, UrgencyCoefficients
from .parsers import OrgModeTaskParser, TaskParser, create_default_registry

__version__ = "0.1.0"

__all__ = [
    "ParserConfig",
    "Task",
    "UrgencyCoefficients",
    "OrgModeTaskParser",
    "TaskParser",
    "create_default_registry",
]
