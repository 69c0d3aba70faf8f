from .dates import parse_date
from .keywords import KeywordManager
from .regex_cache import RegexCache
from .urgency import calculate_urgency, load_urgency_coefficients, parse_urgency_coefficients

__all__ = [
    "parse_date",
    "KeywordManager",
    "RegexCache",
    "calculate_urgency",
    "load_urgency_coefficients",
    "parse_urgency_coefficients",
]
