"""
Parser and urgency configuration models.

Settings arrive from an external settings store as loosely-typed data, so
validation here is forgiving: keyword lists are normalised and bad entries
dropped, and an invalid urgency coefficient falls back to its own default
instead of failing the whole object.
"""

import logging
import math
import os
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

log = logging.getLogger(__name__)

_KEYWORD_FIELDS = (
    "additional_task_keywords",
    "additional_pending_keywords",
    "additional_active_keywords",
    "additional_waiting_keywords",
    "additional_completed_keywords",
    "additional_archived_keywords",
)


def normalize_keywords(raw: Any) -> List[str]:
    """
    Trim, de-duplicate and drop empty or non-string keywords.

    Anything that is not a list-like of strings degrades to an empty list.
    """
    if not isinstance(raw, (list, tuple, set, frozenset)):
        return []
    result: List[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        keyword = item.strip()
        if keyword and keyword not in result:
            result.append(keyword)
    return result


class UrgencyCoefficients(BaseModel):
    """Weights for each urgency term. Field aliases follow urgency.ini naming."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    priority_high: float = Field(6.0, alias="priorityHigh")
    priority_medium: float = Field(3.9, alias="priorityMedium")
    priority_low: float = Field(1.8, alias="priorityLow")
    scheduled: float = 5.0
    deadline: float = 12.0
    active: float = 4.0
    age: float = 2.0
    tags: float = 1.0
    waiting: float = -3.0

    @field_validator("*", mode="wrap")
    @classmethod
    def _fallback_to_default(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> float:
        default = cls.model_fields[info.field_name].default
        try:
            result = handler(value)
        except ValidationError:
            log.warning(
                "Invalid urgency coefficient %s=%r, using default %s",
                info.field_name, value, default,
            )
            return default
        if not math.isfinite(result):
            log.warning(
                "Non-finite urgency coefficient %s=%r, using default %s",
                info.field_name, value, default,
            )
            return default
        return result


class LanguageCommentSupport(BaseModel):
    """Recognise tasks inside source-code comments in fenced code blocks."""

    enabled: bool = True


class ParserConfig(BaseModel):
    """All settings that affect task parsing and urgency scoring."""

    model_config = ConfigDict(populate_by_name=True)

    include_code_blocks: bool = Field(False, alias="includeCodeBlocks")
    include_comment_blocks: bool = Field(False, alias="includeCommentBlocks")
    include_callout_blocks: bool = Field(True, alias="includeCalloutBlocks")
    language_comment_support: LanguageCommentSupport = Field(
        default_factory=LanguageCommentSupport, alias="languageCommentSupport"
    )
    additional_task_keywords: List[str] = Field(
        default_factory=list, alias="additionalTaskKeywords"
    )
    additional_pending_keywords: List[str] = Field(
        default_factory=list, alias="additionalInactiveKeywords"
    )
    additional_active_keywords: List[str] = Field(
        default_factory=list, alias="additionalActiveKeywords"
    )
    additional_waiting_keywords: List[str] = Field(
        default_factory=list, alias="additionalWaitingKeywords"
    )
    additional_completed_keywords: List[str] = Field(
        default_factory=list, alias="additionalCompletedKeywords"
    )
    additional_archived_keywords: List[str] = Field(
        default_factory=list, alias="additionalArchivedKeywords"
    )
    urgency_coefficients: UrgencyCoefficients = Field(
        default_factory=UrgencyCoefficients, alias="urgencyCoefficients"
    )

    @field_validator(*_KEYWORD_FIELDS, mode="before")
    @classmethod
    def _normalize_keyword_list(cls, value: Any) -> List[str]:
        return normalize_keywords(value)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ParserConfig":
        """
        Build a config from NOTETASKS_* environment variables.

        Recognised variables:
            NOTETASKS_INCLUDE_CODE_BLOCKS       true/false
            NOTETASKS_INCLUDE_COMMENT_BLOCKS    true/false
            NOTETASKS_INCLUDE_CALLOUT_BLOCKS    true/false
            NOTETASKS_LANGUAGE_COMMENTS         true/false
            NOTETASKS_KEYWORDS                  comma-separated extra keywords
            NOTETASKS_URGENCY_INI               path to an urgency.ini file
        """
        from notetasks.utils.urgency import load_urgency_coefficients

        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {
            "include_code_blocks": _env_flag(env, "NOTETASKS_INCLUDE_CODE_BLOCKS", False),
            "include_comment_blocks": _env_flag(env, "NOTETASKS_INCLUDE_COMMENT_BLOCKS", False),
            "include_callout_blocks": _env_flag(env, "NOTETASKS_INCLUDE_CALLOUT_BLOCKS", True),
            "language_comment_support": {
                "enabled": _env_flag(env, "NOTETASKS_LANGUAGE_COMMENTS", True),
            },
            "additional_task_keywords": _split_csv(env.get("NOTETASKS_KEYWORDS", "")),
        }
        ini_path = env.get("NOTETASKS_URGENCY_INI", "")
        if ini_path:
            data["urgency_coefficients"] = load_urgency_coefficients(ini_path)
        return cls.model_validate(data)


def _env_flag(env: Dict[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("true", "1", "yes")


def _split_csv(raw: str) -> List[str]:
    """Parse a comma-separated list of values."""
    return [part.strip() for part in raw.split(",") if part.strip()]
