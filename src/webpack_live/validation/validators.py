"""
Input validation functions.

Each validator returns the normalized value or raises ValidationError
naming the offending field.
"""

import logging
from typing import Any, List, Optional, Sequence

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a non-blank string and return it stripped."""
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value,
        )
    if not value.strip():
        raise ValidationError(
            f"{field_name} cannot be empty", field_name=field_name, value=value
        )
    return value.strip()


def validate_optional_string(value: Any, default: str, field_name: str = "value") -> str:
    """Validate an optional string option, falling back to a default."""
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be a string, got {type(value).__name__}",
            field_name=field_name,
            value=value,
        )
    return value


def validate_positive_float(value: Any, field_name: str = "value",
                            allow_zero: bool = True) -> float:
    """Validate that a value is a non-negative (or positive) number."""
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number, got bool", field_name=field_name, value=value
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"{field_name} must be a number, got {value!r}",
            field_name=field_name,
            value=value,
        )
    if number < 0 or (number == 0 and not allow_zero):
        raise ValidationError(
            f"{field_name} must be {'>=' if allow_zero else '>'} 0, got {number}",
            field_name=field_name,
            value=value,
        )
    return number


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """Accept a string or a list of strings; return a list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ValidationError(
        f"{field_name} must be a string or a list of strings",
        field_name=field_name,
        value=value,
    )


def validate_command_argv(argv: Optional[Sequence[str]],
                          field_name: str = "command") -> Optional[List[str]]:
    """
    Validate a trailing command line given after `--`.

    Returns None when no command was given, otherwise the argv list with a
    non-empty program name.
    """
    if not argv:
        return None
    program = validate_non_empty_string(argv[0], field_name=field_name)
    return [program, *argv[1:]]
