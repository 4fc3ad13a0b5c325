"""Validation utilities for load-report.

This module provides validation functions for:
- Configuration values (precision, URLs, names)
- Numeric fields read from metrics snapshots
"""

from typing import Any, Optional, List
from urllib.parse import urlparse


class ValidationError(Exception):
    """Raised when validation fails."""
    pass


class ReportError(ValueError):
    """Raised when a report cannot be built from the supplied input."""
    pass


def validate_int(value: Any, name: str) -> int:
    """Validate that a value is an integer.

    Booleans are rejected even though they are ``int`` subclasses. The sign
    is not checked: counts are rendered exactly as the statistics layer
    produced them.

    Args:
        value: Value to validate.
        name: Name of the parameter (for error messages).

    Returns:
        The validated value.

    Raises:
        ValidationError: If validation fails.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")

    return value


def validate_number(value: Any, name: str) -> float:
    """Validate that a value is an int or float (not a bool)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {type(value).__name__}")

    return value


def validate_int_range(value: Any, name: str, min_value: int, max_value: int) -> int:
    """Validate that an integer lies within ``[min_value, max_value]``.

    Raises:
        ValidationError: If validation fails.
    """
    validate_int(value, name)

    if value < min_value or value > max_value:
        raise ValidationError(
            f"{name} must be between {min_value} and {max_value}, got {value}"
        )

    return value


def validate_url(url: str, name: str, schemes: Optional[List[str]] = None) -> str:
    """Validate a URL.

    Args:
        url: URL to validate.
        name: Name of the parameter (for error messages).
        schemes: Allowed URL schemes (default: ['http', 'https']).

    Returns:
        The validated URL.

    Raises:
        ValidationError: If URL is invalid.
    """
    if not url:
        raise ValidationError(f"{name} cannot be empty")

    if schemes is None:
        schemes = ['http', 'https']

    parsed = urlparse(url)

    if not parsed.scheme:
        raise ValidationError(f"{name} must include a scheme (e.g., https://): {url}")

    if parsed.scheme not in schemes:
        raise ValidationError(
            f"{name} scheme must be one of {schemes}, got {parsed.scheme}"
        )

    if not parsed.netloc:
        raise ValidationError(f"{name} must include a network location: {url}")

    return url


def validate_non_empty_string(value: Any, name: str) -> str:
    """Validate that a string is not empty.

    Args:
        value: String to validate.
        name: Name of the parameter (for error messages).

    Returns:
        The validated string (stripped).

    Raises:
        ValidationError: If string is empty.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string, got {type(value).__name__}")

    value = value.strip()

    if not value:
        raise ValidationError(f"{name} cannot be empty")

    return value
