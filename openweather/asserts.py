"""Precondition checks used by every public entry point.

Each check raises ``TypeMismatch`` or ``RangeViolation`` with a message built
from a caller supplied template. Templates may contain the placeholder tokens
``@1`` (minimum), ``@2`` (maximum) and ``@`` (the offending value); each token
is substituted once, at its first occurrence.
"""
from __future__ import annotations

import json
import numbers
import re
from typing import Any, Optional

from .errors import RangeViolation, TypeMismatch

URL_PATTERN = re.compile(r"(^|\s)((https?://)?[\w-]+(\.[\w-]+)+\.?(:\d+)?(/\S*)?)", re.IGNORECASE)


def _format(message: str, value: Any, minimum: Optional[Any] = None, maximum: Optional[Any] = None) -> str:
    # bounds first so a value containing "@" cannot clobber them
    if minimum is not None:
        message = message.replace("@1", str(minimum), 1)
    if maximum is not None:
        message = message.replace("@2", str(maximum), 1)
    return message.replace("@", str(value), 1)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def require_exists(value: Any, message: str) -> None:
    if value is None:
        raise TypeMismatch(_format(message, value))


def require_in_range(value: Any, minimum: float, maximum: float, message: str) -> None:
    """Require a number within ``[minimum, maximum]``.

    Parameters
    ----------
    value : Any
        Value being tested.
    minimum, maximum : float
        Inclusive bounds.
    message : str
        Template; ``@1`` and ``@2`` receive the bounds, ``@`` the value.

    Raises
    ------
    TypeMismatch
        If ``value`` is not a number.
    RangeViolation
        If ``value`` lies outside the bounds.
    """
    if not _is_number(value):
        raise TypeMismatch(_format(message, value, minimum, maximum))
    if value < minimum or value > maximum:
        raise RangeViolation(_format(message, value, minimum, maximum))


def require_number(value: Any, message: str) -> None:
    if not _is_number(value):
        raise TypeMismatch(_format(message, value))


def require_string(value: Any, message: str) -> None:
    if not isinstance(value, str):
        raise TypeMismatch(_format(message, value))


def require_url(value: Any, message: str) -> None:
    """Require a string holding a URL-shaped token (scheme optional, dotted host)."""
    require_string(value, message)
    if URL_PATTERN.search(value) is None:
        raise TypeMismatch(_format(message, value))


def require_json(text: Any, message: str) -> Any:
    """Require text that decodes to a JSON object or array; return the decoded value."""
    try:
        decoded = json.loads(text)
    except (TypeError, ValueError) as e:
        raise TypeMismatch(_format(message, text)) from e
    if not isinstance(decoded, (dict, list)):
        raise TypeMismatch(_format(message, text))
    return decoded


def require_instance_of(value: Any, types: type | tuple[type, ...], message: str) -> None:
    if value is None or not isinstance(value, types):
        raise TypeMismatch(_format(message, value))


__all__ = [
    "require_exists",
    "require_in_range",
    "require_number",
    "require_string",
    "require_url",
    "require_json",
    "require_instance_of",
]
