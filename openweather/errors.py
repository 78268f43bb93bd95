from __future__ import annotations


class OpenWeatherError(Exception):
    """Base class for all errors raised by the openweather package."""


class ValidationError(OpenWeatherError):
    """A precondition on an input value does not hold."""

    kind: str = "validation"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TypeMismatch(ValidationError, TypeError):
    kind = "type_mismatch"


class RangeViolation(ValidationError, ValueError):
    kind = "range_violation"


class NetworkError(OpenWeatherError):
    """A request ended without a usable response.

    Never raised by the client; attached to ``Request.error`` and delivered
    through the error callback.
    """

    kind = "network_error"


class NetworkTimeout(NetworkError):
    kind = "network_timeout"
