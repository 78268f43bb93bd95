"""OpenWeather client package.

Subpackages:
- ingestion: HTTP request handle and callback-dispatching client.
- schemas: Location identifiers accepted by the weather API.
- services: Current weather and forecast lookups.
- tests: Unit tests for the openweather package.
"""

from .errors import (
    NetworkError,
    NetworkTimeout,
    OpenWeatherError,
    RangeViolation,
    TypeMismatch,
    ValidationError,
)

__all__ = [
    "ingestion",
    "schemas",
    "services",
    "NetworkError",
    "NetworkTimeout",
    "OpenWeatherError",
    "RangeViolation",
    "TypeMismatch",
    "ValidationError",
]
