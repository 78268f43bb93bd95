"""Ingestion subpackage.

Provides the one-shot request handle and the client that sends it and
dispatches the outcome to success/error callbacks.
"""

from .client import RequestClient
from .request import ReadyState, Request

__all__ = ["RequestClient", "ReadyState", "Request"]
