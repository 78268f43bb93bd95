from __future__ import annotations

import socket
import threading
from enum import IntEnum
from typing import Callable, Optional

import requests
import structlog

log = structlog.get_logger(__name__)


class ReadyState(IntEnum):
    """Lifecycle of a single GET request."""

    NOT_INITIALIZED = 0
    CONNECTION_ESTABLISHED = 1
    REQUEST_RECEIVED = 2
    PROCESSING = 3
    RESPONSE_READY = 4


StateChangeHandler = Callable[["Request"], None]


class Request:
    """One-shot handle for an in-flight GET.

    State changes are reported through a single ``on_state_change`` slot;
    assigning a new handler replaces the previous one. The handle is created
    by ``RequestClient.parse`` and never reused.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.ready_state = ReadyState.NOT_INITIALIZED
        self.status = 0
        self.body: Optional[str] = None
        self.error: Optional[Exception] = None
        self.response: Optional[requests.Response] = None
        self.on_state_change: Optional[StateChangeHandler] = None

        self.session: Optional[requests.Session] = None
        self._aborted = False
        self._finished = threading.Event()
        self._dispatch_lock = threading.Lock()
        self._dispatched = False

    def __repr__(self) -> str:
        return f"<Request {self.ready_state.name} status={self.status} url={self.url!r}>"

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def aborted(self) -> bool:
        return self._aborted

    def transition(self, state: ReadyState) -> None:
        if state <= self.ready_state:
            raise ValueError(f"cannot move from {self.ready_state.name} to {state.name}")
        self.ready_state = state
        handler = self.on_state_change
        if handler is not None:
            handler(self)

    def claim_dispatch(self) -> bool:
        """Return True exactly once; later calls return False."""
        with self._dispatch_lock:
            if self._dispatched:
                return False
            self._dispatched = True
            return True

    def abort(self) -> None:
        """Drop the connection; the status stays at whatever was last captured."""
        self._aborted = True
        if self.response is not None:
            # unblocks a reader stuck in recv; closing alone waits for the read to finish
            sock = getattr(getattr(self.response.raw, "connection", None), "sock", None)
            if sock is not None:
                try:
                    sock.shutdown(socket.SHUT_RDWR)
                except OSError as e:
                    log.debug("abort_shutdown_failed", url=self.url, error=str(e))
            self.response.close()
        if self.session is not None:
            self.session.close()

    def finish(self) -> None:
        self._finished.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the request has completed and its callback has run."""
        return self._finished.wait(timeout)
