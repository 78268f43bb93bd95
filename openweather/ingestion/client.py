from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

import requests
import structlog
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ReadTimeoutError

from ..asserts import require_json, require_url
from ..config import AppSettings
from ..errors import NetworkError, NetworkTimeout, TypeMismatch
from .request import ReadyState, Request

logger = structlog.get_logger(__name__)

SuccessCallback = Callable[[Any, Request], None]
ErrorCallback = Callable[[Request], None]
SessionFactory = Callable[[], requests.Session]

BODY_CHUNK_SIZE = 1024


def _is_timeout(e: Optional[Exception]) -> bool:
    # a read timeout while streaming the body surfaces as ConnectionError(ReadTimeoutError)
    if isinstance(e, requests.Timeout):
        return True
    return isinstance(e, requests.ConnectionError) and any(isinstance(a, ReadTimeoutError) for a in e.args)


def _default_session() -> requests.Session:
    s = requests.Session()
    # one attempt per call
    adapter = HTTPAdapter(max_retries=0)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


class RequestClient:
    """Issue one GET per ``parse`` call and report the outcome through callbacks.

    Notes and assumptions:
    - Every call builds its own session; nothing is shared between requests.
    - The request runs on the client's worker pool, so ``parse`` returns the
      ``Request`` handle immediately. The callback has run by the time
      ``Request.wait()`` returns.
    - Status 200 with a JSON object/array body goes to ``on_success``.
      Any other status, a timeout, a connection failure or an undecodable body
      goes to ``on_error`` with ``request.error`` describing the failure.
    - No retries, no backoff, no deduplication of overlapping calls.
    """

    OK = 200
    PAGE_NOT_FOUND = 404

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        session_factory: Optional[SessionFactory] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._session_factory = session_factory or _default_session
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self._settings.max_workers, thread_name_prefix="openweather"
        )

    @property
    def timeout(self) -> float:
        return self._settings.request_timeout_s

    def parse(
        self,
        url: str,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> Request:
        """Send a GET to ``url`` and hand the decoded JSON to ``on_success``.

        Parameters
        ----------
        url : str
            Target URL; must look like a URL.
        on_success : callable, optional
            Called as ``on_success(body, request)`` when the response status is 200.
        on_error : callable, optional
            Called as ``on_error(request)`` for any other outcome.

        Returns
        -------
        Request
            Handle of the in-flight request.

        Raises
        ------
        TypeMismatch
            If ``url`` is invalid. Raised before any network activity.
        """
        require_url(url, "URL is invalid.")

        request = Request(url)
        request.on_state_change = self._dispatcher(on_success, on_error)
        self._executor.submit(self._send, request)
        return request

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "RequestClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _send(self, request: Request) -> None:
        try:
            self._perform(request)
        except Exception:
            logger.exception("request_crashed", url=request.url, state=request.ready_state.name)
        finally:
            request.finish()

    def _perform(self, request: Request) -> None:
        request.session = self._session_factory()
        request.transition(ReadyState.CONNECTION_ESTABLISHED)

        # deadline for the whole exchange; requests' own timeout only bounds single reads
        expired = threading.Event()

        def expire() -> None:
            expired.set()
            request.abort()

        deadline = threading.Timer(self.timeout, expire)
        deadline.daemon = True
        failure: Optional[Exception] = None

        logger.debug("request_sent", url=request.url, timeout_s=self.timeout)
        deadline.start()
        try:
            resp = request.session.get(request.url, timeout=self.timeout, stream=True)
            request.response = resp
            if expired.is_set():
                # deadline passed while the headers were arriving
                request.abort()
            request.status = resp.status_code
            request.transition(ReadyState.REQUEST_RECEIVED)
            request.transition(ReadyState.PROCESSING)
            request.body = self._read_body(resp, expired)
        except Exception as e:
            # after an abort the transport fails in arbitrary ways
            if not expired.is_set() and not isinstance(e, requests.RequestException):
                raise
            failure = e
        finally:
            deadline.cancel()
            if request.response is not None:
                request.response.close()
            request.session.close()

        if expired.is_set() or _is_timeout(failure):
            request.abort()
            request.body = None
            request.error = NetworkTimeout(f"Request timed out after {self.timeout}s.")
            request.error.__cause__ = failure
            logger.warning("request_timed_out", url=request.url, timeout_s=self.timeout)
        elif failure is not None:
            request.abort()
            request.error = NetworkError(f"Request failed: {failure}")
            request.error.__cause__ = failure
            logger.warning("request_failed", url=request.url, error=str(failure))

        request.transition(ReadyState.RESPONSE_READY)
        logger.info("request_completed", url=request.url, status=request.status)

    def _dispatcher(
        self,
        on_success: Optional[SuccessCallback],
        on_error: Optional[ErrorCallback],
    ) -> Callable[[Request], None]:
        def handle(request: Request) -> None:
            if request.ready_state != ReadyState.RESPONSE_READY:
                return
            if not request.claim_dispatch():
                return

            body = None
            if request.error is None and request.status == self.OK:
                try:
                    body = require_json(request.body, "Response is not a JSON document: @")
                except TypeMismatch as e:
                    request.error = e

            if request.error is None and request.status == self.OK:
                if on_success is not None:
                    self._invoke(on_success, body, request)
                return

            if on_error is not None:
                self._invoke(on_error, request)
            else:
                logger.error(
                    "request_failed_unhandled",
                    url=request.url,
                    status=request.status,
                    error=str(request.error) if request.error else None,
                )

        return handle

    @staticmethod
    def _read_body(resp: requests.Response, expired: threading.Event) -> Optional[str]:
        chunks = []
        for chunk in resp.iter_content(chunk_size=BODY_CHUNK_SIZE):
            if expired.is_set():
                return None
            chunks.append(chunk)
        return b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")

    @staticmethod
    def _invoke(callback: Callable[..., None], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("callback_failed", callback=getattr(callback, "__name__", repr(callback)))


__all__ = ["RequestClient", "SuccessCallback", "ErrorCallback"]
