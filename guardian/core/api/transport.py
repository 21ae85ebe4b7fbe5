"""HTTP transport and JSON serializer used to execute Guardian requests.

The transport only moves bytes: it sends a prepared call through a
requests.Session and maps connectivity failures to TransportError.
Status handling and body decoding belong to the typed request.
"""
from __future__ import annotations
import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional, Type

import requests

from .exceptions import TransportError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5
MAX_ASYNC_WORKERS = 4


class JsonSerializer:
    """JSON (de)serializer for request bodies and responses.

    Custom type adapters are supplied as a json.JSONEncoder subclass
    and/or an object_hook; the default has none.
    """

    def __init__(
        self,
        encoder: Optional[Type[json.JSONEncoder]] = None,
        object_hook: Optional[Callable[[dict], Any]] = None,
    ):
        self.encoder = encoder
        self.object_hook = object_hook

    def dumps(self, payload: Any) -> str:
        return json.dumps(payload, cls=self.encoder, separators=(",", ":"))

    def loads(self, text: str) -> Any:
        return json.loads(text, object_hook=self.object_hook)


class HttpTransport:
    """requests-based transport with fixed default headers.

    Default headers are applied to the session and again on every call after
    the request's own headers, so they win over a per-request value of the
    same name.

    Usage:
        transport = HttpTransport(default_headers={"User-Agent": "GuardianSDK/1.0"})
        response = transport.send("POST", url, {"Content-Type": "application/json"}, "{}")
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: float = REQUEST_TIMEOUT,
        max_workers: int = MAX_ASYNC_WORKERS,
    ):
        """Initialize the transport.

        Args:
            session: Session to reuse (a new one is created otherwise)
            default_headers: Headers forced onto every outgoing request
            timeout: Per-request timeout in seconds
            max_workers: Thread pool size for asynchronous execution
        """
        self.session = session or requests.Session()
        self.default_headers = dict(default_headers or {})
        self.session.headers.update(self.default_headers)
        self.timeout = timeout
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        data: Optional[str] = None,
    ) -> requests.Response:
        """Perform one HTTP call.

        Raises:
            TransportError: On connection, DNS, TLS or timeout failure
        """
        logger.debug(f"{method} {url}")
        merged = dict(headers)
        merged.update(self.default_headers)
        try:
            return self.session.request(
                method,
                url,
                headers=merged,
                data=data.encode("utf-8") if data is not None else None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error(f"{method} {url} failed: {exc}")
            raise TransportError(str(exc), url) from exc

    def submit(self, fn: Callable[[], Any]) -> Future:
        """Run fn on the transport's worker pool."""
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="guardian"
                )
            executor = self._executor
        return executor.submit(fn)

    def close(self) -> None:
        """Release pooled connections and worker threads."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self.session.close()
