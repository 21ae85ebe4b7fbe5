"""Typed, one-shot requests against the Guardian API.

A request is built unexecuted, configured through chained setters, then
consumed exactly once with execute() (blocking) or start() (background).
"""
from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import CancelledError, Future
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .exceptions import DecodeError, RequestAlreadyExecutedError, ServerError
from .transport import HttpTransport, JsonSerializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[[Optional[Any], Optional[BaseException]], None]


class ResultShape(Enum):
    """Declared shape of a successful response body."""
    JSON_OBJECT = "json_object"
    NO_CONTENT = "no_content"


class GuardianAPIRequest(ABC, Generic[T]):
    """A request to execute or start, yielding a result of type T."""

    def __init__(self):
        self._executed = False
        self._lock = threading.Lock()

    @abstractmethod
    def set_header(self, name: str, value: str) -> "GuardianAPIRequest[T]":
        """Set a request header (last write wins)."""

    @abstractmethod
    def set_bearer(self, token: str) -> "GuardianAPIRequest[T]":
        """Set `Authorization: Bearer <token>`."""

    @abstractmethod
    def set_parameter(self, name: str, value: Any) -> "GuardianAPIRequest[T]":
        """Set a body parameter; None omits it from the body."""

    @abstractmethod
    def _dispatch(self) -> T:
        """Perform the call and decode the result."""

    @abstractmethod
    def _submit(self, fn: Callable[[], T]) -> Future:
        """Schedule fn on the transport's worker pool."""

    def _claim(self) -> None:
        with self._lock:
            if self._executed:
                raise RequestAlreadyExecutedError("Request has already been executed")
            self._executed = True

    @property
    def executed(self) -> bool:
        return self._executed

    def execute(self) -> T:
        """Execute the request, blocking until the result is decoded.

        Raises:
            RequestAlreadyExecutedError: If this request was already executed or started
            TransportError: On connectivity failure
            ServerError: On a non-2xx response
            DecodeError: On a 2xx response that does not match the declared shape
        """
        self._claim()
        return self._dispatch()

    def start(self, callback: Optional[Callback] = None) -> Future:
        """Execute the request in the background.

        Args:
            callback: Optional callable invoked as callback(result, error)
                once the call completes or is cancelled; a cancelled call
                reports a CancelledError

        Returns:
            Future resolving to the decoded result
        """
        self._claim()
        future = self._submit(self._dispatch)
        if callback is not None:
            def _notify(done: Future) -> None:
                if done.cancelled():
                    callback(None, CancelledError())
                    return
                error = done.exception()
                callback(None if error else done.result(), error)
            future.add_done_callback(_notify)
        return future


class Request(GuardianAPIRequest[T]):
    """HTTP request bound to a method, URL and declared result shape.

    Usage:
        request = Request(transport, serializer, "POST", url, ResultShape.NO_CONTENT)
        request.set_bearer(tx_token).set_parameter("code", "123456").execute()
    """

    def __init__(
        self,
        transport: HttpTransport,
        serializer: JsonSerializer,
        method: str,
        url: str,
        shape: ResultShape,
    ):
        super().__init__()
        self._transport = transport
        self._serializer = serializer
        self.method = method.upper()
        self.url = url
        self.shape = shape
        self._headers: Dict[str, str] = {}
        self._parameters: Dict[str, Any] = {}

    def set_header(self, name: str, value: str) -> "Request[T]":
        self._headers[name] = value
        return self

    def set_bearer(self, token: str) -> "Request[T]":
        return self.set_header("Authorization", f"Bearer {token}")

    def set_parameter(self, name: str, value: Any) -> "Request[T]":
        self._parameters[name] = value
        return self

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    @property
    def parameters(self) -> Dict[str, Any]:
        """All parameters as set, including those whose value is None."""
        return dict(self._parameters)

    @property
    def body(self) -> Dict[str, Any]:
        """Parameters that will be serialized (None values omitted)."""
        return {name: value for name, value in self._parameters.items() if value is not None}

    def _submit(self, fn: Callable[[], T]) -> Future:
        return self._transport.submit(fn)

    def _dispatch(self) -> T:
        headers = dict(self._headers)
        data = None
        body = self.body
        if body or self.method in ("POST", "PUT", "PATCH"):
            headers.setdefault("Content-Type", "application/json")
            data = self._serializer.dumps(body)

        response = self._transport.send(self.method, self.url, headers, data)
        return self._decode(response.status_code, response.text)

    def _decode(self, status_code: int, text: str) -> Any:
        if not 200 <= status_code < 300:
            logger.warning(f"{self.method} {self.url} returned {status_code}")
            raise ServerError(status_code, text, self.url)

        if self.shape is ResultShape.NO_CONTENT:
            return None

        if not text or not text.strip():
            raise DecodeError(f"Empty response body from {self.url}")
        try:
            payload = self._serializer.loads(text)
        except ValueError as exc:
            raise DecodeError(f"Malformed JSON from {self.url}: {exc}") from exc
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected a JSON object from {self.url}, got {type(payload).__name__}"
            )
        return payload


class DeviceTokenRequest(GuardianAPIRequest[str]):
    """Executes a JSON-object request and yields its `device_account_token`."""

    TOKEN_FIELD = "device_account_token"

    def __init__(self, request: Request[Dict[str, Any]]):
        super().__init__()
        self._request = request

    def set_header(self, name: str, value: str) -> "DeviceTokenRequest":
        self._request.set_header(name, value)
        return self

    def set_bearer(self, token: str) -> "DeviceTokenRequest":
        self._request.set_bearer(token)
        return self

    def set_parameter(self, name: str, value: Any) -> "DeviceTokenRequest":
        self._request.set_parameter(name, value)
        return self

    @property
    def request(self) -> Request[Dict[str, Any]]:
        """The underlying map-typed request."""
        return self._request

    def _submit(self, fn: Callable[[], str]) -> Future:
        return self._request._submit(fn)

    def _dispatch(self) -> str:
        payload = self._request.execute()
        token = payload.get(self.TOKEN_FIELD)
        if not isinstance(token, str) or not token:
            raise DecodeError(f"Response is missing '{self.TOKEN_FIELD}'")
        return token
