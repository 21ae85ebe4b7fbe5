"""Factory for typed requests sharing one transport and serializer."""
from __future__ import annotations
from typing import Any

from .request import Request, ResultShape
from .transport import HttpTransport, JsonSerializer


class RequestFactory:
    """Builds unexecuted requests bound to a transport and serializer."""

    def __init__(self, transport: HttpTransport, serializer: JsonSerializer):
        self.transport = transport
        self.serializer = serializer

    def new_request(self, method: str, url: str, shape: ResultShape) -> Request[Any]:
        """Create a request for method/url expecting the given result shape."""
        return Request(self.transport, self.serializer, method, url, shape)
