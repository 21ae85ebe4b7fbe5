"""Guardian-specific exceptions for error handling."""


class GuardianError(Exception):
    """Base exception for all Guardian operations."""
    pass


class InvalidConfigurationError(GuardianError, ValueError):
    """Client configuration is missing or malformed (e.g. a bad base URL)."""
    pass


class InvalidKeyTypeError(GuardianError, ValueError):
    """A key other than RSA was supplied for enrollment or signing."""
    pass


class ServerError(GuardianError):
    """Non-2xx HTTP response from the Guardian API.

    Attributes:
        status_code: HTTP status code
        body: Raw response body, passed through uninterpreted
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, body: str, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {body}")


class TransportError(GuardianError):
    """Connectivity failure (DNS, TLS, timeout) before a response was received."""

    def __init__(self, message: str, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f"{endpoint}: {message}")


class DecodeError(GuardianError):
    """Successful response whose body does not match the expected shape."""
    pass


class RequestAlreadyExecutedError(GuardianError, RuntimeError):
    """A request object was executed (or started) a second time."""
    pass
