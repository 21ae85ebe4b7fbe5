"""Guardian API client library.

Architecture:
- client.py: GuardianAPIClient (protocol surface) and its Builder
- request.py: typed one-shot requests (Request, DeviceTokenRequest)
- factory.py: RequestFactory binding transport and serializer
- transport.py: requests-based HttpTransport and JsonSerializer
- device.py: device account update/delete
- exceptions.py: typed exceptions for error handling

Usage:
    from guardian.core.api import GuardianAPIClient

    client = GuardianAPIClient.Builder().base_url("https://tenant.guardian.auth0.com/").build()
    client.allow_otp(tx_token, "123456").execute()
"""
from .exceptions import (
    GuardianError,
    InvalidConfigurationError,
    InvalidKeyTypeError,
    ServerError,
    TransportError,
    DecodeError,
    RequestAlreadyExecutedError,
)
from .transport import HttpTransport, JsonSerializer, REQUEST_TIMEOUT
from .request import GuardianAPIRequest, Request, DeviceTokenRequest, ResultShape
from .factory import RequestFactory
from .device import DeviceAPIClient
from .client import GuardianAPIClient

__all__ = [
    # Client
    "GuardianAPIClient",
    "DeviceAPIClient",

    # Requests
    "GuardianAPIRequest",
    "Request",
    "DeviceTokenRequest",
    "ResultShape",
    "RequestFactory",

    # Transport
    "HttpTransport",
    "JsonSerializer",
    "REQUEST_TIMEOUT",

    # Exceptions
    "GuardianError",
    "InvalidConfigurationError",
    "InvalidKeyTypeError",
    "ServerError",
    "TransportError",
    "DecodeError",
    "RequestAlreadyExecutedError",
]
