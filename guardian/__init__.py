"""Guardian MFA client SDK.

    from guardian import GuardianAPIClient

    client = GuardianAPIClient.Builder().base_url("https://tenant.guardian.auth0.com/").build()
    enrollment = client.enroll(ticket, device_id, "My Phone", gcm_token, public_key).execute()
"""
from .__version__ import __version__
from .core.api import (
    GuardianAPIClient,
    DeviceAPIClient,
    GuardianAPIRequest,
    ResultShape,
    GuardianError,
    InvalidConfigurationError,
    InvalidKeyTypeError,
    ServerError,
    TransportError,
    DecodeError,
    RequestAlreadyExecutedError,
)

__all__ = [
    "__version__",
    "GuardianAPIClient",
    "DeviceAPIClient",
    "GuardianAPIRequest",
    "ResultShape",
    "GuardianError",
    "InvalidConfigurationError",
    "InvalidKeyTypeError",
    "ServerError",
    "TransportError",
    "DecodeError",
    "RequestAlreadyExecutedError",
]
