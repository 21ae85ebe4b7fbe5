"""Device account operations for an enrolled device."""
from __future__ import annotations
from typing import Any, Dict, Optional
from urllib.parse import quote, urljoin

from .factory import RequestFactory
from .request import Request, ResultShape


def create_push_credentials(push_token: Optional[str]) -> Optional[Dict[str, str]]:
    """GCM push credentials map, or None (omitted from the body) without a token."""
    if push_token is None:
        return None
    return {"service": "GCM", "token": push_token}


class DeviceAPIClient:
    """Client for one device account, authorized by its device token.

    Usage:
        device = api_client.device(enrollment_id, device_token)
        device.update(name="Work Phone").execute()
        device.delete().execute()
    """

    def __init__(self, request_factory: RequestFactory, base_url: str, device_id: str, token: str):
        self.request_factory = request_factory
        self.device_id = device_id
        self._token = token
        self.url = urljoin(base_url, f"api/device-accounts/{quote(device_id, safe='')}")

    def update(
        self,
        local_identifier: Optional[str] = None,
        name: Optional[str] = None,
        push_token: Optional[str] = None,
    ) -> Request[Dict[str, Any]]:
        """Update the device's identifier, name and/or push token.

        Fields left as None are not sent. Returns the updated device account.
        """
        return (
            self.request_factory.new_request("PATCH", self.url, ResultShape.JSON_OBJECT)
            .set_bearer(self._token)
            .set_parameter("identifier", local_identifier)
            .set_parameter("name", name)
            .set_parameter("push_credentials", create_push_credentials(push_token))
        )

    def delete(self) -> Request[None]:
        """Delete the device account (un-enroll)."""
        return (
            self.request_factory.new_request("DELETE", self.url, ResultShape.NO_CONTENT)
            .set_bearer(self._token)
        )
