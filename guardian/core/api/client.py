"""Guardian API client: enrollment and transaction resolution.

Every method builds and returns an unexecuted request; none perform I/O.
The caller executes the request synchronously (execute) or in the
background (start).
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

from guardian.config.settings import (
    GuardianSettings,
    default_locale,
    default_user_agent,
    load_settings,
)
from guardian.core.keys import PUSH_NOTIFICATION_TYPE, create_jwk, sign
from guardian.core.validators import validate_base_url, validate_timeout

from .device import DeviceAPIClient, create_push_credentials
from .exceptions import InvalidConfigurationError
from .factory import RequestFactory
from .request import DeviceTokenRequest, Request, ResultShape
from .transport import REQUEST_TIMEOUT, HttpTransport, JsonSerializer

logger = logging.getLogger(__name__)


class GuardianAPIClient:
    """Protocol surface of the Guardian API.

    Usage:
        client = GuardianAPIClient.Builder().base_url("https://tenant.guardian.auth0.com/").build()
        enrollment = client.enroll(ticket, device_id, "My Phone", gcm_token, public_key).execute()
        client.allow(tx_token, device_id, challenge, private_key).execute()
    """

    def __init__(self, request_factory: RequestFactory, base_url: str):
        self.request_factory = request_factory
        self.base_url = base_url

    @property
    def url(self) -> str:
        """Normalized base URL; also the `aud` of signed challenge responses."""
        return self.base_url

    def _resolve(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def enroll(
        self,
        enrollment_ticket: str,
        device_identifier: str,
        device_name: str,
        push_token: Optional[str],
        public_key: Any,
    ) -> Request[Dict[str, Any]]:
        """Create an enrollment for this device.

        The result carries the enrollment metadata returned by the server,
        including what is needed to update or delete the device later.

        Args:
            enrollment_ticket: Ticket from a Guardian QR code or enrollment email
            device_identifier: Stable local identifier of this installation
            device_name: Human-readable device name
            push_token: GCM token for push notifications (None omits push credentials)
            public_key: RSA public key to associate with the enrollment

        Returns:
            Request yielding the enrollment map

        Raises:
            InvalidKeyTypeError: If public_key is not an RSA public key
        """
        jwk = create_jwk(public_key)
        return (
            self.request_factory.new_request("POST", self._resolve("api/enroll"), ResultShape.JSON_OBJECT)
            .set_header("Authorization", f'Ticket id="{enrollment_ticket}"')
            .set_parameter("identifier", device_identifier)
            .set_parameter("name", device_name)
            .set_parameter("push_credentials", create_push_credentials(push_token))
            .set_parameter("public_key", jwk)
        )

    def get_device_token(self, enrollment_tx_id: str) -> DeviceTokenRequest:
        """Fetch the `device_account_token` for a freshly started enrollment.

        The token authorizes later device updates and un-enrollment. Call
        this once, while the enrollment transaction is in progress.
        """
        request = (
            self.request_factory.new_request(
                "POST", self._resolve("api/enrollment-info"), ResultShape.JSON_OBJECT
            )
            .set_parameter("enrollment_tx_id", enrollment_tx_id)
        )
        return DeviceTokenRequest(request)

    def _resolve_transaction(
        self,
        tx_token: str,
        device_identifier: str,
        challenge: str,
        private_key: Any,
        accepted: bool,
        reason: Optional[str],
    ) -> Request[None]:
        challenge_response = sign(
            private_key, self.url, device_identifier, challenge, accepted, reason
        )
        return (
            self.request_factory.new_request(
                "POST", self._resolve("api/resolve-transaction"), ResultShape.NO_CONTENT
            )
            .set_bearer(tx_token)
            .set_parameter("challengeResponse", challenge_response)
        )

    def allow(
        self,
        tx_token: str,
        device_identifier: str,
        challenge: str,
        private_key: Any,
    ) -> Request[None]:
        """Allow an authentication request with a challenge response signed by the enrollment key.

        Raises:
            InvalidKeyTypeError: If private_key is not an RSA private key
        """
        return self._resolve_transaction(tx_token, device_identifier, challenge, private_key, True, None)

    def reject(
        self,
        tx_token: str,
        device_identifier: str,
        challenge: str,
        private_key: Any,
        reason: Optional[str] = None,
    ) -> Request[None]:
        """Reject an authentication request, optionally indicating a reason.

        Raises:
            InvalidKeyTypeError: If private_key is not an RSA private key
        """
        return self._resolve_transaction(tx_token, device_identifier, challenge, private_key, False, reason)

    def allow_otp(self, tx_token: str, otp_code: str) -> Request[None]:
        """Allow an authentication request with a one-time password."""
        return (
            self.request_factory.new_request("POST", self._resolve("api/verify-otp"), ResultShape.NO_CONTENT)
            .set_bearer(tx_token)
            .set_parameter("type", PUSH_NOTIFICATION_TYPE)
            .set_parameter("code", otp_code)
        )

    def reject_otp(self, tx_token: str, otp_code: str, reason: Optional[str] = None) -> Request[None]:
        """Reject an authentication request with a one-time password."""
        return (
            self.request_factory.new_request("POST", self._resolve("api/reject-login"), ResultShape.NO_CONTENT)
            .set_bearer(tx_token)
            .set_parameter("code", otp_code)
            .set_parameter("reason", reason)
        )

    def device(self, device_id: str, token: str) -> DeviceAPIClient:
        """Client to update or delete the given device account."""
        return DeviceAPIClient(self.request_factory, self.base_url, device_id, token)

    @classmethod
    def from_settings(cls, settings: Optional[GuardianSettings] = None) -> "GuardianAPIClient":
        """Build a client from GuardianSettings (defaults to load_settings())."""
        settings = settings or load_settings()
        builder = cls.Builder().locale(settings.locale).timeout(settings.request_timeout)
        builder.user_agent(settings.user_agent_resolved)
        if settings.base_url:
            builder.base_url(settings.base_url)
        return builder.build()

    class Builder:
        """Validating builder for GuardianAPIClient.

        locale(), timeout() and user_agent() configure the default transport
        only. When a transport is supplied they are ignored (logged at DEBUG);
        configure the supplied transport directly instead.
        """

        def __init__(self):
            self._base_url: Optional[str] = None
            self._transport: Optional[HttpTransport] = None
            self._serializer: Optional[JsonSerializer] = None
            self._locale: Optional[str] = None
            self._timeout: Optional[float] = None
            self._user_agent: Optional[str] = None

        def base_url(self, base_url: str) -> "GuardianAPIClient.Builder":
            """Set the tenant URL.

            Raises:
                InvalidConfigurationError: If base_url is not a valid HTTP or HTTPS URL
            """
            self._base_url = validate_base_url(base_url)
            return self

        def transport(self, transport: HttpTransport) -> "GuardianAPIClient.Builder":
            self._transport = transport
            return self

        def serializer(self, serializer: JsonSerializer) -> "GuardianAPIClient.Builder":
            self._serializer = serializer
            return self

        def locale(self, locale_tag: str) -> "GuardianAPIClient.Builder":
            """Accept-Language for the default transport."""
            self._locale = locale_tag
            return self

        def timeout(self, seconds: float) -> "GuardianAPIClient.Builder":
            """Per-request timeout for the default transport."""
            self._timeout = validate_timeout(seconds, REQUEST_TIMEOUT)
            return self

        def user_agent(self, user_agent: str) -> "GuardianAPIClient.Builder":
            self._user_agent = user_agent
            return self

        def build(self) -> "GuardianAPIClient":
            """Assemble the client, creating default transport/serializer if needed.

            Raises:
                InvalidConfigurationError: If no base URL was set
            """
            if self._base_url is None:
                raise InvalidConfigurationError("baseUrl cannot be null")

            transport = self._transport
            if transport is None:
                transport = HttpTransport(
                    default_headers={
                        "Accept-Language": self._locale or default_locale(),
                        "User-Agent": self._user_agent or default_user_agent(),
                    },
                    timeout=self._timeout if self._timeout is not None else REQUEST_TIMEOUT,
                )
                logger.debug("Using default HTTP transport")
            else:
                ignored = [
                    name
                    for name, value in (
                        ("locale", self._locale),
                        ("timeout", self._timeout),
                        ("user_agent", self._user_agent),
                    )
                    if value is not None
                ]
                if ignored:
                    logger.debug(f"Custom transport supplied; ignoring {', '.join(ignored)}")

            serializer = self._serializer or JsonSerializer()
            return GuardianAPIClient(RequestFactory(transport, serializer), self._base_url)
