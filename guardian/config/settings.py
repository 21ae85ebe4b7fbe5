"""Settings loader with environment variable integration."""
from __future__ import annotations
import locale
import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional

from guardian.__version__ import __version__
from guardian.core.validators import validate_base_url, validate_timeout

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"
DEFAULT_REQUEST_TIMEOUT = 5.0
SDK_NAME = "GuardianSDK"


def default_locale() -> str:
    """Process locale as a language tag (e.g. "en_US"), or DEFAULT_LOCALE."""
    try:
        language, _ = locale.getlocale()
    except ValueError:
        language = None
    if not language or language in ("C", "POSIX"):
        return DEFAULT_LOCALE
    return language


def default_user_agent() -> str:
    """User-Agent identifying SDK name/version and the host platform."""
    return (
        f"{SDK_NAME}/{__version__} "
        f"Python {platform.python_version()} ({platform.system()} {platform.release()})"
    )


@dataclass
class GuardianSettings:
    """Client configuration container."""
    base_url: Optional[str] = None
    locale: str = DEFAULT_LOCALE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = ""

    @property
    def user_agent_resolved(self) -> str:
        """Configured User-Agent, or the SDK default."""
        return self.user_agent or default_user_agent()


def load_settings() -> GuardianSettings:
    """Load client settings from environment variables.

    Environment:
        GUARDIAN_BASE_URL: Tenant API URL (e.g. https://tenant.guardian.auth0.com/)
        GUARDIAN_LOCALE: Accept-Language value (defaults to the process locale)
        GUARDIAN_REQUEST_TIMEOUT: Per-request timeout in seconds
        GUARDIAN_USER_AGENT: User-Agent override

    Raises:
        InvalidConfigurationError: If a provided value is malformed
    """
    base_url = os.environ.get("GUARDIAN_BASE_URL", "").strip() or None
    if base_url:
        base_url = validate_base_url(base_url)
    else:
        logger.debug("GUARDIAN_BASE_URL not set")

    return GuardianSettings(
        base_url=base_url,
        locale=os.environ.get("GUARDIAN_LOCALE", "").strip() or default_locale(),
        request_timeout=validate_timeout(
            os.environ.get("GUARDIAN_REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT
        ),
        user_agent=os.environ.get("GUARDIAN_USER_AGENT", "").strip(),
    )
