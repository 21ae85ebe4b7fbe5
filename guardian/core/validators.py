"""Input validation helpers for client configuration."""
from __future__ import annotations
import ipaddress
import re
from urllib.parse import urlparse, urlunparse

from .api.exceptions import InvalidConfigurationError

ALLOWED_SCHEMES = {"http", "https"}

_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


def _is_valid_host(hostname: str) -> bool:
    """True for an IP literal or a dot-separated sequence of DNS labels."""
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    try:
        ascii_host = hostname.rstrip(".").encode("idna").decode("ascii")
    except UnicodeError:
        return False
    labels = ascii_host.split(".")
    return all(_HOST_LABEL.match(label) for label in labels)


def validate_base_url(raw: str | None) -> str:
    """Validate and normalize the Guardian API base URL.

    Args:
        raw: Base URL as supplied by the caller

    Returns:
        Normalized URL (lowercase scheme, path defaults to "/")

    Raises:
        InvalidConfigurationError: If the URL is missing or not an absolute HTTP(S) URL
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidConfigurationError("baseUrl cannot be empty")

    try:
        parsed = urlparse(raw.strip())
        # Accessing .port validates the port component
        parsed.port
    except ValueError as exc:
        raise InvalidConfigurationError(f"Cannot use an invalid HTTP or HTTPS url: {raw}") from exc

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname:
        raise InvalidConfigurationError(f"Cannot use an invalid HTTP or HTTPS url: {raw}")
    if not _is_valid_host(parsed.hostname):
        raise InvalidConfigurationError(f"Cannot use an invalid HTTP or HTTPS url: {raw}")

    return urlunparse(parsed._replace(scheme=parsed.scheme.lower(), path=parsed.path or "/"))


def validate_timeout(raw: float | int | str | None, default: float) -> float:
    """Parse a request timeout in seconds.

    Raises:
        InvalidConfigurationError: If the value is not a positive number
    """
    if raw is None or raw == "":
        return default
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(f"Invalid request timeout: {raw!r}") from exc
    if timeout <= 0:
        raise InvalidConfigurationError(f"Request timeout must be positive: {raw!r}")
    return timeout
