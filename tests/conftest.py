"""Pytest shared fixtures for Guardian SDK tests."""
import pathlib
import sys
from unittest.mock import Mock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from guardian.core.api import GuardianAPIClient, HttpTransport, JsonSerializer

BASE_URL = "https://example.guardian.auth0.com/"


# ─────────────────────────────────────────────────────────────────────────────
# Key material
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate RSA key pair for enrollment and challenge signing in tests."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
        backend=default_backend()
    )

    public_key = private_key.public_key()
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )

    return {
        "private_key": private_key,
        "public_key": public_key,
        "public_pem": public_pem,
    }


@pytest.fixture(scope="session")
def ec_key_pair():
    """EC key pair: a valid key of the wrong type."""
    private_key = ec.generate_private_key(ec.SECP256R1(), backend=default_backend())
    return {
        "private_key": private_key,
        "public_key": private_key.public_key(),
    }


# ─────────────────────────────────────────────────────────────────────────────
# HTTP stubs
# ─────────────────────────────────────────────────────────────────────────────
def make_response(status_code: int = 200, text: str = "") -> Mock:
    """Minimal stand-in for requests.Response."""
    return Mock(status_code=status_code, text=text)


@pytest.fixture()
def session():
    """Fake requests.Session; configure session.request.return_value per test."""
    stub = Mock()
    stub.headers = {}
    stub.request.return_value = make_response(200, "")
    return stub


@pytest.fixture()
def transport(session):
    transport = HttpTransport(session=session)
    yield transport
    transport.close()


@pytest.fixture()
def api_client(transport):
    return (
        GuardianAPIClient.Builder()
        .base_url(BASE_URL)
        .transport(transport)
        .serializer(JsonSerializer())
        .build()
    )
