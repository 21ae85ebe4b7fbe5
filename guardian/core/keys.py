"""RSA key encoding and signed challenge assertions.

- create_jwk(): RSA public key -> JWK map sent at enrollment
- create_challenge_claims(): claim set for push allow/reject
- sign_jwt(): RS256 compact JWT over a claim set

Randomness and clock are injectable so claim construction is deterministic
under test. The defaults (secrets.token_bytes, time.time) are thread-safe.
"""
from __future__ import annotations
import base64
import secrets
import time
from typing import Any, Callable, Dict, Optional

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa

from .api.exceptions import InvalidKeyTypeError

JWT_EXP_SECS = 5 * 60
JWT_ALGORITHM = "RS256"
NONCE_SIZE = 32

GUARDIAN_TYPE_CLAIM = "auth0.guardian.type"
GUARDIAN_ACCEPTED_CLAIM = "auth0.guardian.accepted"
GUARDIAN_REASON_CLAIM = "auth0.guardian.reason"
PUSH_NOTIFICATION_TYPE = "push_notification"


def _base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def modulus_bytes(modulus: int) -> bytes:
    """Big-endian two's-complement encoding of a positive modulus.

    A leading zero byte is kept when the high bit is set, so a 2048-bit
    modulus encodes to 257 bytes.
    """
    return modulus.to_bytes(modulus.bit_length() // 8 + 1, "big")


def create_jwk(public_key: Any) -> Dict[str, str]:
    """Build the JWK map for an RSA public key.

    Args:
        public_key: cryptography RSA public key

    Returns:
        {"kty", "alg", "use", "e", "n"} map

    Raises:
        InvalidKeyTypeError: If the key is not an RSA public key
    """
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise InvalidKeyTypeError("Only RSA keys are supported")

    modulus = public_key.public_numbers().n
    return {
        "kty": "RSA",
        "alg": JWT_ALGORITHM,
        "use": "sig",
        "e": "AQAB",
        "n": _base64url(modulus_bytes(modulus)),
    }


def create_challenge_claims(
    audience: str,
    device_identifier: str,
    challenge: str,
    accepted: bool,
    reason: Optional[str] = None,
    nonce_source: Callable[[int], bytes] = secrets.token_bytes,
) -> Dict[str, Any]:
    """Assemble the claims attesting to a push challenge.

    `iat` and `exp` are added at signing time by sign_jwt().
    """
    claims: Dict[str, Any] = {
        "aud": audience,
        "iss": device_identifier,
        "sub": challenge,
        GUARDIAN_TYPE_CLAIM: PUSH_NOTIFICATION_TYPE,
        GUARDIAN_ACCEPTED_CLAIM: accepted,
        "jti": base64.b64encode(nonce_source(NONCE_SIZE)).decode("ascii"),
    }
    if reason is not None:
        claims[GUARDIAN_REASON_CLAIM] = reason
    return claims


def sign_jwt(
    private_key: Any,
    claims: Dict[str, Any],
    expiry_seconds: int = JWT_EXP_SECS,
    clock: Callable[[], float] = time.time,
) -> str:
    """Sign a claim set as a compact RS256 JWT.

    Args:
        private_key: cryptography RSA private key
        claims: Claim set (not mutated)
        expiry_seconds: Lifetime added to `iat` for `exp`
        clock: Epoch-seconds source

    Returns:
        Compact JWS string

    Raises:
        InvalidKeyTypeError: If the key is not an RSA private key
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise InvalidKeyTypeError("Only RSA keys are supported")

    issued_at = int(clock())
    payload = dict(claims)
    payload["iat"] = issued_at
    payload["exp"] = issued_at + expiry_seconds
    return jwt.encode(payload, private_key, algorithm=JWT_ALGORITHM)


def sign(
    private_key: Any,
    audience: str,
    device_identifier: str,
    challenge: str,
    accepted: bool,
    reason: Optional[str] = None,
    nonce_source: Callable[[int], bytes] = secrets.token_bytes,
    clock: Callable[[], float] = time.time,
) -> str:
    """Build and sign a challenge response in one step."""
    claims = create_challenge_claims(
        audience, device_identifier, challenge, accepted, reason, nonce_source=nonce_source
    )
    return sign_jwt(private_key, claims, clock=clock)
