"""Tests for JWK encoding and signed challenge assertions."""
import base64

import jwt
import pytest

from guardian.core import keys
from guardian.core.api.exceptions import InvalidKeyTypeError

AUDIENCE = "https://example.guardian.auth0.com/"
FIXED_NONCE = bytes(range(32))
FIXED_NOW = 1_700_000_000


def _b64url_decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _decode(token: str, public_key) -> dict:
    return jwt.decode(
        token,
        public_key,
        algorithms=["RS256"],
        audience=AUDIENCE,
        options={"verify_exp": False},
    )


class TestCreateJwk:
    def test_fixed_fields(self, rsa_key_pair):
        jwk = keys.create_jwk(rsa_key_pair["public_key"])

        assert jwk["kty"] == "RSA"
        assert jwk["alg"] == "RS256"
        assert jwk["use"] == "sig"
        assert jwk["e"] == "AQAB"
        assert set(jwk) == {"kty", "alg", "use", "e", "n"}

    def test_modulus_round_trips_without_padding(self, rsa_key_pair):
        jwk = keys.create_jwk(rsa_key_pair["public_key"])
        modulus = rsa_key_pair["public_key"].public_numbers().n

        assert "=" not in jwk["n"]
        assert "+" not in jwk["n"] and "/" not in jwk["n"]
        decoded = _b64url_decode(jwk["n"])
        assert int.from_bytes(decoded, "big") == modulus

    def test_modulus_keeps_twos_complement_sign_byte(self, rsa_key_pair):
        decoded = _b64url_decode(keys.create_jwk(rsa_key_pair["public_key"])["n"])

        # 2048-bit modulus has its high bit set
        assert len(decoded) == 257
        assert decoded[0] == 0

    @pytest.mark.parametrize(
        "modulus, expected",
        [
            (0x7F, b"\x7f"),
            (0x80, b"\x00\x80"),
            (0x0100, b"\x01\x00"),
            (0xFFFF, b"\x00\xff\xff"),
        ],
    )
    def test_modulus_bytes(self, modulus, expected):
        assert keys.modulus_bytes(modulus) == expected

    @pytest.mark.critical
    def test_ec_key_rejected(self, ec_key_pair):
        with pytest.raises(InvalidKeyTypeError, match="Only RSA keys are supported"):
            keys.create_jwk(ec_key_pair["public_key"])

    @pytest.mark.parametrize("bad_key", [None, "not-a-key", b"\x00" * 16])
    def test_non_key_rejected(self, bad_key):
        with pytest.raises(InvalidKeyTypeError):
            keys.create_jwk(bad_key)

    def test_private_key_rejected(self, rsa_key_pair):
        with pytest.raises(InvalidKeyTypeError):
            keys.create_jwk(rsa_key_pair["private_key"])

    def test_invalid_key_type_is_value_error(self, ec_key_pair):
        with pytest.raises(ValueError):
            keys.create_jwk(ec_key_pair["public_key"])


class TestCreateChallengeClaims:
    def test_accept_claims(self):
        claims = keys.create_challenge_claims(
            AUDIENCE, "device-1", "challenge-abc", True, nonce_source=lambda size: FIXED_NONCE
        )

        assert claims == {
            "aud": AUDIENCE,
            "iss": "device-1",
            "sub": "challenge-abc",
            "auth0.guardian.type": "push_notification",
            "auth0.guardian.accepted": True,
            "jti": base64.b64encode(FIXED_NONCE).decode("ascii"),
        }

    def test_reject_with_reason(self):
        claims = keys.create_challenge_claims(
            AUDIENCE, "device-1", "challenge-abc", False, "hacked",
            nonce_source=lambda size: FIXED_NONCE,
        )

        assert claims["auth0.guardian.accepted"] is False
        assert claims["auth0.guardian.reason"] == "hacked"

    def test_reason_absent_when_not_supplied(self):
        claims = keys.create_challenge_claims(AUDIENCE, "device-1", "challenge-abc", False)
        assert "auth0.guardian.reason" not in claims

    def test_nonce_is_32_bytes(self):
        requested = []

        def nonce_source(size):
            requested.append(size)
            return FIXED_NONCE

        claims = keys.create_challenge_claims(
            AUDIENCE, "device-1", "c", True, nonce_source=nonce_source
        )

        assert requested == [32]
        assert len(base64.b64decode(claims["jti"])) == 32

    def test_jti_fresh_per_call(self):
        first = keys.create_challenge_claims(AUDIENCE, "device-1", "c", True)
        second = keys.create_challenge_claims(AUDIENCE, "device-1", "c", True)
        assert first["jti"] != second["jti"]


class TestSignJwt:
    def test_signature_verifies_with_public_key(self, rsa_key_pair):
        claims = keys.create_challenge_claims(AUDIENCE, "device-1", "challenge-abc", True)
        token = keys.sign_jwt(rsa_key_pair["private_key"], claims, clock=lambda: FIXED_NOW)

        assert token.count(".") == 2
        assert jwt.get_unverified_header(token)["alg"] == "RS256"
        payload = _decode(token, rsa_key_pair["public_key"])
        assert payload["iss"] == "device-1"
        assert payload["sub"] == "challenge-abc"

    def test_iat_and_five_minute_expiry_from_clock(self, rsa_key_pair):
        claims = keys.create_challenge_claims(AUDIENCE, "device-1", "c", True)
        token = keys.sign_jwt(rsa_key_pair["private_key"], claims, clock=lambda: FIXED_NOW + 0.9)

        payload = _decode(token, rsa_key_pair["public_key"])
        assert payload["iat"] == FIXED_NOW
        assert payload["exp"] == FIXED_NOW + 300

    def test_custom_expiry(self, rsa_key_pair):
        token = keys.sign_jwt(
            rsa_key_pair["private_key"], {"aud": AUDIENCE}, expiry_seconds=60, clock=lambda: FIXED_NOW
        )
        assert _decode(token, rsa_key_pair["public_key"])["exp"] == FIXED_NOW + 60

    def test_claims_not_mutated(self, rsa_key_pair):
        claims = {"aud": AUDIENCE, "sub": "c"}
        keys.sign_jwt(rsa_key_pair["private_key"], claims)
        assert claims == {"aud": AUDIENCE, "sub": "c"}

    @pytest.mark.critical
    def test_ec_private_key_rejected(self, ec_key_pair):
        with pytest.raises(InvalidKeyTypeError):
            keys.sign_jwt(ec_key_pair["private_key"], {"aud": AUDIENCE})

    def test_public_key_rejected(self, rsa_key_pair):
        with pytest.raises(InvalidKeyTypeError):
            keys.sign_jwt(rsa_key_pair["public_key"], {"aud": AUDIENCE})


class TestSign:
    @pytest.mark.critical
    def test_claim_set_exact_without_reason(self, rsa_key_pair):
        token = keys.sign(rsa_key_pair["private_key"], AUDIENCE, "device-1", "challenge-abc", True)

        payload = _decode(token, rsa_key_pair["public_key"])
        assert set(payload) == {
            "aud", "iss", "sub", "auth0.guardian.type", "auth0.guardian.accepted",
            "jti", "iat", "exp",
        }
        assert payload["auth0.guardian.type"] == "push_notification"
        assert payload["auth0.guardian.accepted"] is True

    @pytest.mark.critical
    def test_claim_set_includes_reason_when_given(self, rsa_key_pair):
        token = keys.sign(
            rsa_key_pair["private_key"], AUDIENCE, "device-1", "challenge-abc", False, "mistake"
        )

        payload = _decode(token, rsa_key_pair["public_key"])
        assert payload["auth0.guardian.reason"] == "mistake"
        assert payload["auth0.guardian.accepted"] is False

    def test_deterministic_with_injected_sources(self, rsa_key_pair):
        args = (rsa_key_pair["private_key"], AUDIENCE, "device-1", "c", True)
        first = keys.sign(*args, nonce_source=lambda n: FIXED_NONCE, clock=lambda: FIXED_NOW)
        second = keys.sign(*args, nonce_source=lambda n: FIXED_NONCE, clock=lambda: FIXED_NOW)

        # RSASSA-PKCS1-v1_5 is deterministic
        assert first == second

    def test_jti_differs_across_calls(self, rsa_key_pair):
        args = (rsa_key_pair["private_key"], AUDIENCE, "device-1", "c", True)
        first = _decode(keys.sign(*args, clock=lambda: FIXED_NOW), rsa_key_pair["public_key"])
        second = _decode(keys.sign(*args, clock=lambda: FIXED_NOW), rsa_key_pair["public_key"])

        assert first["jti"] != second["jti"]
