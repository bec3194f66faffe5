"""
NoteShare Backend: Token Service Unit Tests
============================================

What we test:
    ✅ Issued token carries user_id, username, email, iat, exp = iat + 24h
    ✅ Accepted at T+23h59m, rejected at T+24h and T+24h00m01s
    ✅ Different secret, tampered payload, garbage, missing claims,
       unsigned tokens → TokenError with one undifferentiated message
"""

import base64
import json
import os
from datetime import timedelta

import jwt
import pytest

from noteshare.exceptions import TokenError
from noteshare.services.token_service import TOKEN_LIFETIME, TokenService

TEST_SECRET = os.environ["JWT_SECRET"]

ISSUED_AT = 1_700_000_000


def service_at(timestamp: float, secret: str = TEST_SECRET) -> TokenService:
    return TokenService(secret=secret, clock=lambda: timestamp)


def issue_alice(secret: str = TEST_SECRET) -> str:
    return service_at(ISSUED_AT, secret).issue(user_id=7, username="alice", email="a@x.com")


class TestIssue:

    def test_claims_round_trip(self):
        token = issue_alice()
        claims = service_at(ISSUED_AT + 60).verify(token)

        assert claims.user_id == 7
        assert claims.username == "alice"
        assert claims.email == "a@x.com"
        assert claims.iat == ISSUED_AT
        assert claims.exp == ISSUED_AT + 24 * 3600

    def test_lifetime_is_24_hours(self):
        assert TOKEN_LIFETIME == timedelta(hours=24)

    def test_payload_is_hs256_jwt(self):
        header = jwt.get_unverified_header(issue_alice())
        assert header["alg"] == "HS256"

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret="")


class TestExpiry:

    def test_accepted_just_before_expiry(self):
        later = ISSUED_AT + int(timedelta(hours=23, minutes=59).total_seconds())
        assert service_at(later).verify(issue_alice()).user_id == 7

    def test_rejected_at_exact_expiry(self):
        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 24 * 3600).verify(issue_alice())

    def test_rejected_after_expiry(self):
        later = ISSUED_AT + int(timedelta(hours=24, seconds=1).total_seconds())
        with pytest.raises(TokenError):
            service_at(later).verify(issue_alice())


class TestRejection:

    def test_different_secret_rejected(self):
        token = issue_alice(secret="another-secret-that-is-long-enough-for-hs256")
        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 60).verify(token)

    def test_tampered_payload_rejected(self):
        header, payload, signature = issue_alice().split(".")
        claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
        claims["user_id"] = 1
        forged = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()

        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 60).verify(f"{header}.{forged}.{signature}")

    @pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "Bearer token"])
    def test_garbage_rejected(self, garbage):
        with pytest.raises(TokenError):
            service_at(ISSUED_AT).verify(garbage)

    def test_missing_claim_rejected(self):
        token = jwt.encode(
            {"user_id": 7, "exp": ISSUED_AT + 3600, "iat": ISSUED_AT},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 60).verify(token)

    def test_mistyped_claim_rejected(self):
        token = jwt.encode(
            {
                "user_id": "not-a-number",
                "username": "alice",
                "email": "a@x.com",
                "iat": ISSUED_AT,
                "exp": ISSUED_AT + 3600,
            },
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 60).verify(token)

    def test_unsigned_token_rejected(self):
        token = jwt.encode(
            {
                "user_id": 7,
                "username": "alice",
                "email": "a@x.com",
                "iat": ISSUED_AT,
                "exp": ISSUED_AT + 3600,
            },
            None,
            algorithm="none",
        )
        with pytest.raises(TokenError):
            service_at(ISSUED_AT + 60).verify(token)

    def test_failures_share_one_message(self):
        messages = set()
        for token in ["abc", issue_alice(secret="another-secret-that-is-long-enough-for-hs256")]:
            with pytest.raises(TokenError) as exc_info:
                service_at(ISSUED_AT + 60).verify(token)
            messages.add(exc_info.value.message)
        with pytest.raises(TokenError) as exc_info:
            service_at(ISSUED_AT + 48 * 3600).verify(issue_alice())
        messages.add(exc_info.value.message)

        assert messages == {"Invalid or expired token"}
