"""
NoteShare Backend: Access Guard Tests
======================================

What we test:
    ✅ Header parsing: missing, wrong scheme, empty token, extra parts
    ✅ "Bearer" scheme matched case-insensitively
    ✅ Valid token → AuthenticatedUser built from the claims
    ✅ Invalid or expired token → AuthenticationError, no token details leaked
"""

import pytest

from noteshare.dependencies import (
    INVALID_TOKEN,
    MISSING_AUTHORIZATION,
    extract_bearer_token,
    require_user,
)
from noteshare.exceptions import AuthenticationError
from noteshare.schemas.auth import AuthenticatedUser
from noteshare.services.token_service import TokenService


class TestExtractBearerToken:

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header(self, header):
        with pytest.raises(AuthenticationError) as exc_info:
            extract_bearer_token(header)
        assert exc_info.value.message == MISSING_AUTHORIZATION

    @pytest.mark.parametrize(
        "header",
        ["Basic dXNlcjpwYXNz", "Bearer", "Bearer ", "Token abc", "abc", "Bearer a b"],
    )
    def test_malformed_header(self, header):
        with pytest.raises(AuthenticationError) as exc_info:
            extract_bearer_token(header)
        assert exc_info.value.message == INVALID_TOKEN

    @pytest.mark.parametrize("scheme", ["Bearer", "bearer", "BEARER"])
    def test_scheme_is_case_insensitive(self, scheme):
        assert extract_bearer_token(f"{scheme} abc.def.ghi") == "abc.def.ghi"


class TestRequireUser:

    @pytest.mark.asyncio
    async def test_valid_token_yields_identity(self, token_service):
        token = token_service.issue(user_id=3, username="alice", email="a@x.com")

        user = await require_user(authorization=f"Bearer {token}", tokens=token_service)

        assert isinstance(user, AuthenticatedUser)
        assert (user.id, user.username, user.email) == (3, "alice", "a@x.com")
        assert user.model_dump() == {"id": 3, "username": "alice", "email": "a@x.com"}

    @pytest.mark.asyncio
    async def test_expired_token_rejected(self, token_service):
        issued = TokenService(secret="x" * 40, clock=lambda: 1_000_000)
        later = TokenService(secret="x" * 40, clock=lambda: 1_000_000 + 25 * 3600)
        token = issued.issue(user_id=3, username="alice", email="a@x.com")

        with pytest.raises(AuthenticationError) as exc_info:
            await require_user(authorization=f"Bearer {token}", tokens=later)
        assert exc_info.value.message == INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_foreign_signature_rejected(self, token_service):
        foreign = TokenService(secret="a-different-secret-of-sufficient-length")
        token = foreign.issue(user_id=3, username="alice", email="a@x.com")

        with pytest.raises(AuthenticationError) as exc_info:
            await require_user(authorization=f"Bearer {token}", tokens=token_service)
        assert exc_info.value.message == INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_missing_header_rejected(self, token_service):
        with pytest.raises(AuthenticationError) as exc_info:
            await require_user(authorization=None, tokens=token_service)
        assert exc_info.value.message == MISSING_AUTHORIZATION
