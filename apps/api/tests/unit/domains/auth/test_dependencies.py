"""
Tests for authentication dependencies in src/domains/auth/dependencies.py

Tests identity token validation and session resolution.
"""

from unittest.mock import AsyncMock, Mock, patch

import jwt
import pytest
from fastapi import HTTPException

from src.domains.auth.dependencies import (
    decode_identity_token,
    get_session,
    get_token_payload,
)
from src.domains.auth.types import IdentityTokenPayload
from src.shared.abilities.models import Role, Session


class TestDecodeIdentityToken:
    """Test JWT validation against the configured secret."""

    def test_valid_token(self, test_jwt_secret: str, valid_jwt_payload: dict):
        """Test successful validation of a correctly signed token."""
        token = jwt.encode(valid_jwt_payload, test_jwt_secret, algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            result = decode_identity_token(token)

        assert result.sub == "person-2"
        assert result.email == "vera@example.com"
        assert result.aud == "authenticated"

    def test_invalid_token_signature_raises_401(self, test_jwt_secret: str):
        """Test that invalid token signature raises 401."""
        invalid_token = jwt.encode({"sub": "test"}, "wrong-secret", algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_identity_token(invalid_token)

        assert exc_info.value.status_code == 401
        assert "Invalid or expired token" in exc_info.value.detail

    def test_malformed_jwt_raises_401(self, test_jwt_secret: str):
        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_identity_token("not.a.valid.jwt.token")

        assert exc_info.value.status_code == 401

    def test_expired_token_raises_401(self, test_jwt_secret: str):
        token = jwt.encode({"sub": "person-2", "exp": 1}, test_jwt_secret, algorithm="HS256")

        with patch(
            "src.domains.auth.dependencies.settings.JWT_SECRET", test_jwt_secret
        ):
            with pytest.raises(HTTPException) as exc_info:
                decode_identity_token(token)

        assert exc_info.value.status_code == 401

    def test_missing_secret_rejects_token(self, valid_jwt_token: str):
        """Test that tokens are rejected outright when no secret is configured."""
        with patch("src.domains.auth.dependencies.settings.JWT_SECRET", None):
            with pytest.raises(HTTPException) as exc_info:
                decode_identity_token(valid_jwt_token)

        assert exc_info.value.status_code == 401


class TestGetTokenPayload:
    """Test token extraction from the Authorization header."""

    def test_no_header_means_no_payload(self):
        assert get_token_payload(None) is None
        assert get_token_payload("") is None

    def test_bearer_token_is_decoded(self, valid_jwt_token: str):
        with patch(
            "src.domains.auth.dependencies.decode_identity_token"
        ) as mock_decode:
            mock_decode.return_value = IdentityTokenPayload(sub="person-2")

            result = get_token_payload(f"Bearer {valid_jwt_token}")

        assert result.sub == "person-2"
        mock_decode.assert_called_once_with(valid_jwt_token)

    @pytest.mark.parametrize("header", ["InvalidFormat token", "Basic dGVzdA==", "Bearer"])
    def test_non_bearer_header_raises_401(self, header: str):
        with pytest.raises(HTTPException) as exc_info:
            get_token_payload(header)

        assert exc_info.value.status_code == 401


class TestGetSession:
    """Test session resolution from the token payload."""

    @pytest.mark.asyncio
    async def test_no_payload_is_anonymous(self, fake_db):
        result = await get_session(None, fake_db)

        assert result == Session.anonymous()
        assert fake_db.person.calls == []

    @pytest.mark.asyncio
    async def test_known_email_resolves_person(self, fake_db):
        payload = IdentityTokenPayload(sub="someone", email="olga@example.com")

        result = await get_session(payload, fake_db)

        assert result.identity == "person-4"
        assert result.roles == frozenset({Role.ORG_ADMIN})
        assert result.org_admin_for == ("org-0",)
        assert fake_db.person.last_where("find_unique") == {"email": "olga@example.com"}

    @pytest.mark.asyncio
    async def test_sub_is_used_when_email_is_absent(self, fake_db):
        payload = IdentityTokenPayload(sub="pat@example.com")

        result = await get_session(payload, fake_db)

        assert result.identity == "person-6"
        assert result.roles == frozenset({Role.VOLUNTEER, Role.OPPORTUNITY_PROVIDER})

    @pytest.mark.asyncio
    async def test_unknown_person_is_anonymous(self):
        db = Mock()
        db.person.find_unique = AsyncMock(return_value=None)
        payload = IdentityTokenPayload(email="stranger@example.com")

        result = await get_session(payload, db)

        assert result == Session.anonymous()

    @pytest.mark.asyncio
    async def test_payload_without_identity_is_anonymous(self, fake_db):
        result = await get_session(IdentityTokenPayload(), fake_db)

        assert result.is_authenticated is False
