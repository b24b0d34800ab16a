"""Tests for auth module."""

import pytest

from shelf_mcp.auth import (
    AuthError,
    BearerTokenVerifier,
    check_write_permission,
    get_auth_provider,
)
from shelf_mcp.config import Config


class TestBearerTokenVerifier:
    """Tests for BearerTokenVerifier class."""

    @pytest.mark.asyncio
    async def test_no_auth_configured_allows_any_request(self):
        """When SHELF_AUTH_TOKEN is not set, all requests should pass."""
        verifier = BearerTokenVerifier(Config.from_env())

        result = await verifier.verify_token("any-token")
        assert result is not None
        assert result.client_id == "anonymous"

        result = await verifier.verify_token("")
        assert result is not None

    @pytest.mark.asyncio
    async def test_empty_token_rejected(self, monkeypatch):
        monkeypatch.setenv("SHELF_AUTH_TOKEN", "a" * 32)
        verifier = BearerTokenVerifier(Config.from_env())

        assert await verifier.verify_token("") is None

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, monkeypatch):
        monkeypatch.setenv("SHELF_AUTH_TOKEN", "correct-token-with-32-characters!")
        verifier = BearerTokenVerifier(Config.from_env())

        assert await verifier.verify_token("wrong-token") is None

    @pytest.mark.asyncio
    async def test_valid_token_accepted(self, monkeypatch):
        token = "my-super-secret-token-32-chars!!"
        monkeypatch.setenv("SHELF_AUTH_TOKEN", token)
        verifier = BearerTokenVerifier(Config.from_env())

        result = await verifier.verify_token(token)
        assert result is not None
        assert result.client_id == "authenticated"
        assert set(result.scopes) == {"read", "write"}


class TestGetAuthProvider:
    def test_returns_verifier_when_token_set(self, monkeypatch):
        monkeypatch.setenv("SHELF_AUTH_TOKEN", "b" * 40)
        assert isinstance(get_auth_provider(Config.from_env()), BearerTokenVerifier)

    def test_returns_none_without_token(self):
        assert get_auth_provider(Config.from_env()) is None


class TestCheckWritePermission:
    """Tests for check_write_permission function."""

    def test_write_allowed_by_default(self):
        check_write_permission(Config.from_env())

    def test_write_rejected_in_read_only_mode_env(self, monkeypatch):
        monkeypatch.setenv("SHELF_READ_ONLY", "true")
        with pytest.raises(AuthError, match="read-only mode"):
            check_write_permission(Config.from_env())

    def test_write_rejected_in_read_only_mode_cli(self):
        config = Config.from_env(read_only_override=True)
        with pytest.raises(AuthError, match="read-only mode"):
            check_write_permission(config)
