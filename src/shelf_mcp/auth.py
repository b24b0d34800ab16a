"""Bearer token authentication and write guarding for the shelfMCP server."""

import hmac
import logging

from fastmcp.server.auth import AccessToken, TokenVerifier

from shelf_mcp.config import Config

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when an operation is not permitted."""


class BearerTokenVerifier(TokenVerifier):
    """
    FastMCP TokenVerifier that checks bearer tokens against SHELF_AUTH_TOKEN.

    Read and write scopes are granted together; read-only mode is enforced
    separately by check_write_permission.
    """

    def __init__(self, config: Config):
        self._config = config

    async def verify_token(self, token: str) -> AccessToken | None:
        """
        Verify a bearer token.

        Args:
            token: The bearer token (without "Bearer " prefix)

        Returns:
            AccessToken if valid, None if invalid
        """
        if self._config.auth_token is None:
            return AccessToken(
                token=token or "anonymous",
                client_id="anonymous",
                scopes=["read", "write"],
            )

        if not token:
            logger.warning("Empty authentication token")
            return None

        if not hmac.compare_digest(token, self._config.auth_token):
            logger.warning("Invalid authentication token")
            return None

        return AccessToken(token=token, client_id="authenticated", scopes=["read", "write"])


def get_auth_provider(config: Config) -> BearerTokenVerifier | None:
    """Token verifier for FastMCP, or None when SHELF_AUTH_TOKEN is unset."""
    if config.auth_token is None:
        return None
    return BearerTokenVerifier(config)


def check_write_permission(config: Config) -> None:
    """
    Reject mutating operations in read-only mode.

    Raises:
        AuthError: If the server is in read-only mode
    """
    if config.read_only:
        logger.warning("Write operation rejected: server is in read-only mode")
        raise AuthError("Server is in read-only mode")
