"""Configuration module for shelfmcp.

Loads configuration from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


@dataclass
class Config:
    """Application configuration."""

    catalog_path: Path | None
    rules_path: Path | None
    port: int
    auth_token: str | None
    read_only: bool
    history_size: int
    github_token: str | None

    @classmethod
    def from_env(cls, read_only_override: bool | None = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            read_only_override: If provided, overrides the SHELF_READ_ONLY env var.
        """
        catalog = os.getenv("SHELF_CATALOG")
        catalog_path = Path(catalog).expanduser() if catalog else None

        rules = os.getenv("SHELF_RULES")
        rules_path = Path(rules).expanduser() if rules else None

        port_str = os.getenv("SHELF_PORT", "8080")
        try:
            port = int(port_str)
            if not 1 <= port <= 65535:
                raise ValueError(f"Port must be between 1 and 65535, got {port}")
        except ValueError as e:
            raise ValueError(f"Invalid SHELF_PORT value '{port_str}': {e}") from e

        history_str = os.getenv("SHELF_HISTORY_SIZE", "10")
        try:
            history_size = int(history_str)
            if history_size < 1:
                raise ValueError(f"History size must be at least 1, got {history_size}")
        except ValueError as e:
            raise ValueError(f"Invalid SHELF_HISTORY_SIZE value '{history_str}': {e}") from e

        auth_token = os.getenv("SHELF_AUTH_TOKEN")
        if auth_token is not None and len(auth_token) < 32:
            raise ValueError("SHELF_AUTH_TOKEN must be at least 32 characters for security")

        # CLI flag takes precedence over env var
        if read_only_override is not None:
            read_only = read_only_override
        else:
            read_only = _env_flag("SHELF_READ_ONLY")

        return cls(
            catalog_path=catalog_path,
            rules_path=rules_path,
            port=port,
            auth_token=auth_token,
            read_only=read_only,
            history_size=history_size,
            github_token=os.getenv("GITHUB_TOKEN") or None,
        )


# Global config instance (lazy loaded)
_config: Config | None = None
_read_only_override: bool | None = None


def set_read_only_override(read_only: bool | None) -> None:
    """Force read-only mode from the command line (None defers to the env var)."""
    global _read_only_override
    _read_only_override = read_only


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config.from_env(read_only_override=_read_only_override)
    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config, _read_only_override
    _config = None
    _read_only_override = None
