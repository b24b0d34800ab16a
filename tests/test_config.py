"""Tests for config module."""

from pathlib import Path

import pytest

from shelf_mcp.config import Config, get_config, reset_config, set_read_only_override


def test_config_defaults():
    """Test config loads with defaults when no env vars set."""
    config = Config.from_env()
    assert config.catalog_path is None
    assert config.rules_path is None
    assert config.port == 8080
    assert config.auth_token is None
    assert config.read_only is False
    assert config.history_size == 10
    assert config.github_token is None


def test_config_from_env(monkeypatch):
    """Test config loads from environment variables."""
    monkeypatch.setenv("SHELF_CATALOG", "/data/catalog.yaml")
    monkeypatch.setenv("SHELF_RULES", "/data/rules.yaml")
    monkeypatch.setenv("SHELF_PORT", "9000")
    monkeypatch.setenv("SHELF_HISTORY_SIZE", "25")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")

    config = Config.from_env()
    assert config.catalog_path == Path("/data/catalog.yaml")
    assert config.rules_path == Path("/data/rules.yaml")
    assert config.port == 9000
    assert config.history_size == 25
    assert config.github_token == "ghp_example"


def test_config_tilde_expansion(monkeypatch):
    """Test config expands tilde in paths."""
    monkeypatch.setenv("SHELF_CATALOG", "~/shelf/catalog.yaml")
    config = Config.from_env()
    assert "~" not in str(config.catalog_path)
    assert config.catalog_path.is_absolute()


def test_config_invalid_port_non_numeric(monkeypatch):
    monkeypatch.setenv("SHELF_PORT", "not_a_number")
    with pytest.raises(ValueError, match="Invalid SHELF_PORT"):
        Config.from_env()


def test_config_invalid_port_out_of_range(monkeypatch):
    monkeypatch.setenv("SHELF_PORT", "70000")
    with pytest.raises(ValueError, match="Port must be between 1 and 65535"):
        Config.from_env()


def test_config_invalid_history_size(monkeypatch):
    monkeypatch.setenv("SHELF_HISTORY_SIZE", "0")
    with pytest.raises(ValueError, match="History size must be at least 1"):
        Config.from_env()


def test_config_short_auth_token(monkeypatch):
    monkeypatch.setenv("SHELF_AUTH_TOKEN", "short")
    with pytest.raises(ValueError, match="at least 32 characters"):
        Config.from_env()


@pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("YES", True), ("no", False), ("", False)])
def test_config_read_only_env(monkeypatch, value, expected):
    monkeypatch.setenv("SHELF_READ_ONLY", value)
    assert Config.from_env().read_only is expected


def test_config_read_only_override_wins(monkeypatch):
    monkeypatch.setenv("SHELF_READ_ONLY", "false")
    assert Config.from_env(read_only_override=True).read_only is True


def test_get_config_is_cached_until_reset(monkeypatch):
    first = get_config()
    assert get_config() is first

    reset_config()
    monkeypatch.setenv("SHELF_PORT", "9100")
    assert get_config().port == 9100


def test_set_read_only_override():
    set_read_only_override(True)
    assert get_config().read_only is True
