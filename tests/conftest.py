"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from shelf_mcp.catalog import Category, Entity, RepositoryMeta
from shelf_mcp.config import reset_config

_ENV_VARS = (
    "SHELF_CATALOG",
    "SHELF_RULES",
    "SHELF_PORT",
    "SHELF_AUTH_TOKEN",
    "SHELF_READ_ONLY",
    "SHELF_HISTORY_SIZE",
    "GITHUB_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the caller's shelf configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_entities() -> list[Entity]:
    """Three projects: a web app, an ML library and a game engine."""
    return [
        Entity(
            id="book-1",
            title="React Dashboard",
            author="alice",
            category=Category.WEB_APPS,
            description="Admin dashboard built with React and Tailwind",
            tags=["react", "dashboard"],
            section_id="sec-web-apps",
            categorization_confidence=0.82,
            meta=RepositoryMeta(
                language="TypeScript",
                topics=["react", "dashboard", "admin"],
                stars=42,
                forks=7,
                watchers=42,
                created_at=datetime(2023, 3, 14, tzinfo=timezone.utc),
                updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
            ),
        ),
        Entity(
            id="book-2",
            title="Python ML Library",
            author="bob",
            category=Category.AI_ML,
            description="Machine learning utilities for tabular data",
            tags=["machine-learning", "python"],
            section_id="sec-ai-ml",
            categorization_confidence=0.91,
            meta=RepositoryMeta(
                language="Python",
                topics=["machine-learning", "data-science"],
                stars=156,
                forks=31,
                watchers=156,
                created_at=datetime(2022, 11, 2, tzinfo=timezone.utc),
                updated_at=datetime(2024, 6, 10, tzinfo=timezone.utc),
            ),
        ),
        Entity(
            id="book-3",
            title="Game Engine",
            author="carol",
            category=Category.GAMES,
            description="A tiny 2D game engine for learning graphics programming",
            readme="# Game Engine\n\nSprites, tilemaps and a fixed-step game loop.",
            meta=RepositoryMeta(
                language="C++",
                topics=["game", "gamedev", "engine"],
                stars=23,
                forks=4,
                created_at=datetime(2021, 7, 19, tzinfo=timezone.utc),
            ),
        ),
    ]
