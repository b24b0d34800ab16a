"""Tests for the GitHub client and importer."""

import base64
import logging
from unittest.mock import MagicMock, patch

import httpx
import pytest

from shelf_mcp.catalog import Category
from shelf_mcp.github import (
    CatalogSync,
    GitHubClient,
    SourceDataError,
    SourceNotFoundError,
)


def make_repo(repo_id: int, name: str, **overrides) -> dict:
    repo = {
        "id": repo_id,
        "name": name,
        "description": None,
        "html_url": f"https://github.com/octocat/{name}",
        "private": False,
        "owner": {"login": "octocat"},
        "language": None,
        "stargazers_count": 1,
        "watchers_count": 1,
        "forks_count": 0,
        "created_at": "2020-01-01T00:00:00Z",
        "updated_at": "2020-02-01T00:00:00Z",
        "topics": [],
        "license": None,
    }
    repo.update(overrides)
    return repo


def make_response(status_code: int = 200, data=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    return response


@pytest.fixture
def mock_http():
    """Patch httpx.Client and yield the client object used inside the with block."""
    with patch("shelf_mcp.github.httpx.Client") as mock_client_class:
        mock_client = MagicMock()
        mock_client.__enter__ = MagicMock(return_value=mock_client)
        mock_client.__exit__ = MagicMock(return_value=False)
        mock_client_class.return_value = mock_client
        yield mock_client


class TestGitHubClient:
    def test_get_repository(self, mock_http):
        mock_http.get.return_value = make_response(data=make_repo(7, "tool"))

        repo = GitHubClient().get_repository("octocat", "tool")

        assert repo["id"] == 7
        url = mock_http.get.call_args[0][0]
        assert url == "https://api.github.com/repos/octocat/tool"

    def test_token_is_sent(self, mock_http):
        mock_http.get.return_value = make_response(data={})

        GitHubClient(token="abc123").get_user_profile("octocat")

        headers = mock_http.get.call_args[1]["headers"]
        assert headers["Authorization"] == "token abc123"
        assert headers["User-Agent"] == "shelfMCP"

    def test_anonymous_has_no_authorization(self, mock_http):
        mock_http.get.return_value = make_response(data={})

        client = GitHubClient()
        client.get_user_profile("octocat")

        assert client.is_authenticated is False
        assert "Authorization" not in mock_http.get.call_args[1]["headers"]

    def test_list_parameters(self, mock_http):
        mock_http.get.return_value = make_response(data=[])

        GitHubClient().get_user_repositories("octocat", page=3, per_page=10)

        params = mock_http.get.call_args[1]["params"]
        assert params == {"page": 3, "per_page": 10, "sort": "updated", "direction": "desc"}

    def test_rate_limit(self, mock_http):
        mock_http.get.return_value = make_response(403)
        with pytest.raises(SourceDataError, match="rate limit"):
            GitHubClient().get_user_repositories("octocat")

    def test_not_found(self, mock_http):
        mock_http.get.return_value = make_response(404)
        with pytest.raises(SourceNotFoundError):
            GitHubClient().get_repository("octocat", "missing")

    def test_server_error(self, mock_http):
        mock_http.get.return_value = make_response(500)
        with pytest.raises(SourceDataError, match="HTTP 500"):
            GitHubClient().get_repository("octocat", "tool")

    def test_timeout(self, mock_http):
        mock_http.get.side_effect = httpx.TimeoutException("slow")
        with pytest.raises(SourceDataError, match="timed out"):
            GitHubClient().get_repository("octocat", "tool")

    def test_connection_error(self, mock_http):
        mock_http.get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(SourceDataError, match="request failed"):
            GitHubClient().get_repository("octocat", "tool")

    def test_invalid_json(self, mock_http):
        response = make_response()
        response.json.side_effect = ValueError("not json")
        mock_http.get.return_value = response

        with pytest.raises(SourceDataError, match="Invalid JSON"):
            GitHubClient().get_repository("octocat", "tool")

    def test_readme_is_decoded(self, mock_http):
        encoded = base64.b64encode("# Hello\n\nWorld\n".encode()).decode()
        # GitHub wraps base64 content across lines
        wrapped = "\n".join(encoded[i : i + 8] for i in range(0, len(encoded), 8))
        mock_http.get.return_value = make_response(data={"content": wrapped, "encoding": "base64"})

        assert GitHubClient().get_repository_readme("octocat", "tool") == "# Hello\n\nWorld\n"

    def test_missing_readme(self, mock_http):
        mock_http.get.return_value = make_response(404)
        assert GitHubClient().get_repository_readme("octocat", "tool") is None

    def test_authenticated_calls_need_token(self, mock_http):
        client = GitHubClient()

        with pytest.raises(SourceDataError, match="Authentication token required"):
            client.get_authenticated_user_repositories()
        with pytest.raises(SourceDataError, match="Authentication token required"):
            client.get_authenticated_user()
        assert not mock_http.get.called


class TestCatalogSync:
    def test_imports_until_short_page(self, mock_http):
        mock_http.get.side_effect = [
            make_response(data=[make_repo(1, "a"), make_repo(2, "b")]),
            make_response(data=[make_repo(3, "pong", description="A pong game")]),
        ]

        result = CatalogSync(GitHubClient(), per_page=2).fetch_user_entities("octocat")

        assert result.total_fetched == 3
        assert [e.id for e in result.entities] == ["book-1", "book-2", "book-3"]
        assert result.entities[2].category is Category.GAMES
        assert result.errors == []
        assert mock_http.get.call_count == 2

    def test_stops_on_empty_page(self, mock_http):
        mock_http.get.side_effect = [
            make_response(data=[make_repo(1, "a"), make_repo(2, "b")]),
            make_response(data=[]),
        ]

        result = CatalogSync(GitHubClient(), per_page=2).fetch_user_entities("octocat")

        assert result.total_fetched == 2
        assert mock_http.get.call_count == 2

    def test_respects_max_repositories(self, mock_http):
        mock_http.get.side_effect = [
            make_response(data=[make_repo(1, "a"), make_repo(2, "b")]),
            make_response(data=[make_repo(3, "c"), make_repo(4, "d")]),
        ]

        result = CatalogSync(GitHubClient(), per_page=2).fetch_user_entities(
            "octocat", max_repositories=3
        )

        assert [e.id for e in result.entities] == ["book-1", "book-2", "book-3"]
        assert mock_http.get.call_count == 2

    def test_readme_failure_is_reported(self, mock_http, caplog):
        mock_http.get.side_effect = [
            make_response(data=[make_repo(1, "a")]),
            make_response(500),
        ]

        with caplog.at_level(logging.WARNING):
            result = CatalogSync(GitHubClient()).fetch_user_entities("octocat", include_readme=True)

        assert len(result.entities) == 1
        assert result.entities[0].readme is None
        assert result.errors == ["octocat/a: GitHub API error: HTTP 500"]
        assert any("Failed to fetch README" in r.message for r in caplog.records)

    def test_listing_failure_propagates(self, mock_http):
        mock_http.get.return_value = make_response(404)
        with pytest.raises(SourceNotFoundError):
            CatalogSync(GitHubClient()).fetch_user_entities("nobody")

    def test_authenticated_import(self, mock_http):
        mock_http.get.return_value = make_response(data=[make_repo(9, "secret", private=True)])

        result = CatalogSync(GitHubClient(token="t")).fetch_authenticated_user_entities()

        assert result.entities[0].is_public is False
        assert mock_http.get.call_args[0][0].endswith("/user/repos")

    def test_single_repository(self, mock_http):
        encoded = base64.b64encode(b"# Tool").decode()
        mock_http.get.side_effect = [
            make_response(data=make_repo(5, "tool", language="Swift")),
            make_response(data={"content": encoded, "encoding": "base64"}),
        ]

        entity = CatalogSync(GitHubClient()).fetch_repository_entity("octocat", "tool")

        assert entity.id == "book-5"
        assert entity.readme == "# Tool"
        assert entity.category is Category.MOBILE_APPS
