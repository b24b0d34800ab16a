"""GitHub data source: fetch repositories and turn them into catalog entities."""

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from shelf_mcp.catalog.models import Entity
from shelf_mcp.catalog.transformer import transform_repository

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
REQUEST_TIMEOUT = 15.0  # seconds
DEFAULT_PER_PAGE = 30
USER_AGENT = "shelfMCP"


class SourceDataError(Exception):
    """Source data could not be loaded from GitHub."""


class SourceNotFoundError(SourceDataError):
    """The requested user or repository does not exist."""


class GitHubClient:
    """Thin synchronous client for the parts of the GitHub REST API we read."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET an API endpoint and decode its JSON body.

        Raises:
            SourceNotFoundError: On 404
            SourceDataError: On rate limiting, other HTTP errors or transport failures
        """
        url = f"{self.base_url}{endpoint}"
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(url, params=params, headers=self._headers())
        except httpx.TimeoutException as e:
            raise SourceDataError(f"GitHub request timed out: {endpoint}") from e
        except httpx.RequestError as e:
            raise SourceDataError(f"GitHub request failed: {e}") from e

        status = response.status_code
        if status == 403:
            raise SourceDataError("GitHub API rate limit exceeded. Please try again later.")
        if status == 404:
            raise SourceNotFoundError(f"Repository or user not found: {endpoint}")
        if not 200 <= status < 300:
            raise SourceDataError(f"GitHub API error: HTTP {status}")

        try:
            return response.json()
        except ValueError as e:
            raise SourceDataError(f"Invalid JSON from GitHub for {endpoint}") from e

    def _require_token(self, what: str) -> None:
        if not self.token:
            raise SourceDataError(f"Authentication token required for accessing {what}")

    def get_user_repositories(
        self, username: str, page: int = 1, per_page: int = DEFAULT_PER_PAGE
    ) -> list[dict[str, Any]]:
        """One page of a user's public repositories, most recently updated first."""
        return self._get(
            f"/users/{username}/repos",
            {"page": page, "per_page": per_page, "sort": "updated", "direction": "desc"},
        )

    def get_authenticated_user_repositories(
        self, page: int = 1, per_page: int = DEFAULT_PER_PAGE
    ) -> list[dict[str, Any]]:
        """One page of the token owner's repositories, private ones included."""
        self._require_token("user repositories")
        return self._get(
            "/user/repos",
            {"page": page, "per_page": per_page, "sort": "updated", "direction": "desc"},
        )

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return self._get(f"/repos/{owner}/{repo}")

    def get_repository_readme(self, owner: str, repo: str) -> str | None:
        """Decoded README text, or None if the repository has no README."""
        try:
            readme = self._get(f"/repos/{owner}/{repo}/readme")
        except SourceNotFoundError:
            return None

        content = readme.get("content") or ""
        if readme.get("encoding") == "base64":
            try:
                return base64.b64decode("".join(content.split())).decode("utf-8", errors="replace")
            except (binascii.Error, ValueError) as e:
                raise SourceDataError(f"Undecodable README for {owner}/{repo}") from e
        return content

    def get_user_profile(self, username: str) -> dict[str, Any]:
        return self._get(f"/users/{username}")

    def get_authenticated_user(self) -> dict[str, Any]:
        self._require_token("user profile")
        return self._get("/user")


@dataclass
class SyncResult:
    """Entities built from one import run."""

    entities: list[Entity] = field(default_factory=list)
    total_fetched: int = 0
    errors: list[str] = field(default_factory=list)


class CatalogSync:
    """
    Imports GitHub repositories as catalog entities.

    Failures listing repositories propagate as SourceDataError. A README that
    fails to load only drops the README: the entity is still built and the
    failure is reported in SyncResult.errors.
    """

    def __init__(self, client: GitHubClient, per_page: int = DEFAULT_PER_PAGE):
        self.client = client
        self.per_page = per_page

    def fetch_user_entities(
        self,
        username: str,
        include_readme: bool = False,
        max_repositories: int | None = None,
    ) -> SyncResult:
        """Import a user's public repositories."""
        logger.info("Fetching repositories for GitHub user %s", username)
        return self._collect(
            lambda page: self.client.get_user_repositories(username, page, self.per_page),
            include_readme,
            max_repositories,
        )

    def fetch_authenticated_user_entities(
        self,
        include_readme: bool = False,
        max_repositories: int | None = None,
    ) -> SyncResult:
        """Import the token owner's repositories."""
        logger.info("Fetching repositories for the authenticated GitHub user")
        return self._collect(
            lambda page: self.client.get_authenticated_user_repositories(page, self.per_page),
            include_readme,
            max_repositories,
        )

    def fetch_repository_entity(
        self, owner: str, repo: str, include_readme: bool = True
    ) -> Entity:
        raw = self.client.get_repository(owner, repo)
        readme = self.client.get_repository_readme(owner, repo) if include_readme else None
        return transform_repository(raw, readme)

    def _collect(self, fetch_page, include_readme: bool, max_repositories: int | None) -> SyncResult:
        result = SyncResult()
        page = 1
        while max_repositories is None or result.total_fetched < max_repositories:
            repos = fetch_page(page)
            if not repos:
                break

            if max_repositories is not None:
                repos = repos[: max_repositories - result.total_fetched]

            for raw in repos:
                result.entities.append(self._transform(raw, include_readme, result.errors))
            result.total_fetched += len(repos)

            if len(repos) < self.per_page:
                break
            page += 1

        logger.info(
            "Imported %d repositories (%d errors)", result.total_fetched, len(result.errors)
        )
        return result

    def _transform(self, raw: dict[str, Any], include_readme: bool, errors: list[str]) -> Entity:
        readme = None
        if include_readme:
            owner = (raw.get("owner") or {}).get("login", "")
            name = raw.get("name", "")
            try:
                readme = self.client.get_repository_readme(owner, name)
            except SourceDataError as e:
                logger.warning("Failed to fetch README for %s/%s: %s", owner, name, e)
                errors.append(f"{owner}/{name}: {e}")
        return transform_repository(raw, readme)
