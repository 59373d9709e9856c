"""GitHub repository search over the REST API.

Uses httpx for requests and tenacity for retrying rate limits and
transient server/transport failures.
"""
from dataclasses import dataclass
from typing import List, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from scopelit.config import __version__, get_config


class GitHubSearchError(RuntimeError):
    """Raised when repository search fails after all retries."""


class TransientGitHubError(Exception):
    """Retryable failure: rate limit, 5xx, or transport error."""


@dataclass(frozen=True)
class RemoteRepo:
    """One search hit."""
    full_name: str
    clone_url: str
    stargazers_count: int


def build_query(min_stars: int, max_stars: int, language: str = "Go") -> str:
    """Build the search query string, e.g. ``language:Go stars:1000..9000``."""
    return f"language:{language} stars:{min_stars}..{max_stars}"


class GitHubSearchClient:
    """Thin client for ``GET /search/repositories``."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        """Initialize the HTTP client.

        Args:
            token: GitHub token (loads GITHUB_TOKEN from config if not provided)
            base_url: API root (defaults to config, normally api.github.com)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests inject a MockTransport)
        """
        config = get_config()
        if token is None:
            token = config.github_token
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"scopelit/{__version__}",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.client = httpx.Client(
            base_url=base_url or config.github_api_url,
            headers=headers,
            timeout=timeout if timeout is not None else config.request_timeout,
            transport=transport,
        )

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @retry(
        retry=retry_if_exception_type(TransientGitHubError),
        stop=stop_after_attempt(4),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        reraise=True,
    )
    def _get(self, path: str, params: dict) -> dict:
        """GET with classification of retryable failures."""
        try:
            response = self.client.get(path, params=params)
        except httpx.TransportError as e:
            raise TransientGitHubError(f"transport error: {e}") from e

        if response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0":
            raise TransientGitHubError("rate limit exceeded")
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientGitHubError(f"HTTP {response.status_code}")
        if response.status_code != 200:
            raise GitHubSearchError(
                f"GitHub search failed: HTTP {response.status_code}: {response.text[:200]}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise GitHubSearchError(f"GitHub search returned invalid JSON: {e}") from e

    def search_repositories(self, min_stars: int, max_stars: int,
                            max_results: int) -> List[RemoteRepo]:
        """Search Go repositories in a star range, most-starred first.

        Args:
            min_stars: Lower bound of the star range
            max_stars: Upper bound of the star range
            max_results: Page size and cap on returned repositories

        Returns:
            At most ``max_results`` repositories

        Raises:
            GitHubSearchError: On a non-retryable error or when retries run out
        """
        if max_results <= 0:
            return []

        params = {
            "q": build_query(min_stars, max_stars),
            "sort": "stars",
            "order": "desc",
            # API caps per_page at 100
            "per_page": min(max_results, 100),
        }
        try:
            payload = self._get("/search/repositories", params)
        except TransientGitHubError as e:
            raise GitHubSearchError(f"GitHub search failed after retries: {e}") from e

        repos = []
        for item in payload.get("items", [])[:max_results]:
            repos.append(RemoteRepo(
                full_name=item["full_name"],
                clone_url=item["clone_url"],
                stargazers_count=item.get("stargazers_count", 0),
            ))
        return repos
