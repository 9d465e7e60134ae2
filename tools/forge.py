"""GitHub client for publishing extension releases."""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"

# git@github.com:owner/repo.git, https://github.com/owner/repo(.git)
GITHUB_REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/(.+?)(?:\.git)?/?$")


class ForgeError(Exception):
    """Raised when a GitHub API call fails."""

    pass


def parse_github_remote(url: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a GitHub remote URL.

    Returns:
        Tuple of owner and repository name, or None if the URL is not GitHub.
    """
    match = GITHUB_REMOTE_PATTERN.search(url.strip())
    if not match:
        return None
    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return owner, repo


class GitHubClient:
    """Minimal GitHub REST client.

    Example:
        >>> client = GitHubClient(token="ghp_...")
        >>> client.create_release("octo", "my-ext", tag_name="v1.0.0", name="Release 1.0.0")
    """

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Personal access token
            api_url: Base URL for the GitHub API
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.token = token
        self.api_url = (api_url or DEFAULT_API_URL).rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated API request."""
        url = f"{self.api_url}/{endpoint.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, url, json=json_data, headers=headers)
        except httpx.RequestError as e:
            raise ForgeError(f"Connection error: {e}")

        if not response.is_success:
            raise ForgeError(_error_message(response))

        try:
            return response.json()
        except ValueError:
            return {}

    def create_release(
        self,
        owner: str,
        repo: str,
        tag_name: str,
        name: str,
        body: str = "",
        draft: bool = False,
        prerelease: bool = False,
    ) -> dict[str, Any]:
        """Create a release (and its tag) on a repository.

        Returns:
            The release object returned by the API.

        Raises:
            ForgeError: If the API responds with a non-2xx status.
        """
        logger.debug("Creating release %s on %s/%s", tag_name, owner, repo)
        return self._request(
            "POST",
            f"/repos/{owner}/{repo}/releases",
            json_data={
                "tag_name": tag_name,
                "name": name,
                "body": body,
                "draft": draft,
                "prerelease": prerelease,
            },
        )


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's own error message."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"GitHub API error: {response.status_code}"
