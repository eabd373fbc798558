"""GitHub issue-list fetcher."""

import logging

import httpx

from pkgquality import __version__
from pkgquality.config import EstimationContext
from pkgquality.errors import MalformedResponseError
from pkgquality.models.schemas import Issue, RepoLocation


class GitHubFetcher:
    """Fetches the issue list of a repository from the GitHub API.

    A token raises the rate limit considerably. It is read from the context
    settings (GITHUB_TOKEN in the environment), never hard-coded.
    """

    # GitHub clamps this to its own maximum page size
    ISSUES_PAGE_SIZE = 1000

    def __init__(self, context: EstimationContext | None = None) -> None:
        """Initialize the fetcher.

        Args:
            context: Settings, logger and optional shared httpx client.
        """
        self._context = context or EstimationContext()

    @property
    def logger(self) -> logging.Logger:
        return self._context.logger

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"pkgquality/{__version__}",
        }
        token = self._context.settings.github_token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._context.client is not None:
            return self._context.client
        return self._context.build_client()

    async def fetch_issues(self, location: RepoLocation) -> list[Issue] | None:
        """Fetch all issues, open and closed, of a repository in one request.

        Args:
            location: A valid repository location.

        Returns:
            The issues, or None when the request failed or the payload is not
            a list.

        Raises:
            MalformedResponseError: If the body is not JSON.
        """
        url = f"{self._context.settings.github_url}{location.api_path}/issues"
        params = {"per_page": self.ISSUES_PAGE_SIZE, "state": "all"}
        self.logger.debug(f"URL for issues: {url}")

        client = await self._get_client()
        try:
            response = await client.get(url, params=params, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.error(f"Could not access issues on {url}: {e}")
            return None
        finally:
            if self._context.client is None:
                await client.aclose()

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("issues", url, str(e)) from e

        if not isinstance(data, list):
            self.logger.warning(f"Unusable issue list from {url}: {type(data).__name__}")
            return None

        return [Issue.model_validate(item) if isinstance(item, dict) else Issue() for item in data]
