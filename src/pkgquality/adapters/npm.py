"""NPM package registry adapter."""

import logging
from datetime import date
from typing import Any

import httpx

from pkgquality.adapters.base import BaseAdapter
from pkgquality.config import EstimationContext
from pkgquality.errors import MalformedResponseError, PackageNotFoundError
from pkgquality.models.schemas import DownloadSample, PackageEntry


class NpmAdapter(BaseAdapter):
    """Adapter for the NPM package registry.

    Data sources:
    - Package metadata: https://registry.npmjs.org/{package}
    - Download stats: https://api.npmjs.org/downloads/range/{start}:{end}/{package}
    """

    def __init__(self, context: EstimationContext | None = None) -> None:
        """Initialize the adapter.

        Args:
            context: Settings, logger and optional shared httpx client.
        """
        self._context = context or EstimationContext()

    @property
    def logger(self) -> logging.Logger:
        return self._context.logger

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._context.client is not None:
            return self._context.client
        return self._context.build_client()

    async def _get(self, url: str) -> httpx.Response:
        client = await self._get_client()
        try:
            return await client.get(url)
        finally:
            if self._context.client is None:
                await client.aclose()

    @staticmethod
    def _encode_name(name: str) -> str:
        # Scoped packages: @org/pkg -> @org%2Fpkg
        return name.replace("/", "%2F")

    @staticmethod
    def _parse(source: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(source, str(response.url), str(e)) from e

    def _registry_url(self, name: str) -> str:
        return f"{self._context.settings.registry_url}/{self._encode_name(name)}"

    async def _fetch_registry_document(self, name: str) -> Any:
        url = self._registry_url(name)
        self.logger.debug(f"Registry URL: {url}")
        response = await self._get(url)
        if response.status_code == 404:
            raise PackageNotFoundError(name)
        response.raise_for_status()
        return self._parse("registry", response)

    async def get_package_entry(self, name: str) -> PackageEntry:
        """Fetch the registry document for an NPM package as a PackageEntry.

        Args:
            name: Package name (supports scoped packages like @org/pkg).

        Raises:
            PackageNotFoundError: If the package doesn't exist.
        """
        data = await self._fetch_registry_document(name)
        if not isinstance(data, dict):
            raise MalformedResponseError("registry", self._registry_url(name), "expected a JSON object")
        return PackageEntry.model_validate({"name": data.get("name") or name, "repository": data.get("repository")})

    async def get_versions(self, name: str) -> dict[str, Any] | None:
        """Fetch the ``versions`` mapping of an NPM package."""
        data = await self._fetch_registry_document(name)
        versions = data.get("versions") if isinstance(data, dict) else None
        if not isinstance(versions, dict):
            return None
        self.logger.debug(f"Versions {len(versions)}")
        return versions

    async def get_download_series(
        self, name: str, start: date, end: date
    ) -> list[DownloadSample] | None:
        """Fetch daily downloads of an NPM package between two dates.

        Transport failures and unknown packages are logged and reported as a
        missing series; only a body that is not JSON raises.
        """
        url = (
            f"{self._context.settings.downloads_url}/range/"
            f"{start.isoformat()}:{end.isoformat()}/{self._encode_name(name)}"
        )
        self.logger.debug(f"Downloads URL: {url}")

        try:
            response = await self._get(url)
            if response.status_code == 404:
                self.logger.debug(f"No downloads recorded for {name}")
                return None
            response.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.error(f"Could not read downloads for {name} ({url}): {e}")
            return None

        result = self._parse("downloads", response)
        series = result.get("downloads") if isinstance(result, dict) else None
        if not isinstance(series, list):
            return None
        return [
            DownloadSample.model_validate(item) if isinstance(item, dict) else DownloadSample()
            for item in series
        ]
