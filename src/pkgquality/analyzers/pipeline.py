"""Short-circuiting quality estimation pipeline for packages."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any

import httpx
from pydantic import ValidationError

from pkgquality.adapters.base import BaseAdapter, locate_repo
from pkgquality.adapters.npm import NpmAdapter
from pkgquality.analyzers.github import GitHubFetcher
from pkgquality.analyzers.scorer import Scorer
from pkgquality.config import EstimationContext
from pkgquality.errors import InvalidEntryError, MalformedResponseError, PackageNotFoundError
from pkgquality.models.schemas import PackageEntry

DOWNLOAD_WINDOW = timedelta(days=365)


@dataclass
class EstimationRun:
    """State carried from one stage to the next during a single estimate."""

    entry: PackageEntry
    quality: float = 0.0
    versions: dict[str, Any] | None = field(default=None, repr=False)


Stage = Callable[[EstimationRun], Awaitable[float]]


class QualityPipeline:
    """Estimates package quality as the product of three signals.

    Pipeline stages:
    1. Repository: issue-resolution ratio on GitHub
    2. Downloads: total downloads over the last year
    3. Registry: fetch the published versions
    4. Versions: number of published versions

    Every stage costs at least one request, so as soon as the running
    product reaches 0 the remaining stages are skipped.
    """

    def __init__(
        self,
        context: EstimationContext | None = None,
        adapter: BaseAdapter | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            context: Settings, logger, clock and optional shared httpx client.
            adapter: Registry adapter. Defaults to NpmAdapter.
        """
        self.context = context or EstimationContext()
        self._custom_adapter = adapter
        self._http_client: httpx.AsyncClient | None = None
        self.scorer = Scorer(self.context.logger)
        self._bind(self.context)

    def _bind(self, context: EstimationContext) -> None:
        self.adapter = self._custom_adapter or NpmAdapter(context)
        self.github = GitHubFetcher(context)

    @property
    def logger(self) -> logging.Logger:
        return self.context.logger

    async def __aenter__(self) -> "QualityPipeline":
        """Set up shared HTTP client unless the context already carries one."""
        if self.context.client is None:
            self._http_client = self.context.build_client()
            self._bind(replace(self.context, client=self._http_client))
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._bind(self.context)

    @property
    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("repository", self._estimate_repository),
            ("downloads", self._estimate_downloads),
            ("registry", self._fetch_versions),
            ("versions", self._estimate_versions),
        ]

    async def estimate(self, entry: PackageEntry | Mapping[str, Any] | None) -> float:
        """Estimate the quality of a package.

        Args:
            entry: Package name and repository descriptor.

        Returns:
            Consolidated quality in [0, 1].

        Raises:
            InvalidEntryError: If the entry is missing or has no name.
            MalformedResponseError: If the issue or download endpoint answered
                with a body that is not JSON.
        """
        run = EstimationRun(entry=self._validate_entry(entry))

        for name, stage in self.stages:
            run.quality = await stage(run)
            self.logger.debug(f"{run.entry.name}: {name} consolidated quality {run.quality}")
            if run.quality <= 0:
                break

        return run.quality

    async def estimate_many(
        self, entries: Iterable[PackageEntry | Mapping[str, Any]]
    ) -> list[tuple[str | None, float | BaseException]]:
        """Estimate several packages concurrently.

        Returns:
            One ``(name, quality or exception)`` pair per entry, in order.
        """
        entries = list(entries)
        results = await asyncio.gather(
            *(self.estimate(entry) for entry in entries),
            return_exceptions=True,
        )
        return [(self._entry_name(entry), result) for entry, result in zip(entries, results)]

    def _validate_entry(self, raw: PackageEntry | Mapping[str, Any] | None) -> PackageEntry:
        entry = raw
        if isinstance(raw, Mapping):
            try:
                entry = PackageEntry.model_validate(dict(raw))
            except ValidationError as e:
                raise InvalidEntryError(f"{self._describe(raw)} is not a valid entry: {e}") from e
        if not isinstance(entry, PackageEntry) or not entry.name:
            self.logger.error(f"null entry or entry without name: {self._describe(raw)}")
            raise InvalidEntryError(f"{self._describe(raw)} is null or has no name")
        return entry

    @staticmethod
    def _describe(entry: Any) -> str:
        if isinstance(entry, PackageEntry):
            return entry.model_dump_json(exclude_none=True)
        return json.dumps(entry, default=str)

    @staticmethod
    def _entry_name(entry: PackageEntry | Mapping[str, Any]) -> str | None:
        if isinstance(entry, PackageEntry):
            return entry.name
        return entry.get("name") if isinstance(entry, Mapping) else None

    async def _estimate_repository(self, run: EstimationRun) -> float:
        location = locate_repo(run.entry.repository, self.logger)
        if not location.valid:
            self.logger.debug(f"Invalid or null repo: {run.entry.repository}")
            return 0.0
        issues = await self.github.fetch_issues(location)
        return self.scorer.score_issues(issues)

    async def _estimate_downloads(self, run: EstimationRun) -> float:
        end = self.context.clock().date()
        start = end - DOWNLOAD_WINDOW
        samples = await self.adapter.get_download_series(run.entry.name, start, end)
        return run.quality * self.scorer.score_downloads(samples)

    async def _fetch_versions(self, run: EstimationRun) -> float:
        # Registry failures of any kind only remove the version signal
        try:
            run.versions = await self.adapter.get_versions(run.entry.name)
        except PackageNotFoundError:
            self.logger.debug(f"{run.entry.name} not found in registry")
            return 0.0
        except (httpx.HTTPError, MalformedResponseError) as e:
            self.logger.error(f"Could not read registry for {run.entry.name}: {e}")
            return 0.0
        return run.quality

    async def _estimate_versions(self, run: EstimationRun) -> float:
        return run.quality * self.scorer.score_versions(run.versions)
