"""Runtime configuration.

Settings come from the environment (the CLI loads ``.env`` first). The
EstimationContext bundles everything a pipeline needs so nothing lives in
module-level state.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx

from pkgquality.errors import ConfigError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Settings:
    """Endpoints, credentials and transport options."""

    github_token: str | None = None
    log_level: str = "WARNING"
    timeout: float = 30.0
    registry_url: str = "https://registry.npmjs.org"
    downloads_url: str = "https://api.npmjs.org/downloads"
    github_url: str = "https://api.github.com"

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigError: If PKGQUALITY_TIMEOUT is not a positive number or
                PKGQUALITY_LOG_LEVEL is not a logging level name.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        log_level = env.get("PKGQUALITY_LOG_LEVEL", defaults.log_level).upper()
        # getLevelName maps known names to their number and anything else to a string
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"PKGQUALITY_LOG_LEVEL must be a logging level name, got {log_level!r}")

        raw_timeout = env.get("PKGQUALITY_TIMEOUT")
        timeout = defaults.timeout
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(f"PKGQUALITY_TIMEOUT must be a number, got {raw_timeout!r}") from e
            if timeout <= 0:
                raise ConfigError(f"PKGQUALITY_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(
            github_token=env.get("GITHUB_TOKEN") or None,
            log_level=log_level,
            timeout=timeout,
            registry_url=env.get("PKGQUALITY_REGISTRY_URL", defaults.registry_url).rstrip("/"),
            downloads_url=env.get("PKGQUALITY_DOWNLOADS_URL", defaults.downloads_url).rstrip("/"),
            github_url=env.get("PKGQUALITY_GITHUB_URL", defaults.github_url).rstrip("/"),
        )


@dataclass
class EstimationContext:
    """Collaborators handed to the pipeline at construction time.

    When ``client`` is None each fetcher opens a short-lived client per
    request; QualityPipeline used as an async context manager provides a
    shared one instead. Clients built here use ``transport`` when it is set.
    """

    settings: Settings = field(default_factory=Settings)
    client: httpx.AsyncClient | None = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("pkgquality"))
    clock: Callable[[], datetime] = utc_now
    transport: httpx.AsyncBaseTransport | None = None

    def build_client(self) -> httpx.AsyncClient:
        """Create a client; renamed repositories and packages answer with redirects."""
        return httpx.AsyncClient(
            timeout=self.settings.timeout,
            follow_redirects=True,
            transport=self.transport,
        )
