"""Pydantic models for package quality data."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class RepoDescriptor(BaseModel):
    """Where the package source lives, as published in the registry."""

    type: str | None = None
    url: str | None = None


class PackageEntry(BaseModel):
    """Input to the pipeline: a package name plus its repository descriptor.

    Extra keys are ignored so a raw registry document validates as an entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    repository: RepoDescriptor | None = None

    @field_validator("repository", mode="before")
    @classmethod
    def _drop_shorthand_repository(cls, value: Any) -> Any:
        # "github:owner/repo" strings carry no type, so they cannot be located
        if value is not None and not isinstance(value, (dict, RepoDescriptor)):
            return None
        return value


class RepoLocation(BaseModel):
    """Owner/name pair addressing a repository on the hosting API."""

    valid: bool = False
    owner: str = ""
    name: str = ""

    @classmethod
    def invalid(cls) -> "RepoLocation":
        return cls(valid=False)

    @property
    def api_path(self) -> str:
        """Path of the repository on the hosting API."""
        return f"/repos/{self.owner}/{self.name}"


class Issue(BaseModel):
    """A single issue from the hosting issue list."""

    state: str | None = None

    @field_validator("state", mode="before")
    @classmethod
    def _unknown_state(cls, value: Any) -> Any:
        # Non-string states are scored like any other unexpected state
        return value if isinstance(value, str) else None


class IssueCounts(BaseModel):
    """Open/closed classification of an issue list."""

    open: int = 0
    closed: int = 0
    other: int = 0

    @property
    def total(self) -> int:
        return self.open + self.closed + self.other


class DownloadSample(BaseModel):
    """One day of download counts."""

    downloads: int = 0
    day: str | None = None

    @field_validator("downloads", mode="before")
    @classmethod
    def _count_or_zero(cls, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return 0

    @field_validator("day", mode="before")
    @classmethod
    def _day_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None
