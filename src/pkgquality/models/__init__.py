"""Data models and schemas."""

from pkgquality.models.schemas import (
    DownloadSample,
    Issue,
    IssueCounts,
    PackageEntry,
    RepoDescriptor,
    RepoLocation,
)

__all__ = [
    "DownloadSample",
    "Issue",
    "IssueCounts",
    "PackageEntry",
    "RepoDescriptor",
    "RepoLocation",
]
