"""Analyzers for fetching and scoring package signals."""

from pkgquality.analyzers.github import GitHubFetcher
from pkgquality.analyzers.pipeline import QualityPipeline
from pkgquality.analyzers.scorer import Scorer

__all__ = ["GitHubFetcher", "QualityPipeline", "Scorer"]
