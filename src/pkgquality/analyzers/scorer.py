"""Per-signal quality formulas.

Every signal scores in [0, 1). A missing or empty signal scores exactly 0:
unknown is treated as worst case, which also covers the zero-count cases
where ``1 - 1/n`` would divide by zero.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pkgquality.models.schemas import DownloadSample, Issue, IssueCounts


class Scorer:
    """Turns fetched signals into quality factors."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def count_issues(self, issues: Iterable[Issue]) -> IssueCounts:
        """Classify issues by state. Unknown states are logged and kept."""
        counts = IssueCounts()
        for issue in issues:
            if issue.state == "open":
                counts.open += 1
            elif issue.state == "closed":
                counts.closed += 1
            else:
                self.logger.warning(f"Invalid issue state {issue.state}")
                counts.other += 1
        return counts

    def score_issues(self, issues: list[Issue] | None) -> float:
        """Share of issues that are not open; 0 when there are none."""
        if not issues:
            self.logger.debug("No issues to score")
            return 0.0
        counts = self.count_issues(issues)
        self.logger.debug(f"Issues: {counts.open} / {counts.total} open")
        return 1 - counts.open / counts.total

    def score_downloads(self, samples: list[DownloadSample] | None) -> float:
        if samples is None:
            return 0.0
        total = sum(sample.downloads for sample in samples)
        self.logger.debug(f"Downloads {total}")
        return self._inverse_score(total)

    def score_versions(self, versions: Mapping[str, Any] | None) -> float:
        if versions is None:
            return 0.0
        self.logger.debug(f"Versions {len(versions)}")
        return self._inverse_score(len(versions))

    @staticmethod
    def _inverse_score(count: int) -> float:
        # 1 - 1/n approaches 1 as n grows; n <= 0 means no signal
        if count <= 0:
            return 0.0
        return 1 - 1 / count
