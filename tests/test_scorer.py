"""Tests for pkgquality.analyzers.scorer: per-signal formulas."""

import logging

import pytest

from pkgquality.analyzers.scorer import Scorer
from pkgquality.models.schemas import DownloadSample, Issue


@pytest.fixture
def scorer():
    return Scorer()


def issues(*states):
    return [Issue(state=state) for state in states]


class TestScoreIssues:
    def test_two_open_one_closed(self, scorer):
        assert scorer.score_issues(issues("open", "open", "closed")) == pytest.approx(1 / 3)

    def test_no_issues_scores_zero(self, scorer):
        assert scorer.score_issues([]) == 0.0

    def test_missing_issue_list_scores_zero(self, scorer):
        assert scorer.score_issues(None) == 0.0

    def test_all_closed_scores_one(self, scorer):
        assert scorer.score_issues(issues("closed", "closed")) == 1.0

    def test_all_open_scores_zero(self, scorer):
        assert scorer.score_issues(issues("open", "open")) == 0.0

    def test_unknown_state_counts_toward_total(self, scorer, caplog):
        with caplog.at_level(logging.WARNING):
            score = scorer.score_issues(issues("open", "merged", "closed", None))
        assert score == pytest.approx(0.75)
        assert "merged" in caplog.text

    def test_fewer_open_issues_scores_higher(self, scorer):
        worse = scorer.score_issues(issues("open", "open", "closed", "closed"))
        better = scorer.score_issues(issues("open", "closed", "closed", "closed"))
        assert better > worse


def test_count_issues(scorer):
    counts = scorer.count_issues(issues("open", "closed", "closed", "draft"))
    assert (counts.open, counts.closed, counts.other, counts.total) == (1, 2, 1, 4)


class TestScoreDownloads:
    def test_total_999(self, scorer):
        samples = [DownloadSample(downloads=n) for n in (500, 400, 99)]
        assert scorer.score_downloads(samples) == pytest.approx(1 - 1 / 999)

    def test_missing_series_scores_zero(self, scorer):
        assert scorer.score_downloads(None) == 0.0

    def test_zero_total_scores_zero(self, scorer):
        assert scorer.score_downloads([DownloadSample(downloads=0)] * 3) == 0.0

    def test_empty_series_scores_zero(self, scorer):
        assert scorer.score_downloads([]) == 0.0

    def test_single_download_scores_zero(self, scorer):
        assert scorer.score_downloads([DownloadSample(downloads=1)]) == 0.0


class TestScoreVersions:
    def test_four_versions(self, scorer):
        versions = {"1.0.0": {}, "1.0.1": {}, "1.1.0": {}, "2.0.0": {}}
        assert scorer.score_versions(versions) == 0.75

    def test_missing_versions_score_zero(self, scorer):
        assert scorer.score_versions(None) == 0.0

    def test_single_version_scores_zero(self, scorer):
        assert scorer.score_versions({"1.0.0": {}}) == 0.0

    def test_no_versions_scores_zero(self, scorer):
        assert scorer.score_versions({}) == 0.0

    def test_version_strings_are_not_validated(self, scorer):
        assert scorer.score_versions({"not-a-version": None, "": None}) == 0.5
