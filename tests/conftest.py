"""Shared fixtures: a fake set of upstream APIs behind httpx.MockTransport."""

from datetime import datetime, timezone

import httpx
import pytest

from pkgquality.config import EstimationContext, Settings

FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

GITHUB_HOST = "api.github.com"
DOWNLOADS_HOST = "api.npmjs.org"
REGISTRY_HOST = "registry.npmjs.org"


def issue_list(open_count: int, closed_count: int) -> list[dict]:
    return [{"state": "open"}] * open_count + [{"state": "closed"}] * closed_count


def download_series(*counts: int) -> dict:
    return {"downloads": [{"downloads": count, "day": "2026-01-01"} for count in counts]}


def registry_document(version_count: int) -> dict:
    versions = {f"1.0.{i}": {"version": f"1.0.{i}"} for i in range(version_count)}
    return {"name": "left-pad", "versions": versions}


class FakeUpstream:
    """Answers issue, download and registry requests from canned payloads.

    A payload can be a JSON-able object, an ``httpx.Response`` returned as is,
    or an exception raised from the transport. Paths in ``moved`` answer with
    a 301 to their new URL.
    """

    def __init__(self) -> None:
        self.issues: object = issue_list(1, 3)
        self.downloads: object = download_series(400, 599)
        self.registry: object = registry_document(4)
        self.requests: list[httpx.Request] = []
        self.moved: dict[str, str] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path in self.moved:
            return httpx.Response(301, headers={"Location": self.moved[request.url.path]})
        payload = {
            GITHUB_HOST: self.issues,
            DOWNLOADS_HOST: self.downloads,
            REGISTRY_HOST: self.registry,
        }[request.url.host]
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    def calls(self, host: str) -> int:
        return sum(1 for request in self.requests if request.url.host == host)

    def last(self, host: str) -> httpx.Request:
        return [request for request in self.requests if request.url.host == host][-1]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(github_token="test-token")


@pytest.fixture
def context(upstream: FakeUpstream, settings: Settings) -> EstimationContext:
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    return EstimationContext(settings=settings, client=client, clock=lambda: FIXED_NOW)


@pytest.fixture
def transport_context(upstream: FakeUpstream, settings: Settings) -> EstimationContext:
    """Context without a client: fetchers and pipelines build their own on the fake transport."""
    return EstimationContext(
        settings=settings,
        transport=httpx.MockTransport(upstream.handler),
        clock=lambda: FIXED_NOW,
    )
