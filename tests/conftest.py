"""Shared fixtures: a moto-backed mirror table, fake upstream and HTTP transport."""

from __future__ import annotations

import threading
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest
from moto import mock_aws

from wp_mirror_tool.mirror.core.client import DynamoDBClient
from wp_mirror_tool.mirror.core.table_operations import create_table
from wp_mirror_tool.mirror.exceptions import UpstreamUnavailableError
from wp_mirror_tool.mirror.models import Category, MirrorSettings, VersionRecord

TABLE_NAME = "wp-mirror-test"
REGION = "us-east-1"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("DYNAMODB_ENDPOINT_URL", raising=False)


@pytest.fixture
def aws() -> Iterator[None]:
    with mock_aws():
        yield


@pytest.fixture
def client(aws: None) -> DynamoDBClient:
    create_table(TABLE_NAME, region=REGION)
    return DynamoDBClient(TABLE_NAME, region=REGION)


@pytest.fixture
def settings(tmp_path: Path) -> MirrorSettings:
    return MirrorSettings(
        artifact_root=tmp_path / "public",
        lock_lease=60,
        sync_interval=1,
        workers=2,
    )


class StaticSource:
    """Upstream source serving fixed manifests; categories in `failing` raise."""

    def __init__(
        self,
        manifests: dict[Category, list[VersionRecord]] | None = None,
        failing: set[Category] | None = None,
    ):
        self.manifests = manifests or {}
        self.failing = failing or set()
        self.calls: list[Category] = []

    def fetch_manifest(self, category: Category) -> list[VersionRecord]:
        self.calls.append(category)
        if category in self.failing:
            raise UpstreamUnavailableError(f"{category.value} upstream is down")
        return list(self.manifests.get(category, []))


class ArtifactServer:
    """httpx transport serving artifact bodies by URL and counting requests."""

    def __init__(self, files: dict[str, bytes] | None = None):
        self.files = files or {}
        self.requests: Counter[str] = Counter()
        self._lock = threading.Lock()

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        with self._lock:
            self.requests[url] += 1
        if url not in self.files:
            return httpx.Response(404, content=b"not found")
        return httpx.Response(200, content=self.files[url])

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def artifact_server() -> ArtifactServer:
    return ArtifactServer()


@pytest.fixture
def http_client(artifact_server: ArtifactServer) -> Iterator[httpx.Client]:
    with artifact_server.client() as http_client:
        yield http_client


def core_record(version: str, **attributes: object) -> VersionRecord:
    return VersionRecord(
        category=Category.CORE,
        identifier="wordpress",
        version=version,
        source_url=f"https://downloads.example.org/release/wordpress-{version}.zip",
        attributes=dict(attributes),
    )


def plugin_record(identifier: str, version: str) -> VersionRecord:
    slug = identifier.split("/", 1)[0]
    return VersionRecord(
        category=Category.PLUGIN,
        identifier=identifier,
        version=version,
        source_url=f"https://downloads.example.org/plugin/{slug}.{version}.zip",
        attributes={"slug": slug},
    )


def theme_record(slug: str, version: str) -> VersionRecord:
    return VersionRecord(
        category=Category.THEME,
        identifier=slug,
        version=version,
        source_url=f"https://downloads.example.org/theme/{slug}.{version}.zip",
    )
