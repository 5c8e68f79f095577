"""Tests for download workers and the worker pool."""

from __future__ import annotations

import httpx
import pytest

from tests.conftest import ArtifactServer, core_record, plugin_record, theme_record
from wp_mirror_tool.mirror.core.artifact_operations import artifact_path
from wp_mirror_tool.mirror.core.client import DynamoDBClient
from wp_mirror_tool.mirror.core.queue_operations import get_queue_size, push_download
from wp_mirror_tool.mirror.core.version_operations import get_version, put_version
from wp_mirror_tool.mirror.core.worker_operations import DownloadWorker, WorkerPool
from wp_mirror_tool.mirror.exceptions import DownloadFailedError
from wp_mirror_tool.mirror.models import Category, DownloadItem, MirrorSettings


def _worker(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> DownloadWorker:
    return DownloadWorker(0, client, http_client, settings)


def test_process_stores_artifact_and_record(
    client: DynamoDBClient,
    http_client: httpx.Client,
    artifact_server: ArtifactServer,
    settings: MirrorSettings,
) -> None:
    record = plugin_record("akismet/akismet.php", "5.1")
    artifact_server.files[record.source_url] = b"akismet zip"

    path = _worker(client, http_client, settings).process(DownloadItem.from_record(record))

    assert path == settings.artifact_root / "plugin" / "akismet-5.1.zip"
    assert path.read_bytes() == b"akismet zip"
    assert get_version(client, Category.PLUGIN, "akismet/akismet.php", "5.1") == record


def test_process_keeps_existing_record(
    client: DynamoDBClient,
    http_client: httpx.Client,
    artifact_server: ArtifactServer,
    settings: MirrorSettings,
) -> None:
    record = core_record("6.2.1", php_version="5.6.20")
    put_version(client, record)
    artifact_server.files[record.source_url] = b"core zip"

    _worker(client, http_client, settings).process(DownloadItem.from_record(record))

    stored = get_version(client, Category.CORE, "wordpress", "6.2.1")
    assert stored.attributes == {"php_version": "5.6.20"}


def test_process_overwrites_existing_artifact(
    client: DynamoDBClient,
    http_client: httpx.Client,
    artifact_server: ArtifactServer,
    settings: MirrorSettings,
) -> None:
    record = theme_record("twentytwentythree", "1.1")
    path = artifact_path(settings.artifact_root, record.category, record.identifier, record.version)
    path.parent.mkdir(parents=True)
    path.write_bytes(b"stale")
    artifact_server.files[record.source_url] = b"fresh"

    _worker(client, http_client, settings).process(DownloadItem.from_record(record))

    assert path.read_bytes() == b"fresh"


def test_process_bad_status_fails_without_record(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> None:
    record = theme_record("missing-theme", "1.0")

    with pytest.raises(DownloadFailedError):
        _worker(client, http_client, settings).process(DownloadItem.from_record(record))

    assert get_version(client, Category.THEME, "missing-theme", "1.0") is None
    assert not (settings.artifact_root / "theme" / "missing-theme-1.0.zip").exists()


def test_process_rejects_unsafe_path(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> None:
    item = DownloadItem(Category.THEME, "..", "1.0", "https://downloads.example.org/x.zip")

    with pytest.raises(DownloadFailedError):
        _worker(client, http_client, settings).process(item)


def test_run_once_drops_failed_item(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> None:
    item = DownloadItem.from_record(theme_record("missing-theme", "1.0"))
    push_download(client, settings.queue_name, item)

    handled = _worker(client, http_client, settings).run_once(timeout=1)

    assert handled == item
    assert get_queue_size(client, settings.queue_name)["size"] == 0


def test_run_once_times_out_on_empty_queue(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> None:
    assert _worker(client, http_client, settings).run_once(timeout=0.2) is None


def test_pool_drains_queue_once_per_item(
    client: DynamoDBClient,
    http_client: httpx.Client,
    artifact_server: ArtifactServer,
    settings: MirrorSettings,
) -> None:
    records = [
        core_record("6.2.1"),
        plugin_record("contact-form-7/wp-contact-form-7.php", "5.7.2"),
        theme_record("twentytwentytwo", "1.4"),
    ]
    for record in records:
        artifact_server.files[record.source_url] = record.version.encode()
        push_download(client, settings.queue_name, DownloadItem.from_record(record))

    handled = WorkerPool(client, http_client, settings).drain(idle_timeout=0.5)

    assert handled == 3
    assert get_queue_size(client, settings.queue_name)["size"] == 0
    assert artifact_server.requests == {record.source_url: 1 for record in records}
    for record in records:
        path = artifact_path(
            settings.artifact_root, record.category, record.identifier, record.version
        )
        assert path.read_bytes() == record.version.encode()


def test_pool_stops_on_request(
    client: DynamoDBClient, http_client: httpx.Client, settings: MirrorSettings
) -> None:
    pool = WorkerPool(client, http_client, settings)
    pool.start()
    pool.stop()

    assert pool.join() == 0
