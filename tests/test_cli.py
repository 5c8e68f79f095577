"""Tests for the wp-mirror-tool command line."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from tests.conftest import REGION, TABLE_NAME
from wp_mirror_tool.cli import main
from wp_mirror_tool.mirror.core.client import DynamoDBClient
from wp_mirror_tool.mirror.core.lock_operations import acquire_lock
from wp_mirror_tool.mirror.core.queue_operations import push_download
from wp_mirror_tool.mirror.models import Category, DownloadItem

STORE = ["--table", TABLE_NAME, "--region", REGION]


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(main, list(args))


def _json(result: Result) -> Any:
    return json.loads(result.stdout.strip().splitlines()[-1])


def test_version_option(runner: CliRunner) -> None:
    result = _invoke(runner, "--version")

    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_create_table(runner: CliRunner, aws: None) -> None:
    result = _invoke(runner, "create-table", *STORE)

    assert result.exit_code == 0
    assert _json(result)["table"] == TABLE_NAME

    again = _invoke(runner, "create-table", *STORE)
    assert again.exit_code == 1


def test_create_table_invalid_name(runner: CliRunner, aws: None) -> None:
    result = _invoke(runner, "create-table", "--table", "no", "--region", REGION)

    assert result.exit_code == 2


def test_seed_and_list_versions(runner: CliRunner, client: DynamoDBClient) -> None:
    seeded = _invoke(runner, "seed", *STORE)
    assert seeded.exit_code == 0
    assert _json(seeded) == {"seeded": 6}

    result = _invoke(runner, "versions", "core", *STORE)

    assert result.exit_code == 0
    payload = _json(result)
    assert payload["count"] == 2
    assert [entry["version"] for entry in payload["versions"]] == ["6.1.3", "6.2.1"]


def test_versions_for_one_identifier(runner: CliRunner, client: DynamoDBClient) -> None:
    _invoke(runner, "seed", *STORE)

    result = _invoke(runner, "versions", "plugin", "--identifier", "akismet/akismet.php", *STORE)

    assert [entry["identifier"] for entry in _json(result)["versions"]] == ["akismet/akismet.php"]


def test_latest(runner: CliRunner, client: DynamoDBClient) -> None:
    _invoke(runner, "seed", *STORE)

    core = _invoke(runner, "latest", "core", *STORE)
    theme = _invoke(runner, "latest", "theme", "twentytwentythree", *STORE)

    assert core.exit_code == 0
    assert _json(core)["version"] == "6.2.1"
    assert _json(theme)["version"] == "1.1"


def test_latest_unknown_identifier(runner: CliRunner, client: DynamoDBClient) -> None:
    result = _invoke(runner, "latest", "theme", "missing", *STORE)

    assert result.exit_code == 1


def test_latest_requires_identifier_outside_core(runner: CliRunner, client: DynamoDBClient) -> None:
    result = _invoke(runner, "latest", "plugin", *STORE)

    assert result.exit_code == 2


def test_lock_check(runner: CliRunner, client: DynamoDBClient) -> None:
    free = _invoke(runner, "lock-check", *STORE)
    assert free.exit_code == 0
    assert _json(free)["locked"] is False

    acquire_lock(client, "wp_updater_lock", 60, "host-a")
    held = _invoke(runner, "lock-check", *STORE)
    assert held.exit_code == 4
    assert _json(held)["owner"] == "host-a"

    released = _invoke(runner, "lock-release", "--owner", "host-a", *STORE)
    assert released.exit_code == 0
    assert _invoke(runner, "lock-check", *STORE).exit_code == 0


def test_queue_size_and_peek(runner: CliRunner, client: DynamoDBClient) -> None:
    item = DownloadItem(Category.THEME, "twentytwentytwo", "1.4", "https://d.example.org/t.zip")
    push_download(client, "download_queue", item)

    size = _invoke(runner, "queue-size", *STORE)
    peek = _invoke(runner, "queue-peek", "--count", "5", *STORE)

    assert _json(size) == {"queue": "download_queue", "size": 1}
    assert _json(peek)["items"][0]["identifier"] == "twentytwentytwo"


def test_sync_skipped_while_lock_held(
    runner: CliRunner, client: DynamoDBClient, tmp_path: Path
) -> None:
    acquire_lock(client, "wp_updater_lock", 60, "host-a")

    result = _invoke(runner, "sync", "--artifact-root", str(tmp_path), *STORE)

    assert result.exit_code == 0
    assert _json(result)["outcome"] == "lock_denied"


def test_workers_drain_empty_queue(
    runner: CliRunner, client: DynamoDBClient, tmp_path: Path
) -> None:
    result = _invoke(
        runner,
        "workers",
        "--drain",
        "--idle-timeout",
        "0.2",
        "--workers",
        "2",
        "--artifact-root",
        str(tmp_path),
        *STORE,
    )

    assert result.exit_code == 0
    assert _json(result) == {"workers": 2, "handled": 0}


def test_missing_table_is_a_store_error(runner: CliRunner, aws: None) -> None:
    assert _invoke(runner, "queue-size", *STORE).exit_code == 3
    assert _invoke(runner, "sync", *STORE).exit_code == 3
