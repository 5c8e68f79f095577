"""Tests for the download queue."""

from __future__ import annotations

import threading
import time

import pytest

from tests.conftest import core_record, plugin_record, theme_record
from wp_mirror_tool.mirror.core.client import DynamoDBClient
from wp_mirror_tool.mirror.core.queue_operations import (
    blocking_pop,
    get_queue_size,
    peek_queue,
    pop_download,
    push_download,
)
from wp_mirror_tool.mirror.exceptions import QueueUnavailableError
from wp_mirror_tool.mirror.models import DownloadItem

QUEUE = "download_queue"


def _items() -> list[DownloadItem]:
    return [
        DownloadItem.from_record(core_record("6.2.1")),
        DownloadItem.from_record(plugin_record("akismet/akismet.php", "5.1")),
        DownloadItem.from_record(theme_record("twentytwentythree", "1.1")),
    ]


def test_pop_is_fifo(client: DynamoDBClient) -> None:
    items = _items()
    for item in items:
        push_download(client, QUEUE, item)

    popped = [pop_download(client, QUEUE) for _ in items]

    assert popped == items
    assert pop_download(client, QUEUE) is None


def test_pop_empty_queue(client: DynamoDBClient) -> None:
    assert pop_download(client, QUEUE) is None


def test_queues_are_independent(client: DynamoDBClient) -> None:
    push_download(client, "other", _items()[0])

    assert pop_download(client, QUEUE) is None
    assert pop_download(client, "other") == _items()[0]


def test_blocking_pop_times_out(client: DynamoDBClient) -> None:
    started = time.monotonic()

    assert blocking_pop(client, QUEUE, timeout=0.3) is None
    assert time.monotonic() - started >= 0.3


def test_blocking_pop_returns_immediately_when_ready(client: DynamoDBClient) -> None:
    item = _items()[1]
    push_download(client, QUEUE, item)

    assert blocking_pop(client, QUEUE, timeout=5) == item


def test_blocking_pop_wakes_on_push(client: DynamoDBClient) -> None:
    item = _items()[2]
    timer = threading.Timer(0.2, push_download, args=(client, QUEUE, item))
    timer.start()
    try:
        assert blocking_pop(client, QUEUE, timeout=10) == item
    finally:
        timer.join()


def test_blocking_pop_stops_on_event(client: DynamoDBClient) -> None:
    stop_event = threading.Event()
    timer = threading.Timer(0.2, stop_event.set)
    timer.start()
    started = time.monotonic()
    try:
        assert blocking_pop(client, QUEUE, stop_event=stop_event) is None
    finally:
        timer.join()
    assert time.monotonic() - started < 5


def test_size_and_peek(client: DynamoDBClient) -> None:
    items = _items()
    for item in items:
        push_download(client, QUEUE, item)

    assert get_queue_size(client, QUEUE) == {"queue": QUEUE, "size": 3}

    peeked = peek_queue(client, QUEUE, count=2)
    assert peeked["count"] == 2
    assert [entry["identifier"] for entry in peeked["items"]] == [
        "wordpress",
        "akismet/akismet.php",
    ]
    assert get_queue_size(client, QUEUE)["size"] == 3


def test_push_to_missing_table(aws: None) -> None:
    missing = DynamoDBClient("no-such-table", region="us-east-1")

    with pytest.raises(QueueUnavailableError):
        push_download(missing, QUEUE, _items()[0])


def test_pop_from_missing_table(aws: None) -> None:
    missing = DynamoDBClient("no-such-table", region="us-east-1")

    with pytest.raises(QueueUnavailableError):
        pop_download(missing, QUEUE)
