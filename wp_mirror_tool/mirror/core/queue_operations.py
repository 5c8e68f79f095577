"""
Download queue operations.

A flat FIFO in one partition. Sort keys are zero-padded microsecond
timestamps, so ascending key order is push order:

    PK = queue:<queue>    SK = <timestamp_micros:020d>#<uuid>

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
import time
import uuid
from typing import Any

from boto3.dynamodb.conditions import Key

from ..constants import (
    ATTR_PK,
    ATTR_SK,
    ATTR_VALUE,
    POP_BACKOFF_BASE,
    POP_BACKOFF_FACTOR,
    POP_BACKOFF_MAX,
    PREFIX_QUEUE,
)
from ..exceptions import ConditionFailedError, QueueUnavailableError, StorageUnavailableError
from ..logging_config import get_logger
from ..models import DownloadItem, ItemType
from ..utils import format_key
from .client import DynamoDBClient

logger = get_logger(__name__)


def push_download(client: DynamoDBClient, queue_name: str, item: DownloadItem) -> dict[str, Any]:
    """
    Append a download item to the queue. Never blocks on consumers.

    Args:
        client: DynamoDB client
        queue_name: Name of the queue
        item: Work item to append

    Returns:
        Dictionary with queue name, receipt (SK) and timestamp

    Raises:
        QueueUnavailableError: If DynamoDB cannot be reached
    """
    now = time.time()
    timestamp_micros = int(now * 1_000_000)
    sk = f"{timestamp_micros:020d}#{uuid.uuid4()}"
    pk = format_key(PREFIX_QUEUE, queue_name)

    record: dict[str, Any] = {
        ATTR_PK: pk,
        ATTR_SK: sk,
        ATTR_VALUE: item.to_json(),
        "type": ItemType.QUEUE.value,
        "created_at": int(now),
    }

    try:
        client.put_item(record)
    except StorageUnavailableError as e:
        raise QueueUnavailableError(f"Failed to push to queue '{queue_name}': {e}") from e

    return {"queue": queue_name, "receipt": sk, "timestamp": int(now)}


def pop_download(client: DynamoDBClient, queue_name: str) -> DownloadItem | None:
    """
    Claim the oldest item in the queue without waiting.

    The claim is a conditional delete, so concurrent poppers never receive
    the same item. Losing a race simply moves on to the next item.

    Args:
        client: DynamoDB client
        queue_name: Name of the queue

    Returns:
        The claimed item, or None if the queue is empty

    Raises:
        QueueUnavailableError: If DynamoDB cannot be reached
    """
    pk = format_key(PREFIX_QUEUE, queue_name)

    try:
        while True:
            items = client.query(
                key_condition_expression=Key(ATTR_PK).eq(pk),
                limit=1,
                consistent_read=True,
            )
            if not items:
                return None

            head = items[0]
            try:
                response = client.delete_item(
                    {ATTR_PK: pk, ATTR_SK: head[ATTR_SK]},
                    condition_expression="attribute_exists(PK)",
                    return_values="ALL_OLD",
                )
            except ConditionFailedError:
                continue

            claimed = response.get("Attributes") or head
            try:
                return DownloadItem.from_json(claimed[ATTR_VALUE])
            except (KeyError, ValueError) as e:
                logger.warning(f"Dropping malformed queue item {head[ATTR_SK]}: {e}")
    except StorageUnavailableError as e:
        raise QueueUnavailableError(f"Failed to pop from queue '{queue_name}': {e}") from e


def blocking_pop(
    client: DynamoDBClient,
    queue_name: str,
    timeout: float | None = None,
    stop_event: threading.Event | None = None,
) -> DownloadItem | None:
    """
    Wait until an item can be claimed from the queue.

    DynamoDB has no blocking read, so the queue is polled with exponential
    backoff that resets after every claimed item.

    Args:
        client: DynamoDB client
        queue_name: Name of the queue
        timeout: Give up after this many seconds (None waits forever)
        stop_event: Give up as soon as this event is set

    Returns:
        The claimed item, or None on timeout or stop

    Raises:
        QueueUnavailableError: If DynamoDB cannot be reached
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    attempt = 0

    while True:
        item = pop_download(client, queue_name)
        if item is not None:
            return item
        if stop_event is not None and stop_event.is_set():
            return None

        sleep_time = min(POP_BACKOFF_BASE * (POP_BACKOFF_FACTOR**attempt), POP_BACKOFF_MAX)
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return None
            sleep_time = min(sleep_time, remaining)

        if stop_event is not None:
            if stop_event.wait(sleep_time):
                return None
        else:
            time.sleep(sleep_time)
        attempt += 1


def peek_queue(client: DynamoDBClient, queue_name: str, count: int = 10) -> dict[str, Any]:
    """
    Peek at the oldest items without claiming them.

    Args:
        client: DynamoDB client
        queue_name: Name of the queue
        count: Maximum number of items to return

    Returns:
        Dictionary with queue name, items and count
    """
    pk = format_key(PREFIX_QUEUE, queue_name)
    items = client.query(key_condition_expression=Key(ATTR_PK).eq(pk), limit=count)

    parsed_items = []
    for item in items:
        download = DownloadItem.from_json(item[ATTR_VALUE])
        parsed_items.append(
            {
                "category": download.category.value,
                "identifier": download.identifier,
                "version": download.version,
                "url": download.source_url,
                "receipt": item[ATTR_SK],
            }
        )

    return {"queue": queue_name, "items": parsed_items, "count": len(parsed_items)}


def get_queue_size(client: DynamoDBClient, queue_name: str) -> dict[str, Any]:
    """
    Get the number of items waiting in a queue.

    Args:
        client: DynamoDB client
        queue_name: Queue name

    Returns:
        Dictionary with queue name and size count
    """
    pk = format_key(PREFIX_QUEUE, queue_name)
    count = client.query_count(Key(ATTR_PK).eq(pk))
    return {"queue": queue_name, "size": count}
