"""
Lease lock operations for sync coordination.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from typing import Any

from ..constants import (
    ATTR_CREATED_AT,
    ATTR_METADATA,
    ATTR_PK,
    ATTR_SK,
    ATTR_TTL,
    ATTR_TYPE,
    ATTR_UPDATED_AT,
    ATTR_VALUE,
    PREFIX_LOCK,
)
from ..exceptions import ConditionFailedError, LockDeniedError
from ..models import ItemType, Lock
from ..utils import format_key
from .client import DynamoDBClient


def acquire_lock(
    client: DynamoDBClient,
    lock_name: str,
    ttl: int,
    owner: str,
) -> Lock:
    """
    Acquire a lease lock, once, without waiting.

    The lease is never renewed. DynamoDB TTL deletion is lazy, so an expired
    lease is treated as free by the write condition itself.

    Args:
        client: DynamoDB client
        lock_name: Lock name
        ttl: Lease duration in seconds
        owner: Owner ID

    Returns:
        Acquired lock

    Raises:
        LockDeniedError: If a live lease is held by another owner
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    pk = format_key(PREFIX_LOCK, lock_name)
    sk = pk
    timestamp = int(time.time())
    ttl_timestamp = timestamp + ttl

    item = {
        ATTR_PK: pk,
        ATTR_SK: sk,
        ATTR_VALUE: owner,
        ATTR_TYPE: ItemType.LOCK.value,
        ATTR_TTL: ttl_timestamp,
        ATTR_METADATA: {"acquired_at": timestamp, "owner": owner},
        ATTR_CREATED_AT: timestamp,
        ATTR_UPDATED_AT: timestamp,
    }

    # Allow lock acquisition if:
    # 1. Lock doesn't exist (attribute_not_exists)
    # 2. Previous lease has expired (ttl < now)
    # 3. Lock is owned by the same owner (value = :owner) - idempotent
    condition = "attribute_not_exists(PK) OR #ttl < :now OR #v = :owner"

    try:
        client.put_item(
            item,
            condition_expression=condition,
            expression_attribute_names={"#v": "value", "#ttl": "ttl"},
            expression_attribute_values={":owner": owner, ":now": timestamp},
        )
    except ConditionFailedError:
        raise LockDeniedError(
            f"Lock '{lock_name}' is held by another owner. "
            f"Wait for the lease to expire or release it with "
            f"'wp-mirror-tool lock-release --owner <owner>'."
        )

    return Lock(name=lock_name, owner=owner, ttl=ttl_timestamp, acquired_at=timestamp)


def release_lock(client: DynamoDBClient, lock_name: str, owner: str) -> dict[str, Any]:
    """
    Release a lease lock. This operation is idempotent.

    Args:
        client: DynamoDB client
        lock_name: Name of the lock to release
        owner: Owner ID (must match lock holder)

    Returns:
        Lock release confirmation

    Raises:
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    pk = format_key(PREFIX_LOCK, lock_name)
    sk = pk

    try:
        client.delete_item(
            {ATTR_PK: pk, ATTR_SK: sk},
            condition_expression="#value = :owner",
            expression_attribute_names={"#value": "value"},
            expression_attribute_values={":owner": owner},
        )
        return {"lock": lock_name, "released": True, "status": "released"}
    except ConditionFailedError:
        # Expired and re-acquired by someone else, or already gone.
        return {"lock": lock_name, "released": True, "status": "not_owned_or_already_released"}


def check_lock(client: DynamoDBClient, lock_name: str) -> Lock | None:
    """
    Check if a live lease is held.

    Args:
        client: DynamoDB client
        lock_name: Name of the lock

    Returns:
        Lock if held and unexpired, None if free
    """
    pk = format_key(PREFIX_LOCK, lock_name)
    sk = pk

    item = client.get_item({ATTR_PK: pk, ATTR_SK: sk}, consistent_read=True)

    if not item or int(item.get(ATTR_TTL, 0)) < int(time.time()):
        return None

    return Lock(
        name=lock_name,
        owner=item[ATTR_VALUE],
        ttl=int(item[ATTR_TTL]),
        acquired_at=int(item.get(ATTR_METADATA, {}).get("acquired_at", 0)),
    )
