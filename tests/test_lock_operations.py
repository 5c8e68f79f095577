"""Tests for the sync lease lock."""

from __future__ import annotations

import pytest

from wp_mirror_tool.mirror.core.client import DynamoDBClient
from wp_mirror_tool.mirror.core.lock_operations import acquire_lock, check_lock, release_lock
from wp_mirror_tool.mirror.exceptions import LockDeniedError

LOCK = "wp_updater_lock"


def test_acquire_and_check(client: DynamoDBClient) -> None:
    lock = acquire_lock(client, LOCK, ttl=60, owner="host-a")

    held = check_lock(client, LOCK)

    assert held is not None
    assert held.owner == "host-a"
    assert held.ttl == lock.ttl
    assert lock.ttl >= lock.acquired_at + 60


def test_second_owner_is_denied(client: DynamoDBClient) -> None:
    acquire_lock(client, LOCK, ttl=60, owner="host-a")

    with pytest.raises(LockDeniedError):
        acquire_lock(client, LOCK, ttl=60, owner="host-b")

    held = check_lock(client, LOCK)
    assert held is not None
    assert held.owner == "host-a"


def test_same_owner_can_reacquire(client: DynamoDBClient) -> None:
    acquire_lock(client, LOCK, ttl=60, owner="host-a")
    lock = acquire_lock(client, LOCK, ttl=120, owner="host-a")

    assert lock.owner == "host-a"


def test_release_frees_the_lock(client: DynamoDBClient) -> None:
    acquire_lock(client, LOCK, ttl=60, owner="host-a")

    result = release_lock(client, LOCK, "host-a")

    assert result["status"] == "released"
    assert check_lock(client, LOCK) is None
    acquire_lock(client, LOCK, ttl=60, owner="host-b")


def test_release_by_other_owner_keeps_the_lock(client: DynamoDBClient) -> None:
    acquire_lock(client, LOCK, ttl=60, owner="host-a")

    result = release_lock(client, LOCK, "host-b")

    assert result["status"] == "not_owned_or_already_released"
    held = check_lock(client, LOCK)
    assert held is not None
    assert held.owner == "host-a"


def test_release_is_idempotent(client: DynamoDBClient) -> None:
    assert release_lock(client, LOCK, "host-a")["released"] is True
    assert release_lock(client, LOCK, "host-a")["released"] is True


def test_expired_lease_can_be_taken_over(client: DynamoDBClient) -> None:
    # A negative lease is already in the past, like a crashed holder.
    acquire_lock(client, LOCK, ttl=-10, owner="crashed-host")

    assert check_lock(client, LOCK) is None
    lock = acquire_lock(client, LOCK, ttl=60, owner="host-b")
    assert lock.owner == "host-b"


def test_locks_are_independent(client: DynamoDBClient) -> None:
    acquire_lock(client, "first", ttl=60, owner="host-a")
    acquire_lock(client, "second", ttl=60, owner="host-b")

    assert check_lock(client, "first").owner == "host-a"
    assert check_lock(client, "second").owner == "host-b"
