"""
Type models for mirror operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_ARTIFACT_ROOT,
    DEFAULT_LOCK_LEASE,
    DEFAULT_LOCK_NAME,
    DEFAULT_QUEUE_NAME,
    DEFAULT_SYNC_INTERVAL,
    DEFAULT_WORKERS,
)


class Category(Enum):
    """Artifact categories mirrored from upstream."""

    CORE = "core"
    PLUGIN = "plugin"
    THEME = "theme"


class ItemType(Enum):
    """Types of items stored in the mirror table."""

    VERSION = "version"
    LOCK = "lock"
    QUEUE = "queue"


class SyncPhase(Enum):
    """States a sync coordinator run moves through."""

    IDLE = "idle"
    ACQUIRING_LOCK = "acquiring_lock"
    LOCK_DENIED = "lock_denied"
    DIFFING = "diffing"
    ENQUEUING = "enqueuing"
    RELEASING_LOCK = "releasing_lock"


@dataclass(frozen=True)
class VersionRecord:
    """One known version of one artifact."""

    category: Category
    identifier: str
    version: str
    source_url: str
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> tuple[Category, str, str]:
        return (self.category, self.identifier, self.version)

    def to_json(self) -> str:
        return json.dumps(
            {
                "category": self.category.value,
                "identifier": self.identifier,
                "version": self.version,
                "source_url": self.source_url,
                "attributes": self.attributes,
            },
            sort_keys=True,
        )

    @classmethod
    def from_json(cls, raw: str) -> "VersionRecord":
        data = json.loads(raw)
        return cls(
            category=Category(data["category"]),
            identifier=data["identifier"],
            version=data["version"],
            source_url=data["source_url"],
            attributes=data.get("attributes") or {},
        )


@dataclass(frozen=True)
class DownloadItem:
    """A unit of queued download work."""

    category: Category
    identifier: str
    version: str
    source_url: str

    @classmethod
    def from_record(cls, record: VersionRecord) -> "DownloadItem":
        return cls(
            category=record.category,
            identifier=record.identifier,
            version=record.version,
            source_url=record.source_url,
        )

    def to_json(self) -> str:
        return json.dumps(
            {
                "category": self.category.value,
                "identifier": self.identifier,
                "version": self.version,
                "url": self.source_url,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "DownloadItem":
        data = json.loads(raw)
        return cls(
            category=Category(data["category"]),
            identifier=data["identifier"],
            version=data["version"],
            source_url=data["url"],
        )


@dataclass
class MirrorSettings:
    """Runtime settings shared by the sync coordinator and download workers."""

    artifact_root: Path = Path(DEFAULT_ARTIFACT_ROOT)
    queue_name: str = DEFAULT_QUEUE_NAME
    lock_name: str = DEFAULT_LOCK_NAME
    lock_lease: int = DEFAULT_LOCK_LEASE
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    workers: int = DEFAULT_WORKERS


@dataclass
class Lock:
    """Lease-based lock model for sync coordination."""

    name: str
    owner: str
    ttl: int
    acquired_at: int
    type: ItemType = ItemType.LOCK


@dataclass
class CategoryReport:
    """Per-category results of one sync run."""

    discovered: int = 0
    missing: int = 0
    enqueued: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class SyncReport:
    """Outcome of one sync coordinator run."""

    phase: SyncPhase = SyncPhase.IDLE
    owner: str = ""
    started_at: int = 0
    finished_at: int = 0
    categories: dict[Category, CategoryReport] = field(default_factory=dict)
    error: str = ""

    @property
    def lock_denied(self) -> bool:
        return self.phase is SyncPhase.LOCK_DENIED

    @property
    def store_unavailable(self) -> bool:
        return bool(self.error)

    @property
    def enqueued(self) -> int:
        return sum(report.enqueued for report in self.categories.values())

    def to_dict(self) -> dict[str, Any]:
        if self.store_unavailable:
            outcome = "store_unavailable"
        elif self.lock_denied:
            outcome = "lock_denied"
        else:
            outcome = "completed"
        return {
            "outcome": outcome,
            "error": self.error or None,
            "owner": self.owner,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "categories": {
                category.value: {
                    "discovered": report.discovered,
                    "missing": report.missing,
                    "enqueued": report.enqueued,
                    "errors": report.errors,
                }
                for category, report in self.categories.items()
            },
        }
