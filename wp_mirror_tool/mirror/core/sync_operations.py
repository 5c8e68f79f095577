"""
Sync coordinator: discovers upstream versions and enqueues missing artifacts.

A run walks IDLE -> ACQUIRING_LOCK -> (LOCK_DENIED | DIFFING -> ENQUEUING ->
RELEASING_LOCK) -> IDLE. Store, upstream and bad-record failures are logged and
recorded in the returned report; anything unexpected still releases the
lock and is logged by the loop, which keeps running. Missing artifacts are computed
from local presence only, so anything dropped along the way is found again
by the next run.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
import time

from ..exceptions import (
    LockDeniedError,
    QueueUnavailableError,
    StorageUnavailableError,
    UpstreamUnavailableError,
)
from ..logging_config import get_logger
from ..models import (
    Category,
    CategoryReport,
    DownloadItem,
    MirrorSettings,
    SyncPhase,
    SyncReport,
    VersionRecord,
)
from ..utils import generate_run_owner
from .artifact_operations import artifact_exists
from .client import DynamoDBClient
from .lock_operations import acquire_lock, release_lock
from .queue_operations import push_download
from .upstream_operations import UpstreamSource
from .version_operations import get_latest_version, get_versions, list_identifiers, put_version

logger = get_logger(__name__)

CATEGORIES = (Category.CORE, Category.PLUGIN, Category.THEME)


def discover_versions(
    client: DynamoDBClient,
    source: UpstreamSource,
    category: Category,
    report: CategoryReport,
) -> None:
    """
    Record every upstream version the store does not know yet.

    Raises:
        UpstreamUnavailableError: If the manifest cannot be fetched
        StorageUnavailableError: If stored versions cannot be listed
    """
    manifest = source.fetch_manifest(category)
    known = {record.key for record in get_versions(client, category)}

    for record in manifest:
        if record.key in known:
            continue
        try:
            put_version(client, record)
        except (ValueError, StorageUnavailableError) as e:
            logger.error(f"Error adding {category.value} {record.identifier} {record.version}: {e}")
            report.errors.append(str(e))
            continue
        logger.info(f"Adding new {category.value} version: {record.identifier} {record.version}")
        report.discovered += 1


def _candidates(
    client: DynamoDBClient, category: Category, report: CategoryReport
) -> list[VersionRecord]:
    if category is Category.CORE:
        return get_versions(client, Category.CORE)

    candidates = []
    for identifier in sorted(list_identifiers(client, category)):
        try:
            latest = get_latest_version(client, category, identifier)
        except (StorageUnavailableError, KeyError, ValueError) as e:
            logger.error(f"Error getting latest version for {category.value} {identifier}: {e}")
            report.errors.append(str(e))
            continue
        if latest is not None:
            candidates.append(latest)
    return candidates


def find_missing(
    client: DynamoDBClient,
    category: Category,
    settings: MirrorSettings,
    report: CategoryReport,
) -> list[VersionRecord]:
    """
    Find stored versions whose artifact is not present locally.

    Core considers every stored release; plugins and themes only the latest
    version of each identifier.

    Raises:
        StorageUnavailableError: If identifiers or core versions cannot be listed
    """
    missing = []
    for record in _candidates(client, category, report):
        try:
            present = artifact_exists(
                settings.artifact_root, record.category, record.identifier, record.version
            )
        except ValueError as e:
            logger.warning(f"Skipping {category.value} {record.identifier}: {e}")
            report.errors.append(str(e))
            continue
        if not present:
            missing.append(record)
    return missing


def enqueue_missing(
    client: DynamoDBClient,
    records: list[VersionRecord],
    settings: MirrorSettings,
    report: CategoryReport,
) -> None:
    """Push one download item per missing artifact, dropping items that fail."""
    for record in records:
        try:
            push_download(client, settings.queue_name, DownloadItem.from_record(record))
        except QueueUnavailableError as e:
            logger.error(f"Error adding item to download queue: {e}")
            report.errors.append(str(e))
            continue
        report.enqueued += 1


def run_sync(
    client: DynamoDBClient,
    source: UpstreamSource,
    settings: MirrorSettings,
    owner: str | None = None,
) -> SyncReport:
    """
    Run one sync pass under the sync lock.

    Args:
        client: DynamoDB client
        source: Upstream manifest source
        settings: Mirror settings
        owner: Lock owner ID (default: unique per run)

    Returns:
        Report of the run; phase is LOCK_DENIED if another run held the lock,
        and error is set if the store could not be reached to take it
    """
    report = SyncReport(owner=owner or generate_run_owner(), started_at=int(time.time()))

    report.phase = SyncPhase.ACQUIRING_LOCK
    try:
        acquire_lock(client, settings.lock_name, settings.lock_lease, report.owner)
    except LockDeniedError:
        logger.info("Another instance is already running. Skipping this run.")
        report.phase = SyncPhase.LOCK_DENIED
        report.finished_at = int(time.time())
        return report
    except StorageUnavailableError as e:
        logger.error(f"Error acquiring lock: {e}")
        report.error = str(e)
        report.phase = SyncPhase.IDLE
        report.finished_at = int(time.time())
        return report

    logger.info(f"Starting sync run as {report.owner}")
    try:
        report.phase = SyncPhase.DIFFING
        missing: dict[Category, list[VersionRecord]] = {}
        for category in CATEGORIES:
            category_report = report.categories.setdefault(category, CategoryReport())
            try:
                discover_versions(client, source, category, category_report)
            except (UpstreamUnavailableError, StorageUnavailableError, KeyError, ValueError) as e:
                logger.error(f"Error updating {category.value} versions: {e}")
                category_report.errors.append(str(e))

            try:
                missing[category] = find_missing(client, category, settings, category_report)
            except (StorageUnavailableError, KeyError, ValueError) as e:
                logger.error(f"Error listing stored {category.value} versions: {e}")
                category_report.errors.append(str(e))
                missing[category] = []
            category_report.missing = len(missing[category])

        report.phase = SyncPhase.ENQUEUING
        for category, records in missing.items():
            enqueue_missing(client, records, settings, report.categories[category])
        logger.info(f"Added {report.enqueued} items to download queue")
    finally:
        report.phase = SyncPhase.RELEASING_LOCK
        try:
            release_lock(client, settings.lock_name, report.owner)
        except StorageUnavailableError as e:
            logger.error(f"Error releasing lock, lease will expire on its own: {e}")

    report.phase = SyncPhase.IDLE
    report.finished_at = int(time.time())
    logger.info("Finished sync run")
    return report


def run_sync_loop(
    client: DynamoDBClient,
    source: UpstreamSource,
    settings: MirrorSettings,
    stop_event: threading.Event,
) -> None:
    """
    Run sync passes on a fixed interval until stop_event is set.

    The interval wait is the only place the loop suspends.
    """
    while not stop_event.is_set():
        try:
            run_sync(client, source, settings)
        except Exception:
            logger.exception("Sync run failed, retrying after the interval")
        if stop_event.wait(settings.sync_interval):
            break
