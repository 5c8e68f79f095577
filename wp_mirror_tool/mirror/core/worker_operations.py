"""
Download workers: pop an item, fetch it, store it, record it.

Workers are interchangeable and keep no state between items. A failed item
is logged and dropped; the next sync run re-enqueues it because the
artifact is still missing locally.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

import httpx

from ..constants import DOWNLOAD_CHUNK_SIZE, POP_BACKOFF_MAX
from ..exceptions import DownloadFailedError, QueueUnavailableError, StorageUnavailableError
from ..logging_config import get_logger
from ..models import DownloadItem, MirrorSettings, VersionRecord
from .artifact_operations import artifact_path, write_artifact
from .client import DynamoDBClient
from .queue_operations import blocking_pop
from .version_operations import get_version, put_version

logger = get_logger(__name__)


def fetch_artifact(http_client: httpx.Client, item: DownloadItem, path: Path) -> int:
    """
    Download an item's source URL to path, replacing any existing file.

    Args:
        http_client: HTTP client
        item: Item to download
        path: Destination path

    Returns:
        Number of bytes written

    Raises:
        DownloadFailedError: On transport errors, non-2xx status or write errors
    """
    try:
        with http_client.stream("GET", item.source_url) as response:
            if not response.is_success:
                raise DownloadFailedError(
                    f"bad status {response.status_code} for {item.source_url}"
                )
            return write_artifact(path, response.iter_bytes(DOWNLOAD_CHUNK_SIZE))
    except httpx.HTTPError as e:
        raise DownloadFailedError(f"error downloading {item.source_url}: {e}") from e
    except OSError as e:
        raise DownloadFailedError(f"error writing {path}: {e}") from e


def record_download(client: DynamoDBClient, item: DownloadItem) -> VersionRecord:
    """
    Upsert the version record of a downloaded item.

    An existing record keeps its content; only the fetch time is stamped.

    Raises:
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    record = get_version(client, item.category, item.identifier, item.version)
    if record is None:
        record = VersionRecord(
            category=item.category,
            identifier=item.identifier,
            version=item.version,
            source_url=item.source_url,
        )
    put_version(client, record, fetched_at=int(time.time()))
    return record


class DownloadWorker:
    """One download loop. The worker ID only appears in logs."""

    def __init__(
        self,
        worker_id: int,
        client: DynamoDBClient,
        http_client: httpx.Client,
        settings: MirrorSettings,
    ):
        self.worker_id = worker_id
        self.client = client
        self.http_client = http_client
        self.settings = settings

    def process(self, item: DownloadItem) -> Path:
        """
        Fetch, persist and record one item.

        Raises:
            DownloadFailedError: If the artifact cannot be fetched or written
            StorageUnavailableError: If the version store cannot be updated
        """
        try:
            path = artifact_path(
                self.settings.artifact_root, item.category, item.identifier, item.version
            )
        except ValueError as e:
            raise DownloadFailedError(str(e)) from e

        logger.info(
            f"Worker {self.worker_id}: Downloading {item.category.value} "
            f"{item.identifier} version {item.version}"
        )
        size = fetch_artifact(self.http_client, item, path)
        logger.info(f"Worker {self.worker_id}: Downloaded {item.source_url} to {path} ({size} bytes)")

        record_download(self.client, item)
        return path

    def run_once(
        self,
        timeout: float | None = None,
        stop_event: threading.Event | None = None,
    ) -> DownloadItem | None:
        """
        Wait for one item and handle it.

        Returns:
            The item handled (successfully or not), or None on timeout or stop

        Raises:
            QueueUnavailableError: If the queue cannot be read
        """
        item = blocking_pop(self.client, self.settings.queue_name, timeout, stop_event)
        if item is None:
            return None

        try:
            self.process(item)
        except DownloadFailedError as e:
            logger.error(f"Worker {self.worker_id}: Error downloading file: {e}")
        except StorageUnavailableError as e:
            logger.error(f"Worker {self.worker_id}: Error updating version store: {e}")
        return item

    def run(self, stop_event: threading.Event, idle_timeout: float | None = None) -> int:
        """
        Handle items until stopped.

        Args:
            stop_event: Set to stop after the current item
            idle_timeout: Also stop once the queue stayed empty this long

        Returns:
            Number of items handled
        """
        handled = 0
        while not stop_event.is_set():
            try:
                item = self.run_once(timeout=idle_timeout, stop_event=stop_event)
            except QueueUnavailableError as e:
                logger.error(f"Worker {self.worker_id}: Error popping from queue: {e}")
                stop_event.wait(POP_BACKOFF_MAX)
                continue
            if item is None:
                if idle_timeout is not None:
                    break
                continue
            handled += 1
        logger.debug(f"Worker {self.worker_id}: stopped after {handled} items")
        return handled


class WorkerPool:
    """Fixed pool of download workers sharing one store and HTTP client."""

    def __init__(
        self,
        client: DynamoDBClient,
        http_client: httpx.Client,
        settings: MirrorSettings,
    ):
        self.workers = [
            DownloadWorker(worker_id, client, http_client, settings)
            for worker_id in range(settings.workers)
        ]
        self.stop_event = threading.Event()
        self._executor: ThreadPoolExecutor | None = None
        self._futures: list[Future[int]] = []

    def start(self, idle_timeout: float | None = None) -> None:
        """Start every worker loop in its own thread."""
        self._executor = ThreadPoolExecutor(
            max_workers=len(self.workers), thread_name_prefix="download-worker"
        )
        self._futures = [
            self._executor.submit(worker.run, self.stop_event, idle_timeout)
            for worker in self.workers
        ]
        logger.info(f"Started {len(self.workers)} download workers")

    def stop(self) -> None:
        """Ask workers to stop once their current item is done."""
        self.stop_event.set()

    def join(self) -> int:
        """
        Wait for all workers to exit.

        Returns:
            Total number of items handled
        """
        if self._executor is None:
            return 0
        handled = sum(future.result() for future in self._futures)
        self._executor.shutdown(wait=True)
        self._executor = None
        self._futures = []
        return handled

    def drain(self, idle_timeout: float = 1.0) -> int:
        """
        Run until the queue has been empty for idle_timeout seconds.

        Returns:
            Total number of items handled
        """
        self.start(idle_timeout)
        return self.join()
