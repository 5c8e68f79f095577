"""
Sync coordinator and download worker commands for the mirror.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
from pathlib import Path

import click

from ..constants import (
    DEFAULT_ARTIFACT_ROOT,
    DEFAULT_LOCK_LEASE,
    DEFAULT_LOCK_NAME,
    DEFAULT_QUEUE_NAME,
    DEFAULT_SYNC_INTERVAL,
    DEFAULT_TABLE_NAME,
    DEFAULT_WORKERS,
    WP_CORE_API_URL,
    WP_PLUGINS_API_URL,
    WP_THEMES_API_URL,
)
from ..core.client import DynamoDBClient
from ..core.sync_operations import run_sync, run_sync_loop
from ..core.upstream_operations import WordPressOrgSource
from ..core.worker_operations import WorkerPool
from ..exceptions import MirrorError
from ..logging_config import get_logger, setup_logging
from ..models import MirrorSettings
from ..utils import create_http_client, error_json, error_text, output_json, output_text

logger = get_logger(__name__)


def _connect(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
) -> DynamoDBClient:
    """Create the process-wide store handle, exiting if the store is unreachable."""
    client = DynamoDBClient(table, region, profile, endpoint_url)
    try:
        client.ping()
    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
    return client


@click.command("sync")
@click.option("--loop", is_flag=True, help="Keep running, one pass per interval")
@click.option(
    "--interval",
    type=int,
    envvar="MIRROR_SYNC_INTERVAL",
    default=DEFAULT_SYNC_INTERVAL,
    help=f"Seconds between passes with --loop (default: {DEFAULT_SYNC_INTERVAL})",
)
@click.option(
    "--lease",
    type=int,
    envvar="MIRROR_LOCK_LEASE",
    default=DEFAULT_LOCK_LEASE,
    help=f"Sync lock lease in seconds (default: {DEFAULT_LOCK_LEASE})",
)
@click.option("--lock-name", envvar="MIRROR_LOCK_NAME", default=DEFAULT_LOCK_NAME, help="Lock name")
@click.option(
    "--artifact-root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="MIRROR_ARTIFACT_ROOT",
    default=DEFAULT_ARTIFACT_ROOT,
    help="Local artifact directory",
)
@click.option("--queue", envvar="MIRROR_QUEUE", default=DEFAULT_QUEUE_NAME, help="Queue name")
@click.option("--core-url", envvar="MIRROR_CORE_URL", default=WP_CORE_API_URL, help="Core manifest URL")
@click.option(
    "--plugins-url", envvar="MIRROR_PLUGINS_URL", default=WP_PLUGINS_API_URL, help="Plugin manifest URL"
)
@click.option(
    "--themes-url", envvar="MIRROR_THEMES_URL", default=WP_THEMES_API_URL, help="Theme manifest URL"
)
@click.option(
    "--table",
    envvar="MIRROR_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="DYNAMODB_ENDPOINT_URL", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def sync_command(
    ctx: click.Context,
    loop: bool,
    interval: int,
    lease: int,
    lock_name: str,
    artifact_root: Path,
    queue: str,
    core_url: str,
    plugins_url: str,
    themes_url: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Discover new upstream versions and enqueue missing artifacts.

    Runs under the sync lock; if another instance holds it the pass is
    skipped. With --loop a pass runs every --interval seconds until
    interrupted.

    Examples:

    \b
        # One pass
        wp-mirror-tool sync

    \b
        # Hourly, as a daemon
        wp-mirror-tool sync --loop -v

    \b
    Output Format:
        Returns JSON (single pass only):
        {"outcome": "completed", "owner": "...", "categories": {"core": {
            "discovered": 1, "missing": 1, "enqueued": 1, "errors": []}, ...}}
    """
    setup_logging(verbose)

    settings = MirrorSettings(
        artifact_root=artifact_root,
        queue_name=queue,
        lock_name=lock_name,
        lock_lease=lease,
        sync_interval=interval,
    )
    client = _connect(ctx, table, region, profile, endpoint_url, text)

    with create_http_client() as http_client:
        source = WordPressOrgSource(http_client, core_url, plugins_url, themes_url)

        if loop:
            stop_event = threading.Event()
            try:
                run_sync_loop(client, source, settings, stop_event)
            except KeyboardInterrupt:
                stop_event.set()
                logger.info("Interrupted, stopping sync loop")
            return

        report = run_sync(client, source, settings)

    if report.store_unavailable:
        if text:
            click.echo(error_text(report.error, "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(report.error, "Check table and credentials", 3), err=True)
        ctx.exit(3)
        return

    if text:
        if report.lock_denied:
            output_text("⏭️  Another instance is syncing, run skipped")
        else:
            output_text(f"✅ Sync finished, {report.enqueued} downloads enqueued")
            for category, category_report in report.categories.items():
                output_text(
                    f"  {category.value}: {category_report.discovered} new, "
                    f"{category_report.missing} missing, {len(category_report.errors)} errors"
                )
    else:
        output_json(report.to_dict())


@click.command("workers")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    envvar="MIRROR_WORKERS",
    default=DEFAULT_WORKERS,
    help=f"Number of concurrent download workers (default: {DEFAULT_WORKERS})",
)
@click.option(
    "--drain",
    is_flag=True,
    help="Exit once the queue has stayed empty for --idle-timeout seconds",
)
@click.option("--idle-timeout", type=float, default=5.0, help="Idle seconds before --drain exits")
@click.option(
    "--artifact-root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="MIRROR_ARTIFACT_ROOT",
    default=DEFAULT_ARTIFACT_ROOT,
    help="Local artifact directory",
)
@click.option("--queue", envvar="MIRROR_QUEUE", default=DEFAULT_QUEUE_NAME, help="Queue name")
@click.option(
    "--table",
    envvar="MIRROR_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="DYNAMODB_ENDPOINT_URL", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def workers_command(
    ctx: click.Context,
    workers: int,
    drain: bool,
    idle_timeout: float,
    artifact_root: Path,
    queue: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Run the download worker pool.

    Each worker pops an item, downloads it into the artifact root and
    records it in the version store. Failed downloads are dropped and
    picked up again by the next sync pass.

    Examples:

    \b
        # Run 5 workers until interrupted
        wp-mirror-tool workers -v

    \b
        # Work off the current queue and exit
        wp-mirror-tool workers --drain --workers 2

    \b
    Output Format:
        Returns JSON on exit:
        {"workers": 2, "handled": 3}
    """
    setup_logging(verbose)

    settings = MirrorSettings(artifact_root=artifact_root, queue_name=queue, workers=workers)
    client = _connect(ctx, table, region, profile, endpoint_url, text)

    with create_http_client() as http_client:
        pool = WorkerPool(client, http_client, settings)
        pool.start(idle_timeout if drain else None)
        try:
            handled = pool.join()
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping workers after current downloads")
            pool.stop()
            handled = pool.join()

    if text:
        output_text(f"✅ {workers} workers handled {handled} downloads")
    else:
        output_json({"workers": workers, "handled": handled})


@click.command("run")
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    envvar="MIRROR_WORKERS",
    default=DEFAULT_WORKERS,
    help=f"Number of concurrent download workers (default: {DEFAULT_WORKERS})",
)
@click.option(
    "--interval",
    type=int,
    envvar="MIRROR_SYNC_INTERVAL",
    default=DEFAULT_SYNC_INTERVAL,
    help=f"Seconds between sync passes (default: {DEFAULT_SYNC_INTERVAL})",
)
@click.option(
    "--lease",
    type=int,
    envvar="MIRROR_LOCK_LEASE",
    default=DEFAULT_LOCK_LEASE,
    help=f"Sync lock lease in seconds (default: {DEFAULT_LOCK_LEASE})",
)
@click.option("--lock-name", envvar="MIRROR_LOCK_NAME", default=DEFAULT_LOCK_NAME, help="Lock name")
@click.option(
    "--artifact-root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="MIRROR_ARTIFACT_ROOT",
    default=DEFAULT_ARTIFACT_ROOT,
    help="Local artifact directory",
)
@click.option("--queue", envvar="MIRROR_QUEUE", default=DEFAULT_QUEUE_NAME, help="Queue name")
@click.option("--core-url", envvar="MIRROR_CORE_URL", default=WP_CORE_API_URL, help="Core manifest URL")
@click.option(
    "--plugins-url", envvar="MIRROR_PLUGINS_URL", default=WP_PLUGINS_API_URL, help="Plugin manifest URL"
)
@click.option(
    "--themes-url", envvar="MIRROR_THEMES_URL", default=WP_THEMES_API_URL, help="Theme manifest URL"
)
@click.option(
    "--table",
    envvar="MIRROR_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="DYNAMODB_ENDPOINT_URL", help="DynamoDB endpoint override")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def run_command(
    ctx: click.Context,
    workers: int,
    interval: int,
    lease: int,
    lock_name: str,
    artifact_root: Path,
    queue: str,
    core_url: str,
    plugins_url: str,
    themes_url: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Run the sync loop and the worker pool in one process.

    The two only talk through the version store and the download queue.
    Runs until interrupted.

    Examples:

    \b
        wp-mirror-tool run -v --workers 5 --artifact-root /srv/mirror
    """
    setup_logging(verbose)

    settings = MirrorSettings(
        artifact_root=artifact_root,
        queue_name=queue,
        lock_name=lock_name,
        lock_lease=lease,
        sync_interval=interval,
        workers=workers,
    )
    client = _connect(ctx, table, region, profile, endpoint_url, text)

    with create_http_client() as http_client:
        source = WordPressOrgSource(http_client, core_url, plugins_url, themes_url)
        pool = WorkerPool(client, http_client, settings)
        pool.start()
        try:
            run_sync_loop(client, source, settings, pool.stop_event)
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping sync loop and workers")
        finally:
            pool.stop()
            handled = pool.join()

    if text:
        output_text(f"✅ Stopped, {handled} downloads handled")
    else:
        output_json({"workers": workers, "handled": handled})
