"""
Sync lock commands for the mirror.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_LOCK_NAME, DEFAULT_TABLE_NAME
from ..core.client import DynamoDBClient
from ..core.lock_operations import check_lock, release_lock
from ..exceptions import MirrorError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)


@click.command("lock-check")
@click.option("--lock-name", envvar="MIRROR_LOCK_NAME", default=DEFAULT_LOCK_NAME, help="Lock name")
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
def lock_check_command(
    ctx: click.Context,
    lock_name: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Show whether a sync run currently holds the lock.

    Exit code 4 when the lock is held, 0 when it is free.

    Examples:

    \b
        # Check the sync lock
        wp-mirror-tool lock-check

    \b
    Output Format:
        Returns JSON:
        {"lock": "wp_updater_lock", "locked": true, "owner": "host-123-ab12cd34", "ttl": 1731696300}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Checking lock '{lock_name}'")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        lock = check_lock(client, lock_name)

        if lock is None:
            if text:
                output_text(f"🔓 Lock '{lock_name}' is free")
            else:
                output_json({"lock": lock_name, "locked": False})
            return

        if text:
            output_text(f"🔒 Lock '{lock_name}' held by {lock.owner}")
            output_text(f"Expires: {lock.ttl}")
        else:
            output_json(
                {
                    "lock": lock_name,
                    "locked": True,
                    "owner": lock.owner,
                    "ttl": lock.ttl,
                    "acquired_at": lock.acquired_at,
                }
            )
        ctx.exit(4)

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("lock-release")
@click.option("--owner", required=True, help="Owner ID holding the lock (see lock-check)")
@click.option("--lock-name", envvar="MIRROR_LOCK_NAME", default=DEFAULT_LOCK_NAME, help="Lock name")
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
def lock_release_command(
    ctx: click.Context,
    owner: str,
    lock_name: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Release the sync lock on behalf of its owner.

    Only needed after a crash when waiting for the lease to expire is not an
    option. Releasing is idempotent and never removes another owner's lease.

    Examples:

    \b
        wp-mirror-tool lock-release --owner host-123-ab12cd34

    \b
    Output Format:
        Returns JSON:
        {"lock": "wp_updater_lock", "released": true, "status": "released"}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Releasing lock '{lock_name}' as {owner}")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        result = release_lock(client, lock_name, owner)

        if text:
            output_text(f"✅ Lock '{lock_name}': {result['status']}")
        else:
            output_json(result)

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
