"""
Download queue commands for the mirror.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import DEFAULT_QUEUE_NAME, DEFAULT_TABLE_NAME
from ..core.client import DynamoDBClient
from ..core.queue_operations import get_queue_size, peek_queue
from ..exceptions import MirrorError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)


@click.command("queue-size")
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
def queue_size_command(
    ctx: click.Context,
    queue: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Count download items waiting in the queue.

    Examples:

    \b
        wp-mirror-tool queue-size

    \b
    Output Format:
        Returns JSON:
        {"queue": "download_queue", "size": 3}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Getting size of queue '{queue}'")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        result = get_queue_size(client, queue)

        if text:
            output_text(f"Queue '{queue}' has {result['size']} items")
        else:
            output_json(result)

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("queue-peek")
@click.option(
    "--count",
    type=int,
    default=10,
    help="Maximum number of items to peek (default: 10)",
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
def queue_peek_command(
    ctx: click.Context,
    count: int,
    queue: str,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Show the oldest download items without claiming them.

    Examples:

    \b
        # Peek at the next 5 downloads
        wp-mirror-tool queue-peek --count 5

    \b
    Output Format:
        Returns JSON:
        {"queue": "download_queue", "items": [
            {"category": "core", "identifier": "wordpress", "version": "6.2.1",
             "url": "https://...", "receipt": "..."}
        ], "count": 1}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Peeking at queue '{queue}' (count: {count})")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        result = peek_queue(client, queue, count)

        if text:
            output_text(f"Queue '{queue}': showing {result['count']} items")
            for item in result["items"]:
                output_text(f"  {item['category']} {item['identifier']} {item['version']}")
        else:
            output_json(result)

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
