"""
Version store commands for the mirror.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from ..constants import CORE_IDENTIFIER, DEFAULT_TABLE_NAME
from ..core.client import DynamoDBClient
from ..core.seed_operations import seed_versions
from ..core.version_operations import get_latest_version, get_versions
from ..exceptions import MirrorError
from ..logging_config import get_logger, setup_logging
from ..models import Category, VersionRecord
from ..utils import error_json, error_text, output_json, output_text

logger = get_logger(__name__)

CATEGORY_CHOICE = click.Choice([category.value for category in Category])


def _record_dict(record: VersionRecord) -> dict:
    return {
        "category": record.category.value,
        "identifier": record.identifier,
        "version": record.version,
        "url": record.source_url,
        "attributes": record.attributes,
    }


@click.command("versions")
@click.argument("category", type=CATEGORY_CHOICE)
@click.option("--identifier", help="Plugin file or theme slug (default: all)")
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
def versions_command(
    ctx: click.Context,
    category: str,
    identifier: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """List known versions for a category.

    Examples:

    \b
        # All stored core releases
        wp-mirror-tool versions core

    \b
        # All stored versions of one plugin
        wp-mirror-tool versions plugin --identifier akismet/akismet.php

    \b
    Output Format:
        Returns JSON:
        {"category": "plugin", "versions": [{"identifier": "...", "version": "5.1", ...}],
         "count": 1}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Listing {category} versions")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        records = sorted(
            get_versions(client, Category(category), identifier),
            key=lambda record: (record.identifier, record.version),
        )

        if text:
            output_text(f"{len(records)} {category} versions")
            for record in records:
                output_text(f"  {record.identifier} {record.version}")
        else:
            output_json(
                {
                    "category": category,
                    "versions": [_record_dict(record) for record in records],
                    "count": len(records),
                }
            )

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("latest")
@click.argument("category", type=CATEGORY_CHOICE)
@click.argument("identifier", required=False)
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
def latest_command(
    ctx: click.Context,
    category: str,
    identifier: str | None,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Show the latest known version of an artifact.

    Versions compare as plain strings, so "1.9" is reported over "1.10".

    Examples:

    \b
        # Latest core release
        wp-mirror-tool latest core

    \b
        # Latest version of a theme
        wp-mirror-tool latest theme twentytwentythree

    \b
    Output Format:
        Returns JSON:
        {"category": "core", "identifier": "wordpress", "version": "6.2.1", "url": "...",
         "attributes": {...}}
    """
    setup_logging(verbose)

    if identifier is None:
        if category != Category.CORE.value:
            raise click.UsageError(f"IDENTIFIER is required for {category}")
        identifier = CORE_IDENTIFIER

    try:
        logger.info(f"Getting latest {category} version for {identifier}")
        client = DynamoDBClient(table, region, profile, endpoint_url)
        record = get_latest_version(client, Category(category), identifier)

        if record is None:
            message = f"No {category} versions known for '{identifier}'"
            if text:
                click.echo(error_text(message, "Run 'wp-mirror-tool sync' first"), err=True)
            else:
                click.echo(error_json(message, "Run sync first", 1), err=True)
            ctx.exit(1)
            return

        if text:
            output_text(f"{record.identifier} {record.version}")
            output_text(f"URL: {record.source_url}")
        else:
            output_json(_record_dict(record))

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)


@click.command("seed")
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
def seed_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Populate the version store with sample core, plugin and theme records.

    Intended for local development against DynamoDB Local.

    Examples:

    \b
        wp-mirror-tool seed --endpoint-url http://localhost:8000

    \b
    Output Format:
        Returns JSON:
        {"seeded": 6}
    """
    setup_logging(verbose)

    try:
        client = DynamoDBClient(table, region, profile, endpoint_url)
        count = seed_versions(client)
        logger.info(f"Seeded {count} version records")

        if text:
            output_text(f"✅ Seeded {count} version records")
        else:
            output_json({"seeded": count})

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check table exists and AWS credentials"), err=True)
        else:
            click.echo(error_json(str(e), "Check table and credentials", 3), err=True)
        ctx.exit(3)
