"""
Table management commands for the mirror.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Literal

import click

from ..constants import DEFAULT_TABLE_NAME
from ..core.table_operations import create_table
from ..exceptions import MirrorError, TableAlreadyExistsError
from ..logging_config import get_logger, setup_logging
from ..utils import error_json, error_text, output_json, output_text, validate_table_name

logger = get_logger(__name__)


@click.command("create-table")
@click.option(
    "--table",
    envvar="MIRROR_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--endpoint-url", envvar="DYNAMODB_ENDPOINT_URL", help="DynamoDB endpoint override")
@click.option(
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def create_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    endpoint_url: str | None,
    billing: str,
    text: bool,
    verbose: int,
) -> None:
    """Create the DynamoDB table backing the mirror.

    Creates a table with partition key (PK), sort key (SK) and TTL enabled
    on the 'ttl' attribute. The version store, download queue and sync lock
    all live in this one table.

    Examples:

    \b
        # Create table with default name
        wp-mirror-tool create-table

    \b
        # Create table against DynamoDB Local
        wp-mirror-tool create-table --endpoint-url http://localhost:8000

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "ACTIVE", "arn": "..."}
    """
    setup_logging(verbose)

    try:
        validate_table_name(table)
        logger.info(f"Creating table '{table}'")
        logger.debug(f"Region: {region}, Billing: {billing}")

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        table_desc = create_table(table, region, profile, endpoint_url, billing_mode)

        if text:
            output_text(f"✅ Table '{table}' created successfully")
            output_text(f"Status: {table_desc['TableStatus']}")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {
                    "table": table,
                    "status": table_desc["TableStatus"],
                    "arn": table_desc["TableArn"],
                }
            )

    except ValueError as e:
        if text:
            click.echo(error_text(str(e), "Choose a valid DynamoDB table name"), err=True)
        else:
            click.echo(error_json(str(e), "Choose a valid table name", 2), err=True)
        ctx.exit(2)

    except TableAlreadyExistsError as e:
        if text:
            click.echo(error_text(str(e), "Use a different table name or reuse it"), err=True)
        else:
            click.echo(error_json(str(e), "Use a different table name", 1), err=True)
        ctx.exit(1)

    except MirrorError as e:
        if text:
            click.echo(error_text(str(e), "Check AWS credentials and permissions"), err=True)
        else:
            click.echo(error_json(str(e), "Check AWS credentials and permissions", 3), err=True)
        ctx.exit(3)
