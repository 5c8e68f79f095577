"""
Table management operations for the mirror store.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any, Literal

import boto3
from botocore.exceptions import ClientError

from ..constants import ATTR_PK, ATTR_SK, ATTR_TTL
from ..exceptions import StorageUnavailableError, TableAlreadyExistsError


def create_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    endpoint_url: str | None = None,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
) -> dict[str, Any]:
    """
    Create DynamoDB table for the version store, download queue and sync lock.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        endpoint_url: Endpoint override (optional)
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
        StorageUnavailableError: For other DynamoDB errors
    """
    session = boto3.Session(profile_name=profile, region_name=region)
    dynamodb = session.client("dynamodb", endpoint_url=endpoint_url)

    kwargs: dict[str, Any] = {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PK, "KeyType": "HASH"},  # Partition key
            {"AttributeName": ATTR_SK, "KeyType": "RANGE"},  # Sort key
        ],
        "AttributeDefinitions": [
            {"AttributeName": ATTR_PK, "AttributeType": "S"},
            {"AttributeName": ATTR_SK, "AttributeType": "S"},
        ],
        "BillingMode": billing_mode,
        "Tags": [
            {"Key": "ManagedBy", "Value": "wp-mirror-tool"},
            {"Key": "Purpose", "Value": "mirror"},
        ],
    }
    if billing_mode == "PROVISIONED":
        kwargs["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    try:
        response = dynamodb.create_table(**kwargs)
        dynamodb.get_waiter("table_exists").wait(TableName=table_name)

        # Expired locks are also filtered by condition, TTL only reclaims space
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": ATTR_TTL},
        )

        return response["TableDescription"]  # type: ignore[no-any-return]

    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{table_name}' already exists")
        raise StorageUnavailableError(f"Failed to create table '{table_name}': {e}") from e
