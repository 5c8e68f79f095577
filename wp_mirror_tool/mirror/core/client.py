"""
DynamoDB client wrapper with error handling.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import threading
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    ConditionFailedError,
    StorageUnavailableError,
    TableNotFoundError,
)


class DynamoDBClient:
    """DynamoDB client wrapper with error handling.

    One instance is created per process and shared by the coordinator and all
    workers. boto3 sessions and resources are not thread-safe, so each thread
    lazily builds its own session and table resource.
    """

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        profile: str | None = None,
        endpoint_url: str | None = None,
    ):
        """
        Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            endpoint_url: Endpoint override, e.g. DynamoDB Local (optional)
        """
        self.table_name = table_name
        self.region = region
        self.profile = profile
        self.endpoint_url = endpoint_url
        self._local = threading.local()

    @property
    def table(self) -> Any:
        table = getattr(self._local, "table", None)
        if table is None:
            session = boto3.Session(profile_name=self.profile, region_name=self.region)
            dynamodb = session.resource("dynamodb", endpoint_url=self.endpoint_url)
            table = dynamodb.Table(self.table_name)
            self._local.table = table
        return table

    def ping(self) -> None:
        """
        Verify the table is reachable.

        Raises:
            TableNotFoundError: If the table does not exist
            StorageUnavailableError: If DynamoDB cannot be reached
        """
        try:
            self.table.meta.client.describe_table(TableName=self.table_name)
        except ClientError as e:
            self._handle_error(e)
        except BotoCoreError as e:
            raise StorageUnavailableError(f"DynamoDB unreachable: {e}") from e

    def put_item(
        self,
        item: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Put item with optional condition.

        Args:
            item: Item to put
            condition_expression: Optional condition expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            StorageUnavailableError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Item": item}
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        if expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = expression_attribute_names
        if expression_attribute_values:
            kwargs["ExpressionAttributeValues"] = expression_attribute_values
        return self._call("put_item", **kwargs)

    def update_item(
        self,
        key: dict[str, Any],
        update_expression: str,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        condition_expression: str | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any]:
        """
        Update item attributes in place, creating the item if needed.

        Args:
            key: Key of the item
            update_expression: Update expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values
            condition_expression: Optional condition expression
            return_values: Optional ReturnValues setting (e.g. 'ALL_NEW')

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            StorageUnavailableError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Key": key, "UpdateExpression": update_expression}
        if expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = expression_attribute_names
        if expression_attribute_values:
            kwargs["ExpressionAttributeValues"] = expression_attribute_values
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        if return_values:
            kwargs["ReturnValues"] = return_values
        return self._call("update_item", **kwargs)

    def get_item(self, key: dict[str, Any], consistent_read: bool = False) -> dict[str, Any] | None:
        """
        Get item by key.

        Args:
            key: Key to retrieve
            consistent_read: Use a strongly consistent read

        Returns:
            Item if found, None otherwise

        Raises:
            StorageUnavailableError: For DynamoDB errors
        """
        response = self._call("get_item", Key=key, ConsistentRead=consistent_read)
        return response.get("Item")

    def delete_item(
        self,
        key: dict[str, Any],
        condition_expression: str | None = None,
        expression_attribute_names: dict[str, str] | None = None,
        expression_attribute_values: dict[str, Any] | None = None,
        return_values: str | None = None,
    ) -> dict[str, Any]:
        """
        Delete item with optional condition.

        Args:
            key: Key to delete
            condition_expression: Optional condition expression
            expression_attribute_names: Optional expression attribute names
            expression_attribute_values: Optional expression attribute values
            return_values: Optional ReturnValues setting (e.g. 'ALL_OLD')

        Returns:
            Response from DynamoDB

        Raises:
            ConditionFailedError: If condition fails
            StorageUnavailableError: For other DynamoDB errors
        """
        kwargs: dict[str, Any] = {"Key": key}
        if condition_expression:
            kwargs["ConditionExpression"] = condition_expression
        if expression_attribute_names:
            kwargs["ExpressionAttributeNames"] = expression_attribute_names
        if expression_attribute_values:
            kwargs["ExpressionAttributeValues"] = expression_attribute_values
        if return_values:
            kwargs["ReturnValues"] = return_values
        return self._call("delete_item", **kwargs)

    def query(
        self,
        key_condition_expression: Any,
        limit: int | None = None,
        scan_index_forward: bool = True,
        consistent_read: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Query items by key condition.

        Without a limit all result pages are followed.

        Args:
            key_condition_expression: Key condition expression
            limit: Maximum number of items to return
            scan_index_forward: Ascending sort key order if True
            consistent_read: Use a strongly consistent read

        Returns:
            List of items

        Raises:
            StorageUnavailableError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition_expression,
            "ScanIndexForward": scan_index_forward,
            "ConsistentRead": consistent_read,
        }
        if limit:
            kwargs["Limit"] = limit

        items: list[dict[str, Any]] = []
        while True:
            response = self._call("query", **kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if limit or not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def query_count(self, key_condition_expression: Any) -> int:
        """
        Count items matching a key condition without fetching them.

        Args:
            key_condition_expression: Key condition expression

        Returns:
            Number of matching items

        Raises:
            StorageUnavailableError: For DynamoDB errors
        """
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": key_condition_expression,
            "Select": "COUNT",
        }
        count = 0
        while True:
            response = self._call("query", **kwargs)
            count += int(response.get("Count", 0))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return count
            kwargs["ExclusiveStartKey"] = last_key

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return getattr(self.table, operation)(**kwargs)  # type: ignore[no-any-return]
        except ClientError as e:
            self._handle_error(e)
            raise  # For type checker
        except BotoCoreError as e:
            raise StorageUnavailableError(f"DynamoDB unreachable: {e}") from e

    def _handle_error(self, error: ClientError) -> None:
        """
        Convert boto3 errors to mirror exceptions.

        Args:
            error: ClientError from boto3

        Raises:
            ConditionFailedError: If condition check failed
            TableNotFoundError: If table not found
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied
            StorageUnavailableError: For other errors
        """
        code = error.response["Error"]["Code"]

        if code == "ConditionalCheckFailedException":
            raise ConditionFailedError(f"Condition failed: {error}")
        elif code == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{self.table_name}' not found")
        elif code == "ProvisionedThroughputExceededException":
            raise AWSThrottlingError("DynamoDB throttling - retry with backoff")
        elif code == "AccessDeniedException":
            raise AWSPermissionError("AWS permission denied")
        else:
            raise StorageUnavailableError(f"DynamoDB error: {error}")
