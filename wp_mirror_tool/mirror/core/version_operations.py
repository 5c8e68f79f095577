"""
Version store operations for the mirror.

Records live in one partition per category, sorted by identifier and version:

    PK = versions:<category>    SK = <identifier>#<version>

"Latest" is the lexicographically greatest version string, so "1.9" wins
over "1.10". Callers rely on this ordering staying stable.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from collections.abc import Iterable
from typing import Any

from boto3.dynamodb.conditions import Key

from ..constants import (
    ATTR_CREATED_AT,
    ATTR_FETCHED_AT,
    ATTR_IDENTIFIER,
    ATTR_PK,
    ATTR_SK,
    ATTR_TYPE,
    ATTR_UPDATED_AT,
    ATTR_VALUE,
    ATTR_VERSION,
    CORE_IDENTIFIER,
    PREFIX_VERSIONS,
    SK_SEPARATOR,
)
from ..models import Category, ItemType, VersionRecord
from ..utils import format_key, format_version_sk, validate_identifier
from .client import DynamoDBClient


def _partition(category: Category) -> str:
    return format_key(PREFIX_VERSIONS, category.value)


def put_version(
    client: DynamoDBClient,
    record: VersionRecord,
    fetched_at: int | None = None,
) -> None:
    """
    Upsert a version record by its (category, identifier, version) triple.

    created_at is set by the first write only.

    Args:
        client: DynamoDB client
        record: Record to store
        fetched_at: Unix time the artifact was downloaded (optional)

    Raises:
        ValueError: If the identifier is invalid
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    validate_identifier(record.identifier)
    timestamp = int(time.time())

    fields: dict[str, Any] = {
        ATTR_VALUE: record.to_json(),
        ATTR_TYPE: ItemType.VERSION.value,
        ATTR_IDENTIFIER: record.identifier,
        ATTR_VERSION: record.version,
        ATTR_UPDATED_AT: timestamp,
    }
    if fetched_at is not None:
        fields[ATTR_FETCHED_AT] = fetched_at

    assignments = [f"#{name} = :{name}" for name in fields]
    assignments.append(f"#{ATTR_CREATED_AT} = if_not_exists(#{ATTR_CREATED_AT}, :{ATTR_UPDATED_AT})")
    names = {f"#{name}": name for name in [*fields, ATTR_CREATED_AT]}
    values = {f":{name}": value for name, value in fields.items()}

    client.update_item(
        key={
            ATTR_PK: _partition(record.category),
            ATTR_SK: format_version_sk(record.identifier, record.version),
        },
        update_expression="SET " + ", ".join(assignments),
        expression_attribute_names=names,
        expression_attribute_values=values,
    )


def get_version(
    client: DynamoDBClient,
    category: Category,
    identifier: str,
    version: str,
) -> VersionRecord | None:
    """
    Get a single version record.

    Returns:
        The record, or None if the triple is unknown
    """
    item = client.get_item(
        {ATTR_PK: _partition(category), ATTR_SK: format_version_sk(identifier, version)}
    )
    if not item:
        return None
    return VersionRecord.from_json(item[ATTR_VALUE])


def get_versions(
    client: DynamoDBClient,
    category: Category,
    identifier: str | None = None,
) -> list[VersionRecord]:
    """
    Get all version records for a category, or for one identifier in it.

    Args:
        client: DynamoDB client
        category: Artifact category
        identifier: Restrict to one plugin file / theme slug (optional)

    Returns:
        Records in no particular order

    Raises:
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    condition = Key(ATTR_PK).eq(_partition(category))
    if identifier is not None:
        condition = condition & Key(ATTR_SK).begins_with(identifier + SK_SEPARATOR)

    items = client.query(key_condition_expression=condition)
    return [VersionRecord.from_json(item[ATTR_VALUE]) for item in items]


def list_identifiers(client: DynamoDBClient, category: Category) -> set[str]:
    """
    List identifiers that have at least one stored version.

    Raises:
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    items = client.query(key_condition_expression=Key(ATTR_PK).eq(_partition(category)))
    identifiers = set()
    for item in items:
        identifier = item.get(ATTR_IDENTIFIER)
        if identifier is None:
            identifier = item[ATTR_SK].rsplit(SK_SEPARATOR, 1)[0]
        identifiers.add(identifier)
    return identifiers


def select_latest(records: Iterable[VersionRecord]) -> VersionRecord | None:
    """
    Pick the record with the lexicographically greatest version string.

    Args:
        records: Candidate records

    Returns:
        Latest record, or None if there are no candidates
    """
    return max(records, key=lambda record: record.version, default=None)


def get_latest_version(
    client: DynamoDBClient,
    category: Category,
    identifier: str,
) -> VersionRecord | None:
    """
    Get the latest known version for one identifier.

    Returns:
        Latest record, or None if the identifier is unknown

    Raises:
        StorageUnavailableError: If DynamoDB cannot be reached
    """
    return select_latest(get_versions(client, category, identifier))


def get_latest_core_version(client: DynamoDBClient) -> VersionRecord | None:
    """
    Get the latest known core release.

    Selected by explicit comparison, never by store iteration order.
    """
    return get_latest_version(client, Category.CORE, CORE_IDENTIFIER)
