"""
Utility functions for mirror operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
import os
import socket
import uuid
from typing import Any

import httpx

from .constants import DEFAULT_HTTP_TIMEOUT, SK_SEPARATOR

USER_AGENT = "wp-mirror-tool/0.1.0"


def format_key(prefix: str, key: str) -> str:
    """
    Format a key with namespace prefix.

    Args:
        prefix: Namespace prefix (e.g., 'versions', 'lock', 'queue')
        key: Key within the namespace

    Returns:
        Formatted key with prefix (e.g., 'versions:plugin')
    """
    return f"{prefix}:{key}"


def format_version_sk(identifier: str, version: str) -> str:
    """
    Format the sort key of a version record.

    Args:
        identifier: Plugin file, theme slug or core identifier
        version: Version string

    Returns:
        Sort key (e.g., 'akismet/akismet.php#5.1')
    """
    return f"{identifier}{SK_SEPARATOR}{version}"


def output_json(data: dict[str, Any], quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(json.dumps(data, default=str))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> str:
    """
    Format error as a JSON line.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        Serialized error object
    """
    return json.dumps({"error": error, "solution": solution, "exit_code": exit_code})


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def validate_table_name(table_name: str) -> bool:
    """
    Validate DynamoDB table name.

    Args:
        table_name: Table name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If table name is invalid
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")
    if len(table_name) < 3 or len(table_name) > 255:
        raise ValueError("Table name must be between 3 and 255 characters")
    if not all(c.isalnum() or c in "-_." for c in table_name):
        raise ValueError(
            "Table name can only contain alphanumeric characters, hyphens, underscores, and periods"
        )
    return True


def validate_identifier(identifier: str) -> bool:
    """
    Validate an artifact identifier.

    Args:
        identifier: Identifier to validate

    Returns:
        True if valid

    Raises:
        ValueError: If identifier is invalid
    """
    if not identifier:
        raise ValueError("Identifier cannot be empty")
    if SK_SEPARATOR in identifier:
        raise ValueError(f"Identifier cannot contain '{SK_SEPARATOR}'")
    if len(identifier) > 1024:
        raise ValueError("Identifier cannot exceed 1024 characters")
    return True


def generate_default_owner() -> str:
    """
    Generate default owner ID.

    Returns:
        Owner ID in format hostname-pid
    """
    return f"{socket.gethostname()}-{os.getpid()}"


def generate_run_owner() -> str:
    """
    Generate an owner ID unique to one sync run.

    Returns:
        Owner ID in format hostname-pid-suffix
    """
    return f"{generate_default_owner()}-{uuid.uuid4().hex[:8]}"


def create_http_client(timeout: float = DEFAULT_HTTP_TIMEOUT) -> httpx.Client:
    """
    Create the HTTP client shared by the upstream source and workers.

    Args:
        timeout: Per-request timeout in seconds

    Returns:
        Configured httpx client (thread-safe)
    """
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )
