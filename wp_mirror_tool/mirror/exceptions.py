"""
Custom exceptions for mirror operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""


class MirrorError(Exception):
    """Base exception for mirror operations."""

    pass


class StorageUnavailableError(MirrorError):
    """Backing store could not be reached or rejected the operation."""

    pass


class QueueUnavailableError(StorageUnavailableError):
    """Download queue could not be reached."""

    pass


class ConditionFailedError(MirrorError):
    """Conditional write failed."""

    pass


class LockDeniedError(MirrorError):
    """Lock is held by another process."""

    pass


class UpstreamUnavailableError(MirrorError):
    """Upstream manifest could not be fetched or parsed."""

    pass


class DownloadFailedError(MirrorError):
    """Artifact could not be fetched or persisted."""

    pass


class AWSThrottlingError(StorageUnavailableError):
    """DynamoDB throttling occurred."""

    pass


class AWSPermissionError(StorageUnavailableError):
    """AWS permission denied."""

    pass


class TableNotFoundError(StorageUnavailableError):
    """DynamoDB table does not exist."""

    pass


class TableAlreadyExistsError(MirrorError):
    """DynamoDB table already exists."""

    pass
