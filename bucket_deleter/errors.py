"""Exceptions raised while emptying and deleting buckets."""

from __future__ import annotations


class BucketDeleterError(Exception):
    """Base class for all bucket deleter errors."""


class ConfigError(BucketDeleterError):
    """An invalid configuration value was supplied."""


class GatewayError(BucketDeleterError):
    """
    A remote storage operation failed.

    Attributes:
        operation: Name of the storage operation that failed.
        code: Service error code, if the service returned one.
    """

    def __init__(self, operation: str, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code

    def __str__(self) -> str:
        base = f"{self.operation} failed: {self.args[0]}"
        return f"{base} ({self.code})" if self.code else base


class EnumerationError(BucketDeleterError):
    """Listing buckets failed. Fatal to the whole run."""


class PageListError(BucketDeleterError):
    """Fetching a page of objects failed. Fatal to one bucket's drain."""

    def __init__(self, bucket_name: str, page_number: int, cause: Exception) -> None:
        super().__init__(
            f"Unable to list page {page_number} of bucket '{bucket_name}': {cause}"
        )
        self.bucket_name = bucket_name
        self.page_number = page_number


class ItemDeleteError(BucketDeleterError):
    """A single object delete failed. Never fatal."""

    def __init__(self, bucket_name: str, key: str, cause: Exception) -> None:
        super().__init__(f"Failed to delete object {key!r} from '{bucket_name}': {cause}")
        self.bucket_name = bucket_name
        self.key = key


class ContainerDeleteError(BucketDeleterError):
    """Removing a drained bucket failed."""

    def __init__(self, bucket_name: str, cause: Exception) -> None:
        super().__init__(f"Failed to delete bucket '{bucket_name}': {cause}")
        self.bucket_name = bucket_name
