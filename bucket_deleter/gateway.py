"""
Storage gateway for S3-compatible object stores.

The deletion engine and orchestrator only talk to the ``StorageGateway``
protocol. ``S3Gateway`` implements it with boto3, translating every botocore
failure into ``GatewayError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

import boto3
import botocore.config
import botocore.exceptions

from bucket_deleter.config import DeleterConfig
from bucket_deleter.errors import GatewayError

if TYPE_CHECKING:
    from boto3 import Session
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    """A bucket as returned by the bucket listing."""

    name: str
    creation_date: datetime | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Page:
    """One page of object keys plus the token for the next page, if any."""

    keys: list[str]
    next_cursor: str | None = None

    def __len__(self) -> int:
        return len(self.keys)


class StorageGateway(Protocol):
    """Remote storage operations. Each one raises GatewayError on failure."""

    def list_containers(self) -> list[Container]: ...

    def list_items(self, container: Container, cursor: str | None = None) -> Page: ...

    def delete_item(self, container: Container, key: str) -> None: ...

    def delete_container(self, container: Container) -> None: ...


class S3Gateway:
    """
    boto3 implementation of the storage gateway.

    A single S3 client is shared by all worker threads; boto3 clients are
    thread-safe, and the connection pool is sized for the concurrency cap.

    Attributes:
        config: Configuration settings for the gateway.
    """

    def __init__(self, config: DeleterConfig, s3_client: S3Client | None = None) -> None:
        """
        Initialize the gateway.

        Args:
            config: Deleter configuration settings.
            s3_client: Pre-built client to use instead of creating one.
        """
        self.config = config
        self._session: Session | None = None
        self._boto_config: botocore.config.Config | None = None
        self._s3_client: S3Client | None = s3_client

    @property
    def session(self) -> Session:
        """Lazily create and cache boto3 session for the configured profile."""
        if self._session is None:
            self._session = boto3.session.Session(
                profile_name=self.config.profile,
                region_name=self.config.region,
            )
        return self._session

    @property
    def boto_config(self) -> botocore.config.Config:
        """Lazily create and cache boto configuration."""
        if self._boto_config is None:
            self._boto_config = botocore.config.Config(
                max_pool_connections=self.config.connection_pool_size,
                retries={"max_attempts": self.config.max_retries, "mode": "standard"},
            )
        return self._boto_config

    @property
    def s3_client(self) -> S3Client:
        """Lazily create and cache S3 client."""
        if self._s3_client is None:
            self._s3_client = self.session.client(
                "s3", endpoint_url=self.config.endpoint_url, config=self.boto_config
            )
        return self._s3_client

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """
        Invoke an S3 client operation, wrapping botocore failures.

        Args:
            operation: Client method name, e.g. ``list_objects_v2``.
            **kwargs: Request parameters.

        Returns:
            The operation's response dictionary.

        Raises:
            GatewayError: If the client cannot be created or the call fails.
        """
        try:
            return getattr(self.s3_client, operation)(**kwargs)
        except botocore.exceptions.ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            raise GatewayError(operation, str(e), code) from e
        except botocore.exceptions.BotoCoreError as e:
            raise GatewayError(operation, str(e)) from e

    def list_containers(self) -> list[Container]:
        """
        List all buckets in the account in a single call.

        Returns:
            Buckets in the order the service returned them.

        Raises:
            GatewayError: If the listing fails.
        """
        response = self._call("list_buckets")
        return [
            Container(name=bucket["Name"], creation_date=bucket.get("CreationDate"))
            for bucket in response.get("Buckets", [])
        ]

    def list_items(self, container: Container, cursor: str | None = None) -> Page:
        """
        List one page of object keys.

        Args:
            container: Bucket to list.
            cursor: Continuation token from the previous page, if any.

        Returns:
            The page's keys and the token for the next page.

        Raises:
            GatewayError: If the listing fails.
        """
        params: dict[str, Any] = {
            "Bucket": container.name,
            "MaxKeys": self.config.page_size,
        }
        if cursor is not None:
            params["ContinuationToken"] = cursor

        response = self._call("list_objects_v2", **params)
        keys = [obj["Key"] for obj in response.get("Contents", [])]
        logger.debug(f"Listed {len(keys)} objects from bucket {container.name}")
        return Page(keys=keys, next_cursor=response.get("NextContinuationToken"))

    def delete_item(self, container: Container, key: str) -> None:
        """
        Delete a single object.

        Args:
            container: Bucket holding the object.
            key: Key of the object to delete.

        Raises:
            GatewayError: If the delete fails.
        """
        self._call("delete_object", Bucket=container.name, Key=key)

    def delete_container(self, container: Container) -> None:
        """
        Delete an empty bucket.

        Args:
            container: Bucket to delete.

        Raises:
            GatewayError: If the delete fails, e.g. with ``BucketNotEmpty``.
        """
        self._call("delete_bucket", Bucket=container.name)
