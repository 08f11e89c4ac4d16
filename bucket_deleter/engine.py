"""Bounded, paginated bulk deletion of every object in a bucket."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Iterator

from bucket_deleter.errors import ConfigError, GatewayError, ItemDeleteError, PageListError
from bucket_deleter.gateway import Container, Page, StorageGateway

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 10


@dataclass
class DrainOutcome:
    """Result of draining one bucket, recorded from many worker threads."""

    container: Container
    deleted: int = 0
    failures: dict[str, ItemDeleteError] = field(default_factory=dict)
    elapsed: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_deleted(self) -> None:
        """Thread-safe increment of deleted count."""
        with self._lock:
            self.deleted += 1

    def record_failure(self, key: str, error: ItemDeleteError) -> None:
        """Thread-safe recording of a failed delete."""
        with self._lock:
            self.failures[key] = error

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def attempted(self) -> int:
        return self.deleted + self.failed

    @property
    def succeeded(self) -> bool:
        """True when every discovered object was deleted."""
        return not self.failures


class BoundedDeletionEngine:
    """
    Deletes every object in a bucket with at most ``max_workers`` deletes in flight.

    Pages are listed strictly in sequence. Each key takes one permit from a pool
    shared by the whole drain before its delete is submitted, so submission blocks
    while all permits are held. A failed delete is logged and recorded; only a
    failed page listing aborts the drain.

    Attributes:
        gateway: Storage gateway used for listing and deleting.
        max_workers: Maximum number of concurrent deletes.
    """

    def __init__(self, gateway: StorageGateway, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {max_workers}")
        self.gateway = gateway
        self.max_workers = max_workers

    def drain(self, container: Container) -> DrainOutcome:
        """
        Delete all objects currently in a bucket.

        Returns once no pages remain and every dispatched delete has finished.

        Args:
            container: Bucket to empty.

        Returns:
            The drain outcome, including any per-object failures.

        Raises:
            PageListError: If a page could not be listed. Deletes already
                dispatched have finished by the time it is raised.
        """
        outcome = DrainOutcome(container=container)
        permits = threading.BoundedSemaphore(self.max_workers)
        start_time = time.monotonic()

        try:
            with ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="delete"
            ) as executor:
                for page in self._pages(container):
                    for key in page.keys:
                        permits.acquire()
                        future = executor.submit(self.gateway.delete_item, container, key)
                        future.add_done_callback(
                            partial(self._settle, container, key, outcome, permits)
                        )
        finally:
            outcome.elapsed = time.monotonic() - start_time
            self._log_statistics(outcome)

        return outcome

    def _pages(self, container: Container) -> Iterator[Page]:
        """
        Yield non-empty pages until an empty page or a page without a cursor.

        The next page is only requested once the caller has dispatched the
        previous one.
        """
        cursor: str | None = None
        page_number = 0
        while True:
            page_number += 1
            try:
                page = self.gateway.list_items(container, cursor)
            except GatewayError as e:
                raise PageListError(container.name, page_number, e) from e

            if not page.keys:
                logger.debug(f"Page {page_number} of {container.name} is empty")
                return

            logger.debug(f"Dispatching {len(page)} deletes from page {page_number}")
            yield page

            if page.next_cursor is None:
                return
            cursor = page.next_cursor

    @staticmethod
    def _settle(
        container: Container,
        key: str,
        outcome: DrainOutcome,
        permits: threading.BoundedSemaphore,
        future: Future,
    ) -> None:
        """Record a finished delete and give its permit back."""
        try:
            future.result()
        except GatewayError as e:
            error = ItemDeleteError(container.name, key, e)
            logger.error(str(error))
            outcome.record_failure(key, error)
        except Exception as e:
            error = ItemDeleteError(container.name, key, e)
            logger.exception(f"Unexpected error: {error}")
            outcome.record_failure(key, error)
        else:
            outcome.record_deleted()
        finally:
            permits.release()

    @staticmethod
    def _log_statistics(outcome: DrainOutcome) -> None:
        rate = outcome.deleted / outcome.elapsed if outcome.elapsed > 0 else 0
        logger.info(
            f"Bucket '{outcome.container.name}': {outcome.deleted} objects deleted, "
            f"{outcome.failed} failed in {outcome.elapsed:.2f} seconds "
            f"({rate:.1f} objects/sec)"
        )
