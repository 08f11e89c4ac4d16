"""Walks every bucket in the account: confirm, drain, delete."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from bucket_deleter.engine import BoundedDeletionEngine, DrainOutcome
from bucket_deleter.errors import (
    BucketDeleterError,
    ContainerDeleteError,
    EnumerationError,
    GatewayError,
    PageListError,
)
from bucket_deleter.gate import ConfirmationGate
from bucket_deleter.gateway import Container, StorageGateway

logger = logging.getLogger(__name__)


class Status(enum.Enum):
    SKIPPED = "skipped"
    DELETED = "deleted"
    DRAIN_FAILED = "drain_failed"
    REMOVAL_FAILED = "removal_failed"


@dataclass
class ContainerResult:
    """What happened to one bucket."""

    container: Container
    status: Status
    outcome: DrainOutcome | None = None
    error: BucketDeleterError | None = None


@dataclass
class RunReport:
    """Per-bucket results in listing order."""

    results: list[ContainerResult] = field(default_factory=list)

    def _with_status(self, *statuses: Status) -> list[str]:
        return [r.container.name for r in self.results if r.status in statuses]

    @property
    def deleted(self) -> list[str]:
        return self._with_status(Status.DELETED)

    @property
    def skipped(self) -> list[str]:
        return self._with_status(Status.SKIPPED)

    @property
    def failed(self) -> list[str]:
        return self._with_status(Status.DRAIN_FAILED, Status.REMOVAL_FAILED)


class Orchestrator:
    """
    Sequences bucket enumeration, confirmation, draining and removal.

    A failure on one bucket is logged and never stops the remaining buckets.
    Only a failed bucket listing is fatal.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        gate: ConfirmationGate,
        engine: BoundedDeletionEngine,
    ) -> None:
        self.gateway = gateway
        self.gate = gate
        self.engine = engine

    def list_containers(self) -> list[Container]:
        """
        List all buckets in the account.

        Raises:
            EnumerationError: If the listing fails.
        """
        try:
            return self.gateway.list_containers()
        except GatewayError as e:
            raise EnumerationError(f"Failed to list buckets: {e}") from e

    def run(self) -> RunReport:
        """Process every bucket once, in listing order."""
        report = RunReport()
        containers = self.list_containers()
        if not containers:
            logger.info("No buckets found.")
            return report

        for container in containers:
            logger.info(f"Found bucket: {container.name}")
            report.results.append(self.process(container))

        logger.info(
            f"Finished: {len(report.deleted)} deleted, {len(report.skipped)} skipped, "
            f"{len(report.failed)} failed"
        )
        return report

    def process(self, container: Container) -> ContainerResult:
        """Confirm, drain and delete a single bucket."""
        if not self.gate.allows(container.name):
            return ContainerResult(container, Status.SKIPPED)

        logger.info(f"Deleting all objects from bucket {container.name}...")
        try:
            outcome = self.engine.drain(container)
        except PageListError as e:
            logger.error(f"Failed to delete all objects from bucket {container.name}: {e}")
            return ContainerResult(container, Status.DRAIN_FAILED, error=e)

        if outcome.succeeded:
            logger.info("Successfully deleted all objects from the bucket.")
        else:
            logger.warning(
                f"{outcome.failed} of {outcome.attempted} objects could not be deleted "
                f"from bucket {container.name}"
            )

        logger.info(f"Deleting bucket {container.name}...")
        try:
            self.gateway.delete_container(container)
        except GatewayError as e:
            error = ContainerDeleteError(container.name, e)
            logger.error(str(error))
            return ContainerResult(container, Status.REMOVAL_FAILED, outcome, error)

        logger.info(f"Successfully deleted bucket {container.name}.")
        return ContainerResult(container, Status.DELETED, outcome)
