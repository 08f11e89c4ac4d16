"""Empty and delete S3 buckets after interactive confirmation."""

from bucket_deleter.config import DeleterConfig
from bucket_deleter.engine import BoundedDeletionEngine, DrainOutcome
from bucket_deleter.gate import ConfirmationGate
from bucket_deleter.gateway import Container, Page, S3Gateway, StorageGateway
from bucket_deleter.orchestrator import Orchestrator, RunReport, Status

__version__ = "0.1.0"

__all__ = [
    "BoundedDeletionEngine",
    "ConfirmationGate",
    "Container",
    "DeleterConfig",
    "DrainOutcome",
    "Orchestrator",
    "Page",
    "RunReport",
    "S3Gateway",
    "Status",
    "StorageGateway",
]
