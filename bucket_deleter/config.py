"""Runtime configuration and logging setup."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

from bucket_deleter.errors import ConfigError

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_PAGE_SIZE = 1000


def configure_logging(verbose: bool = False) -> None:
    """Send progress narration to stdout, DEBUG when verbose."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@dataclass
class DeleterConfig:
    """Configuration settings for a bucket deletion run."""

    region: str = "us-west-2"
    profile: str = "default"
    max_workers: int = 10
    page_size: int = MAX_PAGE_SIZE
    endpoint_url: str | None = None
    max_retries: int = 5
    connection_pool_size: int = 20

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}"
            )
        if self.max_retries < 0:
            raise ConfigError(f"max_retries cannot be negative, got {self.max_retries}")
        # Every worker needs its own connection.
        self.connection_pool_size = max(self.connection_pool_size, self.max_workers)

    @classmethod
    def from_arguments(cls, args: argparse.Namespace) -> DeleterConfig:
        """Create configuration from parsed command line arguments."""
        return cls(
            region=args.region,
            profile=args.profile,
            max_workers=args.workers,
            page_size=args.page_size,
            endpoint_url=args.endpoint_url,
        )
