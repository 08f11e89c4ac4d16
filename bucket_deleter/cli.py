"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from bucket_deleter.config import DeleterConfig, configure_logging
from bucket_deleter.engine import BoundedDeletionEngine
from bucket_deleter.errors import ConfigError, EnumerationError
from bucket_deleter.gate import ConfirmationGate
from bucket_deleter.gateway import S3Gateway
from bucket_deleter.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="bucket-deleter",
        description="Empty and delete S3 buckets, asking before each one",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  Walk every bucket in us-west-2
  %(prog)s --region eu-west-1 --profile ops Use another region and profile
  %(prog)s --workers 32                     Allow 32 concurrent deletes
        """,
    )
    parser.add_argument("--region", default="us-west-2", help="AWS region")
    parser.add_argument("--profile", default="default", help="AWS profile name")
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=10,
        help="Number of concurrent deletes (default: 10)",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=1000,
        help="Objects requested per listing page (default: 1000)",
    )
    parser.add_argument(
        "--endpoint-url", help="Endpoint of an S3-compatible service"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the bucket deletion process.

    Returns:
        Exit status: 1 if buckets could not be listed, 0 otherwise.
    """
    args = parse_arguments(argv)
    configure_logging(args.verbose)

    try:
        config = DeleterConfig.from_arguments(args)
    except ConfigError as e:
        logger.error(str(e))
        return 2

    gateway = S3Gateway(config)
    orchestrator = Orchestrator(
        gateway,
        ConfirmationGate(),
        BoundedDeletionEngine(gateway, max_workers=config.max_workers),
    )

    try:
        orchestrator.run()
    except EnumerationError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user")
        return 1
    return 0


def run() -> None:
    sys.exit(main())
