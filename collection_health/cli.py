#!/usr/bin/env python
"""Fetch and display Qdrant collections information.

Usage:
    qdrant-collection-cli --only unhealthy --verbose
    python -m collection_health.cli --url http://qdrant:6333

Prints the collection records as a JSON array on stdout. Narration and logs
go to stderr so the output can be piped straight into other tools.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from collection_health.config import Backend, Settings, get_settings
from collection_health.endpoint.service import create_source
from collection_health.exceptions import ConfigurationError, ListError
from collection_health.health.models import HealthFilter
from collection_health.health.report import run_health_check
from collection_health.logging_config import get_logger, setup_logging
from collection_health.observability.metrics import write_metrics_file

logger = get_logger(__name__)


def _narrate(message: str = "") -> None:
    print(message, file=sys.stderr)


def build_settings(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of environment settings.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Settings for this run.

    Raises:
        ConfigurationError: If the environment holds invalid settings.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(
            f"Invalid configuration: {problems}",
            details={"errors": e.error_count()},
        ) from e

    qdrant_overrides: dict[str, object] = {}
    if args.url is not None:
        qdrant_overrides["url"] = args.url
    if args.backend is not None:
        qdrant_overrides["backend"] = Backend(args.backend)

    check_overrides: dict[str, object] = {}
    if args.concurrency is not None:
        check_overrides["max_concurrency"] = args.concurrency
    if args.timeout is not None:
        check_overrides["detail_timeout"] = args.timeout
    if args.metrics_file is not None:
        check_overrides["metrics_file"] = args.metrics_file

    return settings.model_copy(
        update={
            "qdrant": settings.qdrant.model_copy(update=qdrant_overrides),
            "check": settings.check.model_copy(update=check_overrides),
        }
    )


async def run_check(
    settings: Settings,
    mode: HealthFilter,
    verbose: bool = False,
) -> int:
    """Run one health check and print the report.

    Args:
        settings: Settings for this run.
        mode: Which records to display.
        verbose: Narrate progress on stderr.

    Returns:
        Process exit code.
    """
    source = create_source(settings.qdrant)
    if verbose:
        _narrate(f"Calling endpoint: {settings.qdrant.url.rstrip('/')}/collections")

    try:
        report = await run_health_check(source, settings=settings.check, mode=mode)
    except ListError as e:
        logger.error(f"Could not list collections: {e.message}", extra=e.details)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        await source.close()

    if verbose:
        _narrate()
        if mode != HealthFilter.NONE:
            _narrate(f"COLLECTION DETAILS (showing only {mode.value} collections)")
        else:
            _narrate("COLLECTION DETAILS")

    print(report.to_json())

    if verbose:
        _narrate()
        _narrate(f"Displayed: {len(report.displayed)} / {report.total} collections")

    if settings.check.metrics_file is not None:
        write_metrics_file(settings.check.metrics_file)

    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="qdrant-collection-cli",
        description="Fetch and display Qdrant collections information",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--only",
        choices=[HealthFilter.HEALTHY.value, HealthFilter.UNHEALTHY.value],
        default=None,
        metavar="TYPE",
        help="Filter output by health status: healthy or unhealthy",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output with additional information",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Qdrant base URL (default from QDRANT_URL)",
    )
    parser.add_argument(
        "--backend",
        choices=[backend.value for backend in Backend],
        default=None,
        help="Query the REST API directly or through qdrant-client",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum concurrent detail requests",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for one collection's details",
    )
    parser.add_argument(
        "--metrics-file",
        type=Path,
        default=None,
        help="Write a Prometheus textfile snapshot to this path",
    )

    args = parser.parse_args(argv)
    if args.concurrency is not None and args.concurrency < 1:
        parser.error("--concurrency must be at least 1")
    if args.timeout is not None and args.timeout <= 0:
        parser.error("--timeout must be positive")

    try:
        settings = build_settings(args)
    except ConfigurationError as e:
        parser.error(e.message)

    setup_logging(verbose=args.verbose)
    mode = HealthFilter(args.only) if args.only else HealthFilter.NONE

    sys.exit(asyncio.run(run_check(settings, mode=mode, verbose=args.verbose)))


if __name__ == "__main__":
    main()
