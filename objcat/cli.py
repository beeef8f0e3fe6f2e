#
# Copyright (c) 2025, NVIDIA CORPORATION. All rights reserved.
#

import argparse
import io
import os
import sys
from typing import List, Optional

from botocore.exceptions import BotoCoreError

from objcat.config import CatConfig, StoreConfig
from objcat.const import (
    BACKEND_AIS,
    BACKEND_S3,
    DEFAULT_CONCURRENCY,
    DEFAULT_LOG_LEVEL,
    DEFAULT_RETRY_COUNT,
    ENV_LOG_LEVEL,
    OPERATION_CAT,
)
from objcat.errors import CatError
from objcat.pipeline import ConcatPipeline
from objcat.printer import print_error
from objcat.retry_config import RetryConfig
from objcat.store import store_from_config
from objcat.target import parse_target
from objcat.types import Target
from objcat.utils import get_logger, natural_size, parse_size, set_log_level
from objcat.version import __version__

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = get_logger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from err
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid integer: '{value}'") from err
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def _positive_size(value: str) -> int:
    try:
        size = parse_size(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"invalid size: '{value}'") from err
    if size <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got '{value}'")
    return size


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="objcat",
        description="Concatenate remote objects to standard output.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"objcat {__version__}",
        help="Show version number and exit",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Report errors as single-line JSON",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper(),
        help=f"Log level for diagnostics on stderr (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "--backend",
        choices=[BACKEND_S3, BACKEND_AIS],
        help="Storage transport (default: 'ais' if AIS_ENDPOINT is set, else 's3')",
    )
    parser.add_argument(
        "--endpoint-url",
        type=str,
        help="Endpoint of the S3-compatible service or AIStore gateway",
    )
    parser.add_argument(
        "--no-verify-ssl",
        action="store_true",
        default=False,
        help="Skip TLS certificate verification",
    )
    parser.add_argument(
        "--retry-count",
        type=_non_negative_int,
        help=f"Retries per request after the first attempt (default: {DEFAULT_RETRY_COUNT})",
    )

    subparsers = parser.add_subparsers(dest="operation", title="operations")
    cat_parser = subparsers.add_parser(
        OPERATION_CAT,
        help="Write object contents to standard output",
        description=(
            "Write the content of one object, every object directly under a prefix, or every object matching a "
            "wildcard pattern, in ascending key order, to standard output."
        ),
    )
    cat_parser.add_argument(
        "target",
        help="Remote object path, e.g. s3://bucket/key, s3://bucket/dir/ or s3://bucket/dir/log-*",
    )
    cat_parser.add_argument(
        "-p",
        "--part-size",
        type=_positive_size,
        help="Maximum size of a single range request, in bytes or human-readable (e.g. 8MiB; default: 50MiB)",
    )
    cat_parser.add_argument(
        "-c",
        "--concurrency",
        type=_positive_int,
        help=f"Maximum range requests in flight per object (default: {DEFAULT_CONCURRENCY})",
    )
    cat_parser.add_argument(
        "--version-id",
        type=str,
        help="Object version to read; only valid for a single-object target",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parses the command line arguments and runs the requested operation."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.operation is None:
        parser.print_help(sys.stderr)
        return 1

    set_log_level(args.log_level)
    return _run_cat(args)


def _run_cat(args: argparse.Namespace) -> int:
    target = Target(path_spec=args.target, version_id=args.version_id)

    def fail(message: str) -> int:
        print_error(sys.stderr, args.target, message, structured=args.json)
        return 1

    try:
        # Reject malformed targets before any transport is created
        parsed = parse_target(target)
    except CatError as err:
        return fail(err.message)

    try:
        retry_config = (
            RetryConfig(max_attempts=args.retry_count + 1)
            if args.retry_count is not None
            else None
        )
        cat_config = CatConfig.from_env(
            part_size=args.part_size,
            concurrency=args.concurrency,
            retry_config=retry_config,
        )
        store_config = StoreConfig.from_env(
            backend=args.backend,
            endpoint=args.endpoint_url,
            skip_verify=True if args.no_verify_ssl else None,
        )
    except ValueError as err:
        return fail(str(err))

    logger.debug(
        "cat %s: part size %s, concurrency %d, %d attempt(s) per request, backend %s",
        args.target,
        natural_size(cat_config.part_size),
        cat_config.concurrency,
        cat_config.retry_config.max_attempts,
        store_config.backend,
    )

    try:
        store = store_from_config(
            store_config,
            provider=parsed.provider,
            retry_config=cat_config.retry_config,
            concurrency=cat_config.concurrency,
        )
    except (BotoCoreError, ValueError) as err:
        # e.g. an AWS profile that does not exist
        return fail(str(err))

    sink = sys.stdout.buffer
    try:
        ConcatPipeline(store, cat_config).run(target, sink)
        sink.flush()
    except CatError as err:
        _flush_quietly(sink)
        return fail(err.message)
    except OSError as err:
        # The reader of stdout went away; nothing more can be delivered
        logger.debug("Output closed: %s", err)
        _detach_stdout()
        return 1
    finally:
        store.close()
    return 0


def _flush_quietly(sink):
    try:
        sink.flush()
    except OSError as err:
        logger.debug("Failed to flush output: %s", err)


def _detach_stdout():
    """
    Point stdout at devnull so the interpreter's final flush does not raise on a closed pipe.
    """
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, io.UnsupportedOperation):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


if __name__ == "__main__":
    sys.exit(main())
