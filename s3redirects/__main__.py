#!/usr/bin/env python3
"""
S3 Redirect Object Generator - CLI Entrypoint

Usage:
    python -m s3redirects --build ./build --redirects redirects.json \\
        --bucket docs-bucket --prefix pr-123/run-1

    # Or from the environment
    S3REDIRECTS_BUCKET=docs-bucket ... python -m s3redirects

    # Print the planned objects without touching the bucket
    python -m s3redirects --redirects redirects.json --prefix docs --dry-run

Exit status:
    0  run completed (store errors are reported, not fatal)
    1  unexpected error during the run
    2  invalid configuration or redirect input
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from dataclasses import replace
from typing import NoReturn, Optional, Sequence

from s3redirects import __version__
from s3redirects.core import constants as C
from s3redirects.core.config import RedirectsConfig, S3Config, parse_parallel
from s3redirects.core.errors import ConfigurationError, RedirectError
from s3redirects.observability.logging import LogLevel, StructuredLogger, setup_logging
from s3redirects.pipeline.runner import plan_preview, run
from s3redirects.sources import load_redirects

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{C.ENV_PREFIX}_{name}") or default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3redirects",
        description="Generate S3 redirect objects for an edge proxy",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--build",
        default=_env("BUILD"),
        help="Local build directory already synchronized to the bucket",
    )
    parser.add_argument(
        "--redirects",
        default=_env("REDIRECTS"),
        help="Redirects JSON file path or https:// URL",
    )
    parser.add_argument("--bucket", default=_env("BUCKET"), help="Target bucket name")
    parser.add_argument("--prefix", default=_env("PREFIX"), help="Key prefix inside the bucket")
    parser.add_argument(
        "--parallel",
        default=_env("PARALLEL", str(C.DEFAULT_PARALLEL)),
        help=f"Maximum concurrent store operations (default: {C.DEFAULT_PARALLEL})",
    )
    parser.add_argument(
        "--endpoint-url",
        default=None,
        help="Custom S3 endpoint (MinIO, LocalStack)",
    )
    parser.add_argument("--region", default=None, help="AWS region")
    parser.add_argument(
        "--fail-on-key-collision",
        action="store_true",
        default=(_env("FAIL_ON_KEY_COLLISION", "") or "").lower() in {"1", "true", "yes", "on"},
        help="Abort when two locations map to the same storage key",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print planned keys and metadata as JSON lines and exit",
    )
    parser.add_argument(
        "--log-level",
        default=_env("LOG_LEVEL", "INFO"),
        choices=[level.name for level in LogLevel],
        type=str.upper,
        help="Minimum log level (default: INFO)",
    )
    parser.add_argument(
        "--log-json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Emit JSON log lines (default: on)",
    )
    return parser


def _config_from_args(args: argparse.Namespace) -> RedirectsConfig:
    for name in ("build", "redirects", "bucket", "prefix"):
        if not getattr(args, name):
            raise ConfigurationError.missing(f"--{name}")

    overrides = {}
    if args.endpoint_url:
        overrides["endpoint_url"] = args.endpoint_url
    if args.region:
        overrides["region"] = args.region
    try:
        s3 = S3Config.from_env()
        if overrides:
            s3 = replace(s3, **overrides)
    except ValueError as e:
        raise ConfigurationError.invalid_value("S3", str(e), cause=e) from e

    return RedirectsConfig(
        build_path=args.build,
        redirects_source=args.redirects,
        bucket=args.bucket,
        prefix=args.prefix,
        parallel=parse_parallel(args.parallel),
        fail_on_key_collision=args.fail_on_key_collision,
        s3=s3,
    )


async def _dry_run(args: argparse.Namespace) -> int:
    if not args.redirects:
        raise ConfigurationError.missing("--redirects")
    rules = await load_redirects(args.redirects)
    for key, metadata in plan_preview(args.prefix or "", rules):
        print(json.dumps({"key": key, "metadata": metadata}))
    return EXIT_OK


async def _run(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    await run(config)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)
    setup_logging(LogLevel.parse(args.log_level), json_output=args.log_json)
    log = StructuredLogger("s3redirects")
    log.debug("Starting s3redirects")

    try:
        if args.dry_run:
            code = asyncio.run(_dry_run(args))
        else:
            code = asyncio.run(_run(args))
    except RedirectError as e:
        log.error(str(e), error_code=e.code.name)
        code = EXIT_USAGE
    except Exception as e:
        log.exception(f"Fatal error: {e}")
        code = EXIT_FATAL

    sys.exit(code)


if __name__ == "__main__":
    main()
