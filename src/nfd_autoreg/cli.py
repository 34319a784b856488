"""Argparse-based CLI for nfd-autoreg.

Command-line values override AUTOREG_* environment settings.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from nfd_autoreg import __version__, run_autoreg
from nfd_autoreg.config import ConfigurationError, Settings, load_filter_config

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nfd-autoreg",
        usage="%(prog)s [--prefix=</autoreg/prefix>]... [options]",
        description="Register prefixes on faces as the forwarder creates them.",
    )
    parser.add_argument("-V", "--version", action="store_true", help="show version information and exit")
    parser.add_argument(
        "-i",
        "--prefix",
        dest="prefixes",
        action="append",
        metavar="PREFIX",
        help="prefix that should be automatically registered when a new non-local face is created",
    )
    parser.add_argument(
        "-a",
        "--all-faces-prefix",
        dest="all_faces_prefixes",
        action="append",
        metavar="PREFIX",
        help="prefix that should be automatically registered for all TCP and UDP non-local faces "
        "(blacklists and whitelists do not apply to this prefix)",
    )
    parser.add_argument(
        "-c",
        "--cost",
        type=int,
        default=None,
        help="FIB cost that should be assigned to autoreg nexthops (default: 255)",
    )
    parser.add_argument(
        "-w",
        "--whitelist",
        action="append",
        metavar="NETWORK",
        help="whitelisted network, e.g., 192.168.2.0/24 or ::1/128",
    )
    parser.add_argument(
        "-b",
        "--blacklist",
        action="append",
        metavar="NETWORK",
        help="blacklisted network, e.g., 192.168.2.32/30 or ::1/128",
    )
    parser.add_argument("--nats-url", default=None, help="forwarder management NATS URL")
    parser.add_argument("--log-level", default=None, help="logging level (default: INFO)")
    return parser


def _args_to_overrides(args: argparse.Namespace) -> dict:
    """Only values given on the command line override settings."""
    return {k: v for k, v in vars(args).items() if k != "version" and v is not None}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 0 for --help and 2 for bad arguments
        return int(e.code or 0)

    if args.version:
        print(__version__)
        return EXIT_OK

    try:
        settings = Settings(**_args_to_overrides(args))
        config = load_filter_config(settings)
    except (ConfigurationError, ValidationError) as e:
        print(f"ERROR: {e}\n", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_CONFIG_ERROR

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        asyncio.run(run_autoreg(settings, config))
    except Exception:
        logger.exception("ERROR: autoreg terminated")
        return EXIT_RUNTIME_ERROR
    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
