#!/usr/bin/env python3
"""Config check CLI.

Usage:
    python -m linkstate_config.cli CONFIG [--print-running-config] [--format json|yaml] [-v]

Environment variables:
    LINKSTATE_LOG_LEVEL=DEBUG   Console log level
    LINKSTATE_LOG_FILE=path     Log file (only with --log-file)
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .loader import load_config
from .utils.logging_config import setup_logging

logger = logging.getLogger("linkstate_config.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate a routing daemon configuration file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Validate only
    python -m linkstate_config.cli /etc/openr/openr.conf

    # Validate and print the running config (defaults filled in)
    python -m linkstate_config.cli openr.yaml --print-running-config
""",
    )
    parser.add_argument(
        "config",
        type=Path,
        help="Configuration file (JSON or YAML)",
    )
    parser.add_argument(
        "--print-running-config",
        action="store_true",
        help="Print the validated configuration with defaults applied",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format for --print-running-config (default: json)",
    )
    parser.add_argument(
        "--log-file",
        action="store_true",
        help="Also log to LINKSTATE_LOG_FILE",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    setup_logging(
        log_to_file=args.log_file,
        level=logging.DEBUG if args.verbose else None,
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"Configuration OK: {config!r}")

    if args.print_running_config:
        if args.format == "yaml":
            print(config.to_yaml(), end="")
        else:
            print(config.get_running_config())

    return 0


if __name__ == "__main__":
    sys.exit(main())
