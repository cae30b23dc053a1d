#!/usr/bin/env python3
"""CLI entry point: serve sandboxed filesystem tools over MCP stdio."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from src.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_READ_SIZE,
    ConfigNotFoundError,
    ConfigValidationError,
    FsGateConfig,
    build_config,
)
from src.server import run_stdio_server

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsgate",
        description="Secure filesystem MCP server restricted to allowed directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Read-only access to one directory
    fsgate /srv/projects

    # Allow writes and deletes in two directories
    fsgate --allow-destructive /srv/projects /tmp/scratch

    # Load settings from a file, adding one more directory
    fsgate --config config/fsgate.yaml ~/notes
        """,
    )
    parser.add_argument(
        "allowed_directories",
        nargs="*",
        help="Directories the server may access",
    )
    parser.add_argument(
        "--allow-write",
        action="store_true",
        default=None,
        help="Enable write_file, edit_file and create_directory",
    )
    parser.add_argument(
        "--allow-destructive",
        action="store_true",
        default=None,
        help="Enable delete_file, move_file and delete_directory (implies --allow-write)",
    )
    parser.add_argument(
        "--max-read-size",
        type=int,
        default=None,
        help=f"Maximum file size in bytes for whole-file reads (default: {DEFAULT_MAX_READ_SIZE})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help=f"Maximum depth for directory_tree and search_files (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with an 'fsgate' section",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        help="Log level for stderr output (default: INFO)",
    )
    return parser


def load_config(args: argparse.Namespace) -> FsGateConfig:
    """Merge the config file (if any) with command-line flags."""
    return build_config(
        allowed_directories=args.allowed_directories,
        config_path=args.config,
        allow_write=args.allow_write,
        allow_destructive=args.allow_destructive,
        max_read_size=args.max_read_size,
        max_depth=args.max_depth,
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args)
    except (ConfigNotFoundError, ConfigValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger.info(
        f"Starting fsgate with allowed directories "
        f"{[str(d) for d in config.allowed_directories]}"
    )
    logger.info(
        f"allow_write={config.allow_write} allow_destructive={config.allow_destructive} "
        f"max_read_size={config.max_read_size} max_depth={config.max_depth}"
    )

    try:
        asyncio.run(run_stdio_server(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
