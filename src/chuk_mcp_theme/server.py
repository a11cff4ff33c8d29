#!/usr/bin/env python3
"""
Entry point for the CHUK Theme MCP Server.

Parses transport options, points the loader at the project's token sets,
and checks every token set before serving. A malformed token set is a
configuration defect: with --strict it aborts startup, otherwise it is
logged and skipped.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from chuk_mcp_theme.models.token import ConfigurationError

if TYPE_CHECKING:
    from chuk_mcp_theme.themes import TokenSetLoader

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def check_token_sets(loader: TokenSetLoader) -> list[str]:
    """
    Load and validate every token set the loader can see.

    Returns:
        One message per file that failed, empty if all loaded
    """
    failures: list[str] = []
    for path in loader.token_set_files():
        try:
            token_set = loader.load_file(path)
        except ConfigurationError as e:
            failures.append(str(e))
            continue
        logger.debug(f"Token set '{token_set.name}' OK ({len(token_set.tokens)} tokens)")
    return failures


def build_parser() -> argparse.ArgumentParser:
    """Command line options for the server."""
    parser = argparse.ArgumentParser(description="CHUK Theme MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--themes-dir",
        type=Path,
        default=None,
        help="Project token set directory (default: ./themes)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Refuse to start if any token set fails validation",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point with transport detection."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # Deferred so --debug covers server construction
    from chuk_mcp_theme.async_server import mcp, token_set_loader

    if args.themes_dir is not None:
        token_set_loader.project_path = args.themes_dir
        token_set_loader.clear_cache()
        logger.info(f"Project themes dir: {args.themes_dir}")

    failures = check_token_sets(token_set_loader)
    for failure in failures:
        logger.error(failure)
    if failures and args.strict:
        logger.error(f"{len(failures)} token set(s) failed validation, not starting")
        sys.exit(1)

    if args.transport == "stdio":
        logger.info("Serving theme tokens over stdio")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Serving theme tokens over http on port {args.port}")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
