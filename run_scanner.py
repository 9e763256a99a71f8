#!/usr/bin/env python3
"""
Round-trip arbitrage scanner CLI.

Quotes every configured pair A -> B -> A through the aggregator API and
prints a table of returns, highlighting round trips that beat the margin.

Usage:
    python3 run_scanner.py
    python3 run_scanner.py --config configs/polygon.yaml
    python3 run_scanner.py --config configs/polygon.yaml --once
"""

import argparse
import asyncio
import dataclasses
import sys

import logging_config
from dex.presentation import ConsoleTable, LoggingSink
from dex.quote_client import QuoteClient
from dex.runner import ArbitrageRunner
from roundtrip_arbitrage.config_loader import load_scanner_config
from roundtrip_arbitrage.exceptions import ConfigurationError, ValidationError
from roundtrip_arbitrage.version import get_version


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Round-trip DEX aggregator arbitrage scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with default config
  python3 run_scanner.py

  # Single scan (for testing/CI)
  python3 run_scanner.py --config configs/polygon.yaml --once

  # Log rows instead of drawing the table
  python3 run_scanner.py --quiet
        """,
    )

    parser.add_argument(
        "--config",
        default="configs/polygon.yaml",
        help="Path to config YAML file (default: configs/polygon.yaml)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single scan and exit (overrides config setting)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Log result rows instead of printing a table",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of pairs evaluated at once (overrides config setting)",
    )

    return parser.parse_args(argv)


async def run_scanner(config, quiet: bool) -> None:
    sink = LoggingSink() if quiet else ConsoleTable()
    api = config.quote_api
    async with QuoteClient(
        base_url=api.base_url,
        protocols=api.protocols,
        main_route_parts=api.main_route_parts,
        timeout_sec=api.timeout_sec,
    ) as client:
        runner = ArbitrageRunner(config, client, sink)
        await runner.run()


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    if args.debug:
        logging_config.setup_debug()
    else:
        logging_config.setup()

    try:
        config = load_scanner_config(args.config)
    except (ConfigurationError, ValidationError) as e:
        print(f"❌ Config error: {e}", file=sys.stderr)
        return 1

    overrides = {}
    if args.once:
        overrides["once"] = True
    if args.concurrency is not None:
        if args.concurrency < 1:
            print("❌ --concurrency must be at least 1", file=sys.stderr)
            return 1
        overrides["max_concurrency"] = args.concurrency
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        asyncio.run(run_scanner(config, args.quiet))
    except KeyboardInterrupt:
        print("\n\n⏸ Stopped by user")
        return 0
    except Exception as e:
        print(f"❌ Scanner failed: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
