"""CLI argument parsing and main entry point.

* ``gateway-filters check CONFIG`` — load a filters config file, register
  every filter on a fresh context and print the resulting mappings.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from gateway_filters.constants import PACKAGE_NAME, PACKAGE_VERSION
from gateway_filters.context import FilterContext
from gateway_filters.display.logging_config import setup_logging
from gateway_filters.errors import FilterRegistryError

module_logger = logging.getLogger(__name__)


def _print_context(context: FilterContext) -> None:
    if not len(context):
        print(f"Context '{context.name}': no filters configured.")
        return

    print(f"{'FILTER':<20s}  {'INIT':<5s}  {'ASYNC':<5s}  {'DISPATCH':<24s}  {'PATTERNS'}")
    print("─" * 90)
    for holder in context.filter_holders:
        reg = holder.registration
        dispatch = ",".join(t.value for t in reg.dispatcher_types) or "-"
        patterns = " ".join(reg.url_pattern_mappings) or "-"
        print(
            f"{holder.name:<20s}  {'yes' if holder.is_initialized else 'no':<5s}  "
            f"{'yes' if reg.async_supported else 'no':<5s}  {dispatch:<24s}  {patterns}"
        )
        print(f"{'':<20s}  class: {reg.class_name}")

    print(f"\n{len(context)} filter(s) registered in context '{context.name}'.")


# ── ``gateway-filters check`` ───────────────────────────────────────────


def _cmd_check(args: argparse.Namespace) -> int:
    """Entry-point for ``gateway-filters check``."""
    from gateway_filters.config.loader import load_filter_context

    setup_logging(args.log_level, log_dir=args.log_dir, quiet=True)
    module_logger.info("---- %s v%s check: %s ----", PACKAGE_NAME, PACKAGE_VERSION, args.config)

    try:
        context = load_filter_context(args.config, strict=args.strict)
    except FilterRegistryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.init:
        for holder in context.filter_holders:
            try:
                holder.init()
            except Exception as exc:
                module_logger.error("Filter '%s' failed to initialize: %s", holder.name, exc)
                print(f"Error: filter '{holder.name}' failed to initialize: {exc}", file=sys.stderr)
                return 1

    _print_context(context)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with the check subcommand."""
    parser = argparse.ArgumentParser(
        prog="gateway-filters",
        description=f"{PACKAGE_NAME} v{PACKAGE_VERSION}",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {PACKAGE_VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # ── check ────────────────────────────────────────────────────
    sp_check = subparsers.add_parser(
        "check",
        help="Validate a filters config file and print the registered mappings",
    )
    sp_check.add_argument("config", metavar="PATH", help="Path to the filters config (YAML)")
    sp_check.add_argument(
        "--log-level",
        type=str,
        default="info",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set file logging level (default: info)",
    )
    sp_check.add_argument(
        "--log-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory for the log file (default: ./logs)",
    )
    sp_check.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Fail on duplicate filter names instead of skipping them",
    )
    sp_check.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Also call init() on every filter after registering it",
    )
    sp_check.set_defaults(func=_cmd_check)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    sys.exit(args.func(args))
