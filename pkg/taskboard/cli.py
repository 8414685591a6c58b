"""
taskboard: command line helpers for column status mapping.

    taskboard status "In Review" "Shipped"
    taskboard column in_progress
    taskboard statuses
    taskboard ping --config ./taskboard.yaml
"""
import argparse
import logging
import sys
from typing import List, Optional

from .config import Config, configure_logging
from .errors import ConfigError
from .status import column_name_from_status, is_valid_status, status_from_column_name, valid_statuses

logger = logging.getLogger(__name__)


def _cmd_status(args) -> int:
    width = max(len(name) for name in args.names)
    for name in args.names:
        print(f"{name:<{width}}  {status_from_column_name(name).value}")
    return 0


def _cmd_column(args) -> int:
    if not is_valid_status(args.status):
        logger.warning(f"Unknown status {args.status!r}, using default column")
    print(column_name_from_status(args.status))
    return 0


def _cmd_statuses(args) -> int:
    for status in valid_statuses():
        print(f"{status.value:<12} {column_name_from_status(status)}")
    return 0


def _cmd_ping(args) -> int:
    try:
        cfg = Config.load(args.config)
        if not args.verbose:
            logging.getLogger().setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
        client = cfg.make_client()
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    if client.health():
        print(f"OK {client.base_url}")
        return 0
    print(f"Unreachable: {client.base_url}", file=sys.stderr)
    return 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="taskboard",
        description="Map board column names to task statuses",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("status", help="Resolve column names to statuses")
    p.add_argument("names", nargs="+", help="Column name(s)")
    p.set_defaults(func=_cmd_status)

    p = sub.add_parser("column", help="Default column name for a status")
    p.add_argument("status", help="One of: " + ", ".join(s.value for s in valid_statuses()))
    p.set_defaults(func=_cmd_column)

    p = sub.add_parser("statuses", help="List valid statuses")
    p.set_defaults(func=_cmd_statuses)

    p = sub.add_parser("ping", help="Check the board API is reachable")
    p.add_argument("--config", default=None, help="Path to taskboard.yaml")
    p.set_defaults(func=_cmd_ping)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else "WARNING")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
