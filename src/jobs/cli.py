#!/usr/bin/env python3
"""
Busy Blocker command line interface.

Usage:
    busy-blocker reconcile [--config PATH] [--dry-run]   # mirror busy time (run hourly)
    busy-blocker cleanup [--config PATH] [--dry-run]     # delete all blocked events
    busy-blocker tag CALENDAR_ID                         # print the correlation tag
"""

import argparse
import logging
import os
import sys

from integration.calendar_integration import get_provider
from jobs.metrics import push_metrics
from jobs.runner import cleanup_all, reconcile_all
from storage.config_store import ConfigError, ConfigStore
from sync.tags import tag_for

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_CONFIG = 2


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def _load_config(args):
    overrides = {"dry_run": True} if args.dry_run else {}
    return ConfigStore(path=args.config).load(**overrides)


def _push(operation: str) -> None:
    url = os.getenv("PROMETHEUS_PUSH_URL", "").strip()
    if not url:
        return
    try:
        push_metrics(url, job=f"busy_blocker_{operation}")
    except OSError as e:
        logger.warning(f"Could not push metrics to {url}: {e}")


def cmd_reconcile(args) -> int:
    config = _load_config(args)
    provider = get_provider(config)
    reports = reconcile_all(provider, config)
    created = sum(len(r.created) for r in reports)
    deleted = sum(len(r.deleted) + len(r.duplicates_deleted) for r in reports)
    print(f"Reconciled {len(reports)} calendars: {created} blocked, {deleted} removed")
    return 0


def cmd_cleanup(args) -> int:
    config = _load_config(args)
    provider = get_provider(config)
    report = cleanup_all(provider, config)
    print(f"Removed {len(report.deleted)} blocked events")
    return 0


def cmd_tag(args) -> int:
    print(tag_for(args.calendar_id))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="busy-blocker",
        description="Block busy time from source calendars in a primary calendar",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    # accepted after the subcommand too; SUPPRESS keeps the top-level value otherwise
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--log-level", default=argparse.SUPPRESS, help="Logging level (default: INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("reconcile", cmd_reconcile, "Create and remove blocked events"),
        ("cleanup", cmd_cleanup, "Delete every blocked event for the configured calendars"),
    ):
        sub = subparsers.add_parser(name, help=help_text, parents=[common])
        sub.add_argument("--config", default=None, help="Path to the JSON config file")
        sub.add_argument("--dry-run", action="store_true", help="Report without changing any calendar")
        sub.set_defaults(func=handler, operation=name)

    tag = subparsers.add_parser("tag", help="Print the correlation tag of a source calendar", parents=[common])
    tag.add_argument("calendar_id")
    tag.set_defaults(func=cmd_tag, operation=None)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        code = args.func(args)
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except Exception as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        code = EXIT_FAILURE

    if args.operation:
        _push(args.operation)
    return code


if __name__ == "__main__":
    sys.exit(main())
