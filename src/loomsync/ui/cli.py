from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from loomsync.app import list_items, run_collector
from loomsync.config import (
    CollectorConfig,
    ConfigurationError,
    configure_logging,
    get_collector_config,
    parse_kinds,
)
from loomsync.domain.model import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from loomsync.domain.model import Item

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile observed Docker resources")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect = subparsers.add_parser("collect", help="Run reconciliation rounds")
    collect.add_argument(
        "--once",
        action="store_true",
        help="Run a single round and exit (same as --max-cycles 1)",
    )
    collect.add_argument(
        "--max-cycles",
        type=int,
        help="Number of rounds to run before stopping (defaults to config, forever if unset)",
    )
    collect.add_argument(
        "--interval",
        type=float,
        help="Seconds to sleep between rounds (defaults to config)",
    )
    collect.add_argument(
        "--workers",
        type=int,
        help="Worker threads for the per-resource map step (defaults to config)",
    )
    collect.add_argument(
        "--kinds",
        type=str,
        help="Comma-separated resource kinds to reconcile (default: all)",
    )

    show = subparsers.add_parser("show", help="Print the published items of one kind")
    show.add_argument(
        "kind",
        choices=[kind.value for kind in ResourceKind],
        help="Resource kind to print",
    )
    show.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON object per line instead of a summary",
    )

    return parser.parse_args(list(argv))


def _collector_config(args: argparse.Namespace) -> CollectorConfig:
    defaults = get_collector_config()
    max_cycles = 1 if args.once else args.max_cycles
    if max_cycles is not None and max_cycles < 1:
        raise ValueError("--max-cycles must be at least 1")
    if args.interval is not None and args.interval < 0:
        raise ValueError("--interval must be non-negative")
    if args.workers is not None and args.workers < 1:
        raise ValueError("--workers must be at least 1")
    return CollectorConfig(
        interval_seconds=defaults.interval_seconds if args.interval is None else args.interval,
        max_workers=args.workers or defaults.max_workers,
        max_cycles=max_cycles if max_cycles is not None else defaults.max_cycles,
        kinds=parse_kinds(args.kinds) if args.kinds else defaults.kinds,
    )


def _format_item(item: Item, *, as_json: bool) -> str:
    if as_json:
        return json.dumps(
            {
                "logical_id": item.logical_id,
                "item_type": item.item_type.value,
                "name": item.attributes.name,
                "description": item.attributes.description,
                "fields": dict(item.attributes.fields),
                "edges": [
                    {
                        "relationship_type": edge.relationship_type.value,
                        "target_item_type": edge.target_item_type.value,
                        "target_logical_id": edge.target_logical_id,
                    }
                    for edge in item.edges
                ],
            },
            sort_keys=True,
        )
    edges = ", ".join(f"{edge.relationship_type}->{edge.target_logical_id}" for edge in item.edges)
    return f"{item.logical_id}  {item.attributes.name}" + (f"  [{edges}]" if edges else "")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
        collector_config = (
            _collector_config(parsed_args) if parsed_args.command == "collect" else None
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if collector_config is not None:
            run = run_collector(config=collector_config)
            if run.aborted_cycles:
                log.warning("%s cycles aborted during collection", run.aborted_cycles)
        elif parsed_args.command == "show":
            for item in list_items(ResourceKind(parsed_args.kind)):
                print(_format_item(item, as_json=parsed_args.json))  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during collection")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
