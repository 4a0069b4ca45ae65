from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import ValidationError

from mediasync.app import import_library_snapshot, sync_favorite_ids
from mediasync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mirror a media server library locally")
    subparsers = parser.add_subparsers(dest="command", required=True)

    library = subparsers.add_parser("import", help="Import a library snapshot (JSON)")
    library.add_argument(
        "snapshot",
        type=Path,
        help="Path to a JSON document with Artists, Albums and Tracks",
    )
    library.add_argument(
        "--source",
        type=str,
        required=True,
        help="Name of the media source the snapshot was taken from",
    )
    library.add_argument(
        "--progress-interval",
        type=int,
        default=None,
        help="Report progress every N tracks (defaults to config)",
    )

    favorites = subparsers.add_parser("favorites", help="Sync liked tracks from an id list")
    favorites.add_argument(
        "ids",
        type=Path,
        help="Path to a text file with one liked track id per line",
    )
    favorites.add_argument(
        "--source",
        type=str,
        required=True,
        help="Name of the media source the ids belong to",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if not args.source.strip():
        raise ValueError("--source must not be blank")
    if args.command == "import" and args.progress_interval is not None:
        if args.progress_interval <= 0:
            raise ValueError("--progress-interval must be positive")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "import":
            import_library_snapshot(
                parsed_args.snapshot,
                source_name=parsed_args.source,
                progress_interval=parsed_args.progress_interval,
            )
        elif parsed_args.command == "favorites":
            sync_favorite_ids(parsed_args.ids, source_name=parsed_args.source)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ValidationError:
        log.exception("Invalid snapshot payload")
        sys.exit(2)
    except Exception:
        log.exception("Sync failed")
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
