from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tarkov_overlay.adapters.tarkov_dev import SnapshotTaskFetcher
from tarkov_overlay.app import apply_overlay_file, build_overlay, check_overrides, validate_sources
from tarkov_overlay.config import VALID_MODES, ConfigurationError, configure_logging, get_paths_config
from tarkov_overlay.ui.report import (
    print_build_result,
    print_check_report,
    print_json,
    print_validation_results,
    write_json,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tarkov_overlay.config import OverlayPathsConfig

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="tarkov-overlay",
        description="Build, validate and check the tarkov.dev data overlay",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Overlay project root (defaults to $TARKOV_OVERLAY_ROOT or the current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("build", help="Merge source files into dist/overlay.json")
    subparsers.add_parser("validate", help="Validate source files against their JSON Schemas")

    check = subparsers.add_parser(
        "check-overrides",
        help="Check which task overrides are still needed against live tarkov.dev data",
    )
    check.add_argument(
        "--snapshot",
        type=Path,
        help="Read live tasks from a saved JSON snapshot instead of the API",
    )
    check.add_argument(
        "--mode",
        choices=VALID_MODES,
        default=None,
        help="Game mode to query (defaults to $TARKOV_DEV_GAME_MODE or regular)",
    )
    check.add_argument(
        "--json",
        action="store_true",
        help="Print the machine-readable report instead of the text report",
    )

    apply = subparsers.add_parser("apply", help="Apply a built overlay to a saved entity list")
    apply.add_argument(
        "--overlay",
        type=Path,
        default=None,
        help="Built overlay file (defaults to dist/overlay.json under the project root)",
    )
    apply.add_argument(
        "--entities",
        type=Path,
        required=True,
        help="JSON file holding the live entities",
    )
    apply.add_argument(
        "--category",
        type=str,
        default="tasks",
        help="Overlay category to apply (default: %(default)s)",
    )
    apply.add_argument(
        "--mode",
        choices=VALID_MODES,
        default=None,
        help="Layer the given game mode's entries over the base overlay",
    )
    apply.add_argument(
        "--output",
        type=Path,
        help="Write the corrected entities here instead of stdout",
    )

    return parser.parse_args(list(argv))


def _run_command(parsed_args: argparse.Namespace, paths: OverlayPathsConfig) -> int:
    if parsed_args.command == "build":
        print_build_result(build_overlay(paths=paths))
        return 0

    if parsed_args.command == "validate":
        results = validate_sources(paths=paths)
        print_validation_results(results)
        return 0 if all(result.valid for result in results) else 1

    if parsed_args.command == "check-overrides":
        fetcher = SnapshotTaskFetcher(parsed_args.snapshot) if parsed_args.snapshot else None
        report = check_overrides(paths=paths, fetch_tasks=fetcher, game_mode=parsed_args.mode)
        if parsed_args.json:
            print_json(report.to_dict())
        else:
            print_check_report(report)
        return 0

    if parsed_args.command == "apply":
        corrected = apply_overlay_file(
            parsed_args.overlay or paths.overlay_path,
            parsed_args.entities,
            category=parsed_args.category,
            mode=parsed_args.mode,
        )
        if parsed_args.output is not None:
            write_json(parsed_args.output, corrected)
            log.info("Wrote %d entities to %s", len(corrected), parsed_args.output)
        else:
            print_json(corrected)
        return 0

    raise ValueError(f"Unsupported command: {parsed_args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Run one subcommand; exits 2 on configuration errors and 1 on failures."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _run_command(parsed_args, get_paths_config(root_dir=parsed_args.root))
    except ConfigurationError:
        log.exception("CLI configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Exit quietly on Ctrl+C instead of printing a traceback."""
    log.info("Interrupted, exiting")
    sys.exit(0)


def entrypoint() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
