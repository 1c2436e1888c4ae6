"""CLI entry point for computing insights from an exported snapshot."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Any, Sequence

from pydantic import BaseModel

from .config import Config
from .entry_contract import Block, Entry, Exercise
from .insights_report import build_insights_report
from .logging import log_extras, setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 2


class Snapshot(BaseModel):
    entries: list[Entry] = []
    blocks: list[Block] = []
    exercises: list[Exercise] = []


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tracker-insights",
        description="Compute movement progress, muscle load and block status from a snapshot.",
    )
    parser.add_argument(
        "--snapshot",
        required=True,
        type=Path,
        help="JSON file with 'entries', 'blocks' and 'exercises' arrays.",
    )
    parser.add_argument(
        "--today",
        type=_parse_date,
        default=None,
        help="Reference date for block progress (YYYY-MM-DD). Defaults to the local date.",
    )
    parser.add_argument(
        "--block-id",
        default=None,
        help="Restrict movement, volume and muscle insights to one block.",
    )
    parser.add_argument(
        "--time-direction",
        choices=("higher", "lower"),
        default=None,
        help="Override which time result counts as best (INSIGHTS_TIME_DIRECTION).",
    )
    parser.add_argument(
        "--case-insensitive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Merge movement names differing only in case (INSIGHTS_CASE_INSENSITIVE_GROUPING).",
    )
    parser.add_argument(
        "--direction",
        action="append",
        default=[],
        metavar="MOVEMENT=higher|lower",
        help="Per-movement best direction override (repeatable).",
    )
    return parser


def _parse_directions(values: list[str]) -> dict[str, Any]:
    directions: dict[str, Any] = {}
    for raw in values:
        name, sep, direction = raw.rpartition("=")
        direction = direction.strip().lower()
        if not sep or not name.strip() or direction not in ("higher", "lower"):
            raise ValueError(f"invalid --direction {raw!r}, expected MOVEMENT=higher|lower")
        directions[name.strip()] = direction
    return directions


def _resolve_config(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.time_direction is not None:
        config = replace(config, default_time_direction=args.time_direction)
    if args.case_insensitive is not None:
        config = replace(config, case_insensitive_grouping=bool(args.case_insensitive))
    return config


def _run(args: argparse.Namespace) -> int:
    config = _resolve_config(args)
    setup_logging(config.log_format, config.log_level)

    try:
        directions = _parse_directions(args.direction)
        raw = json.loads(args.snapshot.read_text(encoding="utf-8"))
        snapshot = Snapshot.model_validate(raw)
    except (OSError, ValueError) as exc:
        logger.error(
            "Could not load snapshot: %s",
            exc,
            extra=log_extras(snapshot_path=str(args.snapshot)),
        )
        return EXIT_BAD_INPUT

    today = args.today or date.today()
    logger.info(
        "Computing insights",
        extra=log_extras(
            snapshot_path=str(args.snapshot),
            entry_count=len(snapshot.entries),
            block_count=len(snapshot.blocks),
            today=today.isoformat(),
        ),
    )
    report = build_insights_report(
        snapshot.entries,
        snapshot.blocks,
        snapshot.exercises,
        today=today,
        config=config,
        block_id=args.block_id,
        directions=directions,
    )
    print(json.dumps(report, indent=2, sort_keys=True))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    raise SystemExit(_run(args))


if __name__ == "__main__":
    main()
