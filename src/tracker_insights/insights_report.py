"""Compose every derived insight for one snapshot into a view-ready dict."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from .block_lifecycle import apply_auto_complete, block_phase, block_progress, status_line
from .config import Config
from .entry_contract import Block, Entry, Exercise
from .logging import log_extras
from .muscle_load import balance_focus_label, muscle_load_for_entries, muscle_set_stats
from .progress_summary import (
    BetterDirection,
    MovementSummary,
    daily_volume_stats,
    summarize_movements,
)

logger = logging.getLogger(__name__)

REPORT_SCHEMA_VERSION = "insights_report.v1"


def _summary_payload(summary: MovementSummary) -> dict[str, Any]:
    return {
        "name": summary.name,
        "kind": summary.kind,
        "unit": summary.unit,
        "direction": summary.direction,
        "last_value": summary.last_value,
        "best_value": summary.best_value,
        "last_display": summary.last_display,
        "best_display": summary.best_display,
        "count": summary.count,
        "first_date": summary.first_date.isoformat(),
        "last_date": summary.last_date.isoformat(),
        "date_range_text": summary.date_range_text,
    }


def _session_counts(entries: Iterable[Entry]) -> Counter[str]:
    """Distinct logged days per block."""
    days: set[tuple[str, date]] = set()
    for entry in entries:
        if entry.block_id:
            days.add((entry.block_id, entry.date))
    return Counter(block_id for block_id, _ in days)


def _block_payload(block: Block, today: date, session_count: int) -> dict[str, Any]:
    progress = block_progress(block, today)
    return {
        "id": block.id,
        "name": block.name,
        "phase": block_phase(block, today),
        "mode": progress.mode,
        "current_week": progress.current_week,
        "total_weeks": progress.total_weeks,
        "status_text": progress.status_text,
        "session_count": session_count,
        "status_line": status_line(block, today, session_count),
    }


def build_insights_report(
    entries: Iterable[Entry],
    blocks: Iterable[Block],
    exercises: Iterable[Exercise],
    *,
    today: date,
    config: Config | None = None,
    block_id: str | None = None,
    directions: Mapping[str, BetterDirection] | None = None,
) -> dict[str, Any]:
    config = config or Config()
    entry_list = list(entries)
    # Expired blocks are closed as of today before rendering.
    block_list = apply_auto_complete(blocks, today)
    exercise_list = list(exercises)
    scoped = [
        entry for entry in entry_list if block_id is None or entry.block_id == block_id
    ]

    summaries = summarize_movements(
        scoped,
        directions=directions,
        default_time_direction=config.default_time_direction,
        case_insensitive=config.case_insensitive_grouping,
    )
    loads = muscle_load_for_entries(
        entry_list,
        exercise_list,
        block_id=block_id,
        basis=config.muscle_share_basis,
    )
    volume = daily_volume_stats(scoped)
    sessions = _session_counts(entry_list)

    logger.debug(
        "Built insights report",
        extra=log_extras(
            entry_count=len(entry_list),
            movement_count=len(summaries),
            block_id=block_id,
        ),
    )

    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "today": today.isoformat(),
        "scope": {"block_id": block_id},
        "movements": [_summary_payload(summary) for summary in summaries],
        "muscle_load": [
            {
                "muscle": load.muscle,
                "total": load.total,
                "percent_label": load.percent_label,
                "primary_bar_width": load.primary_bar_width,
                "secondary_bar_width": load.secondary_bar_width,
            }
            for load in loads
        ],
        "muscle_sets": [
            {
                "muscle": stat.muscle,
                "primary_sets": stat.primary_sets,
                "secondary_sets": stat.secondary_sets,
                "exercise_count": stat.exercise_count,
            }
            for stat in muscle_set_stats(entry_list, exercise_list, block_id=block_id)
        ],
        "balance_focus": balance_focus_label(entry_list, exercise_list, block_id=block_id),
        "volume": (
            {"best": volume.best, "last": volume.last} if volume is not None else None
        ),
        "blocks": [
            _block_payload(block, today, sessions.get(block.id, 0)) for block in block_list
        ],
    }
