"""Per-movement progress summaries: last, best, count and date span.

Only tracked entries with a comparable value participate. A group with no
qualifying entries produces no summary at all rather than a zero-filled one,
so the caller can show its own empty state.

"Best" depends on a direction. Heavier weight and more reps/rounds are always
better. Time is ambiguous (a longer hold vs. a faster sprint), so time-kind
movements default to ``default_time_direction`` and any movement can be
overridden by name through ``directions``.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Literal

from .entry_contract import Entry, MetricKind
from .metric_values import comparable_value, format_value, metric_kind, metric_unit
from .movement_grouping import MovementGroup, entry_sort_key, group_by_name

logger = logging.getLogger(__name__)

BetterDirection = Literal["higher", "lower"]

BETTER_DIRECTIONS: tuple[str, ...] = ("higher", "lower")
BEST_VALUE_TOLERANCE = 0.0001


@dataclass(frozen=True)
class MovementSummary:
    name: str
    kind: MetricKind
    unit: str | None
    direction: BetterDirection
    last_value: float
    best_value: float
    count: int
    first_date: date
    last_date: date
    entries: tuple[Entry, ...]

    @property
    def last_display(self) -> str:
        return format_value(self.last_value, self.kind, self.unit)

    @property
    def best_display(self) -> str:
        return format_value(self.best_value, self.kind, self.unit)

    @property
    def date_range_text(self) -> str:
        return date_range_text(self.first_date, self.last_date)


@dataclass(frozen=True)
class HistoryRow:
    entry: Entry
    value: float
    display: str
    is_best: bool


@dataclass(frozen=True)
class VolumeStats:
    best: float
    last: float


def format_summary_date(value: date) -> str:
    """Abbreviated calendar date, e.g. "Jan 5, 2024"."""
    return f"{value:%b} {value.day}, {value.year}"


def date_range_text(first_date: date, last_date: date) -> str:
    first = format_summary_date(first_date)
    if first == format_summary_date(last_date):
        return f"on {first}"
    return f"since {first}"


def is_best_value(value: float, best: float) -> bool:
    return abs(value - best) < BEST_VALUE_TOLERANCE


def resolve_better_direction(
    name: str,
    kind: MetricKind,
    *,
    directions: Mapping[str, BetterDirection] | None = None,
    default_time_direction: BetterDirection = "higher",
) -> BetterDirection:
    if directions and name in directions:
        return directions[name]
    if kind == "time":
        return default_time_direction
    return "higher"


def _scored_entries(entries: Iterable[Entry]) -> list[tuple[Entry, float]]:
    scored: list[tuple[Entry, float]] = []
    for entry in sorted(entries, key=entry_sort_key):
        if not entry.tracked:
            continue
        value = comparable_value(entry)
        if value is not None:
            scored.append((entry, value))
    return scored


def summarize_group(
    group: MovementGroup,
    *,
    directions: Mapping[str, BetterDirection] | None = None,
    default_time_direction: BetterDirection = "higher",
) -> MovementSummary | None:
    scored = _scored_entries(group.entries)
    if not scored:
        return None

    first, _ = scored[0]
    last, last_value = scored[-1]
    kind = metric_kind(last) or "weight"
    direction = resolve_better_direction(
        group.name,
        kind,
        directions=directions,
        default_time_direction=default_time_direction,
    )

    values = [value for _, value in scored]
    best = max(values) if direction == "higher" else min(values)

    return MovementSummary(
        name=group.name,
        kind=kind,
        unit=metric_unit(last),
        direction=direction,
        last_value=last_value,
        best_value=best,
        count=len(scored),
        first_date=first.date,
        last_date=last.date,
        entries=tuple(entry for entry, _ in scored),
    )


def summarize_movements(
    entries: Iterable[Entry],
    *,
    directions: Mapping[str, BetterDirection] | None = None,
    default_time_direction: BetterDirection = "higher",
    case_insensitive: bool = False,
) -> list[MovementSummary]:
    """Summaries for every movement with at least one qualifying entry."""
    tracked = [entry for entry in entries if entry.tracked]
    summaries: list[MovementSummary] = []
    for group in group_by_name(tracked, case_insensitive=case_insensitive):
        summary = summarize_group(
            group,
            directions=directions,
            default_time_direction=default_time_direction,
        )
        if summary is None:
            logger.debug("No qualifying entries for movement %r", group.name)
            continue
        summaries.append(summary)
    return summaries


def history_rows(summary: MovementSummary) -> list[HistoryRow]:
    """Newest-first history for a movement detail view, with bests marked."""
    rows: list[HistoryRow] = []
    for entry in reversed(summary.entries):
        value = comparable_value(entry)
        if value is None:
            continue
        rows.append(
            HistoryRow(
                entry=entry,
                value=value,
                display=format_value(value, summary.kind, summary.unit),
                is_best=is_best_value(value, summary.best_value),
            )
        )
    return rows


def entry_volume(entry: Entry) -> float:
    """Load x reps x sets for a rep-based loaded entry, otherwise 0.

    An entry logged without a set count carries no volume.
    """
    if entry.load is None or entry.volume is None or entry.volume.kind != "reps":
        return 0.0
    weight = entry.load.magnitude
    if entry.load.multiplier == "double":
        weight *= 2
    reps = entry.volume.count
    if weight <= 0 or reps <= 0:
        return 0.0
    return weight * reps * (entry.sets or 0)


def daily_volume_stats(entries: Iterable[Entry]) -> VolumeStats | None:
    """Best and most recent per-day volume over days with loaded rep work."""
    by_day: dict[date, float] = defaultdict(float)
    for entry in entries:
        if not entry.tracked:
            continue
        volume = entry_volume(entry)
        if volume > 0:
            by_day[entry.date] += volume

    totals = [by_day[day] for day in sorted(by_day)]
    if not totals:
        return None
    return VolumeStats(best=max(totals), last=totals[-1])
