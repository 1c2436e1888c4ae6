"""Combined primary/secondary muscle load distribution.

Weighted total per muscle is ``primary_share * 0.7 + secondary_share * 0.3``.
Rendered bar widths are scaled so the heaviest muscle always fills 75% of the
available width, while the percentage label keeps the unscaled weighted total.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from .entry_contract import Entry, Exercise

logger = logging.getLogger(__name__)

PRIMARY_WEIGHT = 0.7
SECONDARY_WEIGHT = 0.3
MAX_BAR_WIDTH = 0.75

ShareBasis = Literal["exercises", "entries"]

SHARE_BASES: tuple[str, ...] = ("exercises", "entries")

MUSCLE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "upper": ("chest", "back", "shoulders", "triceps", "biceps", "forearms"),
    "lower": ("quads", "hamstrings", "glutes", "calves"),
    "core": ("core",),
}


@dataclass(frozen=True)
class MuscleLoad:
    muscle: str
    total: float
    primary_component: float
    secondary_component: float
    primary_bar_width: float
    secondary_bar_width: float

    @property
    def percent_label(self) -> str:
        return percent_label(self.total)


@dataclass(frozen=True)
class MuscleSetStat:
    muscle: str
    primary_sets: int
    secondary_sets: int
    exercise_count: int

    @property
    def total_sets(self) -> int:
        return self.primary_sets + self.secondary_sets


def percent_label(total: float) -> str:
    return f"{int(round(total * 100))}%"


def combine_muscle_load(
    primary_shares: Mapping[str, float],
    secondary_shares: Mapping[str, float],
) -> list[MuscleLoad]:
    """Combine per-muscle shares (0..1) into a render-ready distribution."""
    raw: list[tuple[str, float, float, float]] = []
    for muscle in set(primary_shares) | set(secondary_shares):
        primary_component = primary_shares.get(muscle, 0.0) * PRIMARY_WEIGHT
        secondary_component = secondary_shares.get(muscle, 0.0) * SECONDARY_WEIGHT
        total = primary_component + secondary_component
        if total > 0:
            raw.append((muscle, total, primary_component, secondary_component))

    max_total = max((item[1] for item in raw), default=0.0)
    if max_total <= 0:
        return []

    bar_scale = MAX_BAR_WIDTH / max_total
    loads = [
        MuscleLoad(
            muscle=muscle,
            total=total,
            primary_component=primary_component,
            secondary_component=secondary_component,
            primary_bar_width=primary_component * bar_scale,
            secondary_bar_width=secondary_component * bar_scale,
        )
        for muscle, total, primary_component, secondary_component in raw
    ]
    loads.sort(key=lambda load: (-load.total, load.muscle))
    return loads


def compute_muscle_shares(
    performed: Iterable[tuple[Exercise, float]],
) -> tuple[dict[str, float], dict[str, float]]:
    """Fraction of the weighted exercise selection engaging each muscle.

    ``performed`` pairs each exercise with its weight in the selection (1 per
    distinct exercise, or a count of logged entries). Returns
    ``(primary_shares, secondary_shares)``.
    """
    primary: dict[str, float] = defaultdict(float)
    secondary: dict[str, float] = defaultdict(float)
    total_weight = 0.0

    for exercise, weight in performed:
        if weight <= 0:
            continue
        total_weight += weight
        for muscle in exercise.primary_muscles:
            primary[muscle] += weight
        for muscle in exercise.secondary_muscles:
            secondary[muscle] += weight

    if total_weight <= 0:
        return {}, {}
    return (
        {muscle: value / total_weight for muscle, value in primary.items()},
        {muscle: value / total_weight for muscle, value in secondary.items()},
    )


def _catalogue_by_name(exercises: Iterable[Exercise]) -> dict[str, Exercise]:
    return {exercise.name: exercise for exercise in exercises}


def _scoped_entries(entries: Iterable[Entry], block_id: str | None) -> list[Entry]:
    return [
        entry
        for entry in entries
        if entry.tracked and (block_id is None or entry.block_id == block_id)
    ]


def muscle_load_for_entries(
    entries: Iterable[Entry],
    exercises: Iterable[Exercise],
    *,
    block_id: str | None = None,
    basis: ShareBasis = "exercises",
) -> list[MuscleLoad]:
    """Muscle load over tracked entries in a block, or across all blocks.

    Entries are matched to the catalogue by movement name; names with no
    catalogue entry carry no muscle information and are skipped.
    """
    catalogue = _catalogue_by_name(exercises)
    weights: dict[str, float] = defaultdict(float)
    unknown: set[str] = set()

    for entry in _scoped_entries(entries, block_id):
        if entry.name not in catalogue:
            unknown.add(entry.name)
            continue
        if basis == "exercises":
            weights[entry.name] = 1.0
        else:
            weights[entry.name] += 1.0

    if unknown:
        logger.debug("Skipped %d movement(s) without muscle data", len(unknown))

    primary, secondary = compute_muscle_shares(
        (catalogue[name], weight) for name, weight in weights.items()
    )
    return combine_muscle_load(primary, secondary)


def muscle_set_stats(
    entries: Iterable[Entry],
    exercises: Iterable[Exercise],
    *,
    block_id: str | None = None,
) -> list[MuscleSetStat]:
    """Logged sets per muscle, split primary/secondary, heaviest first."""
    catalogue = _catalogue_by_name(exercises)
    primary_sets: dict[str, int] = defaultdict(int)
    secondary_sets: dict[str, int] = defaultdict(int)
    exercise_names: dict[str, set[str]] = defaultdict(set)

    for entry in _scoped_entries(entries, block_id):
        exercise = catalogue.get(entry.name)
        if exercise is None:
            continue
        sets = entry.sets or 0
        for muscle in exercise.primary_muscles:
            primary_sets[muscle] += sets
            exercise_names[muscle].add(exercise.name)
        for muscle in exercise.secondary_muscles:
            secondary_sets[muscle] += sets
            exercise_names[muscle].add(exercise.name)

    stats = [
        MuscleSetStat(
            muscle=muscle,
            primary_sets=primary_sets.get(muscle, 0),
            secondary_sets=secondary_sets.get(muscle, 0),
            exercise_count=len(exercise_names[muscle]),
        )
        for muscle in exercise_names
    ]
    stats.sort(key=lambda stat: (-stat.total_sets, stat.muscle))
    return stats


def balance_focus_label(
    entries: Iterable[Entry],
    exercises: Iterable[Exercise],
    *,
    block_id: str | None = None,
) -> str:
    """Classify a scope as "upper body", "lower body" or "full body"."""
    catalogue = _catalogue_by_name(exercises)
    scores: dict[str, float] = {category: 0.0 for category in MUSCLE_CATEGORIES}
    seen: set[str] = set()

    for entry in _scoped_entries(entries, block_id):
        if entry.name in seen:
            continue
        seen.add(entry.name)
        exercise = catalogue.get(entry.name)
        if exercise is None:
            continue
        for category, muscles in MUSCLE_CATEGORIES.items():
            if any(muscle in exercise.primary_muscles for muscle in muscles):
                scores[category] += 1.0
            if any(muscle in exercise.secondary_muscles for muscle in muscles):
                scores[category] += 0.5

    upper = scores["upper"]
    lower = scores["lower"]
    if lower > upper * 2.0:
        return "lower body"
    if upper > lower * 2.0:
        return "upper body"
    return "full body"
