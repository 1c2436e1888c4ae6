"""Partition a flat entry history into per-movement histories."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from .entry_contract import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MovementGroup:
    """All entries sharing one movement name, oldest first."""

    name: str
    entries: tuple[Entry, ...]


def entry_sort_key(entry: Entry) -> tuple[date, datetime]:
    return (entry.date, entry.created_at)


def group_by_name(
    entries: Iterable[Entry],
    *,
    case_insensitive: bool = False,
) -> list[MovementGroup]:
    """Group entries by exact movement name.

    With ``case_insensitive`` the key is casefolded and the group keeps the
    casing of the first entry seen for it. Tracked state is ignored here;
    callers filter for their own purposes.
    """
    buckets: dict[str, list[Entry]] = {}
    display_names: dict[str, str] = {}

    for entry in entries:
        key = entry.name.casefold() if case_insensitive else entry.name
        if key not in buckets:
            buckets[key] = []
            display_names[key] = entry.name
        buckets[key].append(entry)

    groups = [
        MovementGroup(
            name=display_names[key],
            entries=tuple(sorted(items, key=entry_sort_key)),
        )
        for key, items in buckets.items()
    ]
    groups.sort(key=lambda group: (group.name.lower(), group.name))
    logger.debug("Grouped entries into %d movement groups", len(groups))
    return groups
