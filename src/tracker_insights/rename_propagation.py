"""Plan the history rewrite for a movement rename.

Renaming is a bulk rewrite of every entry carrying the old name, tracked or
not. This only plans it; the caller persists each planned entry and reloads
derived summaries afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .entry_contract import Entry
from .logging import log_extras

logger = logging.getLogger(__name__)


def plan_rename(
    old_name: str,
    new_name: str,
    entries: Iterable[Entry],
    *,
    owner_id: str | None = None,
) -> list[Entry]:
    """Return copies of every ``old_name`` entry renamed to ``new_name``."""
    target = new_name.strip()
    if not target or old_name.strip() == target:
        return []

    plan = [
        entry.model_copy(update={"name": target})
        for entry in entries
        if entry.name == old_name and (owner_id is None or entry.owner_id == owner_id)
    ]
    logger.debug(
        "Planned rename of %d entries",
        len(plan),
        extra=log_extras(old_name=old_name, new_name=target, owner_id=owner_id),
    )
    return plan
