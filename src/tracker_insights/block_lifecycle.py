"""Week progress and status text for training blocks.

A block is in exactly one display mode:

- ongoing: no end date and no duration -> "Week <n>"
- bounded-active: end date or duration, not completed -> "Week <n> of <total>"
- completed: completed date set -> "<start> – <completed>", never reads today

``today`` is always passed in explicitly; nothing here reads the clock.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

from .entry_contract import Block

BlockPhase = Literal["planned", "active", "completed"]
DisplayMode = Literal["ongoing", "bounded", "completed"]


@dataclass(frozen=True)
class BlockProgress:
    mode: DisplayMode
    current_week: int | None
    total_weeks: int | None
    status_text: str


def format_block_date(value: date) -> str:
    """Short calendar date, e.g. "Jan 15"."""
    return f"{value:%b} {value.day}"


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from ``start`` to ``end``; negative when end is earlier."""
    return (end - start).days // 7


def total_span_days(block: Block) -> int | None:
    if block.duration_weeks is not None:
        return block.duration_weeks * 7
    if block.end_date is not None:
        return max(1, (block.end_date - block.start_date).days + 1)
    return None


def total_weeks(block: Block) -> int | None:
    span = total_span_days(block)
    if span is None:
        return None
    return max(1, math.ceil(span / 7))


def resolved_end_date(block: Block) -> date | None:
    """Last day of a bounded block; duration wins over an explicit end date."""
    if block.duration_weeks is not None:
        return block.start_date + timedelta(days=block.duration_weeks * 7 - 1)
    return block.end_date


def display_mode(block: Block) -> DisplayMode:
    if block.completed_date is not None:
        return "completed"
    if block.is_ongoing:
        return "ongoing"
    return "bounded"


def date_range_text(block: Block) -> str:
    end = block.completed_date or block.end_date or block.start_date
    return f"{format_block_date(block.start_date)} – {format_block_date(end)}"


def block_progress(block: Block, today: date) -> BlockProgress:
    mode = display_mode(block)
    if mode == "completed":
        return BlockProgress(
            mode=mode,
            current_week=None,
            total_weeks=total_weeks(block),
            status_text=date_range_text(block),
        )

    elapsed_week = max(1, weeks_between(block.start_date, today) + 1)
    if mode == "ongoing":
        return BlockProgress(
            mode=mode,
            current_week=elapsed_week,
            total_weeks=None,
            status_text=f"Week {elapsed_week}",
        )

    total = total_weeks(block) or 1
    current = max(1, min(total, elapsed_week))
    return BlockProgress(
        mode=mode,
        current_week=current,
        total_weeks=total,
        status_text=f"Week {current} of {total}",
    )


def status_text(block: Block, today: date) -> str:
    return block_progress(block, today).status_text


def mark_complete_early(block: Block, now: date) -> Block:
    """End the block yesterday so it reads as finished from today on.

    The duration is cleared because it would otherwise outrank the new end
    date.
    """
    yesterday = now - timedelta(days=1)
    return block.model_copy(update={"end_date": yesterday, "duration_weeks": None})


def block_phase(block: Block, today: date) -> BlockPhase:
    if block.completed_date is not None:
        return "completed"
    end = resolved_end_date(block)
    if end is not None and end < today:
        return "completed"
    if block.start_date > today:
        return "planned"
    return "active"


def plan_auto_complete(blocks: Iterable[Block], today: date) -> list[Block]:
    """Copies of the open blocks whose end has passed, completed as of today."""
    plan: list[Block] = []
    for block in blocks:
        if block.completed_date is not None:
            continue
        end = resolved_end_date(block)
        if end is None or end >= today:
            continue
        plan.append(block.model_copy(update={"completed_date": today}))
    return plan


def apply_auto_complete(blocks: Iterable[Block], today: date) -> list[Block]:
    block_list = list(blocks)
    completed = {block.id: block for block in plan_auto_complete(block_list, today)}
    return [completed.get(block.id, block) for block in block_list]


def classify_blocks(blocks: Iterable[Block], today: date) -> dict[BlockPhase, list[Block]]:
    classified: dict[BlockPhase, list[Block]] = {"active": [], "planned": [], "completed": []}
    for block in blocks:
        classified[block_phase(block, today)].append(block)

    classified["active"].sort(key=lambda block: block.start_date, reverse=True)
    classified["planned"].sort(key=lambda block: block.start_date)
    classified["completed"].sort(key=lambda block: block.start_date, reverse=True)
    return classified


def current_block(blocks: Iterable[Block], today: date) -> Block | None:
    active = classify_blocks(blocks, today)["active"]
    return active[0] if active else None


def session_count_text(count: int) -> str:
    return "1 session" if count == 1 else f"{count} sessions"


def status_line(block: Block, today: date, session_count: int) -> str:
    return f"{status_text(block, today)} • {session_count_text(session_count)}"
