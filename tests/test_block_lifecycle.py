"""Tests for block week progress and status text."""

from __future__ import annotations

from datetime import date

from tracker_insights.block_lifecycle import (
    apply_auto_complete,
    block_phase,
    block_progress,
    classify_blocks,
    current_block,
    date_range_text,
    mark_complete_early,
    plan_auto_complete,
    resolved_end_date,
    session_count_text,
    status_line,
    status_text,
    total_weeks,
    weeks_between,
)
from tracker_insights.entry_contract import Block


def _block(block_id: str = "b1", **fields: object) -> Block:
    payload: dict[str, object] = {"id": block_id, "start_date": date(2024, 1, 1)}
    payload.update(fields)
    return Block.model_validate(payload)


class TestBoundedActive:
    def test_duration_block_mid_way(self):
        progress = block_progress(_block(duration_weeks=4), date(2024, 1, 10))
        assert progress.mode == "bounded"
        assert progress.total_weeks == 4
        assert progress.current_week == 2
        assert progress.status_text == "Week 2 of 4"

    def test_end_date_span_rounds_up(self):
        assert total_weeks(_block(end_date=date(2024, 1, 10))) == 2
        assert total_weeks(_block(end_date=date(2024, 1, 28))) == 4

    def test_duration_is_authoritative_over_end_date(self):
        block = _block(duration_weeks=6, end_date=date(2024, 1, 14))
        assert total_weeks(block) == 6

    def test_clamped_after_end(self):
        block = _block(end_date=date(2024, 1, 28))
        assert status_text(block, date(2024, 6, 1)) == "Week 4 of 4"

    def test_clamped_before_start(self):
        block = _block(duration_weeks=4)
        assert status_text(block, date(2023, 12, 1)) == "Week 1 of 4"

    def test_first_day_is_week_one(self):
        assert status_text(_block(duration_weeks=8), date(2024, 1, 1)) == "Week 1 of 8"
        assert status_text(_block(duration_weeks=8), date(2024, 1, 8)) == "Week 2 of 8"


class TestOngoing:
    def test_week_counter(self):
        progress = block_progress(_block(), date(2024, 1, 15))
        assert progress.mode == "ongoing"
        assert progress.total_weeks is None
        assert progress.status_text == "Week 3"

    def test_floored_at_one(self):
        assert status_text(_block(), date(2023, 12, 20)) == "Week 1"


class TestCompleted:
    def test_date_range_text(self):
        block = _block(duration_weeks=4, completed_date=date(2024, 1, 28))
        progress = block_progress(block, date(2030, 1, 1))
        assert progress.mode == "completed"
        assert progress.current_week is None
        assert progress.status_text == "Jan 1 – Jan 28"

    def test_today_is_irrelevant(self):
        block = _block(completed_date=date(2024, 2, 3))
        assert status_text(block, date(2024, 2, 4)) == status_text(block, date(2099, 1, 1))

    def test_range_falls_back_to_end_then_start(self):
        assert date_range_text(_block(end_date=date(2024, 3, 10))) == "Jan 1 – Mar 10"
        assert date_range_text(_block()) == "Jan 1 – Jan 1"


def test_weeks_between_floors():
    assert weeks_between(date(2024, 1, 1), date(2024, 1, 7)) == 0
    assert weeks_between(date(2024, 1, 1), date(2024, 1, 8)) == 1
    assert weeks_between(date(2024, 1, 8), date(2024, 1, 1)) == -1


def test_resolved_end_date():
    assert resolved_end_date(_block(duration_weeks=4)) == date(2024, 1, 28)
    assert resolved_end_date(_block(end_date=date(2024, 2, 1))) == date(2024, 2, 1)
    assert resolved_end_date(_block()) is None


class TestMarkCompleteEarly:
    def test_sets_end_date_to_yesterday(self):
        updated = mark_complete_early(_block(duration_weeks=12), date(2024, 1, 20))
        assert updated.end_date == date(2024, 1, 19)
        assert updated.duration_weeks is None

    def test_block_reads_finished_today(self):
        today = date(2024, 1, 20)
        block = _block(duration_weeks=12)
        assert block_phase(block, today) == "active"
        assert block_phase(mark_complete_early(block, today), today) == "completed"

    def test_input_block_untouched(self):
        block = _block(duration_weeks=12)
        mark_complete_early(block, date(2024, 1, 20))
        assert block.duration_weeks == 12
        assert block.end_date is None


class TestPhases:
    def test_planned(self):
        assert block_phase(_block(start_date=date(2024, 2, 1)), date(2024, 1, 10)) == "planned"

    def test_duration_end_boundary(self):
        block = _block(duration_weeks=4)
        assert block_phase(block, date(2024, 1, 28)) == "active"
        assert block_phase(block, date(2024, 1, 29)) == "completed"

    def test_ongoing_stays_active(self):
        assert block_phase(_block(), date(2030, 1, 1)) == "active"

    def test_classify_and_current(self):
        today = date(2024, 3, 1)
        blocks = [
            _block("old-active", start_date=date(2024, 1, 1)),
            _block("new-active", start_date=date(2024, 2, 1)),
            _block("later", start_date=date(2024, 5, 1)),
            _block("soon", start_date=date(2024, 4, 1)),
            _block("done", start_date=date(2023, 9, 1), completed_date=date(2023, 12, 1)),
        ]
        classified = classify_blocks(blocks, today)

        assert [b.id for b in classified["active"]] == ["new-active", "old-active"]
        assert [b.id for b in classified["planned"]] == ["soon", "later"]
        assert [b.id for b in classified["completed"]] == ["done"]
        current = current_block(blocks, today)
        assert current is not None and current.id == "new-active"

    def test_no_current_block(self):
        assert current_block([], date(2024, 1, 1)) is None


def test_session_count_text():
    assert session_count_text(1) == "1 session"
    assert session_count_text(0) == "0 sessions"
    assert session_count_text(7) == "7 sessions"


def test_status_line():
    block = _block(duration_weeks=4)
    assert status_line(block, date(2024, 1, 10), 3) == "Week 2 of 4 • 3 sessions"


class TestAutoComplete:
    def test_plans_only_expired_open_blocks(self):
        today = date(2024, 2, 1)
        blocks = [
            _block("expired", duration_weeks=2),
            _block("ends-today", end_date=date(2024, 2, 1)),
            _block("ongoing"),
            _block("done", duration_weeks=1, completed_date=date(2024, 1, 5)),
        ]
        plan = plan_auto_complete(blocks, today)

        assert [block.id for block in plan] == ["expired"]
        assert plan[0].completed_date == today
        assert blocks[0].completed_date is None

    def test_early_completion_is_closed_next(self):
        today = date(2024, 1, 20)
        block = mark_complete_early(_block(duration_weeks=12), today)
        (closed,) = apply_auto_complete([block], today)

        progress = block_progress(closed, today)
        assert block_phase(closed, today) == "completed"
        assert progress.mode == "completed"
        assert progress.status_text == "Jan 1 – Jan 20"

    def test_apply_keeps_order_and_untouched_blocks(self):
        today = date(2024, 2, 1)
        blocks = [_block("ongoing"), _block("expired", duration_weeks=2)]
        applied = apply_auto_complete(blocks, today)

        assert [block.id for block in applied] == ["ongoing", "expired"]
        assert applied[0] is blocks[0]
        assert applied[1].completed_date == today
