"""Tests for the daily load calculator and heatmap classifier."""

from datetime import date, timedelta

import pytest

from capacity_board.core import load
from capacity_board.db.models import AvailabilityBlock, AvailabilityType, Band, Ticket, TicketStatus

MON = date(2024, 3, 4)


def _ticket(tid="T-1", assignee="alice", start=MON, end=MON, title="Task", labels=None,
            status=TicketStatus.TODO):
    return Ticket(
        id=tid, key=tid, title=title, assignee_id=assignee, status=status,
        start_date=start, end_date=end, labels=labels or [],
    )


def _block(bid="B-1", dev="alice", start=MON, end=MON, kind=AvailabilityType.OOO, notes=None):
    return AvailabilityBlock(id=bid, developer_id=dev, type=kind, start_date=start, end_date=end, notes=notes)


class TestTicketWeight:
    def test_default_is_minor(self):
        assert load.ticket_weight(_ticket()) == 0.5

    def test_major_label(self):
        assert load.ticket_weight(_ticket(labels=["Major"])) == 1.0

    def test_major_title(self):
        assert load.ticket_weight(_ticket(title="Major refactor of auth")) == 1.0

    def test_bug_label(self):
        assert load.ticket_weight(_ticket(labels=["Bug"])) == 0.2

    def test_bug_title(self):
        assert load.ticket_weight(_ticket(title="Fix BUG in search")) == 0.2

    def test_major_beats_bug(self):
        assert load.ticket_weight(_ticket(labels=["Bug", "Major"])) == 1.0
        assert load.ticket_weight(_ticket(title="major bug")) == 1.0

    def test_bar_heights_match_weights(self):
        assert load.bar_height(_ticket(labels=["Major", "Bug"])) == 1.0
        assert load.bar_height(_ticket(labels=["Bug"])) == 0.2
        assert load.bar_height(_ticket()) == 0.5
        assert load.bar_height_px(_ticket(labels=["Major"])) == 120
        assert load.bar_height_px(_ticket(labels=["Bug"])) == 24
        assert load.bar_height_px(_ticket()) == 60


class TestComputeDailyLoad:
    def test_nothing_scheduled(self):
        daily = load.compute_daily_load("alice", MON, [], [])
        assert daily.load == 0
        assert daily.is_blocked is False
        assert daily.block_reason is None

    def test_tickets_stack(self):
        tickets = [_ticket("A", labels=["Major"]), _ticket("B"), _ticket("C", labels=["Bug"])]
        assert load.compute_daily_load("alice", MON, tickets, []).load == pytest.approx(1.7)

    def test_range_is_inclusive(self):
        tickets = [_ticket(start=MON, end=MON + timedelta(days=2))]
        assert load.compute_daily_load("alice", MON, tickets, []).load == 0.5
        assert load.compute_daily_load("alice", MON + timedelta(days=2), tickets, []).load == 0.5
        assert load.compute_daily_load("alice", MON + timedelta(days=3), tickets, []).load == 0
        assert load.compute_daily_load("alice", MON - timedelta(days=1), tickets, []).load == 0

    def test_done_and_other_assignees_ignored(self):
        tickets = [_ticket("A", status=TicketStatus.DONE), _ticket("B", assignee="bob")]
        assert load.compute_daily_load("alice", MON, tickets, []).load == 0

    def test_block_adds_full_day(self):
        daily = load.compute_daily_load("alice", MON, [_ticket()], [_block(notes="Dentist")])
        assert daily.load == 1.5
        assert daily.is_blocked is True
        assert daily.block_reason == "Dentist"

    def test_block_reason_falls_back_to_type(self):
        daily = load.compute_daily_load("alice", MON, [], [_block(kind=AvailabilityType.MAINTENANCE)])
        assert daily.block_reason == "Maintenance"

    def test_overlapping_blocks_count_once_first_reason(self):
        blocks = [_block("B-1", notes="Training"), _block("B-2", notes="Sick")]
        daily = load.compute_daily_load("alice", MON, [], blocks)
        assert daily.load == 1.0
        assert daily.block_reason == "Training"

    def test_other_developers_blocks_ignored(self):
        assert load.compute_daily_load("alice", MON, [], [_block(dev="bob")]).load == 0

    def test_major_ticket_with_block_in_the_middle(self):
        tickets = [_ticket(labels=["Major"], start=MON, end=MON + timedelta(days=2))]
        blocks = [_block(start=MON + timedelta(days=1), end=MON + timedelta(days=1))]

        day1 = load.compute_daily_load("alice", MON, tickets, blocks)
        day2 = load.compute_daily_load("alice", MON + timedelta(days=1), tickets, blocks)
        day3 = load.compute_daily_load("alice", MON + timedelta(days=2), tickets, blocks)

        assert day1.load == 1.0
        assert load.classify(day1.load, day1.is_blocked) == Band.HIGH
        assert day2.load == 2.0
        assert day2.is_blocked is True
        assert load.classify(day2.load, day2.is_blocked) == Band.BLOCKED
        assert load.classify(day2.load) == Band.CRITICAL
        assert day3.load == 1.0


class TestAverageLoad:
    def test_empty_window(self):
        assert load.average_load("alice", 7, MON, [], []) == 0

    def test_zero_days(self):
        assert load.average_load("alice", 0, MON, [_ticket()], []) == 0

    def test_all_blocked(self):
        blocks = [_block(start=MON, end=MON + timedelta(days=6))]
        assert load.average_load("alice", 7, MON, [], blocks) == pytest.approx(1.0)

    def test_partial_week(self):
        tickets = [_ticket(labels=["Major"], start=MON, end=MON + timedelta(days=1))]
        assert load.average_load("alice", 7, MON, tickets, []) == round(2 / 7, 6)

    def test_window_anchor(self):
        tickets = [_ticket(start=MON, end=MON)]
        assert load.average_load("alice", 1, MON, tickets, []) == 0.5
        assert load.average_load("alice", 1, MON + timedelta(days=1), tickets, []) == 0


class TestClassify:
    @pytest.mark.parametrize("value,band", [
        (0.0, Band.LOW),
        (0.599, Band.LOW),
        (0.60, Band.MEDIUM),
        (0.899, Band.MEDIUM),
        (0.90, Band.HIGH),
        (1.099, Band.HIGH),
        (1.10, Band.CRITICAL),
        (3.0, Band.CRITICAL),
    ])
    def test_boundaries(self, value, band):
        assert load.classify(value) == band

    def test_blocked_overrides(self):
        assert load.classify(0.0, is_blocked=True) == Band.BLOCKED
        assert load.classify(2.0, is_blocked=True) == Band.BLOCKED

    def test_summed_weights_hit_boundary(self):
        tickets = [_ticket("A"), _ticket("B", labels=["Bug"]), _ticket("C", labels=["Bug"])]
        daily = load.compute_daily_load("alice", MON, tickets, [])
        assert load.classify(daily.load) == Band.HIGH
        assert load.display_percentage(daily.load) == 90


class TestDisplayPercentage:
    def test_rounds(self):
        assert load.display_percentage(0.6) == 60
        assert load.display_percentage(1.7) == 170
        assert load.display_percentage(0.125) == 13
        assert load.display_percentage(0.285) == 29

    def test_capped(self):
        assert load.display_percentage(3.0) == 250

    def test_free_slot(self):
        assert load.is_free_slot(load.DailyLoad(load=0.5)) is True
        assert load.is_free_slot(load.DailyLoad(load=0.6)) is False
        assert load.is_free_slot(load.DailyLoad(load=0.0, is_blocked=True)) is False


class TestStackLayout:
    def test_heights_in_ticket_order(self):
        tickets = [_ticket("A", labels=["Bug"]), _ticket("B", labels=["Major"]), _ticket("C", assignee="bob")]
        layout = load.stack_layout("alice", MON, tickets)
        assert [(t.id, h) for t, h in layout] == [("A", 0.2), ("B", 1.0)]
