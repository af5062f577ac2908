"""Daily load calculation and heatmap classification.

A developer's load for a day is the sum of the weights of their open
tickets active that day, plus a flat 1.0 if any unavailability block covers
the day. Nothing is capped here; consumers cap for their own purposes.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta

from capacity_board.db.models import AvailabilityBlock, Band, Ticket, TicketStatus

MAJOR_WEIGHT = 1.0
BUG_WEIGHT = 0.20
MINOR_WEIGHT = 0.50
BLOCK_WEIGHT = 1.0

DISPLAY_CAP_PCT = 250
ROW_HEIGHT_PX = 120

# Decimal places kept for summed and averaged weights before any threshold check.
LOAD_PRECISION = 6

# Lower bounds, checked from the top.
BAND_THRESHOLDS = (
    (110, Band.CRITICAL),
    (90, Band.HIGH),
    (60, Band.MEDIUM),
)


@dataclass(frozen=True)
class DailyLoad:
    load: float
    is_blocked: bool = False
    block_reason: str | None = None


def _has_signal(ticket: Ticket, word: str) -> bool:
    if any(word in label.lower() for label in ticket.labels):
        return True
    return word in (ticket.title or "").lower()


def ticket_weight(ticket: Ticket) -> float:
    """Fraction of a workday one ticket consumes: Major beats Bug beats everything else."""
    if _has_signal(ticket, "major"):
        return MAJOR_WEIGHT
    if _has_signal(ticket, "bug"):
        return BUG_WEIGHT
    return MINOR_WEIGHT


def bar_height(ticket: Ticket) -> float:
    """Stacked-bar height as a fraction of a full-day cell."""
    return ticket_weight(ticket)


def bar_height_px(ticket: Ticket, row_height: int = ROW_HEIGHT_PX) -> int:
    return round(bar_height(ticket) * row_height)


def is_active_on(start: date, end: date, day: date) -> bool:
    return start <= day <= end


def active_tickets(developer_id: str, day: date, tickets: list[Ticket]) -> list[Ticket]:
    return [
        t for t in tickets
        if t.assignee_id == developer_id
        and t.status != TicketStatus.DONE
        and is_active_on(t.start_date, t.end_date, day)
    ]


def stack_layout(developer_id: str, day: date, tickets: list[Ticket]) -> list[tuple[Ticket, float]]:
    return [(t, bar_height(t)) for t in active_tickets(developer_id, day, tickets)]


def compute_daily_load(
    developer_id: str,
    day: date,
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> DailyLoad:
    load = sum(ticket_weight(t) for t in active_tickets(developer_id, day, tickets))

    # First matching block supplies the reason; overlapping blocks still count once.
    block = next(
        (
            b for b in blocks
            if b.developer_id == developer_id and is_active_on(b.start_date, b.end_date, day)
        ),
        None,
    )
    if block is None:
        return DailyLoad(load=load)
    return DailyLoad(
        load=load + BLOCK_WEIGHT,
        is_blocked=True,
        block_reason=block.notes or block.type.value,
    )


def average_load(
    developer_id: str,
    window_days: int,
    window_start: date,
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> float:
    """Mean daily load over ``window_days`` consecutive days from ``window_start``."""
    if window_days <= 0:
        return 0.0
    total = 0.0
    for offset in range(window_days):
        day = window_start + timedelta(days=offset)
        total += compute_daily_load(developer_id, day, tickets, blocks).load
    return round(total / window_days, LOAD_PRECISION)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def display_percentage(load: float) -> int:
    return min(round_half_up(round(load * 100, LOAD_PRECISION)), DISPLAY_CAP_PCT)


def classify(load: float, is_blocked: bool = False) -> Band:
    """Heatmap band for a day.

    Bands compare against the unrounded percentage (to 6 decimals, which
    absorbs float noise from summing weights), so 59.9% is still LOW even
    though it displays as 60%.
    """
    if is_blocked:
        return Band.BLOCKED
    pct = round(load * 100, LOAD_PRECISION)
    for lower, band in BAND_THRESHOLDS:
        if pct >= lower:
            return band
    return Band.LOW


def is_free_slot(daily: DailyLoad) -> bool:
    return not daily.is_blocked and display_percentage(daily.load) < 60
