"""Timeline geometry: day columns and the current-time marker."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from capacity_board.db.models import ViewMode

WIDE_DAY_PX = 160
NARROW_DAY_PX = 100
COLLAPSED_DAY_PX = 5
WIDE_MAX_DAYS = 7
INITIAL_LEAD_DAYS = 2


@dataclass(frozen=True)
class DayColumn:
    day: date
    width: int
    offset: int
    collapsed: bool = False
    is_weekend: bool = False
    is_today: bool = False


def day_width(days: int) -> int:
    return WIDE_DAY_PX if days <= WIDE_MAX_DAYS else NARROW_DAY_PX


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def initial_view_start(today: date) -> date:
    """Default window opens slightly before today."""
    return today - timedelta(days=INITIAL_LEAD_DAYS)


def shift_window(start: date, mode: ViewMode, steps: int = 1) -> date:
    return start + timedelta(days=ViewMode(mode).days * steps)


def build_columns(start: date, days: int, show_weekends: bool, today: date | None = None) -> list[DayColumn]:
    full = day_width(days)
    columns = []
    offset = 0
    for i in range(days):
        day = start + timedelta(days=i)
        weekend = is_weekend(day)
        collapsed = weekend and not show_weekends
        width = COLLAPSED_DAY_PX if collapsed else full
        columns.append(DayColumn(
            day=day,
            width=width,
            offset=offset,
            collapsed=collapsed,
            is_weekend=weekend,
            is_today=day == today,
        ))
        offset += width
    return columns


def total_width(columns: list[DayColumn]) -> int:
    return sum(c.width for c in columns)


def now_marker_offset(columns: list[DayColumn], now: datetime) -> float | None:
    """Pixel position of ``now`` across the rendered columns.

    Widths are accumulated column by column, so collapsed weekends shift the
    marker the same way they shift the cells. Returns None when ``now`` is
    outside the window.
    """
    if not columns:
        return None
    index = (now.date() - columns[0].day).days
    if index < 0 or index >= len(columns):
        return None
    column = columns[index]
    midnight = datetime.combine(now.date(), datetime.min.time(), tzinfo=now.tzinfo)
    fraction = (now - midnight).total_seconds() / 86400
    return column.offset + fraction * column.width
