"""Roll per-day loads up into sort orders and team-wide metrics."""

from dataclasses import dataclass
from datetime import date, timedelta

from capacity_board.core.load import (
    LOAD_PRECISION,
    average_load,
    compute_daily_load,
    display_percentage,
    round_half_up,
)
from capacity_board.db.models import AvailabilityBlock, Developer, SortOption, Ticket

WEEK_DAYS = 7
UTILIZATION_CAP_PCT = 150
FREE_BELOW = 0.5
OVERBOOKED_AT = 1.0
OVERBOOKED_SORT_ABOVE = 1.0
CRITICAL_ROW_PCT = 110


@dataclass(frozen=True)
class TeamMetrics:
    utilization: int
    free_count: int
    overbooked_count: int


def filter_developers(developers: list[Developer], query: str) -> list[Developer]:
    query = (query or "").strip().lower()
    if not query:
        return list(developers)
    return [d for d in developers if query in d.name.lower()]


def weekly_load(developer_id: str, week_start: date, tickets: list[Ticket], blocks: list[AvailabilityBlock]) -> float:
    return average_load(developer_id, WEEK_DAYS, week_start, tickets, blocks)


def today_load(developer_id: str, today: date, tickets: list[Ticket], blocks: list[AvailabilityBlock]) -> float:
    return average_load(developer_id, 1, today, tickets, blocks)


def sort_developers(
    developers: list[Developer],
    option: SortOption,
    week_start: date,
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
    today: date | None = None,
) -> list[Developer]:
    """Order developers for display. Python's sort is stable, so ties keep input order."""
    option = SortOption(option)

    if option == SortOption.ALPHABETICAL:
        return sorted(developers, key=lambda d: d.name.casefold())

    if option == SortOption.LOAD_TODAY_DESC:
        today = today or date.today()
        return sorted(developers, key=lambda d: -today_load(d.id, today, tickets, blocks))

    week = {d.id: weekly_load(d.id, week_start, tickets, blocks) for d in developers}

    if option == SortOption.OVERBOOKED_DESC:
        return sorted(developers, key=lambda d: (week[d.id] <= OVERBOOKED_SORT_ABOVE, -week[d.id]))

    return sorted(developers, key=lambda d: -week[d.id])


def team_metrics(
    developers: list[Developer],
    today: date,
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> TeamMetrics:
    if not developers:
        return TeamMetrics(utilization=0, free_count=0, overbooked_count=0)

    capped_total = 0.0
    free = 0
    overbooked = 0
    for dev in developers:
        load = today_load(dev.id, today, tickets, blocks)
        capped_total += min(load * 100, UTILIZATION_CAP_PCT)
        if load < FREE_BELOW:
            free += 1
        if load >= OVERBOOKED_AT:
            overbooked += 1

    return TeamMetrics(
        utilization=round_half_up(round(capped_total / len(developers), LOAD_PRECISION)),
        free_count=free,
        overbooked_count=overbooked,
    )


def row_is_critical(
    developer_id: str,
    days: list[date],
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> bool:
    """Whether any visible day shows 110% or more."""
    return any(
        display_percentage(compute_daily_load(developer_id, day, tickets, blocks).load) >= CRITICAL_ROW_PCT
        for day in days
    )


def window_days(start: date, count: int) -> list[date]:
    return [start + timedelta(days=i) for i in range(count)]
