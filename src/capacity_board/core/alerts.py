"""Team-wide overbooking alert and the dismissible banner that shows it."""

from dataclasses import dataclass, field
from datetime import date

from capacity_board.core.aggregate import weekly_load
from capacity_board.core.load import LOAD_PRECISION, round_half_up
from capacity_board.db.models import AvailabilityBlock, Developer, Ticket, WarningLevel

RED_LOAD = 1.2
RED_COUNT = 3
ORANGE_LOAD = 1.0
ORANGE_COUNT = 5
YELLOW_AVERAGE = 0.9
MAX_NAMED = 3


@dataclass(frozen=True)
class WarningStatus:
    level: WarningLevel
    names: list[str] = field(default_factory=list)
    over_120: int = 0
    over_100: int = 0
    average: float = 0.0


def escalate(weekly_loads: list[tuple[str, float]]) -> WarningStatus:
    """Pick the single active level from (name, weekly load) pairs.

    Levels are tested from most to least severe and the first match wins.
    """
    if not weekly_loads:
        return WarningStatus(level=WarningLevel.NONE)

    over_120 = [(name, load) for name, load in weekly_loads if load >= RED_LOAD]
    over_100 = sum(1 for _, load in weekly_loads if load >= ORANGE_LOAD)
    average = round(sum(load for _, load in weekly_loads) / len(weekly_loads), LOAD_PRECISION)

    names = [
        f"{name} {round_half_up(load * 100)}%"
        for name, load in sorted(over_120, key=lambda pair: -pair[1])[:MAX_NAMED]
    ]

    if len(over_120) >= RED_COUNT:
        level = WarningLevel.RED
    elif over_100 >= ORANGE_COUNT:
        level = WarningLevel.ORANGE
    elif average >= YELLOW_AVERAGE:
        level = WarningLevel.YELLOW
    else:
        level = WarningLevel.NONE

    return WarningStatus(
        level=level,
        names=names if level == WarningLevel.RED else [],
        over_120=len(over_120),
        over_100=over_100,
        average=average,
    )


def evaluate_warning(
    developers: list[Developer],
    week_start: date,
    tickets: list[Ticket],
    blocks: list[AvailabilityBlock],
) -> WarningStatus:
    return escalate([(d.name, weekly_load(d.id, week_start, tickets, blocks)) for d in developers])


def warning_message(status: WarningStatus) -> str | None:
    if status.level == WarningLevel.NONE:
        return None
    if status.level == WarningLevel.RED:
        return f"CRITICAL: {status.over_120} developers over 120% this week – {', '.join(status.names)}…"
    return "WARNING: Team utilization is high. Consider redistributing tasks."


class BannerState:
    """Tracks whether the user dismissed the warning banner.

    With ``rearm_on_change`` set, a dismissal only covers the level that was
    showing; any later level change brings the banner back. Without it, one
    dismissal hides the banner until the next data reload.
    """

    def __init__(self, rearm_on_change: bool = True):
        self.rearm_on_change = rearm_on_change
        self.dismissed_level: WarningLevel | None = None

    def dismiss(self, level: WarningLevel):
        self.dismissed_level = WarningLevel(level)

    def reset(self):
        self.dismissed_level = None

    def observe(self, level: WarningLevel) -> bool:
        """Record the current level and return whether the banner should show."""
        level = WarningLevel(level)
        if self.rearm_on_change and self.dismissed_level is not None and level != self.dismissed_level:
            self.dismissed_level = None
        if level == WarningLevel.NONE:
            return False
        return self.dismissed_level is None
