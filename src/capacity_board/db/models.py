"""Data models for the capacity board."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

UNASSIGNED = "unassigned"


class TicketStatus(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    BLOCKED = "Blocked"


class AvailabilityType(str, Enum):
    AVAILABLE = "Available"
    OOO = "Out of Office"
    MAINTENANCE = "Maintenance"
    DOWNTIME = "Downtime"


class ViewMode(str, Enum):
    WEEK = "Week"
    TWO_WEEKS = "2 Weeks"
    MONTH = "Month"

    @property
    def days(self) -> int:
        return {"Week": 7, "2 Weeks": 14, "Month": 30}[self.value]


class SortOption(str, Enum):
    LOAD_WEEK_DESC = "LOAD_WEEK_DESC"
    LOAD_TODAY_DESC = "LOAD_TODAY_DESC"
    OVERBOOKED_DESC = "OVERBOOKED_DESC"
    ALPHABETICAL = "ALPHABETICAL"


class Band(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    BLOCKED = "blocked"


class WarningLevel(str, Enum):
    NONE = "NONE"
    YELLOW = "YELLOW"
    ORANGE = "ORANGE"
    RED = "RED"


@dataclass
class Developer:
    id: str
    name: str
    role: str = "Developer"
    avatar: str = ""
    capacity: int = 8
    jira_account_id: str | None = None


@dataclass
class Ticket:
    id: str
    key: str
    title: str
    assignee_id: str
    status: TicketStatus
    start_date: date
    end_date: date
    priority: str = "Medium"
    labels: list[str] = field(default_factory=list)


@dataclass
class AvailabilityBlock:
    id: str
    developer_id: str
    type: AvailabilityType
    start_date: date
    end_date: date
    notes: str | None = None


@dataclass(frozen=True)
class ViewConfig:
    """What the user is looking at. Passed into the pure board functions."""

    start_date: date
    view_mode: ViewMode = ViewMode.TWO_WEEKS
    sort_option: SortOption = SortOption.LOAD_WEEK_DESC
    search: str = ""
    show_weekends: bool = False
    highlight_free_slots: bool = False

    @property
    def days(self) -> int:
        return self.view_mode.days
