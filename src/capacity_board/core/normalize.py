"""Map raw table-store records onto Developer, Ticket and AvailabilityBlock.

Every mapper here is total: missing or malformed fields are filled from an
ordered fallback chain instead of raising, so a bad row shows up on the
board as visibly-wrong data rather than failing the whole load.
"""

import logging
from datetime import date, datetime, timedelta
from urllib.parse import quote

from capacity_board.db.models import (
    UNASSIGNED,
    AvailabilityBlock,
    AvailabilityType,
    Developer,
    Ticket,
    TicketStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 8
DEFAULT_TICKET_SPAN_DAYS = 3
PRIORITIES = ("High", "Medium", "Low")


# ── Primitive parsers ────────────────────────────────────────────────────────


def parse_date(value, default: date) -> date:
    """Date-only view of a date, datetime or ISO string; ``default`` if unusable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    return default


def parse_status(value) -> TicketStatus:
    if isinstance(value, TicketStatus):
        return value
    text = str(value or "").strip().lower().replace("_", " ").replace("-", " ")
    for status in TicketStatus:
        if text in (status.value.lower(), status.name.lower().replace("_", " ")):
            return status
    return TicketStatus.TODO


def parse_priority(value) -> str:
    text = str(value or "").strip().lower()
    for priority in PRIORITIES:
        if text == priority.lower():
            return priority
    return "Medium"


def parse_availability_type(value) -> AvailabilityType:
    if isinstance(value, AvailabilityType):
        return value
    text = str(value or "").strip().lower()
    for kind in AvailabilityType:
        if text in (kind.value.lower(), kind.name.lower()):
            return kind
    return AvailabilityType.OOO


def parse_labels(value) -> list[str] | None:
    """Explicit labels from a list or comma-separated string, None if absent."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = [str(v) for v in value]
    else:
        return None
    labels = [item.strip() for item in items if item and item.strip()]
    return labels or None


def infer_labels(title: str | None, priority: str | None) -> list[str]:
    """Guess display labels from free text.

    High priority or "critical" in the title means Major; "bug" anywhere in
    the title means Bug. A ticket can carry both.
    """
    text = (title or "").lower()
    labels = []
    if parse_priority(priority) == "High" or "critical" in text:
        labels.append("Major")
    if "bug" in text:
        labels.append("Bug")
    return labels


def placeholder_avatar(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name or 'D')}&background=random"


def block_window_default(today: date) -> tuple[date, date]:
    """Window used for a block whose start or end is missing: a zero-length block on today."""
    return today, today


def _clamp_range(kind: str, ident: str, start: date, end: date) -> tuple[date, date]:
    if end < start:
        logger.warning("%s %s ends (%s) before it starts (%s); clamping to one day", kind, ident, end, start)
        return start, start
    return start, end


# ── Entity mappers ───────────────────────────────────────────────────────────


def map_developer(raw: dict) -> Developer:
    name = raw.get("display_name") or raw.get("name") or "Unknown"
    try:
        capacity = int(raw.get("capacity") or DEFAULT_CAPACITY)
    except (TypeError, ValueError):
        capacity = DEFAULT_CAPACITY
    return Developer(
        id=str(raw.get("id") or raw.get("jira_account_id") or name),
        name=name,
        role=raw.get("role") or "Developer",
        avatar=raw.get("avatar") or placeholder_avatar(name),
        capacity=capacity,
        jira_account_id=raw.get("jira_account_id"),
    )


def build_developer_lookup(raw_developers: list[dict]) -> dict[str, str]:
    """Map external account ids and both name fields to canonical developer ids."""
    lookup: dict[str, str] = {}
    for raw in raw_developers:
        dev_id = map_developer(raw).id
        for field_name in ("jira_account_id", "display_name", "name"):
            if value := raw.get(field_name):
                lookup[value] = dev_id
    return lookup


def resolve_assignee(raw: dict, lookup: dict[str, str]) -> str:
    if (jira_id := raw.get("assignee_jira_id")) and jira_id in lookup:
        return lookup[jira_id]
    if (name := raw.get("assignee")) and name in lookup:
        return lookup[name]
    if assignee_id := raw.get("assignee_id"):
        return str(assignee_id)
    return UNASSIGNED


def map_ticket(raw: dict, lookup: dict[str, str], today: date | None = None) -> Ticket:
    today = today or date.today()
    key = raw.get("key") or "UNK-000"
    title = raw.get("summary") or raw.get("title") or "Untitled Issue"
    priority = parse_priority(raw.get("priority"))

    fallback_start = parse_date(raw.get("updated_at"), today)
    start = parse_date(raw.get("start_date"), fallback_start)
    end = parse_date(raw.get("end_date"), start + timedelta(days=DEFAULT_TICKET_SPAN_DAYS))
    ident = str(raw.get("key") or raw.get("id") or key)
    start, end = _clamp_range("Ticket", ident, start, end)

    labels = parse_labels(raw.get("labels"))
    if labels is None:
        labels = infer_labels(title, raw.get("priority"))

    return Ticket(
        id=ident,
        key=key,
        title=title,
        assignee_id=resolve_assignee(raw, lookup),
        status=parse_status(raw.get("status")),
        start_date=start,
        end_date=end,
        priority=priority,
        labels=labels,
    )


def map_block(raw: dict, today: date | None = None) -> AvailabilityBlock:
    default_start, default_end = block_window_default(today or date.today())
    start = parse_date(raw.get("start_time") or raw.get("start_date"), default_start)
    end = parse_date(raw.get("end_time") or raw.get("end_date"), default_end)
    ident = str(raw.get("id") or f"{raw.get('developer_id')}-{start.isoformat()}")
    start, end = _clamp_range("Block", ident, start, end)
    reason = raw.get("reason") or raw.get("notes")
    return AvailabilityBlock(
        id=ident,
        developer_id=str(raw.get("developer_id") or UNASSIGNED),
        type=parse_availability_type(raw.get("type") or raw.get("reason")),
        start_date=start,
        end_date=end,
        notes=reason,
    )
