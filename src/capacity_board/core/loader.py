"""Fetch raw records from the table store and normalize them for the board."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from capacity_board.config import Config
from capacity_board.core.normalize import build_developer_lookup, map_block, map_developer, map_ticket
from capacity_board.db.engine import SqliteTableSource, StoreError, is_missing_schema
from capacity_board.db.models import AvailabilityBlock, Developer, Ticket

logger = logging.getLogger(__name__)

SETUP_REQUIRED_MESSAGE = "Required tables missing. Please run setup script."


@dataclass
class LoadResult:
    developers: list[Developer] = field(default_factory=list)
    tickets: list[Ticket] = field(default_factory=list)
    blocks: list[AvailabilityBlock] = field(default_factory=list)
    lookup: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    setup_required: bool = False


class StaticTableSource:
    """In-memory rows standing in for the table store."""

    def __init__(self, rows: dict[str, list[dict]]):
        self.rows = {table: list(items) for table, items in rows.items()}

    def select(self, table: str, limit: int | None = None) -> list[dict]:
        items = self.rows.get(table, [])
        return [dict(r) for r in (items if limit is None else items[:limit])]

    def insert(self, table: str, row: dict) -> None:
        self.rows.setdefault(table, []).append(dict(row))

    def close(self):
        pass


def sample_rows(today: date) -> dict[str, list[dict]]:
    """Static fallback data laid out around ``today``."""

    def day(offset: int) -> str:
        return (today + timedelta(days=offset)).isoformat()

    developers = [
        {"id": "dev-1", "display_name": "Alice Chen", "role": "Frontend Lead", "jira_account_id": "acc-alice"},
        {"id": "dev-2", "display_name": "Bob Smith", "role": "Backend Engineer", "jira_account_id": "acc-bob"},
        {"id": "dev-3", "display_name": "Charlie Kim", "role": "Full Stack", "jira_account_id": "acc-charlie"},
        {"id": "dev-4", "display_name": "Dana Lopez", "role": "QA Engineer", "capacity": 6},
        {"id": "dev-5", "display_name": "Evan Wright", "role": "DevOps"},
    ]
    tickets = [
        {"key": "WEB-101", "summary": "Checkout redesign", "status": "In Progress", "priority": "High",
         "assignee_jira_id": "acc-alice", "start_date": day(-1), "end_date": day(4)},
        {"key": "WEB-107", "summary": "Fix bug in date picker", "status": "To Do",
         "assignee_jira_id": "acc-alice", "start_date": day(0), "end_date": day(1)},
        {"key": "API-42", "summary": "Rate limiting middleware", "status": "In Progress",
         "assignee": "Bob Smith", "start_date": day(0), "end_date": day(6)},
        {"key": "API-45", "summary": "Critical: token refresh race", "status": "Blocked",
         "assignee": "Bob Smith", "start_date": day(1), "end_date": day(3)},
        {"key": "API-47", "summary": "Pagination for reports endpoint", "status": "To Do",
         "assignee_jira_id": "acc-bob", "start_date": day(2), "end_date": day(5)},
        {"key": "WEB-120", "summary": "Settings page polish", "status": "To Do",
         "assignee_jira_id": "acc-charlie", "start_date": day(3), "end_date": day(8)},
        {"key": "QA-9", "summary": "Regression suite for release", "status": "In Progress",
         "assignee": "Dana Lopez", "start_date": day(-2), "end_date": day(2)},
        {"key": "OPS-3", "summary": "Migrate CI runners", "status": "Done",
         "assignee_id": "dev-5", "start_date": day(-5), "end_date": day(-1)},
        {"key": "OPS-8", "summary": "Major: database failover drill", "status": "To Do",
         "assignee_id": "dev-5", "start_date": day(1), "end_date": day(2)},
    ]
    blocks = [
        {"id": "blk-1", "developer_id": "dev-3", "reason": "Out of Office",
         "start_time": day(0), "end_time": day(1)},
        {"id": "blk-2", "developer_id": "dev-2", "reason": "Conference talk",
         "start_time": day(4), "end_time": day(4)},
    ]
    return {"developers": developers, "jira_tickets": tickets, "manual_availability": blocks}


def open_source(config: Config, today: date | None = None):
    """Build the table source the configuration asks for."""
    if config.data_source == "rest":
        if not config.rest_url or not config.rest_key:
            logger.warning("CB_REST_URL or CB_REST_KEY not configured; using sample data")
            return StaticTableSource(sample_rows(today or date.today()))
        from capacity_board.integrations.rest import RestTableSource
        return RestTableSource(config.rest_url, config.rest_key)
    if config.data_source == "mock":
        return StaticTableSource(sample_rows(today or date.today()))
    return SqliteTableSource(config.db_path)


def load_all(source, ticket_limit: int = 200, today: date | None = None) -> LoadResult:
    """Fetch developers, then tickets, then blocks.

    The first failing fetch aborts the load; its message is returned on the
    result instead of raised. A missing schema flags ``setup_required``.
    """
    today = today or date.today()
    result = LoadResult()
    try:
        raw_devs = source.select("developers")
        lookup = build_developer_lookup(raw_devs)
        developers = [map_developer(d) for d in raw_devs]

        raw_tickets = source.select("jira_tickets", limit=ticket_limit)
        tickets = _unique_ticket_ids([map_ticket(t, lookup, today) for t in raw_tickets])

        raw_blocks = source.select("manual_availability")
        blocks = [map_block(b, today) for b in raw_blocks]
    except StoreError as e:
        logger.error("Data load failed: %s", e)
        if is_missing_schema(e):
            result.error = SETUP_REQUIRED_MESSAGE
            result.setup_required = True
        else:
            result.error = e.message or repr(e)
        return result

    result.developers = developers
    result.tickets = tickets
    result.blocks = blocks
    result.lookup = lookup
    logger.info("Loaded %d developers, %d tickets, %d blocks", len(developers), len(tickets), len(blocks))
    return result


def _unique_ticket_ids(tickets: list[Ticket]) -> list[Ticket]:
    """Suffix repeated ids with the ticket's position so every ticket stays addressable."""
    seen: set[str] = set()
    unique = []
    for n, ticket in enumerate(tickets):
        if ticket.id in seen:
            logger.warning("Duplicate ticket id %s, using %s-%d", ticket.id, ticket.id, n)
            ticket = replace(ticket, id=f"{ticket.id}-{n}")
        seen.add(ticket.id)
        unique.append(ticket)
    return unique


def block_row(block: AvailabilityBlock) -> dict:
    return {
        "developer_id": block.developer_id,
        "reason": block.notes or block.type.value,
        "start_time": block.start_date.isoformat(),
        "end_time": block.end_date.isoformat(),
    }


def persist_block(source, block: AvailabilityBlock) -> bool:
    """Write a block to the store. Failures are logged; nothing is rolled back."""
    try:
        source.insert("manual_availability", block_row(block))
    except StoreError as e:
        logger.error("Could not save availability block %s: %s", block.id, e)
        return False
    return True
