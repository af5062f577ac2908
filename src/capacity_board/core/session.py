"""In-memory board state for one data-load session, and the computed snapshot."""

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta

from capacity_board.core import aggregate, alerts, load, timeline
from capacity_board.core.loader import LoadResult, load_all, persist_block
from capacity_board.db.models import AvailabilityBlock, AvailabilityType, Developer, ViewConfig

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when a board mutation refers to something that does not exist."""


class BoardSession:
    """Single-writer holder of the loaded collections.

    Mutations replace whole collections; readers never see a half-applied
    change.
    """

    def __init__(self, source, ticket_limit: int = 200, rearm_banner_on_change: bool = True):
        self.source = source
        self.ticket_limit = ticket_limit
        self.banner = alerts.BannerState(rearm_on_change=rearm_banner_on_change)
        self.data = LoadResult()

    @property
    def developers(self):
        return self.data.developers

    @property
    def tickets(self):
        return self.data.tickets

    @property
    def blocks(self):
        return self.data.blocks

    def reload(self, today: date | None = None) -> LoadResult:
        self.data = load_all(self.source, self.ticket_limit, today)
        self.banner.reset()
        return self.data

    def get_developer(self, developer_id: str) -> Developer | None:
        return next((d for d in self.data.developers if d.id == developer_id), None)

    def move_ticket(self, ticket_id: str, developer_id: str, target_date: date):
        """Reassign a ticket and shift it to start on ``target_date``, keeping its length."""
        index = next((i for i, t in enumerate(self.data.tickets) if t.id == ticket_id), None)
        if index is None:
            raise SessionError(f"Ticket not found: {ticket_id}")
        ticket = self.data.tickets[index]
        if not self.get_developer(developer_id):
            raise SessionError(f"Developer not found: {developer_id}")

        span = ticket.end_date - ticket.start_date
        moved = replace(
            ticket,
            assignee_id=developer_id,
            start_date=target_date,
            end_date=target_date + span,
        )
        tickets = list(self.data.tickets)
        tickets[index] = moved
        self.data.tickets = tickets
        logger.info("Moved %s to %s on %s", ticket.key, developer_id, target_date)
        return moved

    def add_availability(
        self,
        developer_id: str,
        day: date,
        kind: AvailabilityType = AvailabilityType.OOO,
        notes: str = "",
    ) -> AvailabilityBlock:
        """Append a one-day block locally, then write it to the store."""
        if not self.get_developer(developer_id):
            raise SessionError(f"Developer not found: {developer_id}")
        block = AvailabilityBlock(
            id=f"temp-{uuid.uuid4().hex}",
            developer_id=developer_id,
            type=AvailabilityType(kind),
            start_date=day,
            end_date=day,
            notes=notes or None,
        )
        self.data.blocks = [*self.data.blocks, block]
        persist_block(self.source, block)
        return block

    def dismiss_warning(self, view: ViewConfig):
        status = alerts.evaluate_warning(self._visible(view), view.start_date, self.tickets, self.blocks)
        self.banner.dismiss(status.level)

    def _visible(self, view: ViewConfig) -> list[Developer]:
        return aggregate.filter_developers(self.developers, view.search)

    def snapshot(self, view: ViewConfig, now: datetime | None = None) -> dict:
        """Everything the dashboard renders for ``view``, as plain data."""
        now = now or datetime.now()
        today = now.date()
        tickets, blocks = self.tickets, self.blocks

        developers = aggregate.sort_developers(
            self._visible(view), view.sort_option, view.start_date, tickets, blocks, today
        )
        columns = timeline.build_columns(view.start_date, view.days, view.show_weekends, today)
        days = [c.day for c in columns]

        warning = alerts.evaluate_warning(developers, view.start_date, tickets, blocks)
        metrics = aggregate.team_metrics(developers, today, tickets, blocks)

        rows = []
        for dev in developers:
            rows.append({
                "developer": developer_dict(dev),
                "week_load": round(aggregate.weekly_load(dev.id, view.start_date, tickets, blocks), 4),
                "critical": aggregate.row_is_critical(dev.id, days, tickets, blocks),
                "cells": [self._cell(dev.id, c, view) for c in columns],
            })

        return {
            "view": {
                "start": view.start_date.isoformat(),
                "end": (view.start_date + timedelta(days=view.days - 1)).isoformat(),
                "mode": view.view_mode.value,
                "sort": view.sort_option.value,
                "search": view.search,
                "show_weekends": view.show_weekends,
                "highlight_free_slots": view.highlight_free_slots,
            },
            "columns": [column_dict(c) for c in columns],
            "total_width": timeline.total_width(columns),
            "now_offset": timeline.now_marker_offset(columns, now),
            "rows": rows,
            "metrics": {
                "utilization": metrics.utilization,
                "free": metrics.free_count,
                "overbooked": metrics.overbooked_count,
            },
            "warning": {
                "level": warning.level.value,
                "names": warning.names,
                "message": alerts.warning_message(warning),
                "visible": self.banner.observe(warning.level),
            },
            "error": self.data.error,
            "setup_required": self.data.setup_required,
        }

    def _cell(self, developer_id: str, column: timeline.DayColumn, view: ViewConfig) -> dict:
        if column.collapsed:
            return {"date": column.day.isoformat(), "collapsed": True}
        daily = load.compute_daily_load(developer_id, column.day, self.tickets, self.blocks)
        bars = load.stack_layout(developer_id, column.day, self.tickets)
        return {
            "date": column.day.isoformat(),
            "collapsed": False,
            "percentage": load.display_percentage(daily.load),
            "band": load.classify(daily.load, daily.is_blocked).value,
            "blocked": daily.is_blocked,
            "block_reason": daily.block_reason,
            "free_slot": view.highlight_free_slots and load.is_free_slot(daily),
            "bars": [
                {
                    "id": t.id,
                    "key": t.key,
                    "title": t.title,
                    "status": t.status.value,
                    "height": height,
                    "height_px": load.bar_height_px(t),
                }
                for t, height in bars
            ],
        }


# ── Serialization ─────────────────────────────────────────────────────────────


def developer_dict(d: Developer) -> dict:
    return {
        "id": d.id,
        "name": d.name,
        "role": d.role,
        "avatar": d.avatar,
        "capacity": d.capacity,
    }


def ticket_dict(t) -> dict:
    return {
        "id": t.id,
        "key": t.key,
        "title": t.title,
        "assignee_id": t.assignee_id,
        "status": t.status.value,
        "start_date": t.start_date.isoformat(),
        "end_date": t.end_date.isoformat(),
        "priority": t.priority,
        "labels": t.labels,
    }


def block_dict(b: AvailabilityBlock) -> dict:
    return {
        "id": b.id,
        "developer_id": b.developer_id,
        "type": b.type.value,
        "start_date": b.start_date.isoformat(),
        "end_date": b.end_date.isoformat(),
        "notes": b.notes,
    }


def column_dict(c: timeline.DayColumn) -> dict:
    return {
        "date": c.day.isoformat(),
        "width": c.width,
        "offset": c.offset,
        "collapsed": c.collapsed,
        "weekend": c.is_weekend,
        "today": c.is_today,
    }
