"""Web dashboard API for the capacity board."""

from datetime import date, datetime

import uvicorn
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse
from starlette.routing import Route

from capacity_board.config import Config, get_config
from capacity_board.core import timeline
from capacity_board.core.loader import open_source
from capacity_board.core.session import BoardSession, SessionError, block_dict, ticket_dict
from capacity_board.db.engine import SETUP_SQL
from capacity_board.db.models import AvailabilityType, SortOption, ViewConfig, ViewMode
from capacity_board.integrations import summarizer
from capacity_board.web.dashboard import get_dashboard_html

TRUE_VALUES = ("1", "true", "yes", "on")


class BadRequest(Exception):
    """Raised when request parameters cannot be parsed."""


def _session(request: Request) -> BoardSession:
    return request.app.state.session


def _now(request: Request) -> datetime:
    return request.app.state.clock()


# ── Parsing ───────────────────────────────────────────────────────────────────


def _parse_day(value: str | None, field_name: str) -> date:
    try:
        return date.fromisoformat(value or "")
    except ValueError:
        raise BadRequest(f"Invalid {field_name}: {value!r}")


def _parse_enum(enum_cls, value: str, field_name: str):
    for member in enum_cls:
        if value in (member.value, member.name):
            return member
    raise BadRequest(f"Invalid {field_name}: {value!r}")


def _view_from_query(request: Request) -> ViewConfig:
    params = request.query_params
    today = _now(request).date()
    start = params.get("start")
    return ViewConfig(
        start_date=_parse_day(start, "start") if start else timeline.initial_view_start(today),
        view_mode=_parse_enum(ViewMode, params.get("view", ViewMode.TWO_WEEKS.value), "view"),
        sort_option=_parse_enum(SortOption, params.get("sort", SortOption.LOAD_WEEK_DESC.value), "sort"),
        search=params.get("search", ""),
        show_weekends=params.get("weekends", "").lower() in TRUE_VALUES,
        highlight_free_slots=params.get("highlight", "").lower() in TRUE_VALUES,
    )


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        raise BadRequest("Request body must be JSON")
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")
    return body


def _bad_request(e: Exception) -> JSONResponse:
    return JSONResponse({"error": str(e)}, status_code=400)


# ── Handlers ──────────────────────────────────────────────────────────────────


async def index(request: Request):
    return HTMLResponse(get_dashboard_html())


async def api_board(request: Request):
    try:
        view = _view_from_query(request)
    except BadRequest as e:
        return _bad_request(e)
    return JSONResponse(_session(request).snapshot(view, _now(request)))


async def api_reload(request: Request):
    session = _session(request)
    result = await run_in_threadpool(session.reload, _now(request).date())
    return JSONResponse({
        "developers": len(result.developers),
        "tickets": len(result.tickets),
        "blocks": len(result.blocks),
        "error": result.error,
        "setup_required": result.setup_required,
    })


async def api_move_ticket(request: Request):
    ticket_id = request.path_params["ticket_id"]
    try:
        body = await _json_body(request)
        target = _parse_day(body.get("date"), "date")
    except BadRequest as e:
        return _bad_request(e)
    try:
        ticket = _session(request).move_ticket(ticket_id, body.get("developer_id", ""), target)
    except SessionError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    return JSONResponse(ticket_dict(ticket))


async def api_add_availability(request: Request):
    try:
        body = await _json_body(request)
        day = _parse_day(body.get("date"), "date")
        kind = _parse_enum(AvailabilityType, body.get("type", AvailabilityType.OOO.value), "type")
    except BadRequest as e:
        return _bad_request(e)
    session = _session(request)
    try:
        block = await run_in_threadpool(
            session.add_availability, body.get("developer_id", ""), day, kind, body.get("notes", "")
        )
    except SessionError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    return JSONResponse(block_dict(block), status_code=201)


async def api_dismiss_warning(request: Request):
    try:
        view = _view_from_query(request)
    except BadRequest as e:
        return _bad_request(e)
    session = _session(request)
    session.dismiss_warning(view)
    return JSONResponse({"dismissed": session.banner.dismissed_level.value})


async def api_analyze(request: Request):
    config: Config = request.app.state.config
    session = _session(request)
    text = await run_in_threadpool(
        summarizer.analyze_schedule,
        config.summarizer_api_key,
        session.developers,
        session.tickets,
        session.blocks,
        config.summarizer_model,
    )
    return JSONResponse({"analysis": text})


async def api_setup_sql(request: Request):
    return PlainTextResponse(SETUP_SQL)


# ── App ───────────────────────────────────────────────────────────────────────


def create_app(config: Config | None = None, clock=datetime.now) -> Starlette:
    config = config or get_config()
    routes = [
        Route("/", index),
        Route("/api/board", api_board),
        Route("/api/reload", api_reload, methods=["POST"]),
        Route("/api/tickets/{ticket_id}/move", api_move_ticket, methods=["POST"]),
        Route("/api/availability", api_add_availability, methods=["POST"]),
        Route("/api/warning/dismiss", api_dismiss_warning, methods=["POST"]),
        Route("/api/analyze", api_analyze, methods=["POST"]),
        Route("/api/setup-sql", api_setup_sql),
    ]
    app = Starlette(routes=routes)
    app.state.config = config
    app.state.clock = clock
    session = BoardSession(
        open_source(config, clock().date()),
        ticket_limit=config.ticket_limit,
        rearm_banner_on_change=config.banner_rearm_on_change,
    )
    session.reload(clock().date())
    app.state.session = session
    return app


def run_server(host: str = "127.0.0.1", port: int = 8787):
    app = create_app()
    uvicorn.run(app, host=host, port=port)
