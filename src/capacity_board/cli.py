"""CLI entry point for the capacity board."""

import json
import logging
import sys
from datetime import date, datetime

import click

from capacity_board.config import get_config
from capacity_board.core import timeline
from capacity_board.core.loader import open_source, sample_rows
from capacity_board.core.session import BoardSession, SessionError
from capacity_board.db.engine import SETUP_SQL, SqliteTableSource, StoreError, init_db
from capacity_board.db.models import AvailabilityType, SortOption, ViewConfig, ViewMode
from capacity_board.integrations import summarizer

VIEW_CHOICES = [m.value for m in ViewMode]
SORT_CHOICES = [s.value for s in SortOption]
TYPE_CHOICES = [t.value for t in AvailabilityType]


def _load_session(today: date) -> BoardSession:
    config = get_config()
    session = BoardSession(
        open_source(config, today),
        ticket_limit=config.ticket_limit,
        rearm_banner_on_change=config.banner_rearm_on_change,
    )
    result = session.reload(today)
    if result.error:
        click.echo(f"Error: {result.error}", err=True)
        if result.setup_required:
            click.echo("Run `cb setup` to create the tables.", err=True)
        sys.exit(1)
    return session


def _view(start, view, sort, search, weekends, today: date) -> ViewConfig:
    return ViewConfig(
        start_date=start.date() if start else timeline.initial_view_start(today),
        view_mode=ViewMode(view),
        sort_option=SortOption(sort),
        search=search,
        show_weekends=weekends,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose):
    """cb - Capacity Board CLI"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── Store Commands ────────────────────────────────────────────────────────────


@main.command("setup")
@click.option("--print", "print_sql", is_flag=True, help="Print the hosted-store SQL instead")
def setup(print_sql):
    """Create the board tables in the local database."""
    if print_sql:
        click.echo(SETUP_SQL)
        return
    config = get_config()
    init_db(config.db_path).close()
    click.echo(f"Tables ready in {config.db_path}")


@main.command("seed")
def seed():
    """Write the sample team into the local database."""
    config = get_config()
    init_db(config.db_path).close()
    source = SqliteTableSource(config.db_path)
    rows = sample_rows(date.today())
    try:
        for table in ("developers", "jira_tickets", "manual_availability"):
            for row in rows[table]:
                source.insert(table, row)
    except StoreError as e:
        click.echo(f"Seeding failed: {e}", err=True)
        sys.exit(1)
    click.echo(
        f"Seeded {len(rows['developers'])} developers, {len(rows['jira_tickets'])} tickets, "
        f"{len(rows['manual_availability'])} blocks"
    )


# ── Board Commands ────────────────────────────────────────────────────────────


@main.command("board")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="First day shown")
@click.option("--view", type=click.Choice(VIEW_CHOICES), default=ViewMode.WEEK.value, help="Window length")
@click.option("--sort", type=click.Choice(SORT_CHOICES), default=SortOption.LOAD_WEEK_DESC.value)
@click.option("--search", default="", help="Filter developers by name")
@click.option("--weekends", is_flag=True, help="Show weekend columns")
@click.option("--json-output", "--json", is_flag=True, help="Output as JSON")
def board(start, view, sort, search, weekends, json_output):
    """Show the load heatmap."""
    now = datetime.now()
    session = _load_session(now.date())
    snapshot = session.snapshot(_view(start, view, sort, search, weekends, now.date()), now)

    if json_output:
        click.echo(json.dumps(snapshot, indent=2))
        return

    visible = [c for c in snapshot["columns"] if not c["collapsed"]]
    click.echo(f"{'':<22}" + "".join(f"{c['date'][5:]:>7}" for c in visible))
    for row in snapshot["rows"]:
        marker = "!" if row["critical"] else " "
        cells = [c for c in row["cells"] if not c["collapsed"]]
        line = "".join(f"{'BLK' if c['blocked'] else str(c['percentage']) + '%':>7}" for c in cells)
        click.echo(f"{marker} {row['developer']['name'][:19]:<20}{line}")
    if not snapshot["rows"]:
        click.echo("No developers found.")


@main.command("status")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Week start")
@click.option("--search", default="", help="Filter developers by name")
def status(start, search):
    """Show team metrics and the current warning level."""
    now = datetime.now()
    session = _load_session(now.date())
    view = _view(start, ViewMode.WEEK.value, SortOption.LOAD_WEEK_DESC.value, search, False, now.date())
    snapshot = session.snapshot(view, now)

    m = snapshot["metrics"]
    click.echo(f"Team {m['utilization']}% utilised • {m['free']} free today • {m['overbooked']} overbooked")
    warning = snapshot["warning"]
    click.echo(f"Warning: {warning['level']}")
    if warning["message"]:
        click.echo(f"  {warning['message']}")


@main.group("block")
def block_group():
    """Manage unavailability blocks."""
    pass


@block_group.command("add")
@click.argument("developer_id")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--type", "kind", type=click.Choice(TYPE_CHOICES), default=AvailabilityType.OOO.value)
@click.option("--notes", default="", help="Reason shown on the board")
def block_add(developer_id, day, kind, notes):
    """Mark a developer unavailable for a day."""
    session = _load_session(date.today())
    try:
        block = session.add_availability(developer_id, day.date(), AvailabilityType(kind), notes)
    except SessionError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    click.echo(f"Blocked {developer_id} on {block.start_date.isoformat()} ({block.notes or block.type.value})")


@main.command("analyze")
def analyze():
    """Ask the summarizer for scheduling insights."""
    config = get_config()
    session = _load_session(date.today())
    click.echo(summarizer.analyze_schedule(
        config.summarizer_api_key,
        session.developers,
        session.tickets,
        session.blocks,
        config.summarizer_model,
    ))


# ── Dashboard Command ────────────────────────────────────────────────────────


@main.command("ui")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8787, type=int, help="Port to listen on")
@click.option("--open/--no-open", default=True, help="Open browser automatically")
def ui_command(host, port, open):
    """Launch the web dashboard."""
    import webbrowser

    from capacity_board.web.app import run_server

    url = f"http://{host}:{port}"
    click.echo(f"Starting dashboard at {url}")
    if open:
        webbrowser.open(url)
    run_server(host=host, port=port)


if __name__ == "__main__":
    main()
