"""SQLite table store: schema, connections and the row-level source."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

TABLES = ("developers", "jira_tickets", "manual_availability")

SCHEMA = """
CREATE TABLE IF NOT EXISTS developers (
    id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(16)))),
    jira_account_id TEXT,
    display_name TEXT,
    name TEXT,
    email TEXT,
    role TEXT,
    avatar TEXT,
    capacity INTEGER
);

CREATE TABLE IF NOT EXISTS jira_tickets (
    key TEXT PRIMARY KEY,
    id TEXT,
    summary TEXT,
    title TEXT,
    status TEXT,
    assignee_jira_id TEXT,
    assignee TEXT,
    assignee_id TEXT,
    priority TEXT,
    labels TEXT,
    updated_at TEXT,
    start_date TEXT,
    end_date TEXT
);

CREATE TABLE IF NOT EXISTS manual_availability (
    id TEXT PRIMARY KEY DEFAULT (lower(hex(randomblob(16)))),
    developer_id TEXT REFERENCES developers(id),
    start_time TEXT,
    end_time TEXT,
    reason TEXT
);
"""

# DDL for the hosted (Postgres) store, shown on the "setup required" screen.
SETUP_SQL = """\
create table if not exists developers ( id uuid default gen_random_uuid() primary key, jira_account_id text, display_name text, email text, role text, capacity int );
create table if not exists jira_tickets ( key text primary key, summary text, status text, assignee_jira_id text, assignee text, updated_at timestamptz, start_date date, end_date date, priority text );
create table if not exists manual_availability ( id uuid default gen_random_uuid() primary key, developer_id uuid references developers(id), start_time timestamptz, end_time timestamptz, reason text );
alter publication supabase_realtime add table jira_tickets, manual_availability;
"""

MISSING_TABLE_CODE = "42P01"


class StoreError(Exception):
    """Raised when the table store cannot serve a request."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


def is_missing_schema(error: Exception) -> bool:
    """True when the error means the board's tables were never created."""
    code = getattr(error, "code", None)
    if code == MISSING_TABLE_CODE:
        return True
    message = str(error)
    return "does not exist" in message or "no such table" in message


def connect(db_path: Path) -> sqlite3.Connection:
    """Open the database without creating any tables."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db(db_path: Path) -> sqlite3.Connection:
    """Initialize the database, creating tables if needed."""
    conn = connect(db_path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.executescript(SCHEMA)
    conn.commit()
    return conn


@contextmanager
def get_db(db_path: Path, create: bool = False):
    """Context manager for database connections."""
    conn = init_db(db_path) if create else connect(db_path)
    try:
        yield conn
    finally:
        conn.close()


class SqliteTableSource:
    """Raw-record access to the three board tables in a SQLite database.

    Opens a connection per call so it can be shared across request threads.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path

    def select(self, table: str, limit: int | None = None) -> list[dict]:
        _check_table(table)
        query = f"SELECT * FROM {table}"
        params: list = []
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        return [dict(r) for r in rows]

    def insert(self, table: str, row: dict) -> None:
        _check_table(table)
        columns = list(row)
        placeholders = ", ".join("?" for _ in columns)
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                    [row[c] for c in columns],
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    def close(self):
        pass


def _check_table(table: str):
    if table not in TABLES:
        raise StoreError(f"Unknown table: {table}")
