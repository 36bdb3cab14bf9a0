"""SQLite schema for the normalized schedule record.

Tables mirror ``services.schedule_tables``: discipline, event, phase,
event_unit, competitor, result. Natural codes (canonical form) are primary
keys so re-ingesting a schedule upserts in place. Timestamps are stored as
the feed's ISO-8601 text.
"""

from __future__ import annotations
import sqlite3

SCHEMA_VERSION = 1

# DDL statements (ordered for FK dependencies)
DDL: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS schema_meta (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS discipline (
        code TEXT PRIMARY KEY,
        name TEXT,
        order_num INTEGER
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS event (
        code TEXT PRIMARY KEY,
        name TEXT,
        gender_code TEXT,
        event_order INTEGER,
        discipline_code TEXT
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS phase (
        code TEXT PRIMARY KEY,
        event_code TEXT NOT NULL REFERENCES event(code) ON DELETE CASCADE,
        name TEXT,
        phase_type TEXT,
        phase_code TEXT
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS event_unit (
        code TEXT PRIMARY KEY,
        event_code TEXT NOT NULL REFERENCES event(code) ON DELETE CASCADE,
        phase_code TEXT,
        name TEXT,
        start_date TEXT,
        end_date TEXT,
        status TEXT,
        status_description TEXT,
        medal_flag INTEGER,
        schedule_item_type TEXT,
        olympic_day TEXT,
        order_num INTEGER,
        unit_num TEXT,
        session_code TEXT,
        location TEXT,
        location_description TEXT,
        event_unit_type TEXT,
        live_flag INTEGER
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS competitor (
        id TEXT PRIMARY KEY,
        code TEXT,
        name TEXT NOT NULL,
        event_unit_code TEXT NOT NULL REFERENCES event_unit(code) ON DELETE CASCADE,
        country_code TEXT,
        order_num INTEGER
    );
    """.strip(),
    """
    CREATE TABLE IF NOT EXISTS result (
        id TEXT PRIMARY KEY,
        competitor_id TEXT NOT NULL REFERENCES competitor(id) ON DELETE CASCADE,
        event_unit_code TEXT NOT NULL,
        position TEXT,
        mark TEXT,
        medal_type TEXT,
        irm TEXT,
        winner_loser_tie TEXT
    );
    """.strip(),
    "CREATE INDEX IF NOT EXISTS idx_phase_event ON phase(event_code)",
    "CREATE INDEX IF NOT EXISTS idx_event_unit_event ON event_unit(event_code)",
    "CREATE INDEX IF NOT EXISTS idx_competitor_country ON competitor(country_code)",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()
    for stmt in DDL:
        cur.execute(stmt)
    cur.execute(
        "INSERT OR REPLACE INTO schema_meta(key, value) VALUES ('schema_version', ?)",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    cur = conn.cursor()
    cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
    return sorted(r[0] for r in cur.fetchall())
