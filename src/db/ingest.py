"""Schedule ingestion into the local SQLite record.

Rows come from ``services.schedule_tables.build_tables``; each table is
upserted in chunks inside one transaction. Before event units are written
their phase code is resolved against the phases stored for their event
(edit-distance match), so units whose phase id is formatted differently
from the phase table still point at a real phase.

Public API:
 - ingest_schedule(conn, schedule, chunk_size=DB_CHUNK_SIZE) -> IngestReport
"""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from config import settings
from domain.models import Schedule
from services.schedule_tables import Row, build_tables, chunked, resolve_unit_phases

_log = logging.getLogger(__name__)

# table name in the record -> attribute of ScheduleTables
TABLES: Dict[str, str] = {
    "discipline": "disciplines",
    "event": "events",
    "phase": "phases",
    "event_unit": "event_units",
    "competitor": "competitors",
    "result": "results",
}


@dataclass
class IngestReport:
    rows: Dict[str, int] = field(default_factory=dict)
    phase_errors: List[str] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return sum(self.rows.values())


def _scalar(value):
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _upsert(conn: sqlite3.Connection, table: str, rows: Sequence[Row], chunk_size: int) -> int:
    if not rows:
        _log.info("No data to insert for table: %s", table)
        return 0
    columns = list(rows[0].keys())
    placeholders = ",".join("?" for _ in columns)
    sql = f"INSERT OR REPLACE INTO {table}({','.join(columns)}) VALUES ({placeholders})"
    written = 0
    for chunk in chunked(rows, chunk_size):
        conn.executemany(sql, [tuple(_scalar(r.get(c)) for c in columns) for r in chunk])
        written += len(chunk)
        _log.debug("Upserted %d rows into %s", len(chunk), table)
    return written


def _stored_phases(conn: sqlite3.Connection) -> List[Row]:
    cur = conn.execute("SELECT code, event_code FROM phase")
    return [{"code": code, "event_code": event_code} for code, event_code in cur.fetchall()]


def ingest_schedule(
    conn: sqlite3.Connection, schedule: Schedule, chunk_size: int = settings.DB_CHUNK_SIZE
) -> IngestReport:
    tables = build_tables(schedule)
    report = IngestReport()
    with conn:
        for table in ("discipline", "event", "phase"):
            report.rows[table] = _upsert(conn, table, getattr(tables, TABLES[table]), chunk_size)

        resolution = resolve_unit_phases(schedule.units, _stored_phases(conn))
        report.phase_errors = list(resolution.errors)
        for row in tables.event_units:
            row["phase_code"] = resolution.phase_codes.get(row["code"])

        for table in ("event_unit", "competitor", "result"):
            report.rows[table] = _upsert(conn, table, getattr(tables, TABLES[table]), chunk_size)
    _log.info("Schedule ingested: %s", report.rows)
    return report


def count_rows(conn: sqlite3.Connection, table: str) -> int:
    if table not in TABLES:
        raise ValueError(f"Unknown table: {table}")
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
