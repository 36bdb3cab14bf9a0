"""Database package for the local normalized schedule record.

Public API:
 - apply_schema(conn), get_existing_tables(conn)
 - ingest_schedule(conn, schedule) -> IngestReport, count_rows(conn, table)
"""

from .schema import apply_schema, get_existing_tables  # noqa: F401
from .ingest import ingest_schedule, IngestReport, count_rows  # noqa: F401
