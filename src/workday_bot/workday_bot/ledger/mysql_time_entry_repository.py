from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import EntryType, Location
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import TimeEntry
from .repository import TimeEntryRepository


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        user_id: str,
        entry_type: EntryType,
        timestamp: datetime,
        location: Location,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(user_id, entry_type, timestamp, location, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (str(user_id), entry_type.value, timestamp, location.value, notes),
            )
            return int(cur.lastrowid)

    def list_between(
        self,
        *,
        start: datetime,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
        entry_types: Optional[Iterable[EntryType]] = None,
        newest_first: bool = True,
        limit: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        clauses = ["timestamp >= %s"]
        params: list[object] = [start]

        if end is not None:
            clauses.append("timestamp < %s")
            params.append(end)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(str(user_id))
        types = [t.value for t in (entry_types or [])]
        if types:
            clauses.append("entry_type IN (" + ",".join(["%s"] * len(types)) + ")")
            params.extend(types)

        where = " AND ".join(clauses)
        order = "DESC" if newest_first else "ASC"
        sql = f"""
            SELECT entry_id, user_id, entry_type, timestamp, location, notes
            FROM time_entries
            WHERE {where}
            ORDER BY timestamp {order}, entry_id {order}
        """
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                TimeEntry(
                    entry_id=int(r["entry_id"]),
                    user_id=str(r["user_id"]),
                    entry_type=EntryType(r["entry_type"]),
                    timestamp=r["timestamp"],
                    location=Location(r["location"]),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
