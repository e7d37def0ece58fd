from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Location, SessionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import ActiveSession
from .repository import SessionRepository


def _to_session(r: dict) -> ActiveSession:
    return ActiveSession(
        user_id=str(r["user_id"]),
        session_type=SessionType(r["session_type"]),
        start_time=r["start_time"],
        location=Location(r["location"]),
        work_started_at=r.get("work_started_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[ActiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, session_type, start_time, location, work_started_at
                FROM active_sessions
                WHERE user_id=%s
                """,
                (str(user_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def insert(self, session: ActiveSession) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO active_sessions(user_id, session_type, start_time, location, work_started_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        session.user_id,
                        session.session_type.value,
                        session.start_time,
                        session.location.value,
                        session.work_started_at,
                    ),
                )
                return True
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise

    def replace(self, *, expected: ActiveSession, new: ActiveSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE active_sessions
                SET session_type=%s, start_time=%s, location=%s, work_started_at=%s
                WHERE user_id=%s AND session_type=%s AND start_time=%s
                """,
                (
                    new.session_type.value,
                    new.start_time,
                    new.location.value,
                    new.work_started_at,
                    expected.user_id,
                    expected.session_type.value,
                    expected.start_time,
                ),
            )
            return cur.rowcount > 0

    def delete(self, *, expected: ActiveSession) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM active_sessions
                WHERE user_id=%s AND session_type=%s AND start_time=%s
                """,
                (expected.user_id, expected.session_type.value, expected.start_time),
            )
            return cur.rowcount > 0

    def list_by_type(self, session_type: SessionType) -> Sequence[ActiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, session_type, start_time, location, work_started_at
                FROM active_sessions
                WHERE session_type=%s
                ORDER BY start_time ASC
                """,
                (session_type.value,),
            )
            return [_to_session(r) for r in fetchall(cur)]
