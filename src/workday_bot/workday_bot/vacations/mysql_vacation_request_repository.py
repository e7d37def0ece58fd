from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationRequest
from .repository import VacationRequestRepository

_COLUMNS = """
    request_id, user_id, kind, requested_days, start_date, end_date, reason, status, created_at,
    pm_approved_by, pm_approved_at, admin_approved_by, admin_approved_at,
    rejected_by, rejected_at, rejection_reason
"""

# Which actor columns a status change writes.
_ACTOR_COLUMNS = {
    RequestStatus.PM_APPROVED: ("pm_approved_by", "pm_approved_at"),
    RequestStatus.ADMIN_APPROVED: ("admin_approved_by", "admin_approved_at"),
    RequestStatus.REJECTED: ("rejected_by", "rejected_at"),
}


def _to_request(r: dict) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["request_id"]),
        user_id=str(r["user_id"]),
        kind=RequestKind(r["kind"]),
        requested_days=int(r["requested_days"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        pm_approved_by=r.get("pm_approved_by"),
        pm_approved_at=r.get("pm_approved_at"),
        admin_approved_by=r.get("admin_approved_by"),
        admin_approved_at=r.get("admin_approved_at"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLVacationRequestRepository(VacationRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        kind: RequestKind,
        requested_days: int,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        status: RequestStatus,
        created_at: datetime,
        admin_approved_by: Optional[str] = None,
    ) -> int:
        admin_approved_at = created_at if admin_approved_by else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(
                    user_id, kind, requested_days, start_date, end_date, reason, status, created_at,
                    admin_approved_by, admin_approved_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    str(user_id),
                    kind.value,
                    int(requested_days),
                    start_date,
                    end_date,
                    reason,
                    status.value,
                    created_at,
                    admin_approved_by,
                    admin_approved_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vacation_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_by_status(self, *, status: RequestStatus, limit: int = 200) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM vacation_requests
                WHERE status=%s
                ORDER BY created_at ASC, request_id ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_for_user(self, *, user_id: str, limit: int = 10) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM vacation_requests
                WHERE user_id=%s
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                (str(user_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_covering(self, *, day: date) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM vacation_requests
                WHERE status=%s AND %s BETWEEN start_date AND end_date
                ORDER BY start_date ASC
                """,
                (RequestStatus.ADMIN_APPROVED.value, day),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_upcoming(self, *, from_day: date, limit: int = 10) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM vacation_requests
                WHERE status=%s AND start_date >= %s
                ORDER BY start_date ASC
                LIMIT %s
                """,
                (RequestStatus.ADMIN_APPROVED.value, from_day, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def transition(
        self,
        *,
        request_id: int,
        expected: RequestStatus,
        status: RequestStatus,
        actor_id: str,
        at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        by_col, at_col = _ACTOR_COLUMNS[status]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE vacation_requests
                SET status=%s, {by_col}=%s, {at_col}=%s, rejection_reason=COALESCE(%s, rejection_reason)
                WHERE request_id=%s AND status=%s
                """,
                (status.value, str(actor_id), at, rejection_reason, int(request_id), expected.value),
            )
            return cur.rowcount > 0
