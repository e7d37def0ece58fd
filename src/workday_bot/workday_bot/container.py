from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.service import AuditLog, ReminderService
from .database.connection import DBConfig, DatabaseConnection
from .ledger.mysql_time_entry_repository import MySQLTimeEntryRepository
from .ledger.service import TimeLedger
from .reports.service import ReportService, ScheduleService, StatusService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import UserDirectory
from .vacations.mysql_balance_repository import MySQLBalanceRepository
from .vacations.mysql_vacation_request_repository import MySQLVacationRequestRepository
from .vacations.service import BalanceLedger, VacationService


@dataclass(frozen=True)
class Container:
    user_directory: UserDirectory
    session_service: SessionService
    time_ledger: TimeLedger
    balance_ledger: BalanceLedger
    vacation_service: VacationService
    reminder_service: ReminderService
    status_service: StatusService
    schedule_service: ScheduleService
    report_service: ReportService


def build_services(
    *,
    users_repo,
    sessions_repo,
    entries_repo,
    balances_repo,
    requests_repo,
    audit_repo,
) -> Container:
    """Wire services on top of any repository implementations (MySQL or in-memory)."""
    audit_log = AuditLog(audit_repo)
    time_ledger = TimeLedger(entries_repo)

    return Container(
        user_directory=UserDirectory(users_repo),
        session_service=SessionService(sessions_repo, time_ledger),
        time_ledger=time_ledger,
        balance_ledger=BalanceLedger(balances_repo, audit_log),
        vacation_service=VacationService(requests_repo, balances_repo, time_ledger, audit_log),
        reminder_service=ReminderService(audit_log),
        status_service=StatusService(users_repo, sessions_repo, entries_repo, requests_repo),
        schedule_service=ScheduleService(users_repo, entries_repo, requests_repo),
        report_service=ReportService(users_repo, entries_repo, requests_repo, balances_repo),
    )


def build_container(*, db_config: dict) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        users_repo=MySQLUserRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        entries_repo=MySQLTimeEntryRepository(conn),
        balances_repo=MySQLBalanceRepository(conn),
        requests_repo=MySQLVacationRequestRepository(conn),
        audit_repo=MySQLAuditRepository(conn),
    )
