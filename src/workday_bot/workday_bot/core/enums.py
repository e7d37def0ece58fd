from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role resolved from the Discord member, used for permission checks."""

    MEMBER = "member"
    PM = "pm"
    ADMIN = "admin"


class SessionType(str, Enum):
    WORK = "work"
    BREAK = "break"


class Location(str, Enum):
    """Where a session happens.

    AWAY is only written to ledger entries for off / off_sick.
    """

    OFFICE = "office"
    HOME = "home"
    AWAY = "away"


class EntryType(str, Enum):
    """Kinds of time ledger entries."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    PAUZA_START = "pauza_start"
    PAUZA_END = "pauza_end"
    OFF = "off"
    OFF_SICK = "off_sick"


class RequestStatus(str, Enum):
    """Vacation request approval states."""

    PENDING = "pending"
    PM_APPROVED = "pm_approved"
    ADMIN_APPROVED = "admin_approved"
    REJECTED = "rejected"


class RequestKind(str, Enum):
    VACATION = "vacation"
    SICK = "sick"


class BalanceOperation(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    SET = "set"


class AuditAction(str, Enum):
    REMINDER_SENT = "reminder_sent"
    BALANCE_ADJUSTED = "balance_adjusted"
    REQUEST_DECIDED = "request_decided"
