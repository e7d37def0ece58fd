from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    log_id: int
    user_id: str
    action: AuditAction
    details: dict
    source: str
    created_at: datetime


@dataclass(frozen=True)
class Reminder:
    """A recorded reminder intent. Nothing delivers it."""

    log_id: int
    from_user_id: str
    target_user_id: str
    message: str
    delay_minutes: int
    scheduled_for: datetime
