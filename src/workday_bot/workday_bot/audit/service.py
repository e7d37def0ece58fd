from __future__ import annotations

import logging
from datetime import datetime, timedelta

from ..common.validators import require_in_range, require_non_empty
from ..core.constants import MAX_REMIND_MINUTES, MIN_REMIND_MINUTES
from ..core.enums import AuditAction
from .model import Reminder
from .repository import AuditRepository

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "discord_bot"


class AuditLog:
    def __init__(self, entries: AuditRepository, *, source: str = DEFAULT_SOURCE):
        self._entries = entries
        self._source = source

    def record(self, user_id: str, action: AuditAction, details: dict, *, now: datetime | None = None) -> int:
        return self._entries.append(
            user_id=str(user_id),
            action=action,
            details=details,
            source=self._source,
            created_at=now or datetime.now(),
        )


class ReminderService:
    """Records reminder intent in the audit log. Delivery is not implemented."""

    def __init__(self, audit: AuditLog):
        self._audit = audit

    def remind(
        self,
        *,
        user_id: str,
        target_user_id: str,
        message: str,
        delay_minutes: int,
        now: datetime | None = None,
    ) -> Reminder:
        message = require_non_empty(message, "Message")
        minutes = require_in_range(delay_minutes, "Minutes", MIN_REMIND_MINUTES, MAX_REMIND_MINUTES)
        now = now or datetime.now()
        scheduled_for = now + timedelta(minutes=minutes)

        log_id = self._audit.record(
            user_id,
            AuditAction.REMINDER_SENT,
            {
                "target_user": str(target_user_id),
                "message": message,
                "delay_minutes": minutes,
                "scheduled_for": scheduled_for.isoformat(),
            },
            now=now,
        )
        logger.info("reminder recorded user=%s target=%s at=%s", user_id, target_user_id, scheduled_for.isoformat())
        return Reminder(
            log_id=log_id,
            from_user_id=str(user_id),
            target_user_id=str(target_user_id),
            message=message,
            delay_minutes=minutes,
            scheduled_for=scheduled_for,
        )
