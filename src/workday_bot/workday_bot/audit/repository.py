from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ..core.enums import AuditAction


class AuditRepository(Protocol):
    def append(self, *, user_id: str, action: AuditAction, details: dict, source: str, created_at: datetime) -> int:
        raise NotImplementedError
