from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SessionType
from .model import ActiveSession


class SessionRepository(Protocol):
    """Keyed store user_id -> ActiveSession with compare-and-swap writes.

    `replace` and `delete` only apply when the stored row still matches
    `expected` (same type and start time); they return False otherwise.
    """

    def get(self, user_id: str) -> Optional[ActiveSession]:
        raise NotImplementedError

    def insert(self, session: ActiveSession) -> bool:
        """Create the session; False if the user already has one."""

        raise NotImplementedError

    def replace(self, *, expected: ActiveSession, new: ActiveSession) -> bool:
        raise NotImplementedError

    def delete(self, *, expected: ActiveSession) -> bool:
        raise NotImplementedError

    def list_by_type(self, session_type: SessionType) -> Sequence[ActiveSession]:
        """All running sessions of one type, oldest first."""

        raise NotImplementedError
