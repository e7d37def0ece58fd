from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def upsert(self, *, user_id: str, display_name: str, last_active: datetime) -> None:
        """Insert the user, or refresh display name and last-active if present."""

        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_active_since(self, since: datetime) -> Sequence[User]:
        """Users whose last activity is at or after `since`, most recent first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError
