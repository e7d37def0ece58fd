from __future__ import annotations

from datetime import datetime

from ..common.validators import require_non_empty
from .repository import UserRepository


class UserDirectory:
    """Use case: keep a lightweight record of everyone who talks to the bot."""

    def __init__(self, users: UserRepository):
        self._users = users

    def ensure_user(self, user_id: str, display_name: str, *, now: datetime | None = None) -> None:
        user_id = require_non_empty(str(user_id or ""), "User id")
        name = (display_name or "").strip() or user_id
        self._users.upsert(user_id=user_id, display_name=name, last_active=now or datetime.now())

    def display_names(self) -> dict[str, str]:
        return {u.user_id: u.display_name for u in self._users.list_all()}
