from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """Domain entity: a Discord user known to the bot.

    Note: plain data object (no DB access code). Users are never deleted.
    """

    user_id: str
    display_name: str
    last_active: datetime
