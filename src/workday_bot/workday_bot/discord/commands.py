"""Parsing of Discord interaction payloads into plain Python values."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.enums import Role
from ..core.exceptions import ValidationError


class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2


class ResponseType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4


EPHEMERAL = 64


@dataclass(frozen=True)
class Actor:
    user_id: str
    display_name: str
    role_ids: frozenset = frozenset()


@dataclass(frozen=True)
class Command:
    name: str
    actor: Actor
    options: dict[str, Any] = field(default_factory=dict)
    resolved_users: dict[str, str] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        value = self.options.get(name)
        return default if value is None else value

    def text(self, name: str) -> Optional[str]:
        value = self.options.get(name)
        return None if value is None else str(value)

    def required(self, name: str) -> Any:
        value = self.options.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Option '{name}' is required")
        return value

    def integer(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self.options.get(name)
        if value is None:
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Option '{name}' must be a whole number")

    def required_integer(self, name: str) -> int:
        self.required(name)
        return self.integer(name)

    def date(self, name: str) -> date:
        return parse_iso_date(str(self.required(name)))

    def user(self, name: str) -> tuple[str, str]:
        """(user id, display name) of a user option."""
        user_id = str(self.required(name))
        return user_id, self.resolved_users.get(user_id, user_id)


def _display_name(member: dict, user: dict) -> str:
    return member.get("nick") or user.get("global_name") or user.get("username") or str(user.get("id", ""))


def parse_actor(payload: dict) -> Actor:
    member = payload.get("member") or {}
    user = member.get("user") or payload.get("user") or {}
    if not user.get("id"):
        raise ValidationError("Interaction has no user")
    return Actor(
        user_id=str(user["id"]),
        display_name=_display_name(member, user),
        role_ids=frozenset(str(r) for r in member.get("roles") or []),
    )


def parse_command(payload: dict) -> Command:
    data = payload.get("data") or {}
    name = str(data.get("name") or "").strip()

    options = {}
    for opt in data.get("options") or []:
        if "name" in opt:
            options[str(opt["name"])] = opt.get("value")

    resolved = {}
    resolved_data = data.get("resolved") or {}
    members = resolved_data.get("members") or {}
    for user_id, user in (resolved_data.get("users") or {}).items():
        resolved[str(user_id)] = _display_name(members.get(user_id) or {}, user)

    return Command(name=name, actor=parse_actor(payload), options=options, resolved_users=resolved)


def role_for(role_ids: frozenset, *, admin_role_ids: frozenset, pm_role_ids: frozenset) -> Role:
    if role_ids & admin_role_ids:
        return Role.ADMIN
    if role_ids & pm_role_ids:
        return Role.PM
    return Role.MEMBER
