from __future__ import annotations

from datetime import timedelta

import pytest

from src.workday_bot.workday_bot.core.enums import AuditAction
from src.workday_bot.workday_bot.core.exceptions import ValidationError
from tests.fakes import FakeStore, at


def test_reminder_is_recorded_not_delivered():
    store = FakeStore()

    item = store.container.reminder_service.remind(
        user_id="a",
        target_user_id="b",
        message="standup",
        delay_minutes=15,
        now=at(9),
    )

    assert item.scheduled_for == at(9) + timedelta(minutes=15)
    [entry] = store.audit.entries
    assert entry.user_id == "a"
    assert entry.action == AuditAction.REMINDER_SENT
    assert entry.source == "discord_bot"
    assert entry.details == {
        "target_user": "b",
        "message": "standup",
        "delay_minutes": 15,
        "scheduled_for": "2026-03-02T09:15:00",
    }


@pytest.mark.parametrize("minutes", [0, 1441])
def test_delay_is_bounded(minutes):
    store = FakeStore()
    with pytest.raises(ValidationError):
        store.container.reminder_service.remind(
            user_id="a", target_user_id="b", message="x", delay_minutes=minutes, now=at(9)
        )
    assert store.audit.entries == []


def test_message_is_required():
    with pytest.raises(ValidationError):
        FakeStore().container.reminder_service.remind(
            user_id="a", target_user_id="b", message=" ", delay_minutes=5, now=at(9)
        )
