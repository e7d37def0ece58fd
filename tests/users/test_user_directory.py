from __future__ import annotations

import pytest

from src.workday_bot.workday_bot.core.exceptions import ValidationError
from tests.fakes import FakeStore, at


def test_ensure_user_is_idempotent_and_refreshes_activity():
    store = FakeStore()
    directory = store.container.user_directory

    directory.ensure_user("42", "alice", now=at(9))
    directory.ensure_user("42", "Alice L.", now=at(15))

    assert len(store.users.users) == 1
    user = store.users.get_by_id("42")
    assert user.display_name == "Alice L."
    assert user.last_active == at(15)


def test_missing_display_name_falls_back_to_id():
    store = FakeStore()
    store.container.user_directory.ensure_user("42", "", now=at(9))
    assert store.container.user_directory.display_names() == {"42": "42"}


def test_user_id_is_required():
    with pytest.raises(ValidationError):
        FakeStore().container.user_directory.ensure_user("", "x", now=at(9))
