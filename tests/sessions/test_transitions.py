from __future__ import annotations

import pytest

from src.workday_bot.workday_bot.core.enums import EntryType
from src.workday_bot.workday_bot.core.exceptions import AlreadyOnBreak, AlreadyWorking, NotOnBreak, NotWorking
from src.workday_bot.workday_bot.sessions.transitions import (
    TRANSITIONS,
    SessionEvent,
    SessionState,
    StoreAction,
    resolve,
)


def test_table_covers_every_state_and_event():
    assert len(TRANSITIONS) == len(SessionState) * len(SessionEvent)


@pytest.mark.parametrize(
    "state,event,error",
    [
        (SessionState.OFF, SessionEvent.END_WORK, NotWorking),
        (SessionState.OFF, SessionEvent.START_BREAK, NotWorking),
        (SessionState.OFF, SessionEvent.END_BREAK, NotOnBreak),
        (SessionState.WORK, SessionEvent.START_WORK, AlreadyWorking),
        (SessionState.WORK, SessionEvent.END_BREAK, NotOnBreak),
        (SessionState.BREAK, SessionEvent.START_BREAK, AlreadyOnBreak),
    ],
)
def test_invalid_transitions_raise(state, event, error):
    with pytest.raises(error):
        resolve(state, event)


def test_break_to_work_has_no_pauza_end():
    t = resolve(SessionState.BREAK, SessionEvent.START_WORK)
    assert t.store == StoreAction.REPLACE
    assert t.target == SessionState.WORK
    assert t.entries == (EntryType.CLOCK_IN,)


def test_off_from_work_emits_clock_out_first():
    t = resolve(SessionState.WORK, SessionEvent.MARK_OFF)
    assert t.store == StoreAction.DELETE
    assert t.entries == (EntryType.CLOCK_OUT, EntryType.OFF)


def test_off_when_already_off_touches_no_session():
    t = resolve(SessionState.OFF, SessionEvent.MARK_OFF)
    assert t.store == StoreAction.NONE
    assert t.entries == (EntryType.OFF,)
