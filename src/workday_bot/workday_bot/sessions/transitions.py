"""Session state machine.

Every command maps (current state, event) to exactly one entry of
TRANSITIONS: either a domain error class, or a Transition describing the
single store write and the ledger entries to emit, in order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..core.enums import EntryType, SessionType
from ..core.exceptions import AlreadyOnBreak, AlreadyWorking, DomainError, NotOnBreak, NotWorking
from .model import ActiveSession


class SessionState(str, Enum):
    OFF = "off"
    WORK = "work"
    BREAK = "break"


class SessionEvent(str, Enum):
    START_WORK = "start_work"
    END_WORK = "end_work"
    START_BREAK = "start_break"
    END_BREAK = "end_break"
    MARK_OFF = "mark_off"


class StoreAction(str, Enum):
    NONE = "none"
    INSERT = "insert"
    REPLACE = "replace"
    DELETE = "delete"


@dataclass(frozen=True)
class Transition:
    store: StoreAction
    target: SessionState
    entries: tuple[EntryType, ...] = ()


Rule = Union[Transition, type[DomainError]]

S, E = SessionState, SessionEvent

TRANSITIONS: dict[tuple[SessionState, SessionEvent], Rule] = {
    (S.OFF, E.START_WORK): Transition(StoreAction.INSERT, S.WORK, (EntryType.CLOCK_IN,)),
    (S.OFF, E.END_WORK): NotWorking,
    (S.OFF, E.START_BREAK): NotWorking,
    (S.OFF, E.END_BREAK): NotOnBreak,
    (S.OFF, E.MARK_OFF): Transition(StoreAction.NONE, S.OFF, (EntryType.OFF,)),

    (S.WORK, E.START_WORK): AlreadyWorking,
    (S.WORK, E.END_WORK): Transition(StoreAction.DELETE, S.OFF, (EntryType.CLOCK_OUT,)),
    (S.WORK, E.START_BREAK): Transition(StoreAction.REPLACE, S.BREAK, (EntryType.PAUZA_START,)),
    (S.WORK, E.END_BREAK): NotOnBreak,
    (S.WORK, E.MARK_OFF): Transition(StoreAction.DELETE, S.OFF, (EntryType.CLOCK_OUT, EntryType.OFF)),

    # The interrupted break is closed silently: no pauza_end entry.
    (S.BREAK, E.START_WORK): Transition(StoreAction.REPLACE, S.WORK, (EntryType.CLOCK_IN,)),
    (S.BREAK, E.END_WORK): Transition(StoreAction.DELETE, S.OFF, (EntryType.CLOCK_OUT,)),
    (S.BREAK, E.START_BREAK): AlreadyOnBreak,
    # Resumes the interrupted work session rather than leaving the user off.
    (S.BREAK, E.END_BREAK): Transition(StoreAction.REPLACE, S.WORK, (EntryType.PAUZA_END,)),
    (S.BREAK, E.MARK_OFF): Transition(StoreAction.DELETE, S.OFF, (EntryType.CLOCK_OUT, EntryType.OFF)),
}

del S, E


def state_of(session: Optional[ActiveSession]) -> SessionState:
    if session is None:
        return SessionState.OFF
    if session.session_type == SessionType.BREAK:
        return SessionState.BREAK
    return SessionState.WORK


def resolve(state: SessionState, event: SessionEvent) -> Transition:
    """Return the transition for (state, event) or raise its domain error."""
    rule = TRANSITIONS[(state, event)]
    if isinstance(rule, Transition):
        return rule
    raise rule()
