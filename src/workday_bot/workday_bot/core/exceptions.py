from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Domain errors are expected and recoverable by the user: the operation that
    raised one has no persisted side effect.
    """


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AlreadyWorking(DomainError):
    def __init__(self) -> None:
        super().__init__("You are already clocked in")


class NotWorking(DomainError):
    def __init__(self) -> None:
        super().__init__("You are not clocked in")


class AlreadyOnBreak(DomainError):
    def __init__(self) -> None:
        super().__init__("You are already on a break")


class NotOnBreak(DomainError):
    def __init__(self) -> None:
        super().__init__("You are not on a break")


class SessionConflict(DomainError):
    """Another command changed the user's session concurrently."""

    def __init__(self) -> None:
        super().__init__("Your session changed in the meantime, please try again")


class InsufficientBalance(DomainError):
    def __init__(self, available: int, requested: Optional[int] = None) -> None:
        self.available = int(available)
        self.requested = requested
        super().__init__(f"Not enough vacation days, {self.available} available")


class BalanceNotFound(DomainError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No vacation balance for user {user_id}")


class RequestNotFound(DomainError):
    def __init__(self, request_id: int) -> None:
        self.request_id = int(request_id)
        super().__init__(f"Request #{self.request_id} not found")


class InvalidTransition(DomainError):
    """Raised when an approval action is not allowed from the current status."""

    def __init__(self, request_id: int, current: str, action: str) -> None:
        self.request_id = int(request_id)
        self.current = current
        self.action = action
        super().__init__(f"Request #{self.request_id} is {current}, cannot {action}")


class StoreUnavailable(Exception):
    """The persistence layer failed. Fatal for the current command."""
