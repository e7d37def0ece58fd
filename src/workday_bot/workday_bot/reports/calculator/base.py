from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from ...ledger.model import TimeEntry


class WorkHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked time)."""

    @abstractmethod
    def worked_minutes(self, entries: Sequence[TimeEntry]) -> int:
        """Entries belong to one user and are sorted oldest first."""
        raise NotImplementedError
