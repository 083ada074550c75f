"""
Time sources for journal timestamps.

The ledger itself is period-driven and never reads the wall clock; only the
EventJournal stamps ``occurred_at``. Injecting the clock keeps journal
hashes reproducible in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of timezone-aware UTC datetimes."""

    @abstractmethod
    def now(self) -> datetime: ...


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    Starts at 2024-01-01 12:00 UTC unless ``fixed_time`` is given. Two
    journals fed from clocks in the same state produce identical events.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or _EPOCH

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: int = 1) -> None:
        self._current += timedelta(seconds=seconds)

    def tick(self) -> datetime:
        """Move forward one second and return the new time."""
        self.advance()
        return self._current
