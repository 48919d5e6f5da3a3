"""Timeouts, deadlines, record coordinates and time helpers."""

from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

__all__ = [
    "Timeout",
    "Deadline",
    "TopicPartitionOffset",
    "millis_to_epoch",
    "current_time_millis",
]

_ONE_MILLI = timedelta(milliseconds=1)
_I32_MAX = 2**31 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _wrap_i32(value: int) -> int:
    """Reduce an integer to the signed 32-bit range, wrapping like a cast."""
    return ((value + 2**31) % 2**32) - 2**31


def _millis(duration: timedelta) -> int:
    return duration // _ONE_MILLI


@functools.total_ordering
@dataclass(frozen=True)
class Timeout:
    """A timeout for an operation: either a duration or no limit at all.

    ``duration`` is ``None`` for a timeout that never expires. Any finite
    timeout orders before the infinite one.
    """

    duration: Optional[timedelta] = None

    def __post_init__(self) -> None:
        if self.duration is not None:
            if not isinstance(self.duration, timedelta):
                raise TypeError("timeout duration must be a timedelta")
            if self.duration < timedelta(0):
                raise ValueError("timeout duration must not be negative")

    @classmethod
    def after(cls, duration: timedelta) -> "Timeout":
        """Time out once ``duration`` has passed."""
        if duration is None:
            raise TypeError("a finite timeout needs a duration")
        return cls(duration)

    @classmethod
    def never(cls) -> "Timeout":
        """Block forever."""
        return cls(None)

    @classmethod
    def from_value(cls, value: Union["Timeout", timedelta, None]) -> "Timeout":
        """Build a timeout from a timedelta, ``None`` (never) or a Timeout."""
        if isinstance(value, Timeout):
            return value
        if value is None:
            return cls.never()
        if isinstance(value, timedelta):
            return cls.after(value)
        raise TypeError(f"cannot convert {type(value).__name__} to Timeout")

    @property
    def is_never(self) -> bool:
        return self.duration is None

    def as_millis(self) -> int:
        """Milliseconds as a signed 32-bit integer; -1 means never."""
        if self.duration is None:
            return -1
        return _wrap_i32(_millis(self.duration))

    def saturating_sub(self, rhs: timedelta) -> "Timeout":
        """Subtract ``rhs``, stopping at zero; a never-timeout is unchanged."""
        if self.duration is None:
            return self
        return Timeout(max(self.duration - rhs, timedelta(0)))

    def is_zero(self) -> bool:
        return self.duration is not None and self.duration == timedelta(0)

    def __isub__(self, other: "Timeout") -> "Timeout":
        if other.duration is None:
            raise ValueError("subtraction of a never-timeout is ill-defined")
        if self.duration is None:
            return self
        if other.duration > self.duration:
            raise ValueError("overflow when subtracting durations")
        return Timeout(self.duration - other.duration)

    def to_deadline(self) -> "Deadline":
        """A deadline this far from now, or one that never arrives."""
        return Deadline(self.duration)

    def _order_key(self) -> tuple:
        if self.duration is None:
            return (1, timedelta(0))
        return (0, self.duration)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timeout):
            return NotImplemented
        return self._order_key() < other._order_key()


class Deadline:
    """A point in time after which an operation should give up."""

    # Flush calls take a signed 32-bit millisecond timeout.
    MAX_FLUSH_DURATION = timedelta(milliseconds=_I32_MAX)

    def __init__(self, duration: Optional[timedelta]) -> None:
        if duration is None:
            self._at: Optional[float] = None
        else:
            self._at = time.monotonic() + duration.total_seconds()

    @property
    def is_never(self) -> bool:
        return self._at is None

    def remaining(self) -> timedelta:
        """Time left before the deadline, never negative."""
        if self._at is None:
            return timedelta.max
        left = self._at - time.monotonic()
        return timedelta(seconds=max(left, 0.0))

    def remaining_millis_i32(self) -> int:
        return _millis(min(self.MAX_FLUSH_DURATION, self.remaining()))

    def elapsed(self) -> bool:
        return self.remaining() <= timedelta(0)

    def to_timeout(self) -> Timeout:
        if self._at is None:
            return Timeout.never()
        return Timeout.after(self.remaining())

    def __repr__(self) -> str:
        if self._at is None:
            return "Deadline(never)"
        return f"Deadline(remaining={self.remaining()!r})"


@dataclass(frozen=True, order=True)
class TopicPartitionOffset:
    """The coordinates of a record: topic, partition and offset."""

    topic: str
    partition: int
    offset: int

    def __str__(self) -> str:
        return (
            f"Topic: {self.topic}, Partition: {self.partition}, "
            f"Offset: {self.offset}"
        )


def millis_to_epoch(time: datetime) -> int:
    """Milliseconds from the Unix epoch to ``time``; 0 for earlier times.

    A naive datetime is taken to be in UTC.
    """
    if time.tzinfo is None:
        time = time.replace(tzinfo=timezone.utc)
    delta = time - _EPOCH
    if delta < timedelta(0):
        return 0
    return _millis(delta)


def current_time_millis() -> int:
    """The current time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000