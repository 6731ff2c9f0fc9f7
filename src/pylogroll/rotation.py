"""Rotation boundary policies for time-rotated log files."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

from .errors import InvalidConfigError


class RotationPolicy(ABC):
    """Abstract base class for rotation boundary policies.

    A policy is immutable and validated when constructed. Boundaries are
    always re-derived from the current time after a rotation, so a sink that
    was idle across several periods rotates once, not once per missed period.
    """

    @property
    @abstractmethod
    def period(self) -> timedelta:
        """Length of one rotation period."""
        pass

    @abstractmethod
    def candidate(self, now: datetime) -> datetime:
        """Align ``now`` to the policy's target time within the same period.

        Args:
        ----
            now: The current time

        Returns:
        -------
            datetime: ``now`` with the target fields overwritten and the
            seconds and sub-seconds zeroed

        """
        pass

    def next_boundary(self, now: datetime) -> datetime:
        """Return the next rotation point, strictly after ``now``."""
        rotation_time = self.candidate(now)
        if rotation_time > now:
            return rotation_time
        return rotation_time + self.period


class DailyRotation(RotationPolicy):
    """Rotate once a day at a fixed wall-clock time."""

    def __init__(self, hour: int = 0, minute: int = 0):
        """Initialize daily rotation.

        Args:
        ----
            hour: Hour of the day to rotate at, 0-23
            minute: Minute of the hour to rotate at, 0-59

        """
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise InvalidConfigError(
                f"Invalid rotation time {hour:02d}:{minute:02d}, "
                "hour must be 0-23 and minute 0-59"
            )
        self._hour = hour
        self._minute = minute

    @property
    def hour(self) -> int:
        """Get the rotation hour."""
        return self._hour

    @property
    def minute(self) -> int:
        """Get the rotation minute."""
        return self._minute

    @property
    def period(self) -> timedelta:
        """One day."""
        return timedelta(hours=24)

    def candidate(self, now: datetime) -> datetime:
        """Today at the configured hour and minute."""
        return now.replace(
            hour=self._hour, minute=self._minute, second=0, microsecond=0
        )

    def __repr__(self) -> str:
        return f"DailyRotation(hour={self._hour}, minute={self._minute})"


class MinuteRotation(RotationPolicy):
    """Rotate every ``rotation_minute`` minutes.

    Periods are aligned to the top of the minute in which the boundary is
    computed. A value of 0 rotates every minute.
    """

    def __init__(self, rotation_minute: int = 0):
        """Initialize minute-based rotation.

        Args:
        ----
            rotation_minute: Length of the rotation period in minutes, 0-59

        """
        if not 0 <= rotation_minute <= 59:
            raise InvalidConfigError(
                f"Invalid rotation minute {rotation_minute}, must be 0-59"
            )
        self._rotation_minute = rotation_minute

    @property
    def rotation_minute(self) -> int:
        """Get the configured rotation minute."""
        return self._rotation_minute

    @property
    def period(self) -> timedelta:
        """The configured number of minutes, at least one."""
        return timedelta(minutes=max(self._rotation_minute, 1))

    def candidate(self, now: datetime) -> datetime:
        """Start of the current minute."""
        return now.replace(second=0, microsecond=0)

    def __repr__(self) -> str:
        return f"MinuteRotation(rotation_minute={self._rotation_minute})"


def next_boundary(
    now: datetime, policy: RotationPolicy, last_boundary: Optional[datetime] = None
) -> datetime:
    """Compute the next rotation boundary for ``policy``.

    ``last_boundary`` is accepted for callers that track it but does not
    influence the result; boundaries are always derived fresh from ``now``.
    """
    return policy.next_boundary(now)
