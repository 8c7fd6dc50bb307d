"""Facilitator availability template: weekly schedule plus booking policy.

Templates are validated when constructed, so any instance that exists is
usable by the slot engine. Stored documents use the shape written by the
facilitator settings screen::

    {
        "is_active": true,
        "timezone": "Europe/Berlin",
        "weekly_schedule": {"monday": [{"start": "09:00", "end": "12:00"}], ...},
        "min_advance_notice_hours": 24,
        "max_advance_booking_days": 30,
        "buffer_time_minutes": 15,
        "preferred_session_lengths": [60, 90],
        "max_sessions_per_day": 3
    }

Times are ``HH:MM`` wall-clock values and an interval ends on the day it
starts, so "24:00" is rejected and the latest possible end is "23:59".
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from datetime import date, time, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Self
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from availability.domain.errors import ConfigurationError
from availability.domain.value_objects import FacilitatorId


class Weekday(Enum):
    """Day of week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def of(cls, day: date) -> Self:
        return cls(day.weekday())

    @classmethod
    def from_name(cls, name: str) -> Self:
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown weekday '{name}'", field="weekly_schedule"
            ) from None

    @property
    def key(self) -> str:
        return self.name.lower()


@dataclass(frozen=True, order=True)
class LocalInterval:
    """Wall-clock interval within a single day, ``end`` exclusive."""

    start: time
    end: time

    def __post_init__(self) -> None:
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise ConfigurationError(
                "Schedule times must be local (no UTC offset)",
                field="weekly_schedule",
            )
        if self.end <= self.start:
            raise ConfigurationError(
                f"Interval end {self.end:%H:%M} must be after start {self.start:%H:%M}",
                field="weekly_schedule",
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> Self:
        try:
            return cls(start=time.fromisoformat(start), end=time.fromisoformat(end))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Invalid time range '{start}'-'{end}'", field="weekly_schedule"
            ) from None

    def overlaps(self, other: "LocalInterval") -> bool:
        return self.start < other.end and other.start < self.end

    def to_mapping(self) -> dict[str, str]:
        return {"start": self.start.strftime("%H:%M"), "end": self.end.strftime("%H:%M")}


@dataclass(frozen=True)
class BookingPolicy:
    """Constraints applied when turning the weekly schedule into slots."""

    min_advance_notice_hours: int = 24
    max_advance_booking_days: int = 30
    buffer_minutes: int = 15
    preferred_session_lengths: frozenset[int] = frozenset({60, 90})
    max_sessions_per_day: int = 3

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "preferred_session_lengths":
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{f.name} must be an integer", field=f.name)

        if self.min_advance_notice_hours < 0:
            raise ConfigurationError(
                "Minimum advance notice cannot be negative",
                field="min_advance_notice_hours",
            )
        if self.max_advance_booking_days < 1:
            raise ConfigurationError(
                "Maximum advance booking must be at least one day",
                field="max_advance_booking_days",
            )
        if self.buffer_minutes < 0:
            raise ConfigurationError(
                "Buffer time cannot be negative", field="buffer_minutes"
            )
        if self.max_sessions_per_day < 1:
            raise ConfigurationError(
                "At least one session per day must be allowed",
                field="max_sessions_per_day",
            )

        try:
            lengths = frozenset(self.preferred_session_lengths)
        except TypeError:
            raise ConfigurationError(
                "Preferred session lengths must be a list of minutes",
                field="preferred_session_lengths",
            ) from None
        for length in lengths:
            if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
                raise ConfigurationError(
                    f"Session length {length!r} must be a positive number of minutes",
                    field="preferred_session_lengths",
                )
        object.__setattr__(self, "preferred_session_lengths", lengths)

    @property
    def min_advance_notice(self) -> timedelta:
        return timedelta(hours=self.min_advance_notice_hours)

    @property
    def max_advance_booking(self) -> timedelta:
        return timedelta(days=self.max_advance_booking_days)

    @property
    def buffer(self) -> timedelta:
        return timedelta(minutes=self.buffer_minutes)

    @property
    def session_lengths(self) -> tuple[timedelta, ...]:
        """Preferred lengths, shortest first."""
        return tuple(timedelta(minutes=m) for m in sorted(self.preferred_session_lengths))


@dataclass(frozen=True)
class AvailabilityTemplate:
    """A facilitator's recurring weekly availability."""

    facilitator_id: FacilitatorId
    weekly_schedule: Mapping[Weekday, tuple[LocalInterval, ...]]
    timezone: str
    policy: BookingPolicy = field(default_factory=BookingPolicy)
    is_active: bool = True

    def __post_init__(self) -> None:
        schedule: dict[Weekday, tuple[LocalInterval, ...]] = {day: () for day in Weekday}
        for day, intervals in self.weekly_schedule.items():
            if not isinstance(day, Weekday):
                raise ConfigurationError(
                    f"Unknown weekday {day!r}", field="weekly_schedule"
                )
            schedule[day] = _validated_day(day, intervals)
        object.__setattr__(self, "weekly_schedule", MappingProxyType(schedule))

        if not isinstance(self.timezone, str) or not self.timezone:
            raise ConfigurationError("Timezone is required", field="timezone")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(
                f"Unknown timezone '{self.timezone}'", field="timezone"
            ) from None

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def intervals_for(self, day: Weekday) -> tuple[LocalInterval, ...]:
        return self.weekly_schedule[day]

    def with_policy(self, **changes: Any) -> "AvailabilityTemplate":
        return replace(self, policy=replace(self.policy, **changes))

    @classmethod
    def from_mapping(
        cls,
        facilitator_id: FacilitatorId,
        data: Mapping[str, Any],
        defaults: BookingPolicy | None = None,
    ) -> Self:
        """Build a template from its stored document form.

        Intervals for a day may be stored in any order; they are sorted
        before validation. Policy fields missing from ``data`` fall back to
        ``defaults``.

        Raises:
            ConfigurationError: If any part of the document is malformed.
        """
        defaults = defaults or BookingPolicy()
        raw_schedule = data.get("weekly_schedule") or {}
        if not isinstance(raw_schedule, Mapping):
            raise ConfigurationError(
                "Weekly schedule must be a mapping", field="weekly_schedule"
            )

        schedule: dict[Weekday, tuple[LocalInterval, ...]] = {}
        for name, entries in raw_schedule.items():
            day = Weekday.from_name(name)
            if not isinstance(entries or [], (list, tuple)):
                raise ConfigurationError(
                    f"Intervals for {day.key} must be a list", field="weekly_schedule"
                )
            intervals = []
            for entry in entries or ():
                try:
                    intervals.append(LocalInterval.from_strings(entry["start"], entry["end"]))
                except (KeyError, TypeError):
                    raise ConfigurationError(
                        f"Malformed interval on {day.key}", field="weekly_schedule"
                    ) from None
            schedule[day] = tuple(sorted(intervals))

        lengths = data.get("preferred_session_lengths", defaults.preferred_session_lengths)
        if lengths is None or isinstance(lengths, (str, bytes)) or not isinstance(lengths, Iterable):
            raise ConfigurationError(
                "Preferred session lengths must be a list of minutes",
                field="preferred_session_lengths",
            )

        policy = BookingPolicy(
            min_advance_notice_hours=data.get(
                "min_advance_notice_hours", defaults.min_advance_notice_hours
            ),
            max_advance_booking_days=data.get(
                "max_advance_booking_days", defaults.max_advance_booking_days
            ),
            buffer_minutes=data.get("buffer_time_minutes", defaults.buffer_minutes),
            preferred_session_lengths=lengths,
            max_sessions_per_day=data.get(
                "max_sessions_per_day", defaults.max_sessions_per_day
            ),
        )
        return cls(
            facilitator_id=facilitator_id,
            weekly_schedule=schedule,
            timezone=data.get("timezone", ""),
            policy=policy,
            is_active=bool(data.get("is_active", False)),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "is_active": self.is_active,
            "timezone": self.timezone,
            "weekly_schedule": {
                day.key: [interval.to_mapping() for interval in intervals]
                for day, intervals in self.weekly_schedule.items()
            },
            "min_advance_notice_hours": self.policy.min_advance_notice_hours,
            "max_advance_booking_days": self.policy.max_advance_booking_days,
            "buffer_time_minutes": self.policy.buffer_minutes,
            "preferred_session_lengths": sorted(self.policy.preferred_session_lengths),
            "max_sessions_per_day": self.policy.max_sessions_per_day,
        }


def _validated_day(
    day: Weekday, intervals: Iterable[LocalInterval]
) -> tuple[LocalInterval, ...]:
    result = tuple(intervals)
    for interval in result:
        if not isinstance(interval, LocalInterval):
            raise ConfigurationError(
                f"Invalid interval on {day.key}", field="weekly_schedule"
            )
    for previous, current in zip(result, result[1:]):
        if current.start < previous.start:
            raise ConfigurationError(
                f"Intervals on {day.key} must be sorted by start time",
                field="weekly_schedule",
            )
        if previous.overlaps(current):
            raise ConfigurationError(
                f"Intervals on {day.key} overlap", field="weekly_schedule"
            )
    return result
