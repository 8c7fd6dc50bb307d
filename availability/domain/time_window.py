"""Half-open time interval value object."""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True, order=True)
class TimeWindow:
    """Half-open interval ``[start, end)`` between two aware instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow requires timezone-aware datetimes")
        if self.start >= self.end:
            raise ValueError("TimeWindow start must be before end")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)

    def overlaps(self, other: "TimeWindow") -> bool:
        """Windows that merely touch do not overlap."""
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def contains_window(self, other: "TimeWindow") -> bool:
        return self.start <= other.start and other.end <= self.end

    def intersection(self, other: "TimeWindow") -> "TimeWindow | None":
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start >= end:
            return None
        return TimeWindow(start=start, end=end)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}/{self.end.isoformat()}"
