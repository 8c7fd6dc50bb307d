"""Expansion of an availability template into concrete bookable slots.

Everything here is a pure function of its arguments: ``now`` and the
existing bookings are passed in by the caller, so identical inputs always
produce identical output. All returned windows are expressed in UTC.
"""

from collections.abc import Iterable, Iterator
from datetime import UTC, date, datetime, timedelta

from availability.domain.template import (
    AvailabilityTemplate,
    BookingPolicy,
    LocalInterval,
    Weekday,
)
from availability.domain.time_window import TimeWindow


def compute_slots(
    template: AvailabilityTemplate,
    horizon_start: datetime,
    horizon_end: datetime,
    existing_bookings: Iterable[TimeWindow],
    *,
    now: datetime,
) -> list[TimeWindow]:
    """Return the bookable windows of ``template`` inside the horizon.

    The requested horizon is clipped to ``[now + min notice, now + max
    advance]``; a slot is returned only if it lies entirely inside the
    clipped range and does not overlap any of ``existing_bookings``.

    For each local date the weekday's intervals are packed greedily, once
    per preferred session length (shortest first), with ``buffer_minutes``
    between consecutive slots of that day. A day stops producing slots once
    ``max_sessions_per_day`` bookable slots have been placed across all
    lengths, so longer lengths only get what the shorter ones left. The day
    plan depends only on the template and ``now``; the horizon merely selects
    from it.
    """
    if not template.is_active or not template.policy.preferred_session_lengths:
        return []

    search = searchable_window(template.policy, horizon_start, horizon_end, now)
    if search is None:
        return []
    bookable = bookable_range(template.policy, now)

    bookings = tuple(existing_bookings)
    candidates: list[TimeWindow] = []
    for day in _local_dates(search, template):
        intervals = template.intervals_for(Weekday.of(day))
        if not intervals:
            continue
        remaining = template.policy.max_sessions_per_day
        for length in template.policy.session_lengths:
            placed = _pack_day(template, day, intervals, length, bookable, remaining)
            candidates.extend(placed)
            remaining -= len(placed)
            if remaining <= 0:
                break

    return sorted(
        candidate
        for candidate in candidates
        if search.contains_window(candidate)
        and not any(candidate.overlaps(booking) for booking in bookings)
    )


def bookable_range(policy: BookingPolicy, now: datetime) -> TimeWindow | None:
    """Instants at which a session may take place when asked at ``now``."""
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware")
    start = (now + policy.min_advance_notice).astimezone(UTC)
    end = (now + policy.max_advance_booking).astimezone(UTC)
    if start >= end:
        return None
    return TimeWindow(start=start, end=end)


def searchable_window(
    policy: BookingPolicy,
    horizon_start: datetime,
    horizon_end: datetime,
    now: datetime,
) -> TimeWindow | None:
    """Clip the requested horizon to the policy's booking range.

    Returns None when nothing of the horizon is bookable.
    """
    if horizon_start.tzinfo is None or horizon_end.tzinfo is None:
        raise ValueError("Horizon bounds must be timezone-aware")
    bookable = bookable_range(policy, now)
    if bookable is None or horizon_start >= horizon_end:
        return None
    return bookable.intersection(
        TimeWindow(start=horizon_start.astimezone(UTC), end=horizon_end.astimezone(UTC))
    )


def resolve_interval(
    template: AvailabilityTemplate, day: date, interval: LocalInterval
) -> TimeWindow | None:
    """Convert a local interval on ``day`` to an absolute window.

    zoneinfo resolves ambiguous wall times (clocks going back) to the earlier
    instant and non-existent ones (clocks going forward) to the instant one
    gap-length later. Returns None if the conversion leaves nothing usable.
    """
    zone = template.zone
    start = datetime.combine(day, interval.start, tzinfo=zone).astimezone(UTC)
    end = datetime.combine(day, interval.end, tzinfo=zone).astimezone(UTC)
    if start >= end:
        return None
    return TimeWindow(start=start, end=end)


def _local_dates(search: TimeWindow, template: AvailabilityTemplate) -> Iterator[date]:
    zone = template.zone
    day = search.start.astimezone(zone).date()
    last = search.end.astimezone(zone).date()
    while day <= last:
        yield day
        day += timedelta(days=1)


def _pack_day(
    template: AvailabilityTemplate,
    day: date,
    intervals: tuple[LocalInterval, ...],
    length: timedelta,
    bookable: TimeWindow,
    limit: int,
) -> list[TimeWindow]:
    policy = template.policy
    placed: list[TimeWindow] = []
    # End of the previous packed candidate on this day, bookable or not.
    cursor: datetime | None = None

    for interval in intervals:
        if len(placed) >= limit:
            break
        window = resolve_interval(template, day, interval)
        if window is None:
            continue

        start = window.start
        if cursor is not None:
            start = max(start, cursor + policy.buffer)

        while start + length <= window.end and len(placed) < limit:
            candidate = TimeWindow(start=start, end=start + length)
            if bookable.contains_window(candidate):
                placed.append(candidate)
            cursor = candidate.end
            start = cursor + policy.buffer

    return placed
