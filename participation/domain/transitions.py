"""Participation state machine.

Every status change goes through ``transition``; anything not listed in
``TRANSITIONS`` raises ``InvalidTransitionError``.
"""

from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import Any

from participation.domain.errors import InvalidTransitionError
from participation.domain.models import ParticipationRecord, ParticipationStatus

S = ParticipationStatus


class ParticipationAction(Enum):
    """Requested changes to a participation record."""

    JOIN = "join"
    CANCEL = "cancel"
    REJECT = "reject"
    REINSTATE = "reinstate"
    PROMOTE = "promote"
    MARK_ATTENDED = "mark attended"
    MARK_NO_SHOW = "mark no-show"


A = ParticipationAction

# (current status, action) -> statuses the action may lead to.
# None as current status means no record exists yet.
TRANSITIONS: dict[tuple[ParticipationStatus | None, ParticipationAction], frozenset[ParticipationStatus]] = {
    (None, A.JOIN): frozenset({S.REGISTERED, S.WAITLISTED}),
    (S.CANCELLED, A.JOIN): frozenset({S.REGISTERED, S.WAITLISTED}),
    (S.REGISTERED, A.CANCEL): frozenset({S.CANCELLED}),
    (S.WAITLISTED, A.CANCEL): frozenset({S.CANCELLED}),
    (S.REGISTERED, A.REJECT): frozenset({S.REJECTED}),
    (S.WAITLISTED, A.REJECT): frozenset({S.REJECTED}),
    (S.REGISTERED, A.MARK_ATTENDED): frozenset({S.ATTENDED}),
    (S.REGISTERED, A.MARK_NO_SHOW): frozenset({S.NO_SHOW}),
    (S.WAITLISTED, A.PROMOTE): frozenset({S.REGISTERED}),
    (S.REJECTED, A.REINSTATE): frozenset({S.REGISTERED, S.WAITLISTED}),
}

_APPLIED_STATUS = {
    A.CANCEL: S.CANCELLED,
    A.REJECT: S.REJECTED,
    A.MARK_ATTENDED: S.ATTENDED,
    A.MARK_NO_SHOW: S.NO_SHOW,
    A.PROMOTE: S.REGISTERED,
}


def allowed_targets(
    current: ParticipationStatus | None, action: ParticipationAction
) -> frozenset[ParticipationStatus]:
    """Return the statuses ``action`` can lead to from ``current``.

    Raises:
        InvalidTransitionError: If the action is not allowed from ``current``.
    """
    targets = TRANSITIONS.get((current, action))
    if targets is None:
        raise InvalidTransitionError(current, action)
    return targets


def is_already_applied(record: ParticipationRecord, action: ParticipationAction) -> bool:
    """Whether repeating ``action`` on ``record`` would be a no-op.

    Joining is never a no-op; duplicate joins are refused instead.
    """
    if action is A.REINSTATE:
        return record.is_active and record.reinstated_at is not None
    return _APPLIED_STATUS.get(action) is record.status


def transition(
    record: ParticipationRecord,
    action: ParticipationAction,
    target: ParticipationStatus,
    *,
    at: datetime,
    waitlist_position: int | None = None,
    **changes: Any,
) -> ParticipationRecord:
    """Return ``record`` moved to ``target`` by ``action``.

    ``waitlist_position`` must be given when the target is waitlisted and is
    cleared otherwise. Extra keyword arguments are applied as field updates.

    Raises:
        InvalidTransitionError: If ``target`` is not reachable by ``action``.
    """
    if target not in allowed_targets(record.status, action):
        raise InvalidTransitionError(record.status, action)
    if target is not S.WAITLISTED:
        waitlist_position = None
    return replace(
        record,
        status=target,
        waitlist_position=waitlist_position,
        updated_at=at,
        **changes,
    )
