"""App settings for availability.

``AVAILABILITY_POLICY_DEFAULTS`` in Django settings may override any
``BookingPolicy`` field; the override applies to stored templates that omit
the field.
"""

from django.conf import settings

from availability.domain import BookingPolicy


def policy_defaults() -> BookingPolicy:
    overrides = dict(getattr(settings, "AVAILABILITY_POLICY_DEFAULTS", {}) or {})
    if "preferred_session_lengths" in overrides:
        overrides["preferred_session_lengths"] = frozenset(
            overrides["preferred_session_lengths"]
        )
    return BookingPolicy(**overrides)
