"""Time decay for perishable score contributions."""

from __future__ import annotations

from datetime import UTC, datetime

from .heat_rules import DecayRules

SECONDS_PER_DAY = 86_400.0


def decay_factor(elapsed_days: float, decay: DecayRules) -> float:
    """Return the multiplicative decay for a signal ``elapsed_days`` old.

    The factor halves every ``half_life_days``, never drops below
    ``minimum_factor`` and snaps to it once ``maximum_days`` have passed.
    Negative ages (future timestamps) count as zero.
    """
    elapsed = max(0.0, elapsed_days)
    if decay.maximum_days is not None and elapsed > decay.maximum_days:
        return decay.minimum_factor
    raw = 2.0 ** (-elapsed / decay.half_life_days)
    return max(decay.minimum_factor, raw)


def elapsed_days_between(reference: datetime, now: datetime) -> float:
    """Days from ``reference`` to ``now``, clamped at zero.

    Naive datetimes are treated as UTC.
    """
    delta = as_utc(now) - as_utc(reference)
    return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware values are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
