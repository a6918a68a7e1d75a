"""Tests for time decay of outreach contributions."""

from datetime import UTC, datetime, timedelta

import pytest

from pipeline_heat.domain.decay import decay_factor, elapsed_days_between
from pipeline_heat.domain.heat_rules import DecayRules

DECAY = DecayRules(half_life_days=7.0, minimum_factor=0.25, maximum_days=30.0)


class TestDecayFactor:
    """Tests for the half-life decay curve."""

    def test_fresh_signal_is_undecayed(self) -> None:
        assert decay_factor(0.0, DECAY) == 1.0

    def test_one_half_life_halves_the_factor(self) -> None:
        assert decay_factor(7.0, DECAY) == pytest.approx(0.5)

    def test_floors_at_minimum_factor(self) -> None:
        # 2^-3 = 0.125 is below the 0.25 floor.
        assert decay_factor(21.0, DECAY) == 0.25

    def test_past_maximum_days_snaps_to_minimum(self) -> None:
        rules = DecayRules(half_life_days=100.0, minimum_factor=0.3, maximum_days=10.0)

        assert decay_factor(10.0, rules) == pytest.approx(2 ** (-0.1))
        assert decay_factor(10.5, rules) == 0.3

    def test_no_maximum_days_means_no_cutoff(self) -> None:
        rules = DecayRules(half_life_days=1000.0, minimum_factor=0.0, maximum_days=None)

        assert decay_factor(5000.0, rules) == pytest.approx(2**-5)

    def test_negative_elapsed_days_count_as_zero(self) -> None:
        assert decay_factor(-3.0, DECAY) == 1.0

    def test_non_increasing_and_bounded_below(self) -> None:
        ages = [day * 0.5 for day in range(0, 100)]
        factors = [decay_factor(age, DECAY) for age in ages]

        assert all(later <= earlier for earlier, later in zip(factors, factors[1:], strict=False))
        assert all(factor >= DECAY.minimum_factor for factor in factors)


class TestElapsedDaysBetween:
    """Tests for elapsed-time calculation."""

    def test_counts_fractional_days(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

        assert elapsed_days_between(now - timedelta(hours=36), now) == pytest.approx(1.5)

    def test_future_reference_clamps_to_zero(self) -> None:
        now = datetime(2026, 3, 1, tzinfo=UTC)

        assert elapsed_days_between(now + timedelta(days=2), now) == 0.0

    def test_naive_datetimes_are_treated_as_utc(self) -> None:
        now = datetime(2026, 3, 2, tzinfo=UTC)

        assert elapsed_days_between(datetime(2026, 3, 1), now) == pytest.approx(1.0)
