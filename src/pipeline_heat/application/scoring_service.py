"""Scoring service: rules + calculator + bucket mapping behind one facade.

Usage example:
    from pipeline_heat.application.heat_rules import DEFAULT_HEAT_RULES
    from pipeline_heat.application.scoring_service import ScoringService

    service = ScoringService(DEFAULT_HEAT_RULES)
    heat = service.recalculate(snapshot)  # persist onto the caller's record
    result = service.explain(snapshot)    # full breakdown for diagnostics
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeAlias

from ..domain.entities import EntitySnapshot
from ..domain.heat_rules import HEAT_LEVELS, RulesConfig, heat_label
from ..domain.heat_scoring import ScoreResult, compute_score
from .heat_rules import HeatRulesLoader

Clock: TypeAlias = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class HeatCount:
    """Number of pipeline items currently at one heat level."""

    heat: int
    label: str
    count: int


class ScoringService:
    """Compute heat for entity snapshots against one rule table."""

    def __init__(self, rules: RulesConfig, *, clock: Clock | None = None) -> None:
        self._rules = rules
        self._clock = clock or _utc_now

    @classmethod
    def from_loader(cls, loader: HeatRulesLoader, *, clock: Clock | None = None) -> ScoringService:
        """Build a service from the loader's (cached) rule table."""
        return cls(loader.load(), clock=clock)

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    def explain(self, entity: EntitySnapshot) -> ScoreResult:
        """Return the full, side-effect-free score breakdown."""
        return compute_score(entity, self._rules, now=self._clock())

    def recalculate(self, entity: EntitySnapshot) -> int:
        """Return only the heat bucket, for the caller to persist."""
        return self.explain(entity).heat


def heat_breakdown(heats: Iterable[int]) -> tuple[HeatCount, ...]:
    """Count items per heat level, always reporting all four levels."""
    counts = Counter(heats)
    return tuple(
        HeatCount(heat=level, label=heat_label(level), count=counts.get(level, 0))
        for level in HEAT_LEVELS
    )
