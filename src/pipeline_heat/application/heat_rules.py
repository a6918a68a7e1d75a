"""Loading and strict validation for heat rule documents."""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..config import HeatEngineConfig
from ..domain.entities import ContactStrength, OutreachChannel, OutreachOutcome, Stage
from ..domain.heat_rules import (
    DecayRules,
    HeatBucket,
    RulesConfig,
    ScoreCaps,
    validate_heat_buckets,
)
from ..exceptions import HeatRulesFileNotFoundError, HeatRulesValidationError
from ..observability.logging import get_logger
from ..protocols import FileSystem
from ..rules_document import RulesTree, parse_rules_document

logger = get_logger("pipeline_heat.heat_rules")

RULES_FILE_NAME = "heat_rules.yaml"

DEFAULT_HEAT_RULES = RulesConfig(
    caps=ScoreCaps(
        archived_score=0.0,
        per_stage=MappingProxyType(
            {Stage.OFFER: 95.0, Stage.REJECTED: 20.0, Stage.DORMANT: 15.0}
        ),
    ),
    stage_base=MappingProxyType(
        {
            Stage.APPLIED: 35.0,
            Stage.HR: 50.0,
            Stage.TECH: 65.0,
            Stage.OFFER: 80.0,
            Stage.REJECTED: 10.0,
            Stage.DORMANT: 5.0,
        }
    ),
    referral_bonus=45.0,
    outreach_outcome_weight=MappingProxyType(
        {
            OutreachOutcome.POSITIVE: 30.0,
            OutreachOutcome.NEGATIVE: -20.0,
            OutreachOutcome.NO_RESPONSE: 15.0,
            OutreachOutcome.NONE: 5.0,
        }
    ),
    contact_strength_weight=MappingProxyType(
        {
            ContactStrength.STRONG: 20.0,
            ContactStrength.MEDIUM: 12.0,
            ContactStrength.WEAK: 6.0,
            ContactStrength.UNKNOWN: 4.0,
        }
    ),
    channel_weight=MappingProxyType(
        {
            OutreachChannel.EMAIL: 12.0,
            OutreachChannel.LINKEDIN: 14.0,
            OutreachChannel.PHONE: 16.0,
            OutreachChannel.OTHER: 8.0,
        }
    ),
    personalization_divisor=5.0,
    tailoring_divisor=4.0,
    decay=DecayRules(half_life_days=7.0, minimum_factor=0.25, maximum_days=30.0),
    heat_buckets=(
        HeatBucket(max_score=24.0, heat=0),
        HeatBucket(max_score=49.0, heat=1),
        HeatBucket(max_score=74.0, heat=2),
        HeatBucket(max_score=100.0, heat=3),
    ),
)


class _RulesModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, allow_inf_nan=False)


class _CapsModel(_RulesModel):
    archived: float = 0.0
    stage: dict[str, float] = Field(default_factory=dict)


class _ReferralModel(_RulesModel):
    score: float


class _DecayModel(_RulesModel):
    half_life_days: float = Field(alias="halfLifeDays")
    minimum_factor: float = Field(default=0.0, alias="minimumFactor")
    maximum_days: float | None = Field(default=None, alias="maximumDays")

    @field_validator("half_life_days")
    @classmethod
    def _validate_half_life(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("halfLifeDays must be positive")
        return value

    @field_validator("minimum_factor")
    @classmethod
    def _validate_minimum_factor(cls, value: float) -> float:
        if value < 0.0 or value > 1.0:
            raise ValueError("minimumFactor must be within 0..1")
        return value

    @field_validator("maximum_days")
    @classmethod
    def _validate_maximum_days(cls, value: float | None) -> float | None:
        if value is not None and value < 0.0:
            raise ValueError("maximumDays must not be negative")
        return value


class _HeatBucketModel(_RulesModel):
    max_score: float = Field(alias="maxScore")
    heat: int


class _HeatRulesModel(_RulesModel):
    caps: _CapsModel = Field(default_factory=_CapsModel)
    stage_base: dict[str, float] = Field(alias="stageBase")
    referral: _ReferralModel
    outreach_outcome: dict[str, float] = Field(alias="outreachOutcome")
    contact_strength: dict[str, float] = Field(alias="contactStrength")
    channel: dict[str, float]
    personalization_divisor: float = Field(alias="personalizationDivisor")
    tailoring_divisor: float = Field(alias="tailoringDivisor")
    decay: _DecayModel
    heat_buckets: tuple[_HeatBucketModel, ...] = Field(alias="heatBuckets")

    @field_validator("personalization_divisor", "tailoring_divisor")
    @classmethod
    def _validate_divisor(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("divisors must be positive")
        return value

    @model_validator(mode="after")
    def _validate_buckets(self) -> _HeatRulesModel:
        validate_heat_buckets(_to_domain_buckets(self.heat_buckets))
        return self


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",))) or "<root>"
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def _to_domain_buckets(buckets: Sequence[_HeatBucketModel]) -> tuple[HeatBucket, ...]:
    return tuple(HeatBucket(max_score=bucket.max_score, heat=bucket.heat) for bucket in buckets)


EnumT = TypeVar("EnumT", bound=StrEnum)


def _to_enum_mapping(
    values: Mapping[str, float], enum_type: type[EnumT], table: str
) -> MappingProxyType[EnumT, float]:
    known = {member.value: member for member in enum_type}
    mapped: dict[EnumT, float] = {}
    for key, weight in values.items():
        member = known.get(key.strip())
        if member is None:
            logger.warning("Ignoring unknown %s key %r in heat rules", table, key)
            continue
        mapped[member] = weight
    return MappingProxyType(mapped)


def _to_domain_rules(model: _HeatRulesModel) -> RulesConfig:
    return RulesConfig(
        caps=ScoreCaps(
            archived_score=model.caps.archived,
            per_stage=_to_enum_mapping(model.caps.stage, Stage, "caps.stage"),
        ),
        stage_base=_to_enum_mapping(model.stage_base, Stage, "stageBase"),
        referral_bonus=model.referral.score,
        outreach_outcome_weight=_to_enum_mapping(
            model.outreach_outcome, OutreachOutcome, "outreachOutcome"
        ),
        contact_strength_weight=_to_enum_mapping(
            model.contact_strength, ContactStrength, "contactStrength"
        ),
        channel_weight=_to_enum_mapping(model.channel, OutreachChannel, "channel"),
        personalization_divisor=model.personalization_divisor,
        tailoring_divisor=model.tailoring_divisor,
        decay=DecayRules(
            half_life_days=model.decay.half_life_days,
            minimum_factor=model.decay.minimum_factor,
            maximum_days=model.decay.maximum_days,
        ),
        heat_buckets=_to_domain_buckets(model.heat_buckets),
    )


def map_rules_tree(tree: RulesTree, *, source: str = "<document>") -> RulesConfig:
    """Validate a parsed rules tree and build the typed rule table.

    Unknown keys are ignored; optional keys fall back to their defaults.

    Raises:
        HeatRulesValidationError: If required keys are missing or values are invalid.
    """
    try:
        model = _HeatRulesModel.model_validate(tree)
    except ValidationError as exc:
        raise HeatRulesValidationError(source, _format_validation_error(exc)) from exc
    return _to_domain_rules(model)


def load_heat_rules_document(*, path: Path, fs: FileSystem) -> RulesConfig:
    """Read, parse and validate one rules document."""
    if not fs.exists(path):
        raise HeatRulesFileNotFoundError(str(path))
    tree = parse_rules_document(fs.read_text(path))
    return map_rules_tree(tree, source=str(path))


def default_rules_candidates(
    config: HeatEngineConfig | None = None,
    *,
    cwd: Path | None = None,
) -> tuple[Path, ...]:
    """Return the ordered rules-document locations to probe.

    An explicitly configured path comes first, then the document shipped with
    the package, then ``config/`` and the working directory.
    """
    base = cwd or Path.cwd()
    candidates: list[Path] = []
    if config is not None and config.rules_path:
        candidates.append(Path(config.rules_path))
    candidates.extend(
        [
            Path(__file__).resolve().parent.parent / RULES_FILE_NAME,
            base / "config" / RULES_FILE_NAME,
            base / RULES_FILE_NAME,
        ]
    )
    return tuple(candidates)


class HeatRulesLoader:
    """Resolve and cache the rule table for the lifetime of the loader.

    Build one per process and pass the loaded ``RulesConfig`` into
    ``ScoringService``. ``override`` exists for test harnesses only.
    """

    def __init__(self, *, fs: FileSystem, candidates: Sequence[Path]) -> None:
        self._fs = fs
        self._candidates = tuple(candidates)
        self._cached: RulesConfig | None = None
        self._source: Path | None = None
        self._lock = threading.Lock()

    @property
    def candidates(self) -> tuple[Path, ...]:
        return self._candidates

    @property
    def source(self) -> Path | None:
        """Path the cached rules were read from; None for defaults or overrides."""
        return self._source

    def load(self) -> RulesConfig:
        """Return the cached rules, resolving them on first use.

        Raises:
            RulesDocumentParseError: If the first existing document is malformed.
            HeatRulesValidationError: If it does not describe a valid rule table.
        """
        cached = self._cached
        if cached is not None:
            return cached
        with self._lock:
            if self._cached is None:
                self._cached, self._source = self._resolve()
            return self._cached

    def override(self, rules: RulesConfig | None) -> None:
        """Replace the cached rules, or clear them so the next load re-resolves."""
        with self._lock:
            self._cached = rules
            self._source = None

    def _resolve(self) -> tuple[RulesConfig, Path | None]:
        for candidate in self._candidates:
            if self._fs.exists(candidate):
                rules = load_heat_rules_document(path=candidate, fs=self._fs)
                logger.info("Loaded heat rules from %s", candidate)
                return rules, candidate
        logger.info("No heat rules document found; using built-in defaults")
        return DEFAULT_HEAT_RULES, None
