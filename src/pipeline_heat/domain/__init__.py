"""Domain modules for the heat engine."""

from .heat_rules import RulesConfig
from .heat_scoring import ScoreResult, bucket_for_score, compute_score

__all__ = ["RulesConfig", "ScoreResult", "bucket_for_score", "compute_score"]
