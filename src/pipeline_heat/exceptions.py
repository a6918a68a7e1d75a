"""Custom exceptions for the heat engine.

Configuration errors are raised while loading rules, before any entity is
scored. Scoring itself never raises for a structurally valid snapshot.
"""

from __future__ import annotations


class HeatEngineError(Exception):
    """Base exception for all heat engine errors."""

    pass


class RulesDocumentParseError(HeatEngineError):
    """Raised when a rules document cannot be parsed.

    Parsing is all-or-nothing: no partial tree is returned.
    """

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Heat rules parse error on line {line_number}: {reason}")


class HeatRulesFileNotFoundError(HeatEngineError):
    """Raised when an explicitly requested rules document does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Heat rules file not found: {path}")


class HeatRulesValidationError(HeatEngineError):
    """Raised when a parsed rules document does not match the rule table shape."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Invalid heat rules in {source}: {detail}")


class HeatBucketsError(HeatEngineError, ValueError):
    """Raised when heat buckets do not partition the 0–100 score range."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Heat buckets must cover 0–100 without gaps: {detail}")


class EntitySnapshotValidationError(HeatEngineError):
    """Raised when a serialised entity snapshot fails validation."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Invalid entity snapshot in {source}: {detail}")


class HeatRulesValueError(HeatEngineError, ValueError):
    """Raised when a rule table holds values the calculator cannot use."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid heat rule value: {detail}")
