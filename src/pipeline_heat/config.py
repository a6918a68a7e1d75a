"""Centralised, injectable configuration for embedding the heat engine.

The engine itself reads no environment variables; this is the wiring an
embedding application (or the developer CLI) uses to locate the rules file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv


@dataclass(frozen=True)
class HeatEngineConfig:
    """Immutable configuration for locating heat rules.

    Load from environment with `HeatEngineConfig.from_env()` or construct directly for testing.
    """

    # Explicit rules document, probed before the built-in candidate locations.
    rules_path: str = ""

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            HeatEngineConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(rules_path=os.getenv("HEAT_RULES_PATH", "").strip())

    def with_overrides(self, *, rules_path: str | None = None) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            rules_path=self.rules_path if rules_path is None else rules_path.strip(),
        )
