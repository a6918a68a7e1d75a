"""Pytest fixtures shared across the test suite."""

from __future__ import annotations

import pytest

from pipeline_heat.application.heat_rules import DEFAULT_HEAT_RULES
from pipeline_heat.domain.heat_rules import RulesConfig
from tests.fakes import FixedClock, InMemoryFileSystem
from tests.support.entities import NOW


@pytest.fixture
def in_memory_fs() -> InMemoryFileSystem:
    """Provide an in-memory filesystem for tests."""
    return InMemoryFileSystem()


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Provide a clock pinned to ``NOW``."""
    return FixedClock(now=NOW)


@pytest.fixture
def default_rules() -> RulesConfig:
    """Provide the built-in rule table."""
    return DEFAULT_HEAT_RULES
