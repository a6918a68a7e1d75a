"""Tests for shared observability logging."""

import logging
import time

import pytest

from pipeline_heat.observability.logging import get_logger


def test_get_logger_formats_utc_timestamps(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fixed = time.struct_time((2026, 3, 1, 12, 0, 5, 6, 60, 0))

    def fake_gmtime(_: float | None = None) -> time.struct_time:
        return fixed

    monkeypatch.setattr(time, "gmtime", fake_gmtime)

    name = "pipeline_heat.test.logging"
    logger = get_logger(name)
    logger.warning("No channel weight for %s; contributing 0", "OTHER")

    captured = capsys.readouterr()
    assert (
        "2026-03-01T12:00:05+0000 WARNING pipeline_heat.test.logging: "
        "No channel weight for OTHER; contributing 0"
    ) in captured.err


def test_get_logger_is_singleton_per_name() -> None:
    name = "pipeline_heat.test.logging.singleton"
    logger = get_logger(name)
    logger_again = get_logger(name)

    assert logger is logger_again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False
