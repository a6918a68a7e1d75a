"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from .cli import CliDependencies, build_loader, create_app
from .config import HeatEngineConfig
from .infrastructure import LocalFileSystem


def build_cli_dependencies(*, config: HeatEngineConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Engine configuration (used to locate the rules document).
    """
    fs = LocalFileSystem()
    return CliDependencies(fs=fs, loader=build_loader(config=config, fs=fs))


app = create_app(build_cli_dependencies)
