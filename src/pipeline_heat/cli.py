"""Developer CLI for the heat engine.

Commands:
- check-rules: Load and validate the heat rules document, print a summary
- explain: Score a JSON entity snapshot and print the breakdown
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.table import Table

from . import __version__
from .application.entity_snapshots import load_entity_snapshot
from .application.heat_rules import HeatRulesLoader, default_rules_candidates
from .application.scoring_service import ScoringService
from .config import HeatEngineConfig
from .domain.heat_rules import heat_label
from .exceptions import HeatEngineError, HeatRulesFileNotFoundError
from .protocols import FileSystem


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: HeatEngineConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    loader: HeatRulesLoader


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: HeatEngineConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: HeatEngineConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the pipeline-heat entry point.")


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"pipeline-heat {__version__}")
        raise typer.Exit()


def _fail(exc: HeatEngineError) -> typer.Exit:
    rprint(f"[red]✗ {exc}[/red]")
    return typer.Exit(code=1)


RulesOption = Annotated[
    str | None,
    typer.Option(
        "--rules",
        "-r",
        help="Heat rules document (overrides HEAT_RULES_PATH)",
    ),
]


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Pipeline heat engine: validate rules and explain entity scores",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the package version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        ctx.obj = CliContext(config=HeatEngineConfig.from_env(), deps_builder=deps_builder)

    @app.command(name="check-rules")
    def check_rules(ctx: typer.Context, rules: RulesOption = None) -> None:
        """Load and validate the heat rules, then print a summary."""
        state = _get_context(ctx)
        try:
            deps = state.build_dependencies(config=state.config.with_overrides(rules_path=rules))
            loaded = deps.loader.load()
        except HeatEngineError as exc:
            raise _fail(exc) from exc

        source = deps.loader.source
        rprint(f"[green]✓ Rules valid:[/green] {source if source else 'built-in defaults'}")
        rprint(f"  Referral floor: {loaded.referral_bonus:g}")
        rprint(
            f"  Decay: half-life {loaded.decay.half_life_days:g}d, "
            f"minimum {loaded.decay.minimum_factor:g}"
        )
        buckets = ", ".join(
            f"≤{bucket.max_score:g} → {heat_label(bucket.heat)}"
            for bucket in loaded.heat_buckets
        )
        rprint(f"  Buckets: {buckets}")

    @app.command()
    def explain(
        ctx: typer.Context,
        snapshot: Annotated[Path, typer.Argument(help="Entity snapshot JSON file")],
        rules: RulesOption = None,
    ) -> None:
        """Score an entity snapshot and print how the score was derived."""
        state = _get_context(ctx)
        try:
            deps = state.build_dependencies(config=state.config.with_overrides(rules_path=rules))
            entity = load_entity_snapshot(path=snapshot, fs=deps.fs)
            result = ScoringService.from_loader(deps.loader).explain(entity)
        except HeatEngineError as exc:
            raise _fail(exc) from exc

        table = Table(title=f"Heat breakdown: {snapshot.name}")
        table.add_column("Category")
        table.add_column("Label")
        table.add_column("Delta", justify="right")
        for entry in result.breakdown:
            table.add_row(entry.category.value, entry.label, f"{entry.delta:+.2f}")
        rprint(table)
        rprint(f"  Decay factor: {result.decay_factor:.3f}")
        label = heat_label(result.heat)
        rprint(f"[bold]Score {result.score:.1f} → heat {result.heat} ({label})[/bold]")

    return app


def build_loader(*, config: HeatEngineConfig, fs: FileSystem) -> HeatRulesLoader:
    """Build a rules loader probing the configured and default locations.

    Raises:
        HeatRulesFileNotFoundError: If an explicitly configured rules path is missing.
    """
    if config.rules_path and not fs.exists(Path(config.rules_path)):
        raise HeatRulesFileNotFoundError(config.rules_path)
    return HeatRulesLoader(fs=fs, candidates=default_rules_candidates(config))
