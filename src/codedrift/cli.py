"""Command line interface: one analysis, printed or checked against a threshold."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .api import analyze_with_config
from .config import DriftConfig, load_config
from .exceptions import DriftError
from .logging_config import get_logger, setup_logging
from .models import AnalysisResults, DependencyStatus, HealthScore

app = typer.Typer(
    name="codedrift",
    help="codedrift - codebase health: complexity, dependency freshness, boundaries, dead code",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
logger = get_logger(__name__)

TOP_FUNCTIONS = 10

PATH_ARGUMENT = typer.Argument(
    Path("."),
    help="Project root to analyze",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)
LANGUAGE_OPTION = typer.Option(
    None, "--language", "-l", help="Language override (go, typescript, python, rust, java, ruby, php, csharp)"
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="TOML config file", exists=True, dir_okay=False
)
JSON_OPTION = typer.Option(False, "--json", help="Output in machine-readable JSON format")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging")
QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Only log errors")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]codedrift[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False, "--version", help="Show version and exit", callback=_version_callback, is_eager=True
    ),
) -> None:
    """Measure how far a codebase has drifted from healthy."""


def _analyze(
    path: Path,
    language: Optional[str],
    config_file: Optional[Path],
    verbose: bool,
    quiet: bool,
) -> tuple[DriftConfig, AnalysisResults, HealthScore]:
    """Load config, configure logging from it, run the engine once, score the result.

    The flags override the configured verbosity; without them, drift.toml or
    DRIFT_VERBOSITY decides.
    """
    config = load_config(config_file, root=str(path), language=language, verbose=verbose, quiet=quiet)
    setup_logging(config.verbosity)
    results, score = analyze_with_config(config)
    return config, results, score


def _run_guarded(action) -> None:
    try:
        action()
    except typer.Exit:
        raise
    except DriftError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    except KeyboardInterrupt:
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error during analysis")
        console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(2)


def _output_json(results: AnalysisResults, score: HealthScore) -> None:
    print(json.dumps({"results": results.to_dict(), "score": score.to_dict()}, indent=2))


def _score_color(value: float, min_score: float) -> str:
    if value >= 90:
        return "green"
    if value >= min_score:
        return "yellow"
    return "red"


def _output_rich(config: DriftConfig, results: AnalysisResults, score: HealthScore) -> None:
    min_score = config.thresholds.min_score
    color = _score_color(score.total, min_score)

    console.print()
    console.print(
        f"[bold cyan]CODEDRIFT[/bold cyan] -- {results.language}, "
        f"{results.file_count} files, {results.function_count} functions"
    )
    console.print(f"Health score: [bold {color}]{score.total:.1f}[/bold {color}]")
    console.print()

    table = Table(show_header=True, pad_edge=True)
    table.add_column("Metric", min_width=14)
    table.add_column("Score", justify="right")
    table.add_column("Weight", justify="right")
    w = config.weights
    for label, value, weight in (
        ("Complexity", score.complexity, w.complexity),
        ("Dependencies", score.deps, w.deps),
        ("Boundaries", score.boundaries, w.boundaries),
        ("Dead code", score.dead_code, w.dead_code),
        ("Coverage", score.coverage, w.coverage),
    ):
        c = _score_color(value, min_score)
        table.add_row(label, f"[{c}]{value:.1f}[/{c}]", f"{weight:.2f}")
    console.print(table)

    threshold = config.thresholds.max_complexity
    hot = [fn for fn in results.functions if fn.complexity > threshold][:TOP_FUNCTIONS]
    if hot:
        console.print()
        fn_table = Table(title=f"Functions above complexity {threshold}", show_header=True)
        fn_table.add_column("Function")
        fn_table.add_column("File")
        fn_table.add_column("Line", justify="right")
        fn_table.add_column("Complexity", justify="right")
        for fn in hot:
            fn_table.add_row(fn.name, fn.file, str(fn.line), str(fn.complexity))
        console.print(fn_table)

    drifted = [d for d in results.dependencies if d.status is not DependencyStatus.CURRENT]
    if drifted:
        console.print()
        dep_table = Table(title="Dependencies behind latest", show_header=True)
        dep_table.add_column("Dependency")
        dep_table.add_column("Current")
        dep_table.add_column("Latest")
        dep_table.add_column("Days", justify="right")
        dep_table.add_column("Status")
        for dep in drifted:
            dep_table.add_row(
                dep.name, dep.current_version, dep.latest_version, str(dep.stale_days), dep.status.value
            )
        console.print(dep_table)

    for violation in results.violations:
        console.print(
            f"[red]boundary[/red] {violation.file}:{violation.line} imports "
            f"{violation.import_path} ({violation.rule_from} -> {violation.rule_to})"
        )
    for dead in results.dead_code:
        console.print(f"[yellow]unused[/yellow] {dead.file}:{dead.line} {dead.name}")


@app.command()
def report(
    path: Path = PATH_ARGUMENT,
    language: Optional[str] = LANGUAGE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """
    Analyze a project and print its health report.

    [bold cyan]Examples:[/bold cyan]

      codedrift report

      codedrift report ./service --language go --json
    """

    def action() -> None:
        cfg, results, score = _analyze(path, language, config, verbose, quiet)
        if json_output:
            _output_json(results, score)
        else:
            _output_rich(cfg, results, score)

    _run_guarded(action)


@app.command()
def check(
    path: Path = PATH_ARGUMENT,
    fail_under: Optional[float] = typer.Option(
        None, "--fail-under", help="Exit 1 when the score is below this (default: thresholds.min_score, 70)"
    ),
    language: Optional[str] = LANGUAGE_OPTION,
    config: Optional[Path] = CONFIG_OPTION,
    json_output: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """
    Fail (exit 1) when the health score is below a threshold. For CI.

    [bold cyan]Examples:[/bold cyan]

      codedrift check --fail-under 80
    """

    def action() -> None:
        cfg, results, score = _analyze(path, language, config, verbose, quiet)
        threshold = fail_under if fail_under is not None else cfg.thresholds.min_score
        if json_output:
            _output_json(results, score)
        elif score.total < threshold:
            console.print(f"[red]FAIL[/red] health score {score.total:.1f} is below {threshold:.1f}")
        else:
            console.print(f"[green]OK[/green] health score {score.total:.1f} (threshold {threshold:.1f})")
        if score.total < threshold:
            raise typer.Exit(1)

    _run_guarded(action)


def main() -> None:
    app()
