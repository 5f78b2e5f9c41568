"""CLI entry point for Baseline Modernizer."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .catalog import FeatureCatalog
from .config import CONFIG_FILE, VALID_STYLES, Config, load_config, save_config
from .dispatch import Command, Dispatcher
from .errors import ModernizerError
from .export import render_comprehensive_report, render_summary_report, render_timeline_report
from .metrics import MetricsTracker
from .recommendations import derive_recommendations

console = Console()

LOG_FILE = Path.home() / ".cache" / "modernizer" / "debug.log"


def configure_logging(debug_logging: bool) -> None:
    """Rotating debug log when enabled, otherwise warnings only."""
    if debug_logging:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
        )
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            handlers=[handler],
        )
        logging.info("Baseline Modernizer starting (debug logging enabled)")
    else:
        # Default: only warn+ so the TUI stays clean
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


def build_dispatcher(config: Config, tracker: MetricsTracker | None = None) -> Dispatcher:
    """Construct the session's tracker, catalog and dispatcher from config."""
    tracker = tracker or MetricsTracker()
    dispatcher = Dispatcher(
        tracker,
        FeatureCatalog(),
        export_dir=Path(config.export_dir).expanduser() if config.export_dir else None,
        max_file_bytes=config.scanner.max_file_bytes,
        exclude_dirs=frozenset(config.scanner.exclude_dirs),
        most_used_limit=config.most_used_limit,
    )
    if config.load_sample_data:
        dispatcher.dispatch(Command.LOAD_SAMPLE_DATA)
    return dispatcher


def print_metrics(dispatcher: Dispatcher) -> None:
    """Print the metrics table and recommendations."""
    tracker = dispatcher.tracker
    metrics = tracker.get_metrics()
    stats = tracker.get_session_stats()

    table = Table(title="Current Session Metrics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Files Analyzed", str(metrics.files_analyzed))
    table.add_row("Issues Found", str(metrics.issues_found))
    table.add_row("Fixes Applied", str(metrics.fixes_applied))
    table.add_row("Progress", f"{metrics.modernization_progress}%")
    table.add_row("Average Issues/File", str(stats.average_issues_per_file))
    console.print(table)

    most_used = tracker.get_most_used_features(5)
    if most_used:
        console.print("\n[bold]Top Legacy Patterns:[/bold]")
        for i, fc in enumerate(most_used, 1):
            console.print(f"  {i}. [cyan]{fc.feature}[/cyan] ({fc.count})")

    console.print("\n[bold]Recommendations:[/bold]")
    for rec in derive_recommendations(metrics):
        console.print(f"  [{rec.impact}] {rec.title}", markup=False)


@click.group(invoke_without_command=True)
@click.option("--sample/--no-sample", "sample", default=None, help="Seed the dashboard with demo data")
@click.option("--project", "-p", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None, help="Project directory to analyze from the dashboard")
@click.option("--style", type=click.Choice(list(VALID_STYLES)), default=None, help="UI style override for this run")
@click.option("--debug-logging/--no-debug-logging", default=None, help="Enable debug logging to file")
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, sample: bool | None, project: Path | None, style: str | None, debug_logging: bool | None, version: bool) -> None:
    """Baseline Modernizer - track legacy web patterns and modernization progress."""
    if version:
        console.print(f"baseline-modernizer v{__version__}")
        return

    config = load_config()
    # Apply CLI overrides (not saved to config file)
    if sample is not None:
        config.load_sample_data = sample
    if style is not None:
        config.style = style
    if debug_logging is not None:
        config.debug_logging = debug_logging
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        run_dashboard(config, project_root=project)


def run_dashboard(config: Config, project_root: Path | None = None) -> None:
    """Run the Textual dashboard."""
    from .tui_textual import ModernizerApp

    configure_logging(config.debug_logging)
    dispatcher = build_dispatcher(config)

    try:
        app = ModernizerApp(dispatcher, project_root=project_root, ui_style=config.style)
        app.run()
    except KeyboardInterrupt:
        pass
    finally:
        console.print("\n[dim]Goodbye![/dim]")


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--report", "report_kind", type=click.Choice(["summary", "comprehensive", "timeline"]), default=None, help="Also print a Markdown report")
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the dashboard JSON export to this file")
@click.pass_obj
def analyze(config: Config, paths: tuple[Path, ...], report_kind: str | None, export_path: Path | None) -> None:
    """Scan files or directories for legacy web patterns.

    Examples:
      modernizer analyze src/                  # Scan a project
      modernizer analyze app.js --report timeline
      modernizer analyze src/ --export metrics.json
    """
    configure_logging(config.debug_logging)
    dispatcher = build_dispatcher(config)

    try:
        for path in paths:
            command = Command.ANALYZE_PROJECT if path.is_dir() else Command.ANALYZE_FILE
            payload = {"root": path} if path.is_dir() else {"path": path}
            result = dispatcher.dispatch(command, **payload)
            console.print(f"[green]✓[/green] {result.message}")

        print_metrics(dispatcher)

        if report_kind:
            console.print()
            console.print(_render_report(dispatcher, report_kind), markup=False)

        if export_path:
            result = dispatcher.dispatch(Command.EXPORT_METRICS, output_path=export_path)
            console.print(f"\n[green]{result.message}[/green]")
    except ModernizerError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)


def _render_report(dispatcher: Dispatcher, kind: str, output_path: Path | None = None) -> str:
    if kind == "comprehensive":
        return render_comprehensive_report(dispatcher.tracker, dispatcher.catalog, output_path)
    if kind == "timeline":
        return render_timeline_report(dispatcher.tracker, output_path)
    return render_summary_report(dispatcher.tracker, output_path)


@main.command()
@click.option("--kind", type=click.Choice(["summary", "comprehensive", "timeline"]), default="summary", help="Report type")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write the report to a file instead of stdout")
@click.pass_obj
def report(config: Config, kind: str, output: Path | None) -> None:
    """Print a Markdown modernization report for a fresh session.

    Combine with --sample to see a populated report:
      modernizer --sample report --kind comprehensive
    """
    configure_logging(config.debug_logging)
    dispatcher = build_dispatcher(config)
    try:
        content = _render_report(dispatcher, kind, output)
    except ModernizerError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)

    if output:
        console.print(f"Written to [dim]{output}[/dim]")
    else:
        console.print(content, markup=False)


@main.command()
@click.argument("query", required=False)
def features(query: str | None) -> None:
    """List catalog features, optionally filtered by QUERY."""
    catalog = FeatureCatalog()
    results = catalog.search(query) if query else catalog.all_features()
    if not results:
        console.print(f"No features match '{query}'")
        return

    table = Table(title="Baseline Features")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Baseline")
    for f in results:
        table.add_row(f.id, f.name, f.category, str(f.baseline or "limited"))
    console.print(table)


@main.command()
@click.argument("feature_id")
@click.pass_obj
def feature(config: Config, feature_id: str) -> None:
    """Show details and modern alternatives for a feature or legacy pattern."""
    dispatcher = build_dispatcher(config)
    catalog = dispatcher.catalog
    result = dispatcher.dispatch(Command.GET_FEATURE_DETAILS, feature_id=feature_id)

    if result.data is not None:
        info = result.data.feature
        console.print(f"\n[bold]{info.name}[/bold] [dim]({info.id})[/dim]")
        console.print(f"  {info.description}")
        console.print(f"  Baseline: [cyan]{info.baseline or 'limited'}[/cyan]  since {info.since or 'n/a'}")
        support = ", ".join(f"{b} {v}+" for b, v in result.data.browser_support.items())
        console.print(f"  Support:  {support}")

    alternatives = catalog.alternatives_for(feature_id)
    if alternatives:
        console.print("\n[bold]Modern alternatives:[/bold]")
        for alt in alternatives:
            console.print(f"  [cyan]{alt.replacement}[/cyan] - {alt.description}")
            console.print(f"    [dim]{alt.example}[/dim]", markup=False)
    elif result.data is None:
        console.print(f"[yellow]No feature or legacy pattern matching '{feature_id}'[/yellow]")
        raise SystemExit(1)


@main.command()
@click.option("--style", type=click.Choice(list(VALID_STYLES)), help="UI style")
@click.option("--sample/--no-sample", "sample", default=None, help="Load demo data on start")
@click.option("--most-used-limit", type=click.IntRange(min=1), default=None, help="Patterns shown in rankings")
@click.option("--export-dir", type=click.Path(file_okay=False), default=None, help="Directory for exports and reports")
@click.option("--debug-logging/--no-debug-logging", default=None, help="Enable debug logging to file")
@click.option("--show", is_flag=True, help="Show current configuration")
def config(style: str | None, sample: bool | None, most_used_limit: int | None, export_dir: str | None, debug_logging: bool | None, show: bool) -> None:
    """Configure Baseline Modernizer settings.

    Examples:
      modernizer config --style plain          # Set UI style
      modernizer config --sample               # Load demo data on start
      modernizer config --show                 # Show current config
    """
    current_config = load_config()

    if show:
        console.print("\n[bold]Current Configuration:[/bold]")
        console.print(f"  Style:           [cyan]{current_config.style}[/cyan]")
        console.print(f"  Sample Data:     [cyan]{current_config.load_sample_data}[/cyan]")
        console.print(f"  Most Used Limit: [cyan]{current_config.most_used_limit}[/cyan]")
        console.print(f"  Export Dir:      [cyan]{current_config.export_dir or '(current directory)'}[/cyan]")
        console.print(f"  Debug Logging:   [cyan]{current_config.debug_logging}[/cyan]")
        console.print(f"  Max File Bytes:  [cyan]{current_config.scanner.max_file_bytes}[/cyan]")
        console.print(f"\nConfig file: [dim]{CONFIG_FILE}[/dim]")
        return

    if style is None and sample is None and most_used_limit is None and export_dir is None and debug_logging is None:
        console.print("Nothing to change. Use --show to view current configuration.")
        return

    if style is not None:
        current_config.style = style
    if sample is not None:
        current_config.load_sample_data = sample
    if most_used_limit is not None:
        current_config.most_used_limit = most_used_limit
    if export_dir is not None:
        current_config.export_dir = export_dir
    if debug_logging is not None:
        current_config.debug_logging = debug_logging

    save_config(current_config)
    console.print("\n[green]Configuration saved![/green]")
    console.print(f"\nSaved to: [dim]{CONFIG_FILE}[/dim]")


if __name__ == "__main__":
    main()
