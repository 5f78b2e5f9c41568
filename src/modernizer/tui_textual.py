"""Textual dashboard for Baseline Modernizer."""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape as markup_escape
from rich.table import Table
from rich.text import Text as RichText
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Static

from .dispatch import Command, DashboardData, Dispatcher
from .errors import ModernizerError
from .export import get_export_filename
from .metrics import AnalysisRecord, FeatureCount
from .recommendations import Recommendation
from .timeline import TimelinePhase

STATUS_STYLES = {
    "completed": "green",
    "in-progress": "yellow",
    "ready": "cyan",
    "pending": "dim",
}

TYPE_STYLES = {
    "priority": "bold red",
    "warning": "yellow",
    "suggestion": "cyan",
    "info": "blue",
}

RICH_MARKS = {"completed": "✅", "in-progress": "🔄", "ready": "🎯", "pending": "⏳"}
PLAIN_MARKS = {"completed": "[x]", "in-progress": "[~]", "ready": "[>]", "pending": "[ ]"}


def progress_bar(percent: int, width: int = 20) -> str:
    """Text progress bar, e.g. ``██████░░░░ 60%``."""
    percent = max(0, min(percent, 100))
    filled = round(width * percent / 100)
    return f"{'█' * filled}{'░' * (width - filled)} {percent}%"


def render_header(data: DashboardData) -> RichText:
    m = data.metrics
    stats = data.session_stats
    content = (
        "[bold]Baseline Modernizer[/bold] - Dashboard\n"
        f"files:{m.files_analyzed}  issues:{m.issues_found}  fixes:{m.fixes_applied}  "
        f"avg/file:{stats.average_issues_per_file}  session:{stats.duration_minutes}m\n"
        f"progress {progress_bar(m.modernization_progress)}"
    )
    return RichText.from_markup(content)


def render_recommendations(recommendations: list[Recommendation]) -> Table:
    table = Table(title="Smart Recommendations", expand=True, show_lines=False)
    table.add_column("Type", no_wrap=True)
    table.add_column("Recommendation")
    table.add_column("Impact", no_wrap=True)
    for rec in recommendations:
        table.add_row(
            RichText(rec.type, style=TYPE_STYLES.get(rec.type, "")),
            RichText.from_markup(f"[bold]{markup_escape(rec.title)}[/bold]\n[dim]{markup_escape(rec.description)}[/dim]"),
            rec.impact,
        )
    return table


def render_timeline(timeline: list[TimelinePhase], ui_style: str = "rich") -> Table:
    marks = RICH_MARKS if ui_style == "rich" else PLAIN_MARKS
    table = Table(title="Modernization Timeline", expand=True)
    table.add_column("", no_wrap=True)
    table.add_column("Phase", no_wrap=True)
    table.add_column("Progress", no_wrap=True)
    table.add_column("Duration", no_wrap=True)
    for phase in timeline:
        table.add_row(
            marks.get(phase.status, "?"),
            RichText(phase.phase, style=STATUS_STYLES.get(phase.status, "")),
            progress_bar(phase.progress, width=10),
            phase.duration,
        )
    return table


def render_patterns(most_used: list[FeatureCount]) -> Table:
    table = Table(title="Most Used Legacy Patterns", expand=True)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Pattern")
    table.add_column("Count", justify="right")
    if not most_used:
        table.add_row("", RichText("No patterns detected yet", style="dim"), "")
    for i, fc in enumerate(most_used, 1):
        table.add_row(str(i), fc.feature, str(fc.count))
    return table


def render_history(history: list[AnalysisRecord], limit: int = 10) -> Table:
    table = Table(title="Recent Analyses", expand=True)
    table.add_column("File")
    table.add_column("Language", no_wrap=True)
    table.add_column("Issues", justify="right")
    table.add_column("Time", no_wrap=True)
    for record in history[:limit]:
        table.add_row(
            record.file_name,
            record.language,
            str(record.issues_count),
            record.timestamp.strftime("%H:%M:%S"),
        )
    return table


CSS = """
Screen {
    layout: vertical;
}

#header {
    height: auto;
    border: solid $primary;
    padding: 0 1;
    margin-bottom: 1;
}

#main-content {
    height: 1fr;
}

#left-column, #right-column {
    width: 1fr;
}

.panel {
    height: auto;
    padding: 0 1;
}
"""


class ModernizerApp(App):
    """Textual dashboard over a shared ``Dispatcher``."""

    CSS = CSS

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("s", "load_sample", "Sample Data"),
        Binding("p", "analyze_project", "Analyze"),
        Binding("t", "timeline", "Timeline"),
        Binding("e", "export", "Export"),
        Binding("x", "reset", "Reset"),
    ]

    def __init__(
        self,
        dispatcher: Dispatcher,
        project_root: Path | None = None,
        ui_style: str = "rich",
    ) -> None:
        super().__init__()
        self.dispatcher = dispatcher
        self._project_root = project_root
        self._ui_style = ui_style
        self._reset_pending = False

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        with Horizontal(id="main-content"):
            with Vertical(id="left-column"):
                yield Static(id="recommendations", classes="panel")
                yield Static(id="timeline", classes="panel")
            with Vertical(id="right-column"):
                yield Static(id="patterns", classes="panel")
                yield Static(id="history", classes="panel")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_all()

    def _refresh_all(self) -> None:
        data = self.dispatcher.dispatch(Command.REFRESH).data
        self.query_one("#header", Static).update(render_header(data))
        self.query_one("#recommendations", Static).update(render_recommendations(data.recommendations))
        self.query_one("#timeline", Static).update(render_timeline(data.timeline, self._ui_style))
        self.query_one("#patterns", Static).update(render_patterns(data.most_used))
        self.query_one("#history", Static).update(render_history(data.analysis_history))

    def _run(self, command: Command, **payload) -> None:
        """Dispatch a command, surface its message, and redraw."""
        try:
            result = self.dispatcher.dispatch(command, **payload)
        except ModernizerError as e:
            self._show_status(f"Error: {e}", severity="error")
            return
        self._show_status(result.message)
        self._refresh_all()

    def _show_status(self, message: str, severity: str = "information") -> None:
        self.notify(message, timeout=3, severity=severity)

    # Action handlers
    def action_refresh(self) -> None:
        self._reset_pending = False
        self._run(Command.REFRESH)

    def action_load_sample(self) -> None:
        self._run(Command.LOAD_SAMPLE_DATA)

    def action_analyze_project(self) -> None:
        root = self._project_root or Path.cwd()
        self._run(Command.ANALYZE_PROJECT, root=root)

    def action_timeline(self) -> None:
        self._run(Command.GENERATE_TIMELINE, output_path=self._output_path("timeline", "markdown"))

    def action_export(self) -> None:
        self._run(Command.EXPORT_METRICS, output_path=self._output_path("metrics", "json"))

    def action_reset(self) -> None:
        """Reset needs two presses."""
        if not self._reset_pending:
            self._reset_pending = True
            self._show_status("Press x again to reset all metrics", severity="warning")
            return
        self._reset_pending = False
        self._run(Command.RESET_METRICS, confirm=True)

    def _output_path(self, kind: str, fmt: str) -> Path | None:
        # The dispatcher falls back to its export dir; without one, write to cwd
        if self.dispatcher.export_dir is not None:
            return None
        return Path.cwd() / get_export_filename(kind, fmt)
