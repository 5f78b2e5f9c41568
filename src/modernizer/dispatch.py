"""Command dispatch for the dashboard and CLI.

Every user-triggered action goes through ``Dispatcher.dispatch``. Handlers are
closures over the one ``MetricsTracker`` the dispatcher was built with, so
there is a single mutator and reads always see the latest recording.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from .catalog import BROWSER_SUPPORT_STATS, FeatureCatalog, FeatureInfo, ModernAlternative
from .errors import ExportError, ModernizerError, ScanError, UnknownCommandError
from .export import export_dashboard_json, get_export_filename, render_timeline_report
from .metrics import AdoptionMetrics, AnalysisRecord, FeatureCount, MetricsTracker, SessionStats
from .recommendations import BASELINE_DOCS_URL, Recommendation, count_by_type, derive_recommendations
from .scanner import DEFAULT_EXCLUDE_DIRS, DEFAULT_MAX_FILE_BYTES, iter_source_files, scan_file
from .timeline import TimelinePhase, derive_timeline

logger = logging.getLogger(__name__)


class Command(Enum):
    """Actions a user can trigger."""
    REFRESH = "refresh"
    ANALYZE_FILE = "analyzeFile"
    ANALYZE_PROJECT = "analyzeProject"
    EXPORT_METRICS = "exportMetrics"
    RESET_METRICS = "resetMetrics"
    GET_FEATURE_DETAILS = "getFeatureDetails"
    GENERATE_TIMELINE = "generateTimeline"
    ANALYZE_RECOMMENDATIONS = "analyzeRecommendations"
    APPLY_RECOMMENDATION = "applyRecommendation"
    LOAD_SAMPLE_DATA = "loadSampleData"
    SHOW_METRICS = "showMetrics"


@dataclass
class CommandResult:
    """What a handler reports back to the caller."""
    command: Command
    message: str
    data: Any = None
    output_path: Path | None = None


@dataclass
class DashboardData:
    """Everything the dashboard renders in one refresh."""
    metrics: AdoptionMetrics
    session_stats: SessionStats
    most_used: list[FeatureCount]
    recommendations: list[Recommendation]
    timeline: list[TimelinePhase]
    analysis_history: list[AnalysisRecord]
    baseline_statistics: dict[str, int]
    browser_support: dict[str, dict[str, int]]
    supported_features: list[dict[str, object]] = field(default_factory=list)


@dataclass
class FeatureDetails:
    feature: FeatureInfo
    browser_support: dict[str, str]
    alternatives: list[ModernAlternative]


class Dispatcher:
    """Maps each ``Command`` to a handler bound to a shared tracker."""

    def __init__(
        self,
        tracker: MetricsTracker,
        catalog: FeatureCatalog,
        export_dir: Path | None = None,
        rng: random.Random | None = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
        exclude_dirs: frozenset[str] = DEFAULT_EXCLUDE_DIRS,
        most_used_limit: int = 10,
    ) -> None:
        self.tracker = tracker
        self.catalog = catalog
        self._export_dir = export_dir
        self._rng = rng or random.Random()
        self._max_file_bytes = max_file_bytes
        self._exclude_dirs = exclude_dirs
        self._most_used_limit = most_used_limit
        self._handlers: dict[Command, Callable[..., CommandResult]] = self._build_handlers()

    @property
    def export_dir(self) -> Path | None:
        return self._export_dir

    def dispatch(self, command: Command | str, **payload: Any) -> CommandResult:
        """Run the handler for ``command``.

        Accepts either a ``Command`` or its wire value (e.g. ``"refresh"``).

        Raises:
            UnknownCommandError: If no handler is registered.
            ModernizerError: Propagated from the handler after logging.
        """
        if isinstance(command, str):
            try:
                command = Command(command)
            except ValueError:
                raise UnknownCommandError(f"Unknown command: {command}") from None

        handler = self._handlers.get(command)
        if handler is None:
            raise UnknownCommandError(f"No handler for {command.value}")

        logger.debug(f"Dispatching {command.value} {payload or ''}")
        try:
            return handler(**payload)
        except ModernizerError as e:
            logger.warning(f"{command.value} failed: {e}")
            raise

    # --- Handlers ---

    def _build_handlers(self) -> dict[Command, Callable[..., CommandResult]]:
        tracker = self.tracker
        catalog = self.catalog

        def refresh() -> CommandResult:
            metrics = tracker.get_metrics()
            data = DashboardData(
                metrics=metrics,
                session_stats=tracker.get_session_stats(),
                most_used=tracker.get_most_used_features(self._most_used_limit),
                recommendations=derive_recommendations(metrics),
                timeline=derive_timeline(metrics),
                analysis_history=tracker.get_analysis_history(),
                baseline_statistics=catalog.baseline_statistics(),
                browser_support={k: dict(v) for k, v in BROWSER_SUPPORT_STATS.items()},
                supported_features=catalog.supported_features(),
            )
            return CommandResult(Command.REFRESH, "Dashboard updated", data)

        def analyze_file(path: str | Path) -> CommandResult:
            result = scan_file(path, max_bytes=self._max_file_bytes)
            tracker.record_analysis(str(path), result.issues_found, result.language)
            for hit in result.patterns:
                tracker.record_feature_usage(hit.pattern, hit.count)
            message = (
                f"Analysis complete! Found {result.issues_found} modernization "
                f"opportunities in {Path(path).name}."
            )
            return CommandResult(Command.ANALYZE_FILE, message, result)

        def analyze_project(root: str | Path = ".") -> CommandResult:
            results = []
            skipped = []
            for path in iter_source_files(root, self._exclude_dirs):
                try:
                    result = scan_file(path, max_bytes=self._max_file_bytes)
                except ScanError as e:
                    logger.warning(f"Skipping {path}: {e}")
                    skipped.append(path)
                    continue
                tracker.record_analysis(str(path), result.issues_found, result.language)
                for hit in result.patterns:
                    tracker.record_feature_usage(hit.pattern, hit.count)
                results.append(result)

            issues = sum(r.issues_found for r in results)
            message = f"Project analysis complete! {len(results)} files, {issues} modernization opportunities."
            if skipped:
                message += f" Skipped {len(skipped)} unreadable files."
            return CommandResult(Command.ANALYZE_PROJECT, message, results)

        def export_metrics(output_path: str | Path | None = None) -> CommandResult:
            path = self._resolve_output(output_path, "metrics", "json")
            content = export_dashboard_json(tracker, catalog, path)
            message = f"Metrics exported to {path.name}" if path else "Metrics exported"
            return CommandResult(Command.EXPORT_METRICS, message, content, path)

        def reset_metrics(confirm: bool = False) -> CommandResult:
            if not confirm:
                return CommandResult(Command.RESET_METRICS, "Reset cancelled")
            tracker.reset()
            return CommandResult(
                Command.RESET_METRICS,
                "Dashboard reset! Analyze a file or project to begin tracking.",
            )

        def get_feature_details(feature_id: str) -> CommandResult:
            feature = catalog.lookup_feature(feature_id)
            if feature is None:
                return CommandResult(Command.GET_FEATURE_DETAILS, f"No feature matching '{feature_id}'")
            details = FeatureDetails(
                feature=feature,
                browser_support=dict(catalog.browser_support(feature_id)),
                alternatives=catalog.alternatives_for(feature_id),
            )
            return CommandResult(Command.GET_FEATURE_DETAILS, feature.name, details)

        def generate_timeline(output_path: str | Path | None = None) -> CommandResult:
            path = self._resolve_output(output_path, "timeline", "markdown")
            content = render_timeline_report(tracker, path)
            message = f"Timeline written to {path.name}" if path else "Timeline generated"
            return CommandResult(Command.GENERATE_TIMELINE, message, content, path)

        def analyze_recommendations() -> CommandResult:
            metrics = tracker.get_metrics()
            recommendations = derive_recommendations(metrics)
            lines = [
                f"Files: {metrics.files_analyzed} | Issues: {metrics.issues_found} | Fixed: {metrics.fixes_applied}",
                f"Progress: {metrics.modernization_progress}%",
            ]
            if recommendations:
                lines.append(f"{count_by_type(recommendations, 'priority')} high-priority recommendations available")
                lines.append(f"Top action: {recommendations[0].title}")
            return CommandResult(Command.ANALYZE_RECOMMENDATIONS, "\n".join(lines), recommendations)

        def apply_recommendation(recommendation_id: str, root: str | Path | None = None) -> CommandResult:
            if recommendation_id == "low_fix_rate":
                return CommandResult(
                    Command.APPLY_RECOMMENDATION,
                    "Place your cursor on a highlighted legacy pattern and press Ctrl+. (or Cmd+.) to see available fixes.",
                )
            if recommendation_id == "high_density":
                if root is None:
                    return CommandResult(Command.APPLY_RECOMMENDATION, "Run a project analysis to find the densest files.")
                return analyze_project(root)
            if recommendation_id == "common_pattern":
                return generate_timeline()
            if recommendation_id == "baseline_adoption":
                return CommandResult(
                    Command.APPLY_RECOMMENDATION,
                    f"Learn more at {BASELINE_DOCS_URL}",
                    BASELINE_DOCS_URL,
                )
            return CommandResult(Command.APPLY_RECOMMENDATION, f"No action for '{recommendation_id}'")

        def load_sample_data() -> CommandResult:
            tracker.load_sample_data(self._rng)
            return CommandResult(Command.LOAD_SAMPLE_DATA, "Sample data loaded")

        def show_metrics() -> CommandResult:
            metrics = tracker.get_metrics()
            stats = tracker.get_session_stats()
            message = "\n".join([
                f"Session Duration: {stats.duration_minutes} minutes",
                f"Files Analyzed: {metrics.files_analyzed}",
                f"Issues Found: {metrics.issues_found}",
                f"Fixes Applied: {metrics.fixes_applied}",
                f"Progress: {metrics.modernization_progress}%",
                f"Average Issues/File: {stats.average_issues_per_file}",
            ])
            return CommandResult(Command.SHOW_METRICS, message, stats)

        return {
            Command.REFRESH: refresh,
            Command.ANALYZE_FILE: analyze_file,
            Command.ANALYZE_PROJECT: analyze_project,
            Command.EXPORT_METRICS: export_metrics,
            Command.RESET_METRICS: reset_metrics,
            Command.GET_FEATURE_DETAILS: get_feature_details,
            Command.GENERATE_TIMELINE: generate_timeline,
            Command.ANALYZE_RECOMMENDATIONS: analyze_recommendations,
            Command.APPLY_RECOMMENDATION: apply_recommendation,
            Command.LOAD_SAMPLE_DATA: load_sample_data,
            Command.SHOW_METRICS: show_metrics,
        }

    def _resolve_output(self, output_path: str | Path | None, kind: str, fmt: str) -> Path | None:
        if output_path is not None:
            return Path(output_path)
        if self._export_dir is None:
            return None
        try:
            self._export_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError(f"Cannot create export directory {self._export_dir}: {e}") from e
        return self._export_dir / get_export_filename(kind, fmt)
