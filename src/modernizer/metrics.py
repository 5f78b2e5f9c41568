"""Session adoption metrics for Baseline Modernizer.

In-memory only. One ``MetricsTracker`` is constructed per run and handed to
every consumer (dispatcher, dashboard, CLI); nothing here touches the disk.
"""

from __future__ import annotations

import json
import logging
import math
import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import PurePath
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .errors import InvalidArgumentError, SnapshotError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"
DEFAULT_MOST_USED_LIMIT = 10

# Demo data shown before any real analysis has run
SAMPLE_FILES = ["app.js", "components/Header.js", "styles/main.css", "utils/api.js", "index.html"]
SAMPLE_PATTERNS = ["var", "XMLHttpRequest", "float", "function", "<div>", "<b><i><u>", "for-in"]
SAMPLE_FIXES = [("let-const", "app.js"), ("fetch", "api.js"), ("flexbox", "main.css")]


def js_round(value: float) -> int:
    """Round half up, so 0.5 -> 1 and 2.5 -> 3."""
    return math.floor(value + 0.5)


def basename(file_identifier: str) -> str:
    """Last path component, or the identifier itself when it has none."""
    if not file_identifier:
        return file_identifier
    return PurePath(file_identifier.replace("\\", "/")).name or file_identifier


def language_for(file_name: str) -> str:
    """Guess a language id from a file extension (used for demo data)."""
    if file_name.endswith(".js"):
        return "javascript"
    if file_name.endswith(".css"):
        return "css"
    if file_name.endswith(".html"):
        return "html"
    return "typescript"


def _validate_count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class AnalysisRecord:
    """One analyzed file."""

    timestamp: datetime
    file_name: str
    issues_count: int
    language: str


@dataclass(frozen=True)
class FixRecord:
    """One applied fix."""

    timestamp: datetime
    feature_id: str
    file_name: str


@dataclass(frozen=True)
class FeatureCount:
    feature: str
    count: int


@dataclass(frozen=True)
class SessionStats:
    """Per-session summary numbers."""

    duration_minutes: int
    files_analyzed: int
    issues_found: int
    fixes_applied: int
    average_issues_per_file: float


@dataclass(frozen=True)
class AdoptionMetrics:
    """Immutable snapshot of a tracker's state.

    ``feature_usage`` is a read-only mapping and the histories are tuples, so a
    snapshot can be handed to any consumer without exposing the tracker.
    """

    files_analyzed: int = 0
    issues_found: int = 0
    fixes_applied: int = 0
    feature_usage: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    modernization_progress: int = 0
    last_analysis: datetime = field(default_factory=datetime.now)
    session_start: datetime = field(default_factory=datetime.now)
    analysis_history: tuple[AnalysisRecord, ...] = ()
    fix_history: tuple[FixRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_analyzed": self.files_analyzed,
            "issues_found": self.issues_found,
            "fixes_applied": self.fixes_applied,
            "feature_usage": dict(self.feature_usage),
            "modernization_progress": self.modernization_progress,
            "last_analysis": self.last_analysis.isoformat(),
            "session_start": self.session_start.isoformat(),
            "analysis_history": [
                {
                    "timestamp": r.timestamp.isoformat(),
                    "file_name": r.file_name,
                    "issues_count": r.issues_count,
                    "language": r.language,
                }
                for r in self.analysis_history
            ],
            "fix_history": [
                {
                    "timestamp": r.timestamp.isoformat(),
                    "feature_id": r.feature_id,
                    "file_name": r.file_name,
                }
                for r in self.fix_history
            ],
        }


def compute_progress(files_analyzed: int, issues_found: int, fixes_applied: int) -> int:
    """Share of found issues that have a recorded fix, as a 0-100 integer."""
    if issues_found == 0:
        return 100 if files_analyzed > 0 else 0
    progress = js_round(fixes_applied / issues_found * 100)
    return max(0, min(progress, 100))


def most_used_features(
    feature_usage: Mapping[str, int], limit: int = DEFAULT_MOST_USED_LIMIT
) -> list[FeatureCount]:
    """Top ``limit`` patterns by count; equal counts keep insertion order."""
    ranked = sorted(feature_usage.items(), key=lambda item: item[1], reverse=True)
    return [FeatureCount(feature=name, count=count) for name, count in ranked[:max(limit, 0)]]


class MetricsTracker:
    """Mutable metrics store for one session.

    All recording happens through ``record_analysis``, ``record_fix`` and
    ``record_feature_usage``; readers get copies.
    """

    def __init__(self, now: Callable[[], datetime] = datetime.now) -> None:
        self._now = now
        self._init_state()

    def _init_state(self) -> None:
        started = self._now()
        self._files_analyzed = 0
        self._issues_found = 0
        self._fixes_applied = 0
        self._feature_usage: dict[str, int] = {}
        self._progress = 0
        self._last_analysis = started
        self._session_start = started
        self._analysis_history: list[AnalysisRecord] = []
        self._fix_history: list[FixRecord] = []

    # --- Recording ---

    def record_analysis(self, file_identifier: str, issues_count: int, language: str = "unknown") -> None:
        """Record one analyzed file and the number of legacy patterns it had."""
        issues_count = _validate_count("issues_count", issues_count)
        timestamp = self._now()
        self._files_analyzed += 1
        self._issues_found += issues_count
        self._last_analysis = timestamp
        self._analysis_history.append(AnalysisRecord(
            timestamp=timestamp,
            file_name=basename(file_identifier),
            issues_count=issues_count,
            language=language,
        ))
        self._update_progress()
        logger.debug(f"Recorded analysis of {file_identifier}: {issues_count} issues ({language})")

    def record_fix(self, feature_id: str, file_identifier: str = "") -> None:
        """Record one applied fix."""
        self._fixes_applied += 1
        self._fix_history.append(FixRecord(
            timestamp=self._now(),
            feature_id=feature_id,
            file_name=basename(file_identifier),
        ))
        self._update_progress()
        logger.debug(f"Recorded fix {feature_id} in {file_identifier or '<unknown>'}")

    def record_feature_usage(self, feature_id: str, count: int = 1) -> None:
        """Add ``count`` occurrences of a legacy pattern. Progress is unaffected."""
        count = _validate_count("count", count)
        self._feature_usage[feature_id] = self._feature_usage.get(feature_id, 0) + count

    def _update_progress(self) -> None:
        self._progress = compute_progress(self._files_analyzed, self._issues_found, self._fixes_applied)

    # --- Reading ---

    def get_metrics(self) -> AdoptionMetrics:
        return AdoptionMetrics(
            files_analyzed=self._files_analyzed,
            issues_found=self._issues_found,
            fixes_applied=self._fixes_applied,
            feature_usage=MappingProxyType(dict(self._feature_usage)),
            modernization_progress=self._progress,
            last_analysis=self._last_analysis,
            session_start=self._session_start,
            analysis_history=tuple(self._analysis_history),
            fix_history=tuple(self._fix_history),
        )

    def get_most_used_features(self, limit: int = DEFAULT_MOST_USED_LIMIT) -> list[FeatureCount]:
        return most_used_features(self._feature_usage, limit)

    def get_analysis_history(self) -> list[AnalysisRecord]:
        """Analysis history, most recent first."""
        return list(reversed(self._analysis_history))

    def get_fix_history(self) -> list[FixRecord]:
        """Fix history, most recent first."""
        return list(reversed(self._fix_history))

    def get_session_stats(self) -> SessionStats:
        elapsed = (self._now() - self._session_start).total_seconds()
        if self._files_analyzed > 0:
            average = js_round(self._issues_found / self._files_analyzed * 10) / 10
        else:
            average = 0
        return SessionStats(
            duration_minutes=js_round(elapsed / 60),
            files_analyzed=self._files_analyzed,
            issues_found=self._issues_found,
            fixes_applied=self._fixes_applied,
            average_issues_per_file=average,
        )

    # --- Lifecycle ---

    def reset(self) -> None:
        """Drop all counters and history and start a new session."""
        self._init_state()
        logger.info("Metrics reset")

    def load_sample_data(self, rng: random.Random | None = None) -> None:
        """Populate the tracker with demo analyses, pattern counts and fixes."""
        rng = rng or random.Random()
        for file_name in SAMPLE_FILES:
            self.record_analysis(f"src/{file_name}", rng.randint(1, 5), language_for(file_name))
        for pattern in SAMPLE_PATTERNS:
            self.record_feature_usage(pattern, rng.randint(1, 8))
        for feature_id, file_name in SAMPLE_FIXES:
            self.record_fix(feature_id, file_name)

    def export_snapshot(self) -> str:
        """Serialize the full state plus session stats as JSON."""
        stats = self.get_session_stats()
        data = self.get_metrics().to_dict()
        data["session_stats"] = {
            "duration_minutes": stats.duration_minutes,
            "files_analyzed": stats.files_analyzed,
            "issues_found": stats.issues_found,
            "fixes_applied": stats.fixes_applied,
            "average_issues_per_file": stats.average_issues_per_file,
        }
        data["export_timestamp"] = self._now().isoformat()
        data["schema_version"] = SCHEMA_VERSION
        return json.dumps(data, indent=2)


def load_snapshot(text: str) -> AdoptionMetrics:
    """Read an ``export_snapshot`` document back into a metrics snapshot."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "schema_version" not in data:
        raise SnapshotError("Snapshot has no schema_version marker")
    if data["schema_version"] != SCHEMA_VERSION:
        logger.warning(f"Reading snapshot with schema {data['schema_version']} (expected {SCHEMA_VERSION})")

    try:
        return AdoptionMetrics(
            files_analyzed=data["files_analyzed"],
            issues_found=data["issues_found"],
            fixes_applied=data["fixes_applied"],
            feature_usage=MappingProxyType(dict(data.get("feature_usage", {}))),
            modernization_progress=data["modernization_progress"],
            last_analysis=datetime.fromisoformat(data["last_analysis"]),
            session_start=datetime.fromisoformat(data["session_start"]),
            analysis_history=tuple(
                AnalysisRecord(
                    timestamp=datetime.fromisoformat(r["timestamp"]),
                    file_name=r["file_name"],
                    issues_count=r["issues_count"],
                    language=r["language"],
                )
                for r in data.get("analysis_history", [])
            ),
            fix_history=tuple(
                FixRecord(
                    timestamp=datetime.fromisoformat(r["timestamp"]),
                    feature_id=r["feature_id"],
                    file_name=r["file_name"],
                )
                for r in data.get("fix_history", [])
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e
