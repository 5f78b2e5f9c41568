"""Tests for the session metrics store."""

import json
import random
from datetime import datetime, timedelta

import pytest

from modernizer.errors import InvalidArgumentError, ModernizerError, SnapshotError
from modernizer.metrics import (
    SAMPLE_FILES,
    SAMPLE_FIXES,
    SAMPLE_PATTERNS,
    SCHEMA_VERSION,
    MetricsTracker,
    basename,
    compute_progress,
    js_round,
    load_snapshot,
)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def _tracker() -> tuple[MetricsTracker, FakeClock]:
    clock = FakeClock()
    return MetricsTracker(now=clock), clock


class TestRounding:

    def test_half_rounds_up(self):
        assert js_round(0.5) == 1
        assert js_round(2.5) == 3
        assert js_round(12.5) == 13

    def test_below_half_rounds_down(self):
        assert js_round(2.49) == 2

    def test_progress_thirds(self):
        assert compute_progress(1, 3, 1) == 33
        assert compute_progress(1, 3, 2) == 67


class TestBasename:

    def test_posix_path(self):
        assert basename("src/components/Header.js") == "Header.js"

    def test_windows_path(self):
        assert basename("C:\\work\\app.js") == "app.js"

    def test_bare_identifier(self):
        assert basename("untitled-1") == "untitled-1"

    def test_empty(self):
        assert basename("") == ""


class TestRecording:

    def test_fresh_store(self):
        tracker, _ = _tracker()
        m = tracker.get_metrics()
        assert m.files_analyzed == 0
        assert m.issues_found == 0
        assert m.fixes_applied == 0
        assert m.modernization_progress == 0
        assert dict(m.feature_usage) == {}
        assert m.analysis_history == ()

    def test_record_analysis(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 4, "javascript")
        m = tracker.get_metrics()
        assert m.files_analyzed == 1
        assert m.issues_found == 4
        assert m.modernization_progress == 0

    def test_fixes_move_progress(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 4, "javascript")
        tracker.record_fix("let-const")
        tracker.record_fix("let-const")
        m = tracker.get_metrics()
        assert m.fixes_applied == 2
        assert m.modernization_progress == 50

    def test_clean_file_is_fully_modern(self):
        tracker, _ = _tracker()
        tracker.record_analysis("x.css", 0, "css")
        assert tracker.get_metrics().modernization_progress == 100

    def test_feature_usage_accumulates(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 3)
        tracker.record_feature_usage("var", 2)
        assert tracker.get_metrics().feature_usage["var"] == 5

    def test_feature_usage_default_count(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("float")
        assert tracker.get_metrics().feature_usage["float"] == 1

    def test_feature_usage_does_not_touch_progress(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 4)
        tracker.record_fix("fetch")
        before = tracker.get_metrics().modernization_progress
        tracker.record_feature_usage("var", 10)
        assert tracker.get_metrics().modernization_progress == before

    def test_progress_clamped_when_fixes_exceed_issues(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 1)
        tracker.record_fix("let-const")
        tracker.record_fix("fetch")
        tracker.record_fix("flexbox")
        assert tracker.get_metrics().modernization_progress == 100

    def test_fix_without_analysis_keeps_zero_progress(self):
        tracker, _ = _tracker()
        tracker.record_fix("let-const")
        m = tracker.get_metrics()
        assert m.fixes_applied == 1
        assert m.modernization_progress == 0

    def test_history_stores_basename(self):
        tracker, _ = _tracker()
        tracker.record_analysis("/home/dev/project/src/app.js", 2, "javascript")
        record = tracker.get_analysis_history()[0]
        assert record.file_name == "app.js"
        assert record.language == "javascript"
        assert record.issues_count == 2

    def test_default_language(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.txt", 1)
        assert tracker.get_analysis_history()[0].language == "unknown"

    def test_last_analysis_tracks_clock(self):
        tracker, clock = _tracker()
        clock.advance(minutes=3)
        tracker.record_analysis("a.js", 1)
        assert tracker.get_metrics().last_analysis == clock.current


class TestInvalidInput:

    @pytest.mark.parametrize("bad", [-1, 1.5, "3", None, True])
    def test_record_analysis_rejects(self, bad):
        tracker, _ = _tracker()
        with pytest.raises(InvalidArgumentError):
            tracker.record_analysis("a.js", bad)
        assert tracker.get_metrics().files_analyzed == 0
        assert tracker.get_analysis_history() == []

    @pytest.mark.parametrize("bad", [-2, 0.5, "1", False])
    def test_record_feature_usage_rejects(self, bad):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 2)
        with pytest.raises(InvalidArgumentError):
            tracker.record_feature_usage("var", bad)
        assert tracker.get_metrics().feature_usage["var"] == 2

    def test_invalid_argument_is_value_error(self):
        tracker, _ = _tracker()
        with pytest.raises(ValueError):
            tracker.record_analysis("a.js", -5)

    def test_invalid_argument_is_modernizer_error(self):
        assert issubclass(InvalidArgumentError, ModernizerError)


class TestReads:

    def test_snapshot_is_isolated(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 1)
        snapshot = tracker.get_metrics()
        tracker.record_feature_usage("var", 4)
        tracker.record_analysis("a.js", 2)
        assert snapshot.feature_usage["var"] == 1
        assert snapshot.files_analyzed == 0

    def test_snapshot_is_read_only(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 1)
        with pytest.raises(TypeError):
            tracker.get_metrics().feature_usage["var"] = 99

    def test_reads_are_idempotent(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 3)
        tracker.record_feature_usage("var", 3)
        assert tracker.get_metrics() == tracker.get_metrics()
        assert tracker.get_most_used_features() == tracker.get_most_used_features()

    def test_history_most_recent_first(self):
        tracker, _ = _tracker()
        for name in ("one.js", "two.js", "three.js"):
            tracker.record_analysis(name, 1)
        names = [r.file_name for r in tracker.get_analysis_history()]
        assert names == ["three.js", "two.js", "one.js"]

    def test_history_copy_does_not_leak(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 1)
        tracker.get_analysis_history().clear()
        assert len(tracker.get_analysis_history()) == 1

    def test_fix_history_most_recent_first(self):
        tracker, _ = _tracker()
        tracker.record_fix("let-const", "src/app.js")
        tracker.record_fix("fetch", "src/api.js")
        history = tracker.get_fix_history()
        assert [r.feature_id for r in history] == ["fetch", "let-const"]
        assert history[0].file_name == "api.js"


class TestMostUsed:

    def test_sorted_descending(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 2)
        tracker.record_feature_usage("float", 7)
        tracker.record_feature_usage("<div>", 4)
        ranked = [(fc.feature, fc.count) for fc in tracker.get_most_used_features()]
        assert ranked == [("float", 7), ("<div>", 4), ("var", 2)]

    def test_ties_keep_insertion_order(self):
        tracker, _ = _tracker()
        for pattern in ("b", "a", "c"):
            tracker.record_feature_usage(pattern, 3)
        assert [fc.feature for fc in tracker.get_most_used_features()] == ["b", "a", "c"]

    def test_limit(self):
        tracker, _ = _tracker()
        for i in range(15):
            tracker.record_feature_usage(f"p{i}", i + 1)
        assert len(tracker.get_most_used_features()) == 10
        top = tracker.get_most_used_features(3)
        assert [fc.feature for fc in top] == ["p14", "p13", "p12"]

    def test_zero_limit(self):
        tracker, _ = _tracker()
        tracker.record_feature_usage("var", 1)
        assert tracker.get_most_used_features(0) == []


class TestSessionStats:

    def test_empty_session(self):
        tracker, _ = _tracker()
        stats = tracker.get_session_stats()
        assert stats.duration_minutes == 0
        assert stats.average_issues_per_file == 0

    def test_average_one_decimal(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 3)
        tracker.record_analysis("b.js", 4)
        tracker.record_analysis("c.js", 4)
        assert tracker.get_session_stats().average_issues_per_file == 3.7

    def test_duration_rounds_minutes(self):
        tracker, clock = _tracker()
        clock.advance(minutes=4, seconds=30)
        assert tracker.get_session_stats().duration_minutes == 5


class TestLifecycle:

    def test_reset_clears_everything(self):
        tracker, clock = _tracker()
        tracker.record_analysis("a.js", 3)
        tracker.record_fix("let-const")
        tracker.record_feature_usage("var", 3)
        clock.advance(minutes=10)
        tracker.reset()
        m = tracker.get_metrics()
        assert m.files_analyzed == 0
        assert m.issues_found == 0
        assert m.fixes_applied == 0
        assert dict(m.feature_usage) == {}
        assert m.modernization_progress == 0
        assert m.session_start == clock.current
        assert tracker.get_fix_history() == []

    def test_sample_data(self):
        tracker, _ = _tracker()
        tracker.load_sample_data(random.Random(42))
        m = tracker.get_metrics()
        assert m.files_analyzed == len(SAMPLE_FILES)
        assert m.fixes_applied == len(SAMPLE_FIXES)
        assert set(m.feature_usage) == set(SAMPLE_PATTERNS)
        assert all(1 <= r.issues_count <= 5 for r in m.analysis_history)
        assert all(1 <= c <= 8 for c in m.feature_usage.values())

    def test_sample_data_languages(self):
        tracker, _ = _tracker()
        tracker.load_sample_data(random.Random(1))
        languages = {r.file_name: r.language for r in tracker.get_analysis_history()}
        assert languages["app.js"] == "javascript"
        assert languages["main.css"] == "css"
        assert languages["index.html"] == "html"


class TestSnapshot:

    def test_export_shape(self):
        tracker, _ = _tracker()
        tracker.record_analysis("a.js", 4, "javascript")
        data = json.loads(tracker.export_snapshot())
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["files_analyzed"] == 1
        assert data["session_stats"]["average_issues_per_file"] == 4
        assert "export_timestamp" in data

    def test_round_trip(self):
        tracker, _ = _tracker()
        tracker.record_analysis("src/a.js", 4, "javascript")
        tracker.record_fix("let-const", "src/a.js")
        tracker.record_feature_usage("var", 3)
        restored = load_snapshot(tracker.export_snapshot())
        assert restored == tracker.get_metrics()

    def test_rejects_invalid_json(self):
        with pytest.raises(SnapshotError):
            load_snapshot("{not json")

    def test_rejects_missing_schema(self):
        with pytest.raises(SnapshotError):
            load_snapshot(json.dumps({"files_analyzed": 1}))

    def test_rejects_malformed_fields(self):
        with pytest.raises(SnapshotError):
            load_snapshot(json.dumps({"schema_version": SCHEMA_VERSION, "files_analyzed": 1}))
