"""Tests for Markdown reports and the JSON dashboard export."""

import json
import re

import pytest

from modernizer.catalog import FeatureCatalog
from modernizer.export import (
    export_dashboard_json,
    get_export_filename,
    render_comprehensive_report,
    render_summary_report,
    render_timeline_report,
)
from modernizer.metrics import MetricsTracker


@pytest.fixture
def tracker():
    tracker = MetricsTracker()
    tracker.record_analysis("src/app.js", 4, "javascript")
    tracker.record_analysis("src/main.css", 2, "css")
    tracker.record_feature_usage("var", 5)
    tracker.record_feature_usage("float", 2)
    tracker.record_fix("let-const", "src/app.js")
    return tracker


class TestSummaryReport:

    def test_contents(self, tracker):
        report = render_summary_report(tracker)
        assert report.startswith("# 🚀 Baseline Modernization Report")
        assert "- **Files Analyzed**: 2" in report
        assert "- **Issues Identified**: 6" in report
        assert "- **Modernization Progress**: 17%" in report
        assert "- **Most Common Pattern**: var (5 occurrences)" in report
        assert "1. **var**: 5 occurrences" in report
        assert "2. **float**: 2 occurrences" in report

    def test_empty_session(self):
        report = render_summary_report(MetricsTracker())
        assert "- **Most Common Pattern**: None (0 occurrences)" in report

    def test_writes_file(self, tracker, tmp_path):
        out = tmp_path / "summary.md"
        content = render_summary_report(tracker, out)
        assert out.read_text(encoding="utf-8") == content


class TestComprehensiveReport:

    def test_contents(self, tracker):
        report = render_comprehensive_report(tracker, FeatureCatalog())
        assert "| Files Analyzed | 2 | ✅ |" in report
        assert "| Progress | 17% | 📊 |" in report
        assert "| Avg Issues/File | 3.0 | ⚠️ |" in report
        assert "1. **var** - 5 occurrences" in report
        assert "**Widely Available (High)**: 8" in report
        assert "**Newly Available (Low)**: 2" in report
        assert "| Chrome | 980+ | 82% |" in report

    def test_history_most_recent_first(self, tracker):
        report = render_comprehensive_report(tracker, FeatureCatalog())
        assert report.index("1. main.css (css)") < report.index("2. app.js (javascript)")

    def test_no_patterns(self):
        report = render_comprehensive_report(MetricsTracker(), FeatureCatalog())
        assert "*No patterns detected yet*" in report


class TestTimelineReport:

    def test_contents(self, tracker):
        report = render_timeline_report(tracker)
        assert "### 1. Assessment ✅" in report
        assert "### 3. Implementation 🔄" in report
        assert "- **Status**: IN-PROGRESS" in report
        assert "- **Progress**: 17%" in report
        assert "  - Replace var with let/const" in report

    def test_top_three_recommendations(self, tracker):
        report = render_timeline_report(tracker)
        section = report.split("## 💡 Priority Recommendations")[1]
        assert section.count("**Impact**") == 3
        assert "Apply Available Quick Fixes 🔥" in section


class TestDashboardJson:

    def test_shape(self, tracker):
        data = json.loads(export_dashboard_json(tracker, FeatureCatalog()))
        assert set(data) == {
            "timestamp",
            "metrics",
            "baseline_statistics",
            "recommendations",
            "browser_compatibility",
            "supported_web_features",
            "summary",
        }
        assert data["metrics"]["files_analyzed"] == 2
        assert data["metrics"]["schema_version"] == "1.0.0"
        assert data["browser_compatibility"]["edge"]["percentage"] == 78

    def test_summary(self, tracker):
        summary = json.loads(export_dashboard_json(tracker, FeatureCatalog()))["summary"]
        assert summary == {
            "total_analyzed": 2,
            "issues_found": 6,
            "modernization_progress": "17%",
            "top_recommendation": "Apply Available Quick Fixes",
        }

    def test_writes_file(self, tracker, tmp_path):
        out = tmp_path / "metrics.json"
        export_dashboard_json(tracker, FeatureCatalog(), out)
        assert json.loads(out.read_text(encoding="utf-8"))["summary"]["issues_found"] == 6


class TestExportFilename:

    def test_markdown(self):
        assert re.fullmatch(r"modernizer_timeline_\d{8}_\d{6}\.md", get_export_filename("timeline", "markdown"))

    def test_json(self):
        assert re.fullmatch(r"modernizer_metrics_\d{8}_\d{6}\.json", get_export_filename("metrics", "json"))
