"""Export session metrics to Markdown reports and JSON."""

import json
from datetime import datetime
from pathlib import Path

from .catalog import BROWSER_SUPPORT_STATS, FeatureCatalog
from .errors import ExportError
from .metrics import MetricsTracker
from .recommendations import derive_recommendations, top_recommendation
from .timeline import derive_timeline

STATUS_MARKS = {"completed": "✅", "in-progress": "🔄", "ready": "🎯", "pending": "⏳"}
TYPE_MARKS = {"priority": "🔥", "warning": "⚠️", "suggestion": "💡", "info": "ℹ️"}


def _write(content: str, output_path: Path | None) -> str:
    if output_path:
        try:
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Cannot write {output_path}: {e}") from e
    return content


def render_summary_report(tracker: MetricsTracker, output_path: Path | None = None) -> str:
    """Short modernization report: executive summary and top patterns."""
    metrics = tracker.get_metrics()
    most_used = tracker.get_most_used_features()
    top = most_used[0] if most_used else None

    lines = [
        "# 🚀 Baseline Modernization Report",
        f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## 📊 Executive Summary",
        f"- **Files Analyzed**: {metrics.files_analyzed}",
        f"- **Issues Identified**: {metrics.issues_found}",
        f"- **Modernization Progress**: {metrics.modernization_progress}%",
        f"- **Most Common Pattern**: {top.feature if top else 'None'} ({top.count if top else 0} occurrences)",
        "",
        "## 🎯 Top Legacy Patterns",
    ]
    for i, fc in enumerate(most_used[:5], 1):
        lines.append(f"{i}. **{fc.feature}**: {fc.count} occurrences")
    lines.extend([
        "",
        "## 💡 Recommendations",
        "1. **Prioritize High-Frequency Patterns**: Focus on the most commonly used legacy features first",
        "2. **Use Quick Fixes**: Apply your editor's quick fix actions (Ctrl+.) on highlighted issues",
        "3. **Gradual Migration**: Modernize one pattern at a time to minimize risk",
        "4. **Test Thoroughly**: Validate changes across target browsers",
        "",
        "## 🌐 Browser Compatibility",
        'All suggested modernizations use Baseline "widely available" features that are supported across:',
        "- Chrome 29+, Firefox 28+, Safari 9+, Edge 12+ (for layout features)",
        "- Chrome 42+, Firefox 39+, Safari 10.1+, Edge 14+ (for API features)",
        "- Chrome 49+, Firefox 36+, Safari 10+, Edge 12+ (for JavaScript features)",
        "",
        "---",
        "*Generated by Baseline Modernizer*",
    ])
    return _write("\n".join(lines), output_path)


def render_comprehensive_report(
    tracker: MetricsTracker,
    catalog: FeatureCatalog,
    output_path: Path | None = None,
) -> str:
    """Full analysis document with metrics table, history and browser matrix."""
    metrics = tracker.get_metrics()
    stats = tracker.get_session_stats()
    most_used = tracker.get_most_used_features()
    features = catalog.all_features()
    high = catalog.features_by_baseline("high")
    low = catalog.features_by_baseline("low")

    progress = metrics.modernization_progress
    progress_mark = "🎉" if progress > 80 else "📈" if progress > 50 else "📊"

    lines = [
        "# 📊 Comprehensive Baseline Modernization Analysis",
        f"**Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Session Duration**: {stats.duration_minutes} minutes",
        f"**Analysis Scope**: {metrics.files_analyzed} files",
        "",
        "## 🎯 Key Metrics",
        "| Metric | Value | Status |",
        "|--------|-------|--------|",
        f"| Files Analyzed | {metrics.files_analyzed} | {'✅' if metrics.files_analyzed > 0 else '⏳'} |",
        f"| Issues Found | {metrics.issues_found} | {'🎉' if metrics.issues_found == 0 else '🔍'} |",
        f"| Fixes Applied | {metrics.fixes_applied} | {'✅' if metrics.fixes_applied > 0 else '⏳'} |",
        f"| Progress | {progress}% | {progress_mark} |",
        f"| Avg Issues/File | {stats.average_issues_per_file} | {'✅' if stats.average_issues_per_file < 3 else '⚠️'} |",
        "",
        "## 🔧 Most Used Legacy Patterns",
    ]
    if most_used:
        lines.extend(f"{i}. **{fc.feature}** - {fc.count} occurrences" for i, fc in enumerate(most_used, 1))
    else:
        lines.append("*No patterns detected yet*")

    lines.extend([
        "",
        "## ✨ Available Modern Alternatives",
        f"**Total Baseline Features**: {len(features)}",
        f"**Widely Available (High)**: {len(high)}",
        f"**Newly Available (Low)**: {len(low)}",
        "",
        "### 🎯 High-Priority Recommendations",
    ])
    lines.extend(f"- **{f.name}**: {f.description}" for f in high[:5])

    lines.extend(["", "## 📈 Analysis History"])
    for i, record in enumerate(tracker.get_analysis_history()[:10], 1):
        lines.append(
            f"{i}. {record.file_name} ({record.language}) - {record.issues_count} issues - "
            f"{record.timestamp.strftime('%H:%M:%S')}"
        )

    lines.extend([
        "",
        "## 🌐 Browser Support Matrix",
        "| Browser | Supported Features | Percentage |",
        "|---------|-------------------|------------|",
    ])
    for browser, row in BROWSER_SUPPORT_STATS.items():
        lines.append(f"| {browser.capitalize()} | {row['supported']}+ | {row['percentage']}% |")

    lines.extend([
        "",
        "## 🚀 Next Steps",
        "1. **Focus on High-Count Patterns**: Address the most frequently occurring legacy patterns first",
        "2. **Use Interactive Dashboard**: Explore the dashboard for detailed insights and recommendations",
        "3. **Apply Quick Fixes**: Use your editor's quick fix actions for automated modernization",
        "4. **Validate Changes**: Test modernized code across target browsers",
        "5. **Monitor Progress**: Track improvements using the dashboard metrics",
        "",
        "---",
        "*This report was generated by Baseline Modernizer*",
    ])
    return _write("\n".join(lines), output_path)


def render_timeline_report(tracker: MetricsTracker, output_path: Path | None = None) -> str:
    """Timeline phases plus the top three recommendations."""
    metrics = tracker.get_metrics()
    timeline = derive_timeline(metrics)
    recommendations = derive_recommendations(metrics)

    lines = [
        "# 🚀 Modernization Timeline Report",
        f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "## 📊 Executive Summary",
        "",
        f"- **Files Analyzed**: {metrics.files_analyzed}",
        f"- **Issues Identified**: {metrics.issues_found}",
        f"- **Fixes Applied**: {metrics.fixes_applied}",
        f"- **Overall Progress**: {metrics.modernization_progress}%",
        "",
        "## 📅 Detailed Timeline",
        "",
    ]
    for i, phase in enumerate(timeline, 1):
        lines.append(f"### {i}. {phase.phase} {STATUS_MARKS.get(phase.status, '⏳')}")
        lines.append(f"- **Status**: {phase.status.upper()}")
        lines.append(f"- **Progress**: {phase.progress}%")
        lines.append(f"- **Duration**: {phase.duration}")
        lines.append(f"- **Priority**: {phase.priority.upper()}")
        lines.append(f"- **Description**: {phase.description}")
        lines.append("- **Key Tasks**:")
        lines.extend(f"  - {task}" for task in phase.tasks)
        lines.append("")

    lines.append("## 💡 Priority Recommendations")
    lines.append("")
    for i, rec in enumerate(recommendations[:3], 1):
        lines.append(f"### {i}. {rec.title} {TYPE_MARKS.get(rec.type, 'ℹ️')}")
        lines.append(f"**Impact**: {rec.impact}")
        lines.append(f"**Description**: {rec.description}")
        lines.append(f"**Recommended Action**: {rec.action}")
        lines.append("")

    return _write("\n".join(lines), output_path)


def export_dashboard_json(
    tracker: MetricsTracker,
    catalog: FeatureCatalog,
    output_path: Path | None = None,
) -> str:
    """Everything the dashboard shows, as one JSON document for team reporting."""
    snapshot = json.loads(tracker.export_snapshot())
    recommendations = derive_recommendations(tracker.get_metrics())
    top = top_recommendation(recommendations)

    data = {
        "timestamp": datetime.now().isoformat(),
        "metrics": snapshot,
        "baseline_statistics": catalog.baseline_statistics(),
        "recommendations": [r.to_dict() for r in recommendations],
        "browser_compatibility": {k: dict(v) for k, v in BROWSER_SUPPORT_STATS.items()},
        "supported_web_features": catalog.supported_features(),
        "summary": {
            "total_analyzed": snapshot["files_analyzed"],
            "issues_found": snapshot["issues_found"],
            "modernization_progress": f"{snapshot['modernization_progress']}%",
            "top_recommendation": top.title if top else "None",
        },
    }
    content = json.dumps(data, indent=2)
    return _write(content, output_path)


def get_export_filename(kind: str, format: str) -> str:
    """Generate a timestamped export filename, e.g. ``modernizer_timeline_20250101_120000.md``."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    ext = "json" if format == "json" else "md"
    return f"modernizer_{kind}_{timestamp}.{ext}"
