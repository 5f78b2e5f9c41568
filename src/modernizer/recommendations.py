"""Recommendation rules derived from session metrics.

Pure computation over an ``AdoptionMetrics`` snapshot. Rules are applied in a
fixed order; the first recommendation is the one surfaced as "top action".
"""

from __future__ import annotations

from dataclasses import dataclass

from .metrics import AdoptionMetrics, js_round, most_used_features

LOW_FIX_RATE_THRESHOLD = 50   # percent fixed below which fixes are urged
HIGH_DENSITY_THRESHOLD = 2    # average issues per file above which density is flagged

BASELINE_DOCS_URL = "https://web.dev/baseline/"


@dataclass(frozen=True)
class Recommendation:
    """An advisory shown on the dashboard and in reports."""

    id: str
    type: str  # "priority" | "warning" | "suggestion" | "info"
    title: str
    description: str
    action: str
    actionable: bool
    impact: str  # "High" | "Medium" | "Low"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "action": self.action,
            "actionable": self.actionable,
            "impact": self.impact,
        }


BASELINE_ADOPTION = Recommendation(
    id="baseline_adoption",
    type="suggestion",
    title="Adopt More Baseline Features",
    description=(
        "850+ web features are widely available (Baseline High). Consider using modern APIs "
        "and CSS properties that are safe across all browsers."
    ),
    action="Explore Baseline Features",
    actionable=True,
    impact="Medium",
)

BROWSER_COMPATIBILITY = Recommendation(
    id="browser_compatibility",
    type="info",
    title="Excellent Browser Support Available",
    description=(
        "Chrome (82%), Firefox (77%), Safari (71%), Edge (78%) - Most modern features have "
        "strong cross-browser support."
    ),
    action="View Browser Matrix",
    actionable=False,
    impact="Low",
)


def derive_recommendations(metrics: AdoptionMetrics) -> list[Recommendation]:
    """Build the ordered recommendation list for a metrics snapshot."""
    recommendations: list[Recommendation] = []

    if metrics.issues_found > 0:
        fix_rate = js_round(metrics.fixes_applied / metrics.issues_found * 100)
        if fix_rate < LOW_FIX_RATE_THRESHOLD:
            recommendations.append(Recommendation(
                id="low_fix_rate",
                type="priority",
                title="Apply Available Quick Fixes",
                description=(
                    f"You have {metrics.issues_found} issues but only {fix_rate}% fixed. "
                    "Use your editor's quick fix actions (Ctrl+.) to modernize your code faster."
                ),
                action="Apply Quick Fixes",
                actionable=True,
                impact="High",
            ))

    if metrics.files_analyzed > 0:
        avg_issues = js_round(metrics.issues_found / metrics.files_analyzed)
        if avg_issues > HIGH_DENSITY_THRESHOLD:
            recommendations.append(Recommendation(
                id="high_density",
                type="warning",
                title="Focus on High-Impact Files",
                description=(
                    f"Average {avg_issues} legacy patterns per file. Prioritize files with the "
                    "most issues for maximum impact."
                ),
                action="View File Analysis",
                actionable=True,
                impact="Medium",
            ))

    most_used = most_used_features(metrics.feature_usage)
    if most_used:
        top = most_used[0]
        recommendations.append(Recommendation(
            id="common_pattern",
            type="info",
            title=f'Modernize "{top.feature}" Usage',
            description=f'"{top.feature}" appears {top.count} times. This is your biggest modernization opportunity.',
            action="View Alternatives",
            actionable=True,
            impact="High",
        ))

    recommendations.append(BASELINE_ADOPTION)
    recommendations.append(BROWSER_COMPATIBILITY)
    return recommendations


def top_recommendation(recommendations: list[Recommendation]) -> Recommendation | None:
    return recommendations[0] if recommendations else None


def count_by_type(recommendations: list[Recommendation], rec_type: str) -> int:
    return sum(1 for r in recommendations if r.type == rec_type)
