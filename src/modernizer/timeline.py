"""Five-phase modernization timeline derived from session metrics."""

from __future__ import annotations

from dataclasses import dataclass

from .metrics import AdoptionMetrics, js_round

PHASE_NAMES = ("Assessment", "Planning", "Implementation", "Testing", "Deployment")

TESTING_START_RATE = 80  # completion percent at which testing begins
TESTING_PROGRESS = 60


@dataclass(frozen=True)
class TimelinePhase:
    """One stage of the modernization plan."""

    phase: str
    status: str  # "pending" | "in-progress" | "completed" | "ready"
    progress: int
    description: str
    duration: str
    priority: str
    tasks: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "phase": self.phase,
            "status": self.status,
            "progress": self.progress,
            "description": self.description,
            "duration": self.duration,
            "priority": self.priority,
            "tasks": list(self.tasks),
        }


def completion_rate(metrics: AdoptionMetrics) -> int:
    """Percent of found issues fixed, unclamped; 0 when nothing was found."""
    if metrics.issues_found == 0:
        return 0
    return js_round(metrics.fixes_applied / metrics.issues_found * 100)


def derive_timeline(metrics: AdoptionMetrics) -> list[TimelinePhase]:
    """Build the timeline, always in ``PHASE_NAMES`` order."""
    rate = completion_rate(metrics)
    assessed = metrics.files_analyzed > 0
    planned = metrics.issues_found > 0

    if rate >= 100:
        implementation_status = "completed"
    elif rate > 0:
        implementation_status = "in-progress"
    else:
        implementation_status = "pending"

    return [
        TimelinePhase(
            phase="Assessment",
            status="completed" if assessed else "pending",
            progress=100 if assessed else 0,
            description=(
                f"Analyzed {metrics.files_analyzed} files and identified "
                f"{metrics.issues_found} modernization opportunities"
            ),
            duration="1-2 days",
            priority="high",
            tasks=(
                "Scan codebase for legacy patterns",
                "Identify browser compatibility gaps",
                "Catalog modernization opportunities",
                "Generate baseline compatibility report",
            ),
        ),
        TimelinePhase(
            phase="Planning",
            status="completed" if planned else "pending",
            progress=100 if planned else 0,
            description=f"Prioritized {metrics.issues_found} issues by impact and Baseline availability",
            duration="2-3 days",
            priority="high",
            tasks=(
                "Prioritize issues by impact",
                "Research modern alternatives",
                "Plan migration strategy",
                "Set up testing framework",
            ),
        ),
        TimelinePhase(
            phase="Implementation",
            status=implementation_status,
            progress=min(rate, 100),
            description=(
                f"Applied {metrics.fixes_applied} of {metrics.issues_found} modernizations "
                f"({rate}% complete)"
            ),
            duration="1-2 weeks",
            priority="medium",
            tasks=(
                "Replace var with let/const",
                "Migrate XMLHttpRequest to Fetch",
                "Convert float layouts to Flexbox",
                "Update semantic HTML structure",
            ),
        ),
        TimelinePhase(
            phase="Testing",
            status="in-progress" if rate >= TESTING_START_RATE else "pending",
            progress=TESTING_PROGRESS if rate >= TESTING_START_RATE else 0,
            description=(
                f"Cross-browser testing and performance validation "
                f"({metrics.fixes_applied} fixes, {rate}% complete)"
            ),
            duration="3-5 days",
            priority="high",
            tasks=(
                "Test across target browsers",
                "Validate performance improvements",
                "Check accessibility compliance",
                "Verify responsive behavior",
            ),
        ),
        TimelinePhase(
            phase="Deployment",
            status="ready" if rate >= 100 else "pending",
            progress=100 if rate >= 100 else 0,
            description=(
                f"Production deployment and monitoring "
                f"({metrics.files_analyzed} files, {rate}% complete)"
            ),
            duration="1-2 days",
            priority="low",
            tasks=(
                "Deploy to staging environment",
                "Run automated tests",
                "Monitor performance metrics",
                "Deploy to production",
            ),
        ),
    ]
