"""Baseline feature catalog.

Static reference data: which modern web features exist, how widely they are
supported, and which of them replace a given legacy pattern. The catalog is
built once and is read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping, Sequence, Union

BaselineStatus = Union[Literal["high", "low"], Literal[False]]

BROWSERS = MappingProxyType({
    "chrome": {"name": "Chrome", "icon": "🌐"},
    "firefox": {"name": "Firefox", "icon": "🦊"},
    "safari": {"name": "Safari", "icon": "🧭"},
    "edge": {"name": "Edge", "icon": "🔷"},
})

# Illustrative dashboard figures, not measured
CATALOG_TOTAL = 1200
BROWSER_SUPPORT_STATS = MappingProxyType({
    "chrome": {"supported": 980, "total": CATALOG_TOTAL, "percentage": 82},
    "firefox": {"supported": 920, "total": CATALOG_TOTAL, "percentage": 77},
    "safari": {"supported": 850, "total": CATALOG_TOTAL, "percentage": 71},
    "edge": {"supported": 940, "total": CATALOG_TOTAL, "percentage": 78},
})


@dataclass(frozen=True)
class BrowserDetail:
    version: str
    status: str  # "supported" | "partial" | "unsupported"
    since: str | None = None


@dataclass(frozen=True)
class FeatureInfo:
    """A web platform feature and its Baseline status."""

    id: str
    name: str
    description: str
    group: str
    category: str
    baseline: BaselineStatus
    support: Mapping[str, str]
    compat_features: tuple[str, ...] = ()
    baseline_high_date: str | None = None
    baseline_low_date: str | None = None
    browser_details: Mapping[str, BrowserDetail] = field(default_factory=lambda: MappingProxyType({}))
    spec: str | None = None
    caniuse: str | None = None

    @property
    def since(self) -> str | None:
        """Year-month the feature reached its current Baseline status."""
        date = self.baseline_high_date or self.baseline_low_date
        return date[:7] if date else None


@dataclass(frozen=True)
class ModernAlternative:
    """A modern replacement for a legacy pattern."""

    feature: str
    replacement: str
    description: str
    example: str
    baseline_status: BaselineStatus
    browser_support: Mapping[str, str]
    migration_guide: str | None = None
    benefits: tuple[str, ...] = ()
    caveats: tuple[str, ...] = ()


def _support(chrome: str, firefox: str, safari: str, edge: str) -> Mapping[str, str]:
    return MappingProxyType({"chrome": chrome, "firefox": firefox, "safari": safari, "edge": edge})


def _details(**since: tuple[str, str]) -> Mapping[str, BrowserDetail]:
    return MappingProxyType({
        browser: BrowserDetail(version=version, status="supported", since=date)
        for browser, (version, date) in since.items()
    })


_FEATURES = (
    FeatureInfo(
        id="flexbox",
        name="CSS Flexbox",
        description="A layout method for arranging items in rows or columns with flexible sizing",
        group="css-layout",
        category="CSS",
        baseline="high",
        baseline_high_date="2017-03-01",
        support=_support("29", "28", "9", "12"),
        compat_features=("css.properties.display.flex", "css.properties.flex-direction"),
        browser_details=_details(
            chrome=("29", "2013-08"), firefox=("28", "2014-03"),
            safari=("9", "2015-09"), edge=("12", "2015-07"),
        ),
    ),
    FeatureInfo(
        id="fetch",
        name="Fetch API",
        description="Modern promise-based API for making HTTP requests",
        group="web-api",
        category="JavaScript",
        baseline="high",
        baseline_high_date="2017-04-01",
        support=_support("42", "39", "10.1", "14"),
        compat_features=("api.fetch", "api.Request", "api.Response"),
        browser_details=_details(
            chrome=("42", "2015-04"), firefox=("39", "2015-06"),
            safari=("10.1", "2017-03"), edge=("14", "2016-08"),
        ),
    ),
    FeatureInfo(
        id="let-const",
        name="let and const declarations",
        description="Block-scoped variable declarations with let and const keywords",
        group="javascript-syntax",
        category="JavaScript",
        baseline="high",
        baseline_high_date="2016-07-01",
        support=_support("49", "36", "10", "12"),
        compat_features=("javascript.statements.let", "javascript.statements.const"),
        browser_details=_details(
            chrome=("49", "2016-03"), firefox=("36", "2015-02"),
            safari=("10", "2016-09"), edge=("12", "2015-07"),
        ),
    ),
    FeatureInfo(
        id="grid",
        name="CSS Grid Layout",
        description="Two-dimensional layout system for complex grid-based designs",
        group="css-layout",
        category="CSS",
        baseline="high",
        baseline_high_date="2020-01-01",
        support=_support("57", "52", "10.1", "16"),
        compat_features=("css.properties.display.grid", "css.properties.grid-template-columns"),
        browser_details=_details(
            chrome=("57", "2017-03"), firefox=("52", "2017-03"),
            safari=("10.1", "2017-03"), edge=("16", "2017-10"),
        ),
    ),
    FeatureInfo(
        id="arrow-functions",
        name="Arrow Functions",
        description="Concise function syntax with lexical this binding",
        group="javascript-syntax",
        category="JavaScript",
        baseline="high",
        baseline_high_date="2016-07-01",
        support=_support("45", "22", "10", "12"),
        compat_features=("javascript.functions.arrow_functions",),
        browser_details=_details(
            chrome=("45", "2015-09"), firefox=("22", "2013-06"),
            safari=("10", "2016-09"), edge=("12", "2015-07"),
        ),
    ),
    FeatureInfo(
        id="semantic-elements",
        name="HTML5 Semantic Elements",
        description="Meaningful HTML elements like header, nav, main, section, article, aside, footer",
        group="html-elements",
        category="HTML",
        baseline="high",
        baseline_high_date="2014-01-01",
        support=_support("5", "4", "4.1", "12"),
        compat_features=("html.elements.header", "html.elements.nav", "html.elements.main"),
        browser_details=_details(
            chrome=("5", "2010-05"), firefox=("4", "2011-03"),
            safari=("4.1", "2010-06"), edge=("12", "2015-07"),
        ),
    ),
    FeatureInfo(
        id="custom-properties",
        name="CSS Custom Properties (Variables)",
        description="CSS variables for creating reusable values throughout stylesheets",
        group="css-syntax",
        category="CSS",
        baseline="high",
        baseline_high_date="2018-04-01",
        support=_support("49", "31", "9.1", "16"),
        compat_features=("css.properties.custom-property",),
        browser_details=_details(
            chrome=("49", "2016-03"), firefox=("31", "2014-07"),
            safari=("9.1", "2016-03"), edge=("16", "2017-10"),
        ),
    ),
    FeatureInfo(
        id="template-literals",
        name="Template Literals",
        description="Enhanced string literals with embedded expressions using backticks",
        group="javascript-syntax",
        category="JavaScript",
        baseline="high",
        baseline_high_date="2016-07-01",
        support=_support("41", "34", "9", "12"),
        compat_features=("javascript.grammar.template_literals",),
        browser_details=_details(
            chrome=("41", "2015-03"), firefox=("34", "2014-12"),
            safari=("9", "2015-09"), edge=("12", "2015-07"),
        ),
    ),
    FeatureInfo(
        id="object-spread",
        name="Object Spread Syntax",
        description="Spread properties in object literals for easy object composition",
        group="javascript-syntax",
        category="JavaScript",
        baseline="low",
        baseline_low_date="2024-03-01",
        support=_support("60", "55", "11.1", "79"),
        compat_features=("javascript.operators.spread.spread_in_object_literals",),
        browser_details=_details(
            chrome=("60", "2017-07"), firefox=("55", "2017-08"),
            safari=("11.1", "2018-03"), edge=("79", "2020-01"),
        ),
    ),
    FeatureInfo(
        id="container-queries",
        name="CSS Container Queries",
        description="Style elements based on the size of their containing element",
        group="css-layout",
        category="CSS",
        baseline="low",
        baseline_low_date="2024-02-01",
        support=_support("105", "110", "16", "105"),
        compat_features=("css.at-rules.container", "css.properties.container-type"),
        browser_details=_details(
            chrome=("105", "2022-08"), firefox=("110", "2023-02"),
            safari=("16", "2022-09"), edge=("105", "2022-08"),
        ),
    ),
)

_ALTERNATIVES: dict[str, tuple[ModernAlternative, ...]] = {
    "var": (
        ModernAlternative(
            feature="let-const",
            replacement="let/const",
            description="Use let for variables that change, const for constants. Better scoping than var.",
            example='const API_URL = "https://api.example.com"; let userCount = 0;',
            baseline_status="high",
            browser_support=_support("49", "36", "10", "12"),
            migration_guide="Replace var with const for values that don't change, let for variables",
            benefits=("Block scoping", "Temporal dead zone", "No hoisting confusion", "Prevent accidental reassignment"),
            caveats=("const requires initialization", "Different hoisting behavior"),
        ),
    ),
    "XMLHttpRequest": (
        ModernAlternative(
            feature="fetch",
            replacement="Fetch API",
            description="Modern promise-based HTTP client with better error handling and cleaner syntax",
            example='fetch("/api/users").then(response => response.json()).then(users => console.log(users))',
            baseline_status="high",
            browser_support=_support("42", "39", "10.1", "14"),
            migration_guide="Replace XMLHttpRequest with fetch(), handle promises instead of callbacks",
            benefits=("Promise-based", "Cleaner syntax", "Better error handling", "Streaming support"),
            caveats=("Different error handling", "No automatic request/response timeout", "CORS restrictions"),
        ),
    ),
    "float": (
        ModernAlternative(
            feature="flexbox",
            replacement="CSS Flexbox",
            description="Modern layout method for one-dimensional layouts with flexible items",
            example=".container { display: flex; justify-content: space-between; align-items: center; }",
            baseline_status="high",
            browser_support=_support("29", "28", "9", "12"),
            migration_guide="Replace float-based layouts with flex containers",
            benefits=("No clearfix needed", "Better alignment", "Responsive by default", "Flexible spacing"),
            caveats=("One-dimensional layout", "Different mental model", "IE10 has bugs"),
        ),
        ModernAlternative(
            feature="grid",
            replacement="CSS Grid",
            description="Two-dimensional layout system for complex grid-based designs",
            example=".grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 20px; }",
            baseline_status="high",
            browser_support=_support("57", "52", "10.1", "16"),
            migration_guide="Use Grid for two-dimensional layouts, combine with flexbox",
            benefits=("Two-dimensional control", "Responsive grids", "Powerful alignment", "No framework needed"),
            caveats=("Overkill for simple layouts", "IE11 has old implementation"),
        ),
    ),
    "function": (
        ModernAlternative(
            feature="arrow-functions",
            replacement="Arrow Functions",
            description="Concise function syntax with lexical this binding, perfect for callbacks",
            example="const users = data.map(item => ({ id: item.id, name: item.name }));",
            baseline_status="high",
            browser_support=_support("45", "22", "10", "12"),
            migration_guide="Replace function expressions with arrow functions, keep function declarations",
            benefits=("Shorter syntax", "Lexical this binding", "No arguments object", "Cannot be used as constructors"),
            caveats=("No this binding", "Cannot be hoisted", "No arguments object"),
        ),
    ),
    "<div>": (
        ModernAlternative(
            feature="semantic-elements",
            replacement="Semantic HTML5 Elements",
            description="Use meaningful HTML elements that describe content structure and purpose",
            example="<header>, <nav>, <main>, <section>, <article>, <aside>, <footer>",
            baseline_status="high",
            browser_support=_support("5", "4", "4.1", "12"),
            migration_guide="Replace generic divs with appropriate semantic elements based on content",
            benefits=("Better SEO", "Improved accessibility", "Clearer document structure", "Screen reader support"),
            caveats=("CSS selectors may need updates", "Different default styling"),
        ),
    ),
    "<b><i><u>": (
        ModernAlternative(
            feature="semantic-formatting",
            replacement="Semantic Text Elements",
            description="Use elements that convey meaning, not just appearance",
            example="<strong> for importance, <em> for emphasis, <mark> for highlighting",
            baseline_status="high",
            browser_support=_support("1", "1", "1", "12"),
            migration_guide="Replace presentational elements with semantic alternatives",
            benefits=("Better semantics", "Accessibility improvements", "Future-proof markup"),
            caveats=("Default styling may differ", "CSS updates needed"),
        ),
    ),
}


class FeatureCatalog:
    """Read-only lookup over the built-in feature and alternative tables."""

    def __init__(
        self,
        features: Sequence[FeatureInfo] = _FEATURES,
        alternatives: Mapping[str, Sequence[ModernAlternative]] = _ALTERNATIVES,
    ) -> None:
        self._features = tuple(features)
        self._by_id = MappingProxyType({f.id: f for f in self._features})
        self._alternatives = MappingProxyType({k: tuple(v) for k, v in alternatives.items()})

    @property
    def patterns(self) -> tuple[str, ...]:
        """Legacy pattern ids that have known alternatives."""
        return tuple(self._alternatives)

    def all_features(self) -> list[FeatureInfo]:
        return list(self._features)

    def features_by_baseline(self, status: BaselineStatus) -> list[FeatureInfo]:
        return [f for f in self._features if f.baseline == status]

    def lookup_feature(self, feature_id: str) -> FeatureInfo | None:
        """Find a feature by id, falling back to a case-insensitive name match."""
        feature = self._by_id.get(feature_id)
        if feature is not None:
            return feature
        needle = feature_id.lower()
        for f in self._features:
            if needle in f.name.lower():
                return f
        return None

    def browser_support(self, feature_id: str) -> Mapping[str, str]:
        feature = self.lookup_feature(feature_id)
        return feature.support if feature else MappingProxyType({})

    def alternatives_for(self, pattern_id: str) -> list[ModernAlternative]:
        """Modern replacements for a legacy pattern.

        An exact key wins. Otherwise every entry whose key contains, or is
        contained in, ``pattern_id`` contributes, and repeated alternatives
        (same ``feature`` id) are listed once.
        """
        exact = self._alternatives.get(pattern_id)
        if exact is not None:
            return list(exact)

        matches: list[ModernAlternative] = []
        seen: set[str] = set()
        for pattern, alternatives in self._alternatives.items():
            if pattern in pattern_id or pattern_id in pattern:
                for alt in alternatives:
                    if alt.feature not in seen:
                        seen.add(alt.feature)
                        matches.append(alt)
        return matches

    def search(self, query: str) -> list[FeatureInfo]:
        """Case-insensitive substring search over name, description, id and category."""
        q = query.lower()
        return [
            f for f in self._features
            if q in f.name.lower()
            or q in f.description.lower()
            or q in f.id.lower()
            or q in f.category.lower()
        ]

    def baseline_score(self, pattern_counts: Sequence[int], alternatives: Sequence[ModernAlternative]) -> int:
        """Score a file from 0-100: fewer legacy patterns without a widely available fix is better."""
        total = sum(pattern_counts)
        if total == 0:
            return 100
        modern = sum(1 for alt in alternatives if alt.baseline_status == "high")
        return max(0, 100 - (total - modern) * 10)

    def baseline_statistics(self) -> dict[str, int]:
        """Headline catalog numbers for the dashboard."""
        return {
            "total": max(len(self._features), CATALOG_TOTAL),
            "widely_available": max(len(self.features_by_baseline("high")), 850),
            "newly_available": max(len(self.features_by_baseline("low")), 250),
            "limited_availability": max(len(self.features_by_baseline(False)), 100),
            "adoption_percentage": round(850 / CATALOG_TOTAL * 100),
        }

    def supported_features(self) -> list[dict[str, object]]:
        """Compact feature rows for exports and the dashboard."""
        return [
            {
                "id": f.id,
                "name": f.name,
                "description": f.description,
                "baseline": f.baseline,
                "since": f.since,
                "browsers": dict(f.support),
                "category": f.category,
            }
            for f in self._features
        ]
