"""Tests for the Baseline feature catalog."""

import pytest

from modernizer.catalog import BROWSER_SUPPORT_STATS, FeatureCatalog, ModernAlternative


@pytest.fixture
def catalog():
    return FeatureCatalog()


def _alt(feature: str, status="high") -> ModernAlternative:
    return ModernAlternative(
        feature=feature,
        replacement=feature,
        description="",
        example="",
        baseline_status=status,
        browser_support={},
    )


class TestLookup:

    def test_by_id(self, catalog):
        feature = catalog.lookup_feature("fetch")
        assert feature is not None
        assert feature.name == "Fetch API"
        assert feature.baseline == "high"

    def test_by_name_case_insensitive(self, catalog):
        feature = catalog.lookup_feature("container queries")
        assert feature is not None
        assert feature.id == "container-queries"

    def test_unknown(self, catalog):
        assert catalog.lookup_feature("blink-tag") is None

    def test_since(self, catalog):
        assert catalog.lookup_feature("grid").since == "2020-01"
        assert catalog.lookup_feature("object-spread").since == "2024-03"

    def test_browser_support(self, catalog):
        support = catalog.browser_support("flexbox")
        assert dict(support) == {"chrome": "29", "firefox": "28", "safari": "9", "edge": "12"}

    def test_browser_support_unknown(self, catalog):
        assert dict(catalog.browser_support("nope")) == {}

    def test_features_by_baseline(self, catalog):
        low = {f.id for f in catalog.features_by_baseline("low")}
        assert low == {"object-spread", "container-queries"}
        assert catalog.features_by_baseline(False) == []

    def test_catalog_is_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.lookup_feature("fetch").support["chrome"] = "1"


class TestAlternatives:

    def test_exact_match(self, catalog):
        alternatives = catalog.alternatives_for("XMLHttpRequest")
        assert [a.feature for a in alternatives] == ["fetch"]

    def test_exact_match_multiple(self, catalog):
        alternatives = catalog.alternatives_for("float")
        assert [a.feature for a in alternatives] == ["flexbox", "grid"]

    def test_partial_match(self, catalog):
        # "XMLHttpRequest.open" contains the "XMLHttpRequest" key
        alternatives = catalog.alternatives_for("XMLHttpRequest.open")
        assert [a.feature for a in alternatives] == ["fetch"]

    def test_partial_match_reverse(self, catalog):
        # "XMLHttp" is contained in the "XMLHttpRequest" key
        assert [a.feature for a in catalog.alternatives_for("XMLHttp")] == ["fetch"]

    def test_partial_match_deduplicates(self):
        shared = _alt("let-const")
        catalog = FeatureCatalog(alternatives={"var": (shared,), "var-hoist": (shared, _alt("fetch"))})
        alternatives = catalog.alternatives_for("va")
        assert [a.feature for a in alternatives] == ["let-const", "fetch"]

    def test_no_match(self, catalog):
        assert catalog.alternatives_for("marquee") == []

    def test_patterns(self, catalog):
        assert "var" in catalog.patterns
        assert "<b><i><u>" in catalog.patterns


class TestSearch:

    def test_search_by_category(self, catalog):
        results = catalog.search("css")
        assert {f.id for f in results} >= {"flexbox", "grid", "custom-properties", "container-queries"}

    def test_search_by_description(self, catalog):
        assert [f.id for f in catalog.search("backticks")] == ["template-literals"]

    def test_search_no_results(self, catalog):
        assert catalog.search("webgpu") == []


class TestScore:

    def test_no_patterns_is_perfect(self, catalog):
        assert catalog.baseline_score([], []) == 100

    def test_modern_alternatives_offset(self, catalog):
        assert catalog.baseline_score([3], [_alt("a"), _alt("b", "low")]) == 80

    def test_never_negative(self, catalog):
        assert catalog.baseline_score([50], []) == 0


class TestStatistics:

    def test_baseline_statistics(self, catalog):
        stats = catalog.baseline_statistics()
        assert stats == {
            "total": 1200,
            "widely_available": 850,
            "newly_available": 250,
            "limited_availability": 100,
            "adoption_percentage": 71,
        }

    def test_browser_support_stats(self):
        assert BROWSER_SUPPORT_STATS["chrome"]["percentage"] == 82
        assert BROWSER_SUPPORT_STATS["safari"]["supported"] == 850

    def test_supported_features_rows(self, catalog):
        rows = catalog.supported_features()
        assert len(rows) == len(catalog.all_features())
        flexbox = rows[0]
        assert flexbox["id"] == "flexbox"
        assert flexbox["since"] == "2017-03"
        assert flexbox["browsers"]["safari"] == "9"
