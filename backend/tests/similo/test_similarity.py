"""
Unit tests for attribute similarity metrics.
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "app"))

from similo.core.locator import MetricKind
from similo.core.similarity import (
    AttributeSimilarityEngine,
    levenshtein_distance,
    levenshtein_similarity,
    numeric_similarity,
    spatial_similarity,
    token_overlap_similarity,
    exact_similarity,
)


class TestLevenshtein:
    """Test edit distance based similarity."""

    def test_identical(self):
        assert levenshtein_similarity("email", "email") == 1.0

    def test_one_insertion(self):
        assert levenshtein_similarity("email", "emails") == pytest.approx(1 - 1 / 6)

    def test_case_insensitive(self):
        assert levenshtein_distance("Submit", "SUBMIT") == 0
        assert levenshtein_similarity("Submit", "SUBMIT") == 1.0

    def test_classic_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_both_empty_is_identical(self):
        assert levenshtein_similarity("", "") == 1.0

    def test_one_empty_is_zero(self):
        assert levenshtein_similarity("", "abc") == 0.0
        assert levenshtein_similarity("abc", "") == 0.0

    def test_completely_different(self):
        assert levenshtein_similarity("abc", "xyz") == 0.0

    def test_case_folding_that_lengthens(self):
        # "İ".lower() is two code points
        assert levenshtein_similarity("İ", "x") == 0.0
        assert levenshtein_similarity("İ", "i\u0307") == 1.0
        assert levenshtein_similarity("İstanbul", "istanbul") == pytest.approx(1 - 1 / 9)

    @pytest.mark.parametrize("a,b", [("İİİ", "x"), ("ẞ", "ss"), ("ΣΑΣ", "σας"), ("İ", "İİ")])
    def test_non_ascii_stays_in_unit_range(self, a, b):
        assert 0.0 <= levenshtein_similarity(a, b) <= 1.0


class TestNumeric:
    """Test integer closeness."""

    def test_example_values(self):
        assert numeric_similarity("100", "150") == pytest.approx(1 - 50 / 150)

    def test_equal_values(self):
        assert numeric_similarity("15000", "15000") == 1.0

    def test_both_zero(self):
        assert numeric_similarity("0", "0") == 1.0

    def test_unparsable_is_zero(self):
        assert numeric_similarity("abc", "100") == 0.0
        assert numeric_similarity("12.5", "12") == 0.0

    def test_never_negative(self):
        assert numeric_similarity("-5", "5") == 0.0


class TestSpatial:
    """Test on-screen distance similarity."""

    def test_example_points(self):
        assert spatial_similarity("100,200", "100,250", 500) == pytest.approx(0.9)

    def test_same_point(self):
        assert spatial_similarity("10,10", "10,10") == 1.0

    def test_beyond_max_distance(self):
        assert spatial_similarity("0,0", "600,0", 500) == 0.0

    def test_malformed(self):
        assert spatial_similarity("100", "100,200") == 0.0
        assert spatial_similarity("a,b", "100,200") == 0.0


class TestTokenOverlap:
    """Test Jaccard word overlap."""

    def test_partial_overlap(self):
        assert token_overlap_similarity("Sign in now", "sign up now") == pytest.approx(2 / 4)

    def test_identical(self):
        assert token_overlap_similarity("Review your order", "review  YOUR order") == 1.0

    def test_one_empty(self):
        assert token_overlap_similarity("", "hello") == 0.0

    def test_both_empty_is_zero(self):
        """Two empty texts carry no evidence, so they do not count as a match."""
        assert token_overlap_similarity("", "") == 0.0
        assert token_overlap_similarity("   ", "") == 0.0


class TestAttributeSimilarityEngine:
    """Test metric dispatch."""

    def test_absent_value_gives_no_contribution(self):
        engine = AttributeSimilarityEngine()

        assert engine.similarity(MetricKind.EXACT, None, "a") is None
        assert engine.similarity(MetricKind.STRING_EDIT, "a", None) is None

    def test_exact(self):
        engine = AttributeSimilarityEngine()

        assert engine.similarity(MetricKind.EXACT, "BUTTON", "button") == 1.0
        assert engine.similarity(MetricKind.EXACT, "button", "a") == 0.0
        assert exact_similarity("x", "x") == 1.0

    def test_spatial_uses_configured_distance(self):
        engine = AttributeSimilarityEngine(max_distance=100)

        assert engine.similarity(MetricKind.SPATIAL, "0,0", "0,50") == pytest.approx(0.5)

    @pytest.mark.parametrize("metric", list(MetricKind))
    def test_results_in_unit_range(self, metric):
        engine = AttributeSimilarityEngine()

        for a, b in [("1,2", "300,4"), ("abc", "abd"), ("10", "2000"), ("x y", "y z")]:
            value = engine.similarity(metric, a, b)
            assert 0.0 <= value <= 1.0
