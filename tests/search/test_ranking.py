"""Tests for BM25 scoring functions."""

import math

import pytest

from sitesearch.search.ranking import (
    BM25Parameters,
    FieldWeights,
    compute_bm25_idf,
    compute_bm25_term_score,
)


class TestFieldWeights:
    """Test FieldWeights configuration."""

    def test_configured_weight(self):
        """Configured fields should return their weight."""
        weights = FieldWeights({"title": 2.0, "tags": 1.5})

        assert weights.get_weight("title") == 2.0
        assert weights.get_weight("tags") == 1.5

    def test_default_weight(self):
        """Unknown fields should weigh 1.0."""
        assert FieldWeights().get_weight("body") == 1.0
        assert FieldWeights({"title": 2.0}).get_weight("body") == 1.0

    def test_zero_weight_counts_as_default(self):
        """A zero weight should fall back to 1.0."""
        assert FieldWeights({"title": 0}).get_weight("title") == 1.0

    def test_copy_of_input(self):
        """Weights should not alias the caller's dict."""
        source = {"title": 2.0}
        weights = FieldWeights(source)
        source["title"] = 5.0

        assert weights.get_weight("title") == 2.0


class TestBM25:
    """Test BM25 formulas."""

    def test_default_parameters(self):
        """Defaults should be the standard BM25 constants."""
        params = BM25Parameters()
        assert params.k1 == 1.2
        assert params.b == 0.75

    def test_idf(self):
        """IDF should follow the smoothed BM25 formula."""
        assert compute_bm25_idf(3, 2) == pytest.approx(math.log(1.6))
        assert compute_bm25_idf(10, 1) == pytest.approx(math.log(9.5 / 1.5 + 1))

    def test_idf_always_positive(self):
        """IDF should stay positive even for terms in every document."""
        assert compute_bm25_idf(5, 5) > 0
        assert compute_bm25_idf(1, 1) > 0

    def test_rarer_terms_weigh_more(self):
        """Rarer terms should get a higher IDF."""
        assert compute_bm25_idf(100, 1) > compute_bm25_idf(100, 50)

    def test_term_score(self):
        """Term score should follow the BM25 formula."""
        score = compute_bm25_term_score(
            tf=0.5, field_length=2, avg_field_length=2.0, idf=1.0
        )
        assert score == pytest.approx(1.1 / 1.7)

    def test_field_weight_scales_score(self):
        """Field weight should multiply the score."""
        base = compute_bm25_term_score(0.5, 2, 2.0, 1.0)
        weighted = compute_bm25_term_score(0.5, 2, 2.0, 1.0, field_weight=3.0)
        assert weighted == pytest.approx(3 * base)

    def test_longer_fields_score_lower(self):
        """Length normalization should favor shorter fields."""
        short = compute_bm25_term_score(0.25, 4, 8.0, 1.0)
        long = compute_bm25_term_score(0.25, 16, 8.0, 1.0)
        assert short > long

    def test_no_length_normalization(self):
        """With b=0 field length should not matter."""
        params = BM25Parameters(b=0.0)
        short = compute_bm25_term_score(0.25, 4, 8.0, 1.0, params=params)
        long = compute_bm25_term_score(0.25, 16, 8.0, 1.0, params=params)
        assert short == pytest.approx(long)

    def test_zero_average_length(self):
        """A zero average length should be treated as 1."""
        assert compute_bm25_term_score(1.0, 1, 0.0, 1.0) == pytest.approx(
            compute_bm25_term_score(1.0, 1, 1.0, 1.0)
        )
