"""BM25 relevance scoring.

This module provides the IDF and per-field term scoring used by the
inverted index, plus field weight configuration.
"""

import math
from dataclasses import dataclass

DEFAULT_K1 = 1.2
DEFAULT_B = 0.75


class FieldWeights:
    """Field-specific weight configuration for ranking."""

    def __init__(self, weights: dict[str, float] | None = None):
        """Initialize field weights.

        Args:
            weights: Dict mapping field names to weight multipliers
        """
        self.weights = dict(weights or {})

    def get_weight(self, field: str) -> float:
        """Get weight for a field, 1.0 when not configured."""
        return self.weights.get(field) or 1.0

    def __repr__(self) -> str:
        return f"FieldWeights({self.weights!r})"


@dataclass(frozen=True)
class BM25Parameters:
    """BM25 tuning parameters."""

    k1: float = DEFAULT_K1
    b: float = DEFAULT_B


def compute_bm25_idf(total_docs: int, doc_freq: int) -> float:
    """Compute the BM25 inverse document frequency.

    The +1 inside the logarithm keeps the IDF positive even for terms
    present in most documents.

    Args:
        total_docs: Total number of documents
        doc_freq: Number of documents containing the term

    Returns:
        IDF weight for the term
    """
    return math.log((total_docs - doc_freq + 0.5) / (doc_freq + 0.5) + 1)


def compute_bm25_term_score(
    tf: float,
    field_length: int,
    avg_field_length: float,
    idf: float,
    field_weight: float = 1.0,
    params: BM25Parameters | None = None,
) -> float:
    """Compute the BM25 contribution of one posting.

    Args:
        tf: Term frequency, normalized by field length
        field_length: Token count of the field in this document
        avg_field_length: Average token count of the field
        idf: Inverse document frequency of the term
        field_weight: Boost applied to the field
        params: BM25 parameters (k1, b)

    Returns:
        Weighted BM25 score for the posting
    """
    params = params or BM25Parameters()
    k1, b = params.k1, params.b

    if avg_field_length <= 0:
        avg_field_length = 1.0

    denominator = tf + k1 * (1 - b + b * (field_length / avg_field_length))
    if denominator <= 0:
        return 0.0

    return idf * (tf * (k1 + 1)) / denominator * field_weight
