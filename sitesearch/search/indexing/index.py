"""In-memory inverted index with BM25 ranking.

Documents are caller-owned mappings keyed by a string or integer id.
Each configured field is analyzed into positional postings, and
per-field token counts feed BM25 length normalization.

The index performs no locking. Callers sharing an index between
threads must serialize access (see SearchService).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from ...exceptions import InvalidDocumentError
from ..models import DocId, Posting, SearchHit
from ..ranking import (
    DEFAULT_B,
    DEFAULT_K1,
    BM25Parameters,
    FieldWeights,
    compute_bm25_idf,
    compute_bm25_term_score,
)
from .analyzers import (
    Stemmer,
    TextAnalyzer,
    Tokenizer,
    get_stemmer,
    get_stop_words,
)

if TYPE_CHECKING:
    from ...config import IndexSettings

logger = logging.getLogger(__name__)


def _is_document(doc: Any) -> bool:
    if isinstance(doc, Mapping):
        return True
    return hasattr(doc, "__dict__") and not isinstance(doc, (str, bytes, type))


def _document_fields(doc: Any) -> dict[str, Any]:
    if isinstance(doc, Mapping):
        return dict(doc)
    return vars(doc)


def _field_text(value: Any) -> str:
    """Convert a field value to indexable text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return " ".join(str(v) for v in value if v is not None)
    return str(value)


class SearchIndex:
    """Full-text search index over caller-supplied documents."""

    def __init__(
        self,
        fields: Iterable[str] | None = None,
        tokenizer: Tokenizer | None = None,
        stemmer: Stemmer | None = None,
        stop_words: Iterable[str] | None = None,
        field_weights: dict[str, float] | None = None,
        k1: float = DEFAULT_K1,
        b: float = DEFAULT_B,
    ):
        """Initialize search index.

        Args:
            fields: Fields to index (default: every str-valued field)
            tokenizer: Callable splitting text into tokens
            stemmer: Callable reducing tokens to stems (default: identity)
            stop_words: Tokens ignored at index and query time
            field_weights: Score multiplier per field (default 1.0)
            k1: BM25 term frequency saturation parameter
            b: BM25 length normalization parameter
        """
        self.fields: list[str] = list(fields or [])
        self.analyzer = TextAnalyzer(tokenizer, stemmer, stop_words)
        self.field_weights = FieldWeights(field_weights)
        self.params = BM25Parameters(k1=k1, b=b)

        self._documents: dict[DocId, Any] = {}
        self._index: dict[str, list[Posting]] = {}
        self._doc_terms: dict[DocId, set[str]] = {}
        self._field_lengths: dict[str, dict[DocId, int]] = {}
        self._avg_field_lengths: dict[str, float] = {}

    @classmethod
    def from_config(cls, settings: IndexSettings) -> SearchIndex:
        """Build an index from configuration settings."""
        return cls(
            fields=settings.fields,
            stemmer=get_stemmer(settings.stemmer),
            stop_words=get_stop_words(settings.stop_words),
            field_weights=settings.field_weights,
            k1=settings.k1,
            b=settings.b,
        )

    # Mutation

    def add(self, doc_id: DocId, doc: Any) -> None:
        """Add a document, replacing any document with the same id.

        Args:
            doc_id: Caller-chosen identifier
            doc: Mapping (or attribute object) with the fields to index

        Raises:
            InvalidDocumentError: If doc is not a mapping or object
        """
        if not _is_document(doc):
            raise InvalidDocumentError(
                doc_id, f"expected a mapping, got {type(doc).__name__}"
            )

        if doc_id in self._documents:
            logger.debug("Replacing document %r", doc_id)
            self._remove_postings(doc_id)

        self._documents[doc_id] = doc
        values = _document_fields(doc)
        fields = self.fields or [
            name for name, value in values.items() if isinstance(value, str)
        ]

        doc_terms = self._doc_terms.setdefault(doc_id, set())
        for field in fields:
            analysis = self.analyzer.analyze(_field_text(values.get(field)))
            self._field_lengths.setdefault(field, {})[doc_id] = analysis.length

            for term, positions in analysis.positions.items():
                self._index.setdefault(term, []).append(
                    Posting(
                        doc_id=doc_id,
                        field=field,
                        positions=positions,
                        tf=len(positions) / analysis.length,
                    )
                )
                doc_terms.add(term)

        self._update_average_lengths()

    def add_all(self, documents: Iterable[tuple[DocId, Any]]) -> None:
        """Add multiple (doc_id, doc) pairs."""
        for doc_id, doc in documents:
            self.add(doc_id, doc)

    def remove(self, doc_id: DocId) -> bool:
        """Remove a document and all of its postings.

        Returns:
            True if the document existed, False otherwise
        """
        if doc_id not in self._documents:
            return False

        self._remove_postings(doc_id)
        del self._documents[doc_id]
        self._update_average_lengths()
        logger.debug("Removed document %r", doc_id)
        return True

    def clear(self) -> None:
        """Remove every document from the index."""
        self._documents.clear()
        self._index.clear()
        self._doc_terms.clear()
        self._field_lengths.clear()
        self._avg_field_lengths.clear()

    def _remove_postings(self, doc_id: DocId) -> None:
        for term in self._doc_terms.pop(doc_id, set()):
            remaining = [p for p in self._index.get(term, []) if p.doc_id != doc_id]
            if remaining:
                self._index[term] = remaining
            else:
                self._index.pop(term, None)

        for field in list(self._field_lengths):
            lengths = self._field_lengths[field]
            lengths.pop(doc_id, None)
            if not lengths:
                del self._field_lengths[field]

    def _update_average_lengths(self) -> None:
        # Full recomputation: O(documents) per mutation.
        self._avg_field_lengths = {
            field: sum(lengths.values()) / len(lengths)
            for field, lengths in self._field_lengths.items()
        }

    # Querying

    def search(
        self, query: str, *, limit: int | None = 10, threshold: float = 0.0
    ) -> list[SearchHit]:
        """Search the index with BM25 ranking.

        Args:
            query: Free-text query
            limit: Maximum number of hits (None for all)
            threshold: Minimum score a hit must reach

        Returns:
            Hits sorted by descending score; equal scores keep the order
            in which documents were first scored
        """
        terms = self.analyzer.query_terms(query)
        if not terms:
            return []

        total_docs = len(self._documents)
        scores: dict[DocId, float] = {}

        for term in terms:
            postings = self._index.get(term)
            if not postings:
                continue

            doc_freq = len({posting.doc_id for posting in postings})
            idf = compute_bm25_idf(total_docs, doc_freq)
            for posting in postings:
                score = compute_bm25_term_score(
                    tf=posting.tf,
                    field_length=self._field_lengths[posting.field][posting.doc_id],
                    avg_field_length=self._avg_field_lengths.get(posting.field, 1.0),
                    idf=idf,
                    field_weight=self.field_weights.get_weight(posting.field),
                    params=self.params,
                )
                scores[posting.doc_id] = scores.get(posting.doc_id, 0.0) + score

        ranked = sorted(
            (item for item in scores.items() if item[1] >= threshold),
            key=lambda item: item[1],
            reverse=True,
        )
        if limit is not None:
            ranked = ranked[:limit]

        return [
            SearchHit(doc_id=doc_id, doc=self._documents[doc_id], score=score)
            for doc_id, score in ranked
        ]

    # Accessors

    def get(self, doc_id: DocId) -> Any | None:
        """Get a document by id."""
        return self._documents.get(doc_id)

    def get_all(self) -> list[Any]:
        """Get all documents in insertion order."""
        return list(self._documents.values())

    def ids(self) -> list[DocId]:
        """Get all document ids in insertion order."""
        return list(self._documents)

    @property
    def size(self) -> int:
        """Number of indexed documents."""
        return len(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def terms(self) -> list[str]:
        """Get all indexed terms."""
        return list(self._index)

    def postings(self, term: str) -> list[Posting]:
        """Get a copy of the postings list for a term."""
        return list(self._index.get(term, []))

    def field_length(self, field: str, doc_id: DocId) -> int | None:
        """Token count of a field in a document, if indexed."""
        return self._field_lengths.get(field, {}).get(doc_id)

    def average_field_length(self, field: str) -> float | None:
        """Average token count of a field across documents."""
        return self._avg_field_lengths.get(field)

    def statistics(self) -> dict[str, Any]:
        """Get index statistics."""
        return {
            "total_documents": len(self._documents),
            "total_terms": len(self._index),
            "total_postings": sum(len(p) for p in self._index.values()),
            "average_field_lengths": dict(self._avg_field_lengths),
        }


def create_search_index(**options: Any) -> SearchIndex:
    """Create a search index with the given options."""
    return SearchIndex(**options)
