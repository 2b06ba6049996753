"""Search service for site content.

Wraps a SearchIndex with a lock, manifest loading, and result
presentation (highlighted titles and description snippets).
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import Settings
from .highlighting import (
    extract_snippet,
    highlight_terms,
    suggest_corrections,
    suggest_queries,
)
from .indexing.index import SearchIndex
from .manifest import index_manifest, load_manifest
from .models import DocId, SearchHit

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """A search hit prepared for display."""

    hit: SearchHit
    title: str
    snippet: str

    @property
    def doc_id(self) -> DocId:
        return self.hit.doc_id

    @property
    def score(self) -> float:
        return self.hit.score

    @property
    def url(self) -> str | None:
        doc = self.hit.doc
        return doc.get("url") if isinstance(doc, dict) else None


class SearchService:
    """High-level search service guarding one index with a lock.

    The index itself is not thread-safe; every operation here holds the
    same re-entrant lock for its whole duration.
    """

    def __init__(
        self, index: SearchIndex | None = None, settings: Settings | None = None
    ):
        """Initialize search service.

        Args:
            index: Index to wrap (default: built from settings)
            settings: Configuration (default: built-in defaults)
        """
        self.settings = settings or Settings()
        if index is None:
            index = SearchIndex.from_config(self.settings.index)
        self.index = index
        self._lock = threading.RLock()

    def load_manifest(self, path: Path | str) -> int:
        """Replace the index contents with a manifest's records.

        Returns:
            Number of records indexed
        """
        records = load_manifest(path)
        with self._lock:
            self.index.clear()
            return index_manifest(self.index, records)

    def add(self, doc_id: DocId, doc: Any) -> None:
        """Add or replace a document."""
        with self._lock:
            self.index.add(doc_id, doc)

    def remove(self, doc_id: DocId) -> bool:
        """Remove a document."""
        with self._lock:
            return self.index.remove(doc_id)

    def clear(self) -> None:
        """Remove every document."""
        with self._lock:
            self.index.clear()

    def documents(self) -> list[tuple[DocId, Any]]:
        """Snapshot of (doc_id, doc) pairs in insertion order."""
        with self._lock:
            return [(doc_id, self.index.get(doc_id)) for doc_id in self.index.ids()]

    def search_hits(
        self, query: str, limit: int | None = None, threshold: float | None = None
    ) -> list[SearchHit]:
        """Run a ranked search and return raw hits."""
        limit = self.settings.limit if limit is None else limit
        threshold = self.settings.threshold if threshold is None else threshold
        with self._lock:
            return self.index.search(query, limit=limit, threshold=threshold)

    def search(
        self,
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
        highlight: bool = True,
    ) -> list[SearchResult]:
        """Search and prepare results for display.

        Args:
            query: Free-text query
            limit: Maximum results (default from settings)
            threshold: Minimum score (default from settings)
            highlight: Wrap query words in the configured markers

        Returns:
            Results in rank order
        """
        hits = self.search_hits(query, limit, threshold)
        words = self._highlight_words(query)
        markers = self.settings.fuzzy.highlight_markers if highlight else ("", "")
        logger.debug("Query %r returned %d hits", query, len(hits))

        results = []
        for hit in hits:
            title = _doc_text(hit.doc, "title") or str(hit.doc_id)
            if highlight:
                title = highlight_terms(title, words, markers)

            snippet = extract_snippet(
                _doc_text(hit.doc, "description"),
                words,
                max_length=self.settings.snippet_length,
                markers=markers,
            )
            results.append(SearchResult(hit=hit, title=title, snippet=snippet))

        return results

    def _highlight_words(self, query: str) -> list[str]:
        """Query tokens the index can match, in query order."""
        analyzer = self.index.analyzer
        return [
            token
            for token in dict.fromkeys(analyzer.tokenize(query))
            if token not in analyzer.stop_words
        ]

    def suggest(self, partial_query: str, limit: int = 5) -> list[str]:
        """Suggest query completions from indexed content."""
        with self._lock:
            return suggest_queries(partial_query, self.index, limit)

    def corrections(self, query: str, limit: int = 3) -> list[str]:
        """Suggest indexed terms close to misspelled query words."""
        with self._lock:
            return suggest_corrections(query, self.index, limit)

    def statistics(self) -> dict[str, Any]:
        """Get index statistics."""
        with self._lock:
            return self.index.statistics()


def _doc_text(doc: Any, field: str) -> str:
    value = doc.get(field) if isinstance(doc, dict) else getattr(doc, field, None)
    return "" if value is None else str(value)
