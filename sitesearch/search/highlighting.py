"""Search result highlighting and snippet generation."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from rapidfuzz import fuzz, process

if TYPE_CHECKING:
    from .indexing.index import SearchIndex

DEFAULT_MARKERS: tuple[str, str] = ("<mark>", "</mark>")


def _as_terms(terms: str | Iterable[str]) -> list[str]:
    if isinstance(terms, str):
        return [terms]
    return list(terms)


def highlight_terms(
    text: str,
    terms: str | Iterable[str],
    markers: Sequence[str] = DEFAULT_MARKERS,
) -> str:
    """Wrap every case-insensitive occurrence of the terms in markers.

    Args:
        text: Text to highlight
        terms: Term or terms to highlight
        markers: Start and end markers

    Returns:
        Highlighted text
    """
    escaped = [re.escape(term) for term in _as_terms(terms) if term]
    if not escaped:
        return text

    start, end = markers
    pattern = re.compile("(" + "|".join(escaped) + ")", re.IGNORECASE)
    return pattern.sub(lambda m: f"{start}{m.group(1)}{end}", text)


def extract_snippet(
    text: str,
    terms: str | Iterable[str],
    *,
    max_length: int = 200,
    context_words: int = 5,
    ellipsis: str = "...",
    markers: Sequence[str] = DEFAULT_MARKERS,
) -> str:
    """Extract a highlighted snippet around the first matching word.

    Args:
        text: Source text
        terms: Term or terms to look for
        max_length: Maximum snippet length before highlighting
        context_words: Words kept on each side of the match
        ellipsis: Marker for truncated text
        markers: Highlight markers

    Returns:
        Snippet text. Without a match the start of the text is returned
        unhighlighted.
    """
    term_list = [term.lower() for term in _as_terms(terms)]
    words = text.split()

    first_match = next(
        (
            i
            for i, word in enumerate(words)
            if any(term in word.lower() for term in term_list)
        ),
        None,
    )

    if first_match is None:
        snippet = " ".join(words[: math.ceil(max_length / 5)])
        return snippet + ellipsis if len(snippet) < len(text) else snippet

    start = max(0, first_match - context_words)
    end = min(len(words), first_match + context_words + 1)

    snippet = " ".join(words[start:end])
    if start > 0:
        snippet = ellipsis + snippet
    if end < len(words):
        snippet = snippet + ellipsis

    if len(snippet) > max_length:
        snippet = snippet[: max_length - len(ellipsis)] + ellipsis

    return highlight_terms(snippet, _as_terms(terms), markers)


def calculate_relevance(query: str, text: str) -> float:
    """Fraction of query words present as whole words in text."""
    query_words = query.lower().split()
    if not query_words:
        return 0.0

    text_words = set(text.lower().split())
    matched = sum(1 for word in query_words if word in text_words)
    return matched / len(query_words)


def suggest_queries(partial_query: str, index: SearchIndex, limit: int = 5) -> list[str]:
    """Suggest completions for a partial query from indexed content.

    Args:
        partial_query: Prefix typed so far
        index: Index whose documents provide the vocabulary
        limit: Maximum number of suggestions

    Returns:
        Distinct words starting with the prefix, shortest first
    """
    prefix = partial_query.lower()
    suggestions: dict[str, None] = {}

    for doc in index.get_all():
        values = doc.values() if isinstance(doc, Mapping) else vars(doc).values()
        for value in values:
            if not isinstance(value, str):
                continue
            for word in value.split():
                if word.lower().startswith(prefix) and len(word) > len(partial_query):
                    suggestions.setdefault(word, None)

    return sorted(suggestions, key=len)[:limit]


def suggest_corrections(
    query: str, index: SearchIndex, limit: int = 3, score_cutoff: float = 70.0
) -> list[str]:
    """Suggest spelling corrections for query words missing from the index.

    Candidates are indexed terms (stemmed when the index stems), ranked
    with rapidfuzz's ratio scorer.
    """
    vocabulary = index.terms()
    if not vocabulary:
        return []

    known = set(vocabulary)
    analyzer = index.analyzer
    corrections: dict[str, float] = {}

    for word in analyzer.tokenize(query):
        if word in analyzer.stop_words or analyzer.stemmer(word) in known:
            continue

        matches = process.extract(
            word, vocabulary, scorer=fuzz.ratio, limit=limit, score_cutoff=score_cutoff
        )
        for term, score, _ in matches:
            corrections[term] = max(score, corrections.get(term, 0.0))

    return sorted(corrections, key=lambda term: corrections[term], reverse=True)[:limit]
