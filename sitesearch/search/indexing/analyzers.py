"""Text analysis for search indexing.

This module provides the tokenizer, stop-word and stemming pipeline shared
by indexing and querying. Every stage is a plain callable so callers can
inject their own implementations.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from whoosh.lang.porter import stem as _whoosh_porter_stem
from whoosh.lang.stopwords import stoplists

from ...exceptions import ConfigError

Tokenizer = Callable[[str], list[str]]
Stemmer = Callable[[str], str]

DEFAULT_STOP_WORDS: frozenset[str] = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "has",
        "he",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "or",
        "that",
        "the",
        "to",
        "was",
        "were",
        "will",
        "with",
    }
)

_NON_WORD = re.compile(r"[^\w\s]")


def default_tokenizer(text: str) -> list[str]:
    """Split text into lower-cased word tokens.

    Punctuation becomes whitespace and single-character tokens are dropped.
    """
    text = _NON_WORD.sub(" ", text.lower())
    return [token for token in text.split() if len(token) > 1]


def identity_stemmer(word: str) -> str:
    """Return the word unchanged."""
    return word


def porter_stemmer(word: str) -> str:
    """Apply Porter stemming to a word.

    Uses Whoosh's Porter stemmer implementation.
    """
    if len(word) <= 3:
        return word

    stemmed = _whoosh_porter_stem(word)

    # Keep at least 2 characters
    if len(stemmed) >= 2:
        return stemmed
    return word


STEMMERS: dict[str, Stemmer] = {
    "none": identity_stemmer,
    "porter": porter_stemmer,
}


def get_stemmer(name: str) -> Stemmer:
    """Look up a stemmer by name."""
    try:
        return STEMMERS[name.lower()]
    except KeyError:
        choices = ", ".join(sorted(STEMMERS))
        raise ConfigError(f"Unknown stemmer '{name}' (expected one of: {choices})")


def get_stop_words(words: str | Iterable[str] | None) -> frozenset[str]:
    """Resolve a stop-word list by name or contents.

    Args:
        words: "default", "english" (Whoosh's English list), "none",
            or an explicit collection of words

    Returns:
        Frozen set of lower-cased stop words
    """
    if words is None:
        return DEFAULT_STOP_WORDS

    if isinstance(words, str):
        name = words.lower()
        if name == "default":
            return DEFAULT_STOP_WORDS
        if name == "english":
            return frozenset(stoplists["en"])
        if name == "none":
            return frozenset()
        raise ConfigError(
            f"Unknown stop-word list '{words}' (expected default, english or none)"
        )

    return frozenset(word.lower() for word in words)


@dataclass
class FieldAnalysis:
    """Result of analyzing one field's text."""

    length: int
    positions: dict[str, list[int]] = field(default_factory=dict)


class TextAnalyzer:
    """Tokenize, filter stop words and stem text.

    Indexing and querying must go through the same analyzer so that
    query terms line up with indexed terms.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        stemmer: Stemmer | None = None,
        stop_words: Iterable[str] | None = None,
    ):
        """Initialize analyzer.

        Args:
            tokenizer: Callable splitting text into tokens
            stemmer: Callable reducing a token to its stem
            stop_words: Tokens to ignore (checked before stemming)
        """
        self.tokenizer = tokenizer or default_tokenizer
        self.stemmer = stemmer or identity_stemmer
        self.stop_words = (
            DEFAULT_STOP_WORDS if stop_words is None else frozenset(stop_words)
        )

    def tokenize(self, text: str) -> list[str]:
        """Tokenize text without filtering or stemming."""
        if not text:
            return []
        return self.tokenizer(text)

    def analyze(self, text: str) -> FieldAnalysis:
        """Analyze field text into term positions.

        The field length counts every token, stop words included, and
        positions are offsets in that unfiltered token stream.
        """
        tokens = self.tokenize(text)
        analysis = FieldAnalysis(length=len(tokens))

        for position, token in enumerate(tokens):
            if token in self.stop_words:
                continue
            term = self.stemmer(token)
            analysis.positions.setdefault(term, []).append(position)

        return analysis

    def query_terms(self, query: str) -> list[str]:
        """Analyze a query into terms, keeping duplicates and order."""
        return [
            self.stemmer(token)
            for token in self.tokenize(query)
            if token not in self.stop_words
        ]
