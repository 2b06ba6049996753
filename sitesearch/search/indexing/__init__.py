"""Indexing subsystem for search."""

from .analyzers import (
    DEFAULT_STOP_WORDS,
    FieldAnalysis,
    TextAnalyzer,
    default_tokenizer,
    get_stemmer,
    get_stop_words,
    identity_stemmer,
    porter_stemmer,
)
from .index import SearchIndex, create_search_index

__all__ = [
    "DEFAULT_STOP_WORDS",
    "FieldAnalysis",
    "TextAnalyzer",
    "default_tokenizer",
    "identity_stemmer",
    "porter_stemmer",
    "get_stemmer",
    "get_stop_words",
    "SearchIndex",
    "create_search_index",
]
