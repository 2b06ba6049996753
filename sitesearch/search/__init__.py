"""Search functionality for site content.

This module provides full-text search, fuzzy matching and result
highlighting for the site's command palette.

Main components:
- SearchIndex: BM25-ranked inverted index with positional postings
- fuzzy_match and friends: subsequence matching for command labels
- SearchService: Locked facade with manifest loading
- CommandPalette: Static commands plus indexed pages
- Highlighting and snippet helpers
"""

from .engine import SearchResult, SearchService
from .fuzzy import (
    fuzzy_match,
    fuzzy_search,
    fuzzy_search_multi_key,
    fuzzy_search_objects,
)
from .highlighting import (
    calculate_relevance,
    extract_snippet,
    highlight_terms,
    suggest_corrections,
    suggest_queries,
)
from .indexing import (
    DEFAULT_STOP_WORDS,
    SearchIndex,
    TextAnalyzer,
    create_search_index,
    default_tokenizer,
    identity_stemmer,
    porter_stemmer,
)
from .manifest import index_manifest, load_manifest, parse_manifest
from .models import (
    Command,
    FuzzyMatch,
    FuzzyObjectMatch,
    ManifestRecord,
    Posting,
    SearchHit,
)
from .palette import CommandPalette, ItemKind, PaletteItem, load_commands
from .ranking import (
    BM25Parameters,
    FieldWeights,
    compute_bm25_idf,
    compute_bm25_term_score,
)

__all__ = [
    # Index
    "SearchIndex",
    "create_search_index",
    "TextAnalyzer",
    "DEFAULT_STOP_WORDS",
    "default_tokenizer",
    "identity_stemmer",
    "porter_stemmer",
    # Fuzzy matching
    "fuzzy_match",
    "fuzzy_search",
    "fuzzy_search_objects",
    "fuzzy_search_multi_key",
    # Highlighting
    "highlight_terms",
    "extract_snippet",
    "calculate_relevance",
    "suggest_queries",
    "suggest_corrections",
    # Models
    "Command",
    "FuzzyMatch",
    "FuzzyObjectMatch",
    "ManifestRecord",
    "Posting",
    "SearchHit",
    # Ranking
    "BM25Parameters",
    "FieldWeights",
    "compute_bm25_idf",
    "compute_bm25_term_score",
    # Services
    "SearchService",
    "SearchResult",
    "CommandPalette",
    "PaletteItem",
    "ItemKind",
    "load_commands",
    "load_manifest",
    "parse_manifest",
    "index_manifest",
]
