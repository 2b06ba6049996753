"""Tests for highlighting, snippets and query suggestions."""

import pytest

from sitesearch.search import SearchIndex
from sitesearch.search.highlighting import (
    calculate_relevance,
    extract_snippet,
    highlight_terms,
    suggest_corrections,
    suggest_queries,
)


class TestHighlightTerms:
    """Test term highlighting."""

    def test_case_insensitive(self):
        """Matches should ignore case and keep the original text."""
        assert highlight_terms("Hello world", ["hello"]) == "<mark>Hello</mark> world"

    def test_every_occurrence(self):
        """Every occurrence should be wrapped."""
        result = highlight_terms("Go go GO", "go")
        assert result == "<mark>Go</mark> <mark>go</mark> <mark>GO</mark>"

    def test_multiple_terms(self):
        """Several terms should be highlighted in one pass."""
        result = highlight_terms("Python and Rust", ["python", "rust"])
        assert result == "<mark>Python</mark> and <mark>Rust</mark>"

    def test_substring_matches(self):
        """Terms should also match inside longer words."""
        assert highlight_terms("JavaScript", ["script"]) == "Java<mark>Script</mark>"

    def test_regex_characters_escaped(self):
        """Terms should be matched literally."""
        assert highlight_terms("c++ and a+b", ["c++"]) == "<mark>c++</mark> and a+b"
        assert highlight_terms("a.b axb", ["a.b"]) == "<mark>a.b</mark> axb"

    def test_no_terms(self):
        """Without terms the text should be unchanged."""
        assert highlight_terms("text", []) == "text"
        assert highlight_terms("text", [""]) == "text"

    def test_custom_markers(self):
        """Custom markers should be used."""
        assert highlight_terms("find me", ["me"], ("**", "**")) == "find **me**"


class TestExtractSnippet:
    """Test snippet extraction."""

    def test_window_around_match(self):
        """The snippet should keep context words around the first match."""
        text = "one two three four five six seven eight nine ten eleven twelve"
        snippet = extract_snippet(text, "seven")

        assert snippet == (
            "...two three four five six <mark>seven</mark> "
            "eight nine ten eleven twelve"
        )

    def test_suffix_ellipsis(self):
        """Text cut at the end should get a trailing ellipsis."""
        text = "alpha beta gamma delta epsilon zeta eta theta iota kappa"
        snippet = extract_snippet(text, "alpha", context_words=2)

        assert snippet == "<mark>alpha</mark> beta gamma..."

    def test_short_text_unchanged(self):
        """A short text with a match should not get ellipses."""
        assert extract_snippet("quick brown fox", "brown") == (
            "quick <mark>brown</mark> fox"
        )

    def test_long_window_truncated(self):
        """Windows longer than max_length should be cut with an ellipsis."""
        words = [f"word{i}" for i in range(50)]
        words[25] = "target"
        snippet = extract_snippet(" ".join(words), "target", max_length=30)

        assert "..." in snippet
        assert len(snippet) == 30
        assert snippet.endswith("...")

    def test_match_is_substring(self):
        """Words containing a term should count as matches."""
        snippet = extract_snippet("learn TypeScript today", "script")
        assert snippet == "learn Type<mark>Script</mark> today"

    def test_no_match_returns_start(self):
        """Without a match the start of the text should be returned."""
        assert extract_snippet("alpha beta gamma", "zzz") == "alpha beta gamma"
        assert extract_snippet("alpha beta gamma", "zzz", max_length=10) == (
            "alpha beta..."
        )

    def test_custom_ellipsis_and_markers(self):
        """Custom ellipsis and markers should be used."""
        text = "one two three four"
        snippet = extract_snippet(
            text, "three", context_words=0, ellipsis="…", markers=("[", "]")
        )
        assert snippet == "…[three]…"

    def test_empty_text(self):
        """Empty text should give an empty snippet."""
        assert extract_snippet("", "term") == ""


class TestCalculateRelevance:
    """Test query/text relevance."""

    def test_all_words_present(self):
        """Every query word present should give 1.0."""
        assert calculate_relevance("python guide", "A Python guide") == 1.0

    def test_partial(self):
        """The fraction of present words should be returned."""
        assert calculate_relevance("python rust", "python tips") == 0.5

    def test_whole_words_only(self):
        """Substrings should not count as matches."""
        assert calculate_relevance("script", "typescript") == 0.0

    def test_empty_query(self):
        """An empty query should have zero relevance."""
        assert calculate_relevance("", "anything") == 0.0


class TestSuggestQueries:
    """Test query suggestions."""

    def test_prefix_completions(self):
        """Words starting with the prefix should be suggested shortest first."""
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "JavaScript Guide"})
        index.add(2, {"title": "Java Basics"})

        assert suggest_queries("ja", index) == ["Java", "JavaScript"]
        assert suggest_queries("ja", index, limit=1) == ["Java"]

    def test_deduplicated(self):
        """Repeated words should be suggested once."""
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "Python tips"})
        index.add(2, {"title": "Python tricks"})

        assert suggest_queries("py", index) == ["Python"]

    def test_exact_word_excluded(self):
        """Words equal to the prefix should not be suggested."""
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "go golang"})

        assert suggest_queries("go", index) == ["golang"]

    def test_uses_all_string_values(self):
        """Suggestions should draw on unindexed string fields too."""
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "Home", "url": "/home", "description": "homepage"})

        assert suggest_queries("hom", index) == ["Home", "homepage"]

    def test_no_matches(self):
        """Unknown prefixes should give no suggestions."""
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "Hello"})

        assert suggest_queries("zz", index) == []


class TestSuggestCorrections:
    """Test spelling corrections."""

    @pytest.fixture
    def index(self):
        index = SearchIndex(fields=["title"])
        index.add(1, {"title": "JavaScript Guide"})
        index.add(2, {"title": "Python Basics"})
        return index

    def test_misspelled_word(self, index):
        """Close indexed terms should be suggested."""
        assert suggest_corrections("javascrpt", index) == ["javascript"]

    def test_known_words_skipped(self, index):
        """Words already in the index need no correction."""
        assert suggest_corrections("python guide", index) == []

    def test_unrelated_word(self, index):
        """Words far from every term should give nothing."""
        assert suggest_corrections("zzzz", index) == []

    def test_empty_index(self):
        """An empty index has no vocabulary to suggest from."""
        assert suggest_corrections("anything", SearchIndex()) == []
