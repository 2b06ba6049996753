"""Fuzzy string matching for command labels and short strings.

A query matches a target when its characters appear in the target in
order (a subsequence). Matches are scored from 0 to 1 using coverage,
consecutiveness, prefix, word-boundary and spread heuristics.
"""

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from .models import FuzzyMatch, FuzzyObjectMatch

T = TypeVar("T")

DEFAULT_MARKERS: tuple[str, str] = ("<mark>", "</mark>")

COVERAGE_WEIGHT = 0.3
CONSECUTIVE_WEIGHT = 0.3
PREFIX_BONUS = 0.15
BOUNDARY_BONUS = 0.05
MAX_BOUNDARY_BONUS = 0.2
SPREAD_PENALTY = 0.01
MAX_SPREAD_PENALTY = 0.2

_BOUNDARY_CHARS = re.compile(r"[\s\-_./]")

KeySpec = str | Callable[[Any], str]


def fuzzy_match(
    query: str,
    target: str,
    *,
    case_sensitive: bool = False,
    threshold: float = 0.0,
    highlight_markers: Sequence[str] = DEFAULT_MARKERS,
) -> FuzzyMatch | None:
    """Fuzzy match a query against a target string.

    Args:
        query: Search query
        target: String to match against
        case_sensitive: Compare characters without lower-casing
        threshold: Minimum score a match must reach
        highlight_markers: Start and end markers wrapped around each
            matched character

    Returns:
        FuzzyMatch with score and matched indices, or None

    Example:
        >>> fuzzy_match("jq", "jQuery").matches
        [0, 1]
    """
    if not isinstance(query, str) or not isinstance(target, str):
        raise TypeError("fuzzy_match() expects str query and target")

    q = query if case_sensitive else _fold_case(query)
    t = target if case_sensitive else _fold_case(target)

    if not q:
        return FuzzyMatch(item=target, score=1.0, matches=[], highlighted=target)

    if not t or len(q) > len(t):
        return None

    matches = _match_subsequence(q, t)
    if matches is None:
        return None

    score = _score_matches(matches, len(q), target)
    if score < threshold:
        return None

    return FuzzyMatch(
        item=target,
        score=score,
        matches=matches,
        highlighted=_highlight_characters(target, matches, highlight_markers),
    )


def _fold_case(text: str) -> str:
    """Lower-case text one character at a time, keeping its length.

    Characters whose lower case form is longer (such as "\u0130") are
    left unchanged so match indices stay valid for the original text.
    """
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)


def _match_subsequence(query: str, target: str) -> list[int] | None:
    """Greedily match query characters left to right in target."""
    matches: list[int] = []
    query_idx = 0

    for i, char in enumerate(target):
        if query_idx == len(query):
            break
        if char == query[query_idx]:
            matches.append(i)
            query_idx += 1

    if query_idx != len(query):
        return None
    return matches


def _longest_run(matches: list[int]) -> int:
    """Length of the longest run of consecutive indices."""
    longest = 0
    current = 0
    previous = -2

    for idx in matches:
        current = current + 1 if idx == previous + 1 else 1
        longest = max(longest, current)
        previous = idx

    return longest


def _is_word_boundary(target: str, idx: int) -> bool:
    """Check whether target[idx] starts a word."""
    if idx == 0:
        return True

    prev_char = target[idx - 1]
    if _BOUNDARY_CHARS.match(prev_char):
        return True

    # camelCase hump
    char = target[idx]
    return prev_char == prev_char.lower() and char != char.lower()


def _score_matches(matches: list[int], query_length: int, target: str) -> float:
    """Combine the matching heuristics into a score clamped to [0, 1]."""
    score = len(matches) / len(target) * COVERAGE_WEIGHT
    score += _longest_run(matches) / query_length * CONSECUTIVE_WEIGHT

    if matches[0] == 0:
        score += PREFIX_BONUS

    boundary_bonus = sum(
        BOUNDARY_BONUS for idx in matches if _is_word_boundary(target, idx)
    )
    score += min(boundary_bonus, MAX_BOUNDARY_BONUS)

    spread = matches[-1] - matches[0]
    if spread > query_length * 2:
        score -= min((spread - query_length * 2) * SPREAD_PENALTY, MAX_SPREAD_PENALTY)

    return max(0.0, min(1.0, score))


def _highlight_characters(
    target: str, matches: list[int], markers: Sequence[str]
) -> str:
    """Wrap each matched character in its own pair of markers."""
    start_mark, end_mark = markers
    matched = set(matches)
    return "".join(
        f"{start_mark}{char}{end_mark}" if i in matched else char
        for i, char in enumerate(target)
    )


def _sort_and_limit(results: list, sort: bool, limit: int | None) -> list:
    if sort:
        results.sort(key=lambda r: r.score, reverse=True)
    if limit is not None:
        return results[:limit]
    return results


def fuzzy_search(
    query: str,
    items: Iterable[str],
    *,
    limit: int | None = None,
    sort: bool = True,
    **match_options: Any,
) -> list[FuzzyMatch]:
    """Fuzzy search through strings.

    Args:
        query: Search query
        items: Strings to search
        limit: Maximum results to return
        sort: Sort results by descending score
        **match_options: Options passed to fuzzy_match

    Returns:
        Matching items with scores
    """
    results = []
    for item in items:
        match = fuzzy_match(query, item, **match_options)
        if match:
            results.append(match)

    return _sort_and_limit(results, sort, limit)


def _text_getter(key: KeySpec) -> Callable[[Any], str]:
    """Build a callable extracting searchable text from an object."""
    if callable(key):
        return key

    def get_text(item: Any) -> str:
        if isinstance(item, Mapping):
            value = item.get(key)
        else:
            value = getattr(item, key, None)
        return "" if value is None else str(value)

    return get_text


def fuzzy_search_objects(
    query: str,
    items: Iterable[T],
    key: KeySpec,
    *,
    limit: int | None = None,
    sort: bool = True,
    **match_options: Any,
) -> list[FuzzyObjectMatch]:
    """Fuzzy search through objects by a single key.

    Args:
        query: Search query
        items: Objects to search
        key: Mapping key or attribute name, or a callable returning text
        limit: Maximum results to return
        sort: Sort results by descending score
        **match_options: Options passed to fuzzy_match

    Returns:
        Matches with the searched object attached as ``original``
    """
    get_text = _text_getter(key)
    results = []

    for item in items:
        match = fuzzy_match(query, get_text(item), **match_options)
        if match:
            results.append(
                FuzzyObjectMatch(
                    item=match.item,
                    score=match.score,
                    matches=match.matches,
                    highlighted=match.highlighted,
                    original=item,
                )
            )

    return _sort_and_limit(results, sort, limit)


def fuzzy_search_multi_key(
    query: str,
    items: Iterable[T],
    keys: Sequence[KeySpec],
    *,
    key_weights: Sequence[float] | None = None,
    limit: int | None = None,
    sort: bool = True,
    **match_options: Any,
) -> list[FuzzyObjectMatch]:
    """Fuzzy search through objects across several keys.

    Each item keeps only its best key, scored as the match score times
    the key's weight. Missing or zero weights count as 1.

    Args:
        query: Search query
        items: Objects to search
        keys: Keys or callables to evaluate for every item
        key_weights: Weight per key, aligned with ``keys``
        limit: Maximum results to return
        sort: Sort results by descending weighted score
        **match_options: Options passed to fuzzy_match

    Returns:
        Best match per item with its weighted score
    """
    getters = [_text_getter(key) for key in keys]
    weights = list(key_weights or [])
    threshold = match_options.get("threshold", 0.0) or 0.0
    results = []

    for item in items:
        best_match: FuzzyMatch | None = None
        best_score = 0.0

        for i, get_text in enumerate(getters):
            match = fuzzy_match(query, get_text(item), **match_options)
            if not match:
                continue

            weight = (weights[i] if i < len(weights) else 0) or 1.0
            weighted = match.score * weight
            if weighted > best_score:
                best_score = weighted
                best_match = match

        if best_match and best_score >= threshold:
            results.append(
                FuzzyObjectMatch(
                    item=best_match.item,
                    score=best_score,
                    matches=best_match.matches,
                    highlighted=best_match.highlighted,
                    original=item,
                )
            )

    return _sort_and_limit(results, sort, limit)
