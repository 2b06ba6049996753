"""Data models for search functionality using msgspec for records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import msgspec

DocId = str | int


class ManifestRecord(msgspec.Struct, frozen=True, kw_only=True):
    """A page record from the site's generated search manifest.

    Uses msgspec.Struct so manifests decode straight into typed records.
    """

    id: str
    title: str
    description: str = ""
    category: str = ""
    url: str = ""
    tags: list[str] = msgspec.field(default_factory=list)
    date: str | None = None

    def to_document(self) -> dict[str, Any]:
        """Convert to the plain mapping stored in the search index."""
        return msgspec.to_builtins(self)


class Command(msgspec.Struct, frozen=True, kw_only=True):
    """A static command palette action."""

    id: str
    label: str
    category: str = ""
    keywords: list[str] = msgspec.field(default_factory=list)
    description: str = ""

    @property
    def keyword_text(self) -> str:
        """Keywords joined into searchable text."""
        return " ".join(self.keywords)


@dataclass
class Posting:
    """Occurrences of one term in one field of one document."""

    doc_id: DocId
    field: str
    positions: list[int]
    tf: float


@dataclass
class FuzzyMatch:
    """Result of fuzzy matching a query against a string."""

    item: str
    score: float
    matches: list[int] = field(default_factory=list)
    highlighted: str = ""


@dataclass
class FuzzyObjectMatch(FuzzyMatch):
    """Fuzzy match carrying the object the text was taken from."""

    original: Any = None


@dataclass
class SearchHit:
    """A single ranked document from the inverted index."""

    doc_id: DocId
    doc: Any
    score: float
