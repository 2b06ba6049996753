"""Shared fixtures for search module tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from sitesearch.search import Command, SearchIndex


@pytest.fixture
def content_documents() -> dict[int, dict[str, Any]]:
    """Small corpus indexed on a single content field."""
    return {
        1: {"content": "Learn JavaScript programming"},
        2: {"content": "TypeScript is typed JavaScript"},
        3: {"content": "Python basics"},
    }


@pytest.fixture
def content_index(content_documents) -> SearchIndex:
    """Index over the content corpus."""
    index = SearchIndex(fields=["content"])
    index.add_all(content_documents.items())
    return index


@pytest.fixture
def title_index() -> SearchIndex:
    """Index over three page titles."""
    index = SearchIndex(fields=["title"])
    index.add(1, {"id": 1, "title": "Hello World"})
    index.add(2, {"id": 2, "title": "JavaScript Guide"})
    index.add(3, {"id": 3, "title": "TypeScript Tutorial"})
    return index


@pytest.fixture
def manifest_records() -> list[dict[str, Any]]:
    """Records in the site's search manifest format."""
    return [
        {
            "id": "blog-hello",
            "title": "Hello World",
            "description": "The first post on this blog, saying hello to everyone.",
            "category": "Blog",
            "url": "/blog/hello-world",
            "tags": ["intro", "meta"],
            "date": "2024-01-05",
        },
        {
            "id": "guide-js",
            "title": "JavaScript Guide",
            "description": "A practical guide to modern JavaScript for the browser.",
            "category": "Guides",
            "url": "/guides/javascript",
            "tags": ["javascript", "web"],
        },
        {
            "id": "guide-ts",
            "title": "TypeScript Tutorial",
            "description": "Learn how TypeScript adds static types to JavaScript.",
            "category": "Guides",
            "url": "/guides/typescript",
            "tags": ["typescript", "javascript"],
        },
    ]


@pytest.fixture
def manifest_file(tmp_path: Path, manifest_records) -> Path:
    """Manifest records written to a JSON file."""
    path = tmp_path / "search-index.json"
    path.write_text(json.dumps(manifest_records))
    return path


@pytest.fixture
def palette_commands() -> list[Command]:
    """Static palette commands."""
    return [
        Command(
            id="toggle-theme",
            label="Toggle Theme",
            category="Settings",
            keywords=["dark", "light"],
            description="Switch between color schemes",
        ),
        Command(
            id="go-home",
            label="Go Home",
            category="Navigation",
            keywords=["index"],
        ),
    ]
