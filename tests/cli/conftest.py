"""Pytest configuration and fixtures for CLI tests."""

import json

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner():
    """Click CLI test runner bound to the sitesearch group."""

    class SiteSearchCliRunner(CliRunner):
        def invoke(self, args, **kwargs):  # type: ignore
            from sitesearch.cli.main import cli

            return super().invoke(cli, args, **kwargs)

    return SiteSearchCliRunner()


@pytest.fixture
def manifest_file(tmp_path):
    """Site manifest with three pages."""
    path = tmp_path / "search-index.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "blog-hello",
                    "title": "Hello World",
                    "description": "The first post on this blog.",
                    "category": "Blog",
                    "url": "/blog/hello-world",
                    "tags": ["intro"],
                },
                {
                    "id": "guide-js",
                    "title": "JavaScript Guide",
                    "description": "A practical guide to modern JavaScript.",
                    "category": "Guides",
                    "url": "/guides/javascript",
                    "tags": ["javascript"],
                },
                {
                    "id": "guide-ts",
                    "title": "TypeScript Tutorial",
                    "description": "Learn how TypeScript adds types to JavaScript.",
                    "category": "Guides",
                    "url": "/guides/typescript",
                    "tags": ["typescript", "javascript"],
                },
            ]
        )
    )
    return path


@pytest.fixture
def commands_file(tmp_path):
    """Palette commands in YAML."""
    path = tmp_path / "commands.yaml"
    path.write_text(
        "- id: toggle-theme\n"
        "  label: Toggle Theme\n"
        "  category: Settings\n"
        "  keywords: [dark, light]\n"
        "- id: go-home\n"
        "  label: Go Home\n"
        "  category: Navigation\n"
    )
    return path
