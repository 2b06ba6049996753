"""Command-line interface for sitesearch."""

from sitesearch.cli.main import cli, main

__all__ = ["cli", "main"]
