"""Full-text and fuzzy search for the site command palette."""

__version__ = "1.0.0"
