"""Command palette combining static actions with indexed site content.

Static commands are matched with the fuzzy matcher; pages from the
search manifest are ranked by the BM25 index.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import msgspec
import yaml

from ..config import FuzzySettings
from ..exceptions import CommandNotFoundError, ConfigError
from .engine import SearchService
from .fuzzy import fuzzy_search_multi_key
from .models import Command

COMMAND_KEYS = ("label", "category", "keyword_text", "description")
COMMAND_KEY_WEIGHTS = (1.0, 0.6, 0.8, 0.4)


class ItemKind(str, Enum):
    """Kind of palette entry."""

    COMMAND = "command"
    DOCUMENT = "document"


@dataclass
class PaletteItem:
    """One row of palette results."""

    kind: ItemKind
    id: str
    label: str
    score: float
    highlighted: str
    payload: Any = None


def load_commands(path: Path | str) -> list[Command]:
    """Load palette commands from a YAML list of mappings.

    Raises:
        ConfigError: If the file cannot be read or an entry is invalid
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or []
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in commands file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Error reading commands file: {e}") from e

    try:
        return msgspec.convert(data, list[Command])
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid command in {path}: {e}") from e


class CommandPalette:
    """Searchable list of commands and site pages."""

    def __init__(
        self,
        commands: Iterable[Command] = (),
        service: SearchService | None = None,
        fuzzy: FuzzySettings | None = None,
    ):
        """Initialize palette.

        Args:
            commands: Static commands available without an index
            service: Search service for site pages
            fuzzy: Fuzzy matching settings (default: service settings)
        """
        self.service = service or SearchService()
        self.fuzzy = fuzzy or self.service.settings.fuzzy
        self._commands: dict[str, Command] = {}
        for command in commands:
            self.register(command)

    def register(self, command: Command) -> None:
        """Register a command, replacing one with the same id."""
        self._commands[command.id] = command

    def unregister(self, command_id: str) -> bool:
        """Remove a command. Returns False if it was not registered."""
        return self._commands.pop(command_id, None) is not None

    def get(self, command_id: str) -> Command:
        """Look up a registered command.

        Raises:
            CommandNotFoundError: If no command has this id
        """
        try:
            return self._commands[command_id]
        except KeyError:
            raise CommandNotFoundError(command_id) from None

    @property
    def commands(self) -> list[Command]:
        return list(self._commands.values())

    def search(self, query: str, limit: int | None = None) -> list[PaletteItem]:
        """Search commands and pages.

        A blank query lists every command followed by every page.
        Otherwise matching commands come first, then matching pages,
        each group in rank order.
        """
        if not query.strip():
            items = [self._command_item(c, 1.0, c.label) for c in self._commands.values()]
            items.extend(
                self._document_item(doc_id, doc, 1.0, None)
                for doc_id, doc in self.service.documents()
            )
            return items[:limit] if limit is not None else items

        query = query.strip()
        matches = fuzzy_search_multi_key(
            query,
            list(self._commands.values()),
            COMMAND_KEYS,
            key_weights=COMMAND_KEY_WEIGHTS,
            limit=limit,
            **self.fuzzy.match_options(),
        )
        items = [
            self._command_item(m.original, m.score, m.highlighted) for m in matches
        ]

        # A palette without a limit lists every matching page.
        remaining = len(self.service.index) if limit is None else limit - len(items)
        if remaining > 0:
            for result in self.service.search(query, limit=remaining):
                items.append(
                    self._document_item(
                        result.doc_id, result.hit.doc, result.score, result.title
                    )
                )

        return items

    def _command_item(self, command: Command, score: float, highlighted: str) -> PaletteItem:
        return PaletteItem(
            kind=ItemKind.COMMAND,
            id=command.id,
            label=command.label,
            score=score,
            highlighted=highlighted,
            payload=command,
        )

    def _document_item(
        self, doc_id: Any, doc: Any, score: float, highlighted: str | None
    ) -> PaletteItem:
        title = doc.get("title") if isinstance(doc, dict) else None
        label = str(title or doc_id)
        return PaletteItem(
            kind=ItemKind.DOCUMENT,
            id=str(doc_id),
            label=label,
            score=score,
            highlighted=highlighted if highlighted is not None else label,
            payload=doc,
        )
