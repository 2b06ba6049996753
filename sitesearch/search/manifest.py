"""Loading of the site's generated search manifest.

The manifest is a JSON array of page records::

    [{"id": "blog-hello", "title": "Hello", "description": "...",
      "category": "Blog", "url": "/blog/hello", "tags": ["intro"]}]
"""

import logging
from collections.abc import Iterable
from pathlib import Path

import msgspec

from ..exceptions import ManifestError
from .indexing.index import SearchIndex
from .models import ManifestRecord

logger = logging.getLogger(__name__)


def parse_manifest(data: bytes | str, source: str | None = None) -> list[ManifestRecord]:
    """Decode manifest JSON into records.

    Args:
        data: Raw JSON document
        source: Name used in error messages

    Returns:
        Records in manifest order

    Raises:
        ManifestError: If the JSON is malformed, has the wrong shape,
            or repeats an id
    """
    try:
        raw = msgspec.json.decode(data)
    except msgspec.DecodeError as e:
        raise ManifestError(f"Invalid JSON: {e}", source) from e

    try:
        records = msgspec.convert(raw, list[ManifestRecord])
    except msgspec.ValidationError as e:
        raise ManifestError(f"Invalid manifest record: {e}", source) from e

    seen: set[str] = set()
    for record in records:
        if record.id in seen:
            raise ManifestError(f"Duplicate record id '{record.id}'", source)
        seen.add(record.id)

    return records


def load_manifest(path: Path | str) -> list[ManifestRecord]:
    """Read and decode a manifest file."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ManifestError(f"Cannot read manifest: {e}", str(path)) from e

    records = parse_manifest(data, str(path))
    logger.info("Loaded %d records from %s", len(records), path)
    return records


def index_manifest(index: SearchIndex, records: Iterable[ManifestRecord]) -> int:
    """Add manifest records to an index keyed by record id.

    Returns:
        Number of records indexed
    """
    count = 0
    for record in records:
        index.add(record.id, record.to_document())
        count += 1
    return count
