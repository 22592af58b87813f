"""YAML loading and parsing for schema catalogs."""

import logging
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import SchemaLoadError, SchemaValidationError
from .models import SchemaCatalog, SchemaEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_RESOURCE = "catalog.yml"

# A top-level "Type:" line opens a new entry in the reference-sheet layout
_ENTRY_START = re.compile(r"^Type\s*:", re.MULTILINE)
_DOCUMENT_SEPARATOR = re.compile(r"^---[ \t]*$", re.MULTILINE)
_BLANK_LINE = re.compile(r"\n[ \t]*\n")


def load_catalog(path: str | Path) -> SchemaCatalog:
    """Load a schema catalog file.

    Args:
        path: Path to the catalog YAML file.

    Returns:
        The parsed SchemaCatalog.

    Raises:
        SchemaLoadError: If the file cannot be read or parsed.
        SchemaValidationError: If an entry fails validation.
    """
    path = Path(path)

    if not path.exists():
        raise SchemaLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise SchemaLoadError(f"Not a file: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read file: {e}", str(path)) from e

    try:
        catalog = parse_catalog_from_string(text)
    except SchemaLoadError as e:
        raise SchemaLoadError(str(e), str(path)) from e

    logger.debug("Loaded %d schema entries from %s", len(catalog), path)
    return catalog


@lru_cache(maxsize=1)
def load_default_catalog() -> SchemaCatalog:
    """Load the catalog bundled with the package.

    The result is cached for the lifetime of the process.
    """
    text = (
        resources.files("stacklint.data")
        .joinpath(DEFAULT_CATALOG_RESOURCE)
        .read_text(encoding="utf-8")
    )
    catalog = parse_catalog_from_string(text)
    logger.debug("Loaded bundled catalog with %d entries", len(catalog))
    return catalog


def parse_catalog_from_string(text: str) -> SchemaCatalog:
    """Parse catalog text into a SchemaCatalog.

    Entries are separated by ``---`` or simply start at a top-level
    ``Type:`` line.

    Raises:
        SchemaLoadError: If the YAML cannot be parsed.
        SchemaValidationError: If an entry fails validation.
    """
    entries: dict[str, SchemaEntry] = {}
    errors: list[dict] = []

    for index, chunk in enumerate(_split_documents(text)):
        try:
            data = yaml.safe_load(chunk)
        except yaml.YAMLError as e:
            raise SchemaLoadError(f"Invalid YAML in catalog entry {index}: {e}") from e

        if data is None:
            continue

        if not isinstance(data, dict):
            raise SchemaLoadError(
                f"Expected YAML mapping for catalog entry {index}, "
                f"got {type(data).__name__}"
            )

        try:
            entry = SchemaEntry.model_validate(data)
        except ValidationError as e:
            label = data.get("Type", index)
            errors.extend(
                {
                    "loc": ".".join([str(label)] + [str(x) for x in err["loc"]]),
                    "msg": err["msg"],
                    "type": err["type"],
                }
                for err in e.errors()
            )
            continue

        existing = entries.get(entry.name)
        if existing is None:
            entries[entry.name] = entry
        elif existing != entry:
            errors.append(
                {
                    "loc": entry.name,
                    "msg": "Conflicting duplicate catalog entry",
                    "type": "duplicate_entry",
                }
            )
        else:
            logger.debug("Ignoring repeated catalog entry %s", entry.name)

    if errors:
        raise SchemaValidationError(
            f"Catalog validation failed with {len(errors)} error(s)", errors
        )

    return SchemaCatalog(entries=entries)


def _split_documents(text: str) -> list[str]:
    """Split catalog text into one chunk per entry.

    An entry runs from its top-level ``Type:`` line to the next one. Keys
    written above ``Type:`` belong to it when they follow a blank line and
    start at column 0.
    """
    chunks: list[str] = []
    for document in _DOCUMENT_SEPARATOR.split(text):
        starts = [m.start() for m in _ENTRY_START.finditer(document)]
        if len(starts) <= 1:
            chunks.append(document)
            continue

        # Anything before the first Type line belongs to the first entry
        bounds = [0]
        for previous, start in zip(starts, starts[1:]):
            bounds.append(_entry_boundary(document, previous, start))
        bounds.append(len(document))
        chunks.extend(document[a:b] for a, b in zip(bounds, bounds[1:]))

    return chunks


def _entry_boundary(document: str, previous: int, start: int) -> int:
    blanks = list(_BLANK_LINE.finditer(document, previous, start))
    if not blanks:
        return start

    head = blanks[-1].end()
    block = document[head:start].lstrip("\n")
    if not block or block[0] in " \t":
        return start
    return head
