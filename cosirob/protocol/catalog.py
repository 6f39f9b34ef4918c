from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from .parsing import placeholders
from .types import CatalogError, CommandDefinition, CommandNotFound

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).with_name("commands.json")
SCHEMA_ROOT_KEY = "CosirobCommands"


class CommandCatalog:
    """
    Read-only mapping of command code -> CommandDefinition.

    Iteration and list() follow the order in which the schema declares commands.
    """

    def __init__(self, definitions: Mapping[str, CommandDefinition]) -> None:
        for code, definition in definitions.items():
            if not placeholders(definition.syntax):
                raise CatalogError(
                    f"Command {code!r} syntax has no channel placeholder: {definition.syntax!r}"
                )
        self._defs: dict[str, CommandDefinition] = dict(definitions)

    def __contains__(self, code: object) -> bool:
        return code in self._defs

    def __iter__(self) -> Iterator[str]:
        return iter(self._defs)

    def __len__(self) -> int:
        return len(self._defs)

    def lookup(self, code: str) -> CommandDefinition:
        try:
            return self._defs[code]
        except KeyError:
            raise CommandNotFound(code) from None

    def parameter_names(self, code: str) -> list[str]:
        """Placeholder names for code, excluding the leading channel."""
        return placeholders(self.lookup(code).syntax)[1:]

    def parameter_count(self, code: str) -> int:
        return len(self.parameter_names(code))

    def mnemonic(self, code: str) -> str:
        """
        Literal command token that goes on the wire for code.

        This is the first token after the channel placeholder in the syntax
        (e.g. "st?" for the "st_query" entry); falls back to the code itself.
        """
        syntax = self.lookup(code).syntax
        tokens = [t for t in syntax.split() if not (t.startswith("<") and t.endswith(">"))]
        return tokens[0] if tokens else code

    def list(self) -> list[tuple[str, CommandDefinition]]:
        return list(self._defs.items())


def _pairs_no_duplicates(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in pairs:
        if key in out:
            raise CatalogError(f"Duplicate command code in schema: {key!r}")
        out[key] = value
    return out


def parse_catalog(text: str) -> CommandCatalog:
    """Build a catalog from JSON schema text ({"CosirobCommands": {code: {...}}})."""
    try:
        data = json.loads(text, object_pairs_hook=_pairs_no_duplicates)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid command schema: {e}") from e

    raw = data.get(SCHEMA_ROOT_KEY) if isinstance(data, dict) else None
    if not isinstance(raw, dict):
        raise CatalogError(f"Command schema missing {SCHEMA_ROOT_KEY!r} object")

    defs: dict[str, CommandDefinition] = {}
    for code, entry in raw.items():
        try:
            defs[code] = CommandDefinition(
                syntax=str(entry["syntax"]),
                description=str(entry.get("description", "")),
                example=str(entry.get("example", "")),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise CatalogError(f"Malformed entry for command {code!r}: {e}") from e
    return CommandCatalog(defs)


def load_catalog(path: str | Path | None = None) -> CommandCatalog:
    """Load the command schema from path (defaults to the bundled commands.json)."""
    schema_path = Path(path) if path is not None else DEFAULT_SCHEMA_PATH
    catalog = parse_catalog(schema_path.read_text(encoding="utf-8"))
    logger.debug("Loaded %d command definitions from %s", len(catalog), schema_path)
    return catalog
