"""
Lookup Tables - Injected reference data keyed by destination.

Tables are plain mappings of lower-case key -> value. A key matches a query
when it occurs inside the normalized query; the longest matching key wins,
and a table's "default" entry answers when nothing matches.
"""
import json
import os
import logging
from typing import Any, Dict, Mapping, Optional

from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"

RESOURCES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "resources")


def _load_json(path: str) -> Dict[str, Any]:
    """Utility to load a JSON resource file."""
    try:
        if os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        logger.warning(f"Resource not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading {path}: {e}")
    return {}


class LookupTables:
    """Reference tables with most-specific-key-wins matching."""

    def __init__(self, tables: Optional[Mapping[str, Any]] = None):
        self._tables: Dict[str, Any] = dict(tables or {})

    @classmethod
    def from_file(cls, path: str) -> "LookupTables":
        return cls(_load_json(path))

    def table(self, name: str) -> Mapping[str, Any]:
        value = self._tables.get(name)
        return value if isinstance(value, Mapping) else {}

    def entries(self, name: str) -> list:
        value = self._tables.get(name)
        return list(value) if isinstance(value, list) else []

    def match_key(self, name: str, query: Optional[str]) -> Optional[str]:
        """
        Find the most specific key of a table contained in the query.

        The query is lower-cased and tried both as-is and with whitespace
        removed, so "New York" finds "newyork" as well as "new york".
        """
        if not query:
            return None
        normalized = query.lower().strip()
        compact = "".join(normalized.split())

        best = None
        for key in self.table(name):
            if key == DEFAULT_KEY:
                continue
            needle = key.lower()
            if needle in normalized or needle in compact:
                if best is None or len(needle) > len(best):
                    best = key
        return best

    def resolve(self, name: str, query: Optional[str], default: Any = None) -> Any:
        """Value of the most specific matching key, else the table default."""
        table = self.table(name)
        key = self.match_key(name, query)
        if key is not None:
            return table[key]
        return table.get(DEFAULT_KEY, default)


# Global lookup tables instance
lookups: Optional[LookupTables] = None


def get_lookups() -> LookupTables:
    """Get or load the global lookup tables."""
    global lookups
    if lookups is None:
        path = settings.lookups_path or os.path.join(RESOURCES_DIR, "lookups.json")
        lookups = LookupTables.from_file(path)
    return lookups
