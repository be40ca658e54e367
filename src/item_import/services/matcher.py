from __future__ import annotations

from collections.abc import Iterable

from ..models.reference import Category, UnitOfMeasure

"""Reference matcher: resolves category / unit display text to ids.

Matching is exact after trimming and lower-casing; there is no fuzzy or
partial matching. Blank text resolves to None without an error (both
columns are optional). When the reference lists hold duplicate names or
codes, the entry that comes first in list order wins.
"""

__all__ = [
    "ReferenceMatcher",
]


def _key(text: str | None) -> str:
    return (text or "").strip().lower()


class ReferenceMatcher:
    """Case-insensitive lookup over preloaded categories and units."""

    def __init__(
        self,
        categories: Iterable[Category] = (),
        uom_types: Iterable[UnitOfMeasure] = (),
    ) -> None:
        self.categories = list(categories)
        self.uom_types = list(uom_types)
        self._category_index: dict[str, str] = {}
        self._uom_index: dict[str, str] = {}
        for c in self.categories:
            # setdefault keeps the first entry for a duplicated key
            self._category_index.setdefault(c.name.lower(), c.id)
            if c.code:
                self._category_index.setdefault(c.code.lower(), c.id)
        for u in self.uom_types:
            self._uom_index.setdefault(u.code.lower(), u.id)
            self._uom_index.setdefault(u.name.lower(), u.id)

    def match_category(self, text: str | None) -> str | None:
        key = _key(text)
        if not key:
            return None
        return self._category_index.get(key)

    def match_uom(self, text: str | None) -> str | None:
        key = _key(text)
        if not key:
            return None
        return self._uom_index.get(key)
