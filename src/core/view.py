"""Sort/filter projection of a reconciled batch (core domain).

Projection never mutates the batch: it returns a new list each time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from core.models import DisplayRecord
from core.parser import parse_distance
from core.ports import KeyValuePort

LOGGER = logging.getLogger(__name__)

UNKNOWN_ONLY_FILTER_KEY = "unknown-only-filter"

ASCENDING = "ascending"
DESCENDING = "descending"

SORT_KEYS: dict[str, Callable[[DisplayRecord], Any]] = {
    "id": lambda record: record.identifier.casefold(),
    "status": lambda record: record.is_known,
    "type": lambda record: record.effective_category.casefold(),
    "name": lambda record: record.name.casefold(),
    "signal": lambda record: record.signal_strength,
    "distance": lambda record: parse_distance(record.distance),
}


@dataclass(frozen=True)
class SortConfig:
    """Active sort column; ``key=None`` keeps batch order."""

    key: Optional[str] = None
    direction: str = ASCENDING

    def __post_init__(self) -> None:
        if self.key is not None and self.key not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key: {self.key}")
        if self.direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unsupported sort direction: {self.direction}")


UNSORTED = SortConfig()


def next_sort(current: SortConfig, key: str) -> SortConfig:
    """Advance the header-click cycle: ascending, descending, then unsorted."""

    if current.key != key:
        return SortConfig(key=key, direction=ASCENDING)
    if current.direction == ASCENDING:
        return SortConfig(key=key, direction=DESCENDING)
    return UNSORTED


def project(
    records: Iterable[DisplayRecord],
    sort: SortConfig = UNSORTED,
    unknown_only: bool = False,
) -> List[DisplayRecord]:
    """Return the records to show, sorted and filtered."""

    items = list(records)
    if sort.key is not None:
        # sorted() is stable and reverse=True keeps ties in batch order.
        items = sorted(items, key=SORT_KEYS[sort.key], reverse=sort.direction == DESCENDING)
    if unknown_only:
        items = [record for record in items if not record.is_known]
    return items


class ViewState:
    """Sort and filter state; only the unknown-only flag is persisted."""

    def __init__(self, kv: KeyValuePort) -> None:
        self._kv = kv
        self.sort = UNSORTED
        raw = kv.get(UNKNOWN_ONLY_FILTER_KEY)
        if raw is not None and not isinstance(raw, bool):
            LOGGER.warning("Ignoring %s with unexpected value: %r", UNKNOWN_ONLY_FILTER_KEY, raw)
            raw = None
        self._unknown_only = bool(raw)

    @property
    def unknown_only(self) -> bool:
        return self._unknown_only

    @unknown_only.setter
    def unknown_only(self, value: bool) -> None:
        self._unknown_only = bool(value)
        self._kv.set(UNKNOWN_ONLY_FILTER_KEY, self._unknown_only)

    def sort_by(self, key: str) -> SortConfig:
        self.sort = next_sort(self.sort, key)
        return self.sort

    def apply(self, records: Iterable[DisplayRecord]) -> List[DisplayRecord]:
        return project(records, self.sort, self._unknown_only)
