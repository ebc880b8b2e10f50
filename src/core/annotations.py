"""Favourite/ignore flags per signature identifier (core domain).

Flags are independent of reconciliation: an identifier keeps its flags even
after its known-signature entry expires.
"""

from __future__ import annotations

import logging
from typing import Iterator

from core.ports import KeyValuePort

LOGGER = logging.getLogger(__name__)

FAVOURITED_SIGNATURES_KEY = "favourited-signatures"
IGNORED_SIGNATURES_KEY = "ignored-signatures"


class AnnotationSet:
    """A persisted set of identifiers, written in full after every change."""

    def __init__(self, kv: KeyValuePort, key: str) -> None:
        self._kv = kv
        self._key = key
        self._ids = self._read()

    def _read(self) -> set[str]:
        raw = self._kv.get(self._key)
        if raw is None:
            return set()
        if not isinstance(raw, list):
            LOGGER.warning("Ignoring %s with unexpected shape: %s", self._key, type(raw).__name__)
            return set()
        return {item for item in raw if isinstance(item, str) and item}

    def _persist(self) -> None:
        self._kv.set(self._key, sorted(self._ids))

    def contains(self, identifier: str) -> bool:
        return identifier in self._ids

    __contains__ = contains

    def toggle(self, identifier: str) -> bool:
        """Flip membership and return the new state."""

        if identifier in self._ids:
            self._ids.remove(identifier)
            state = False
        else:
            self._ids.add(identifier)
            state = True
        self._persist()
        return state

    def discard(self, identifier: str) -> bool:
        if identifier not in self._ids:
            return False
        self._ids.remove(identifier)
        self._persist()
        return True

    def clear(self) -> None:
        self._ids.clear()
        self._kv.delete(self._key)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)


class AnnotationTracker:
    """Favourited and ignored identifier sets."""

    def __init__(self, kv: KeyValuePort) -> None:
        self.favourites = AnnotationSet(kv, FAVOURITED_SIGNATURES_KEY)
        self.ignored = AnnotationSet(kv, IGNORED_SIGNATURES_KEY)

    def is_favourited(self, identifier: str) -> bool:
        return self.favourites.contains(identifier)

    def is_ignored(self, identifier: str) -> bool:
        return self.ignored.contains(identifier)

    def toggle_favourite(self, identifier: str) -> bool:
        return self.favourites.toggle(identifier)

    def toggle_ignore(self, identifier: str) -> bool:
        return self.ignored.toggle(identifier)

    def forget(self, identifier: str) -> None:
        """Drop the identifier from both sets."""

        self.favourites.discard(identifier)
        self.ignored.discard(identifier)

    def clear(self) -> None:
        self.favourites.clear()
        self.ignored.clear()
