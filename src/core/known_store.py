"""Persistent, time-limited store of previously seen signatures.

Entries are swept for expiry eagerly on ``load`` and the pruned mapping is
written straight back, so persisted state never holds an entry that a
previous load already considered expired.

Two on-disk shapes exist for an entry:
- ``{"data": {...}, "timestamp": ms}``: current shape
- ``ms``: legacy bare timestamp, seen but with no remembered data

Both decode to ``StoreEntry``; legacy entries get ``data=None``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from core.models import ParsedRecord, StoreEntry
from core.ports import KeyValuePort

LOGGER = logging.getLogger(__name__)

KNOWN_SIGNATURES_KEY = "known-signatures"

Clock = Callable[[], int]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""

    return int(datetime.now(timezone.utc).timestamp() * 1000)


def decode_entry(identifier: str, raw: Any) -> Optional[StoreEntry]:
    """Decode one persisted value, returning None when it is unusable."""

    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return StoreEntry(data=None, timestamp=int(raw))
    if not isinstance(raw, dict):
        return None

    timestamp = raw.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None

    data = raw.get("data")
    if not isinstance(data, dict):
        return StoreEntry(data=None, timestamp=int(timestamp))
    try:
        record = ParsedRecord.from_dict({"identifier": identifier, **data})
    except ValueError:
        return None
    return StoreEntry(data=record, timestamp=int(timestamp))


def encode_entry(entry: StoreEntry) -> Any:
    """Encode an entry for persistence.

    Legacy entries keep their bare-timestamp shape until new data upgrades
    them during reconciliation.
    """

    if entry.data is None:
        return entry.timestamp
    return {"data": entry.data.to_dict(), "timestamp": entry.timestamp}


class KnownSignatureStore:
    """Known-signature mapping backed by a key-value port."""

    def __init__(self, kv: KeyValuePort, expiration_ms: int, clock: Clock = now_ms) -> None:
        self._kv = kv
        self._expiration_ms = expiration_ms
        self._clock = clock

    @property
    def expiration_ms(self) -> int:
        return self._expiration_ms

    def now(self) -> int:
        return self._clock()

    def load(self) -> dict[str, StoreEntry]:
        """Return non-expired entries and persist the pruned mapping."""

        raw = self._kv.get(KNOWN_SIGNATURES_KEY)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring known signatures with unexpected shape: %s", type(raw).__name__)
            raw = {}

        now = self._clock()
        fresh: dict[str, StoreEntry] = {}
        expired = 0
        for identifier, value in raw.items():
            entry = decode_entry(identifier, value)
            if entry is None:
                LOGGER.warning("Dropping unreadable known signature %s", identifier)
                continue
            if now - entry.timestamp >= self._expiration_ms:
                expired += 1
                continue
            fresh[identifier] = entry

        if expired:
            LOGGER.info("Expired %s known signatures", expired)
        self.save(fresh)
        return fresh

    def save(self, entries: dict[str, StoreEntry]) -> None:
        """Replace persisted state wholesale."""

        payload = {identifier: encode_entry(entry) for identifier, entry in entries.items()}
        self._kv.set(KNOWN_SIGNATURES_KEY, payload)

    def remove(self, identifier: str) -> bool:
        """Delete one entry and persist; returns whether it was present."""

        entries = self.load()
        if entries.pop(identifier, None) is None:
            return False
        self.save(entries)
        return True

    def clear(self) -> None:
        self._kv.delete(KNOWN_SIGNATURES_KEY)
