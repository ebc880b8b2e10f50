"""Batch reconciliation against the known-signature store (core domain).

Every record in a batch gets its known flag from the same pre-batch snapshot
of the store, so an earlier record never makes a later one known. When an
identifier repeats inside a batch, the later copy merges into the entry the
earlier copy wrote, so its displayed data and the stored entry are the best
reading seen so far in the batch.

Two modes:
- check (default): a record is known when the snapshot holds its identifier
- refresh (``keep_known_state``): the known flag is copied from the previous
  batch, and identifiers absent from it are new

In both modes the store is merged the same way. The entry keeps the data of
the strongest reading seen, because signal strength only rises as the scanner
closes in and a weaker later reading says nothing about the site itself. The
timestamp always moves to ``now`` so re-observed signatures do not expire.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Iterable, List, Optional, Protocol, Sequence

from core.models import DisplayRecord, ParsedRecord, StoreEntry

LOGGER = logging.getLogger(__name__)

_DESCRIPTIVE_FIELDS = tuple(
    field.name
    for field in fields(ParsedRecord)
    if field.name not in {"identifier", "signal_strength"}
)


class FlagLookup(Protocol):
    def is_favourited(self, identifier: str) -> bool:
        ...

    def is_ignored(self, identifier: str) -> bool:
        ...


@dataclass(frozen=True)
class Reconciliation:
    """Result of one reconciliation pass."""

    known: dict[str, StoreEntry]
    records: List[DisplayRecord]

    @property
    def new_count(self) -> int:
        return sum(1 for record in self.records if not record.is_known)


def merge_entry(prior: Optional[StoreEntry], record: ParsedRecord, now: int) -> StoreEntry:
    """Best-signal-wins merge of a fresh reading into a store entry."""

    if prior is None or prior.data is None:
        return StoreEntry(data=record, timestamp=now)
    if record.signal_strength >= prior.data.signal_strength:
        return StoreEntry(data=record, timestamp=now)
    return StoreEntry(data=prior.data, timestamp=now)


def prefer_remembered(record: ParsedRecord, remembered: ParsedRecord) -> ParsedRecord:
    """Overlay remembered descriptive fields onto a fresh reading.

    Empty remembered fields fall back to the fresh value.
    """

    overrides = {
        name: getattr(remembered, name)
        for name in _DESCRIPTIVE_FIELDS
        if getattr(remembered, name)
    }
    return replace(record, signal_strength=remembered.signal_strength, **overrides)


def reconcile(
    batch: Sequence[ParsedRecord],
    known: dict[str, StoreEntry],
    flags: FlagLookup,
    now: int,
    keep_known_state: bool = False,
    previous: Optional[Iterable[DisplayRecord]] = None,
) -> Reconciliation:
    """Label a parsed batch and compute the updated store mapping.

    ``known`` is not modified; the merged mapping is returned in the result.
    """

    snapshot = dict(known)
    updated = dict(known)
    previous_by_id = {record.identifier: record for record in previous or ()}

    records: List[DisplayRecord] = []
    for record in batch:
        identifier = record.identifier
        prior = snapshot.get(identifier)

        if keep_known_state:
            carried = previous_by_id.get(identifier)
            is_known = carried.is_known if carried is not None else False
        else:
            is_known = prior is not None

        # Duplicates within one batch merge into the entry written by the
        # earlier occurrence, so the store still ends up with the best reading.
        merged = merge_entry(updated.get(identifier), record, now)
        updated[identifier] = merged

        shown = record
        if not keep_known_state and is_known and merged.data is not None:
            shown = prefer_remembered(record, merged.data)

        records.append(
            DisplayRecord.from_record(
                shown,
                is_known=is_known,
                is_favourited=flags.is_favourited(identifier),
                is_ignored=flags.is_ignored(identifier),
            )
        )

    return Reconciliation(known=updated, records=records)
