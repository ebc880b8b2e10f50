"""Core scan processing pipeline.

This module is storage- and UI-agnostic. It only relies on the key-value
port, enabling the TUI, the CLI, and tests to share one session object.

A submit runs in a strict order:
1) Parse the pasted text (a blank paste stops here)
2) Load the known-signature store (sweeps expired entries)
3) Reconcile against the loaded snapshot
4) Persist the merged store
5) Replace the active batch
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from core.annotations import AnnotationTracker
from core.config import ScanConfig
from core.known_store import Clock, KnownSignatureStore, now_ms
from core.models import DisplayRecord
from core.parser import parse_block
from core.ports import KeyValuePort
from core.reconcile import reconcile
from core.view import ViewState

LOGGER = logging.getLogger(__name__)


class ScanProcessor:
    """Orchestrates parsing, reconciliation, flags, and the active batch."""

    def __init__(self, kv: KeyValuePort, config: ScanConfig, clock: Clock = now_ms) -> None:
        self.store = KnownSignatureStore(kv, config.expiration_ms, clock)
        self.annotations = AnnotationTracker(kv)
        self.view = ViewState(kv)
        self._batch: List[DisplayRecord] = []

    @property
    def batch(self) -> List[DisplayRecord]:
        return list(self._batch)

    def submit(self, text: str, keep_known_state: bool = False) -> List[DisplayRecord]:
        """Reconcile pasted scan text and make it the active batch.

        ``keep_known_state`` carries each identifier's known flag over from
        the current batch instead of recomputing it from the store.
        """

        parsed = parse_block(text)
        if not parsed:
            # Nothing to reconcile; the store is left as it was.
            self._batch = []
            return []

        known = self.store.load()
        result = reconcile(
            parsed,
            known,
            self.annotations,
            now=self.store.now(),
            keep_known_state=keep_known_state,
            previous=self._batch,
        )
        self.store.save(result.known)
        self._batch = result.records

        LOGGER.info(
            "Reconciled %s signatures (%s new, mode=%s)",
            len(result.records),
            result.new_count,
            "refresh" if keep_known_state else "check",
        )
        return self.batch

    def visible(self) -> List[DisplayRecord]:
        """Active batch projected through the current view state."""

        return self.view.apply(self._batch)

    def find(self, identifier: str) -> Optional[DisplayRecord]:
        for record in self._batch:
            if record.identifier == identifier:
                return record
        return None

    def toggle_favourite(self, identifier: str) -> bool:
        state = self.annotations.toggle_favourite(identifier)
        self._batch = [
            replace(record, is_favourited=state) if record.identifier == identifier else record
            for record in self._batch
        ]
        return state

    def toggle_ignore(self, identifier: str) -> bool:
        state = self.annotations.toggle_ignore(identifier)
        self._batch = [
            replace(record, is_ignored=state) if record.identifier == identifier else record
            for record in self._batch
        ]
        return state

    def remove(self, identifier: str) -> None:
        """Drop a record from the active batch only; the store keeps it."""

        self._batch = [record for record in self._batch if record.identifier != identifier]

    def remove_globally(self, identifier: str) -> bool:
        """Forget a signature everywhere: flags, active batch, and store.

        Returns whether the store held an entry for it.
        """

        self.annotations.forget(identifier)
        self.remove(identifier)
        removed = self.store.remove(identifier)
        LOGGER.info("Removed signature %s globally (store entry: %s)", identifier, removed)
        return removed

    def reset(self) -> None:
        """Delete all known signatures, flags, and the active batch."""

        self.store.clear()
        self.annotations.clear()
        self._batch = []
        LOGGER.info("Cleared all known signatures and flags")
