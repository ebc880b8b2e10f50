"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage or UI-specific types.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ParsedRecord:
    """One signature line from a scan snapshot."""

    identifier: str
    category: str
    subcategory: str
    name: str
    signal: str
    distance: str
    signal_strength: float = 0.0

    @property
    def effective_category(self) -> str:
        return self.subcategory or self.category

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ParsedRecord":
        """Build a record from persisted JSON, raising on missing identifiers."""

        identifier = str(raw.get("identifier") or "").strip()
        if not identifier:
            raise ValueError("record is missing an identifier")
        try:
            strength = float(raw.get("signal_strength") or 0)
        except (TypeError, ValueError):
            strength = 0.0
        return cls(
            identifier=identifier,
            category=str(raw.get("category") or ""),
            subcategory=str(raw.get("subcategory") or ""),
            name=str(raw.get("name") or ""),
            signal=str(raw.get("signal") or ""),
            distance=str(raw.get("distance") or ""),
            signal_strength=strength,
        )


@dataclass(frozen=True)
class StoreEntry:
    """Best-known data for one identifier plus its last-seen time (epoch ms).

    ``data`` is None for entries written before descriptive data was kept;
    those only record that the identifier was seen.
    """

    data: Optional[ParsedRecord]
    timestamp: int


@dataclass(frozen=True)
class DisplayRecord(ParsedRecord):
    """A parsed record labelled for presentation."""

    is_known: bool = False
    is_favourited: bool = False
    is_ignored: bool = False

    @classmethod
    def from_record(
        cls,
        record: ParsedRecord,
        *,
        is_known: bool,
        is_favourited: bool,
        is_ignored: bool,
    ) -> "DisplayRecord":
        return cls(
            identifier=record.identifier,
            category=record.category,
            subcategory=record.subcategory,
            name=record.name,
            signal=record.signal,
            distance=record.distance,
            signal_strength=record.signal_strength,
            is_known=is_known,
            is_favourited=is_favourited,
            is_ignored=is_ignored,
        )
