"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for persistence so that the core can be
reused with different backends.
"""

from __future__ import annotations

from typing import Any, Protocol


class KeyValuePort(Protocol):
    """String-keyed store of JSON-serializable values."""

    def get(self, key: str) -> Any:
        """Return the stored value, or None when absent or unreadable."""
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...
