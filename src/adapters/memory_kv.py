"""In-memory key-value adapter.

Values go through a JSON round-trip on write so callers see exactly what a
persistent backend would hand back.
"""

from __future__ import annotations

import json
from typing import Any


class InMemoryKeyValueStore:
    """Dict-backed KeyValuePort for previews and tests."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
