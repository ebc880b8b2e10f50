"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

MS_PER_DAY = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class ScanConfig:
    """Known-signature retention settings for the core pipeline."""

    expiration_days: float = 3

    def __post_init__(self) -> None:
        if self.expiration_days <= 0:
            raise ValueError(f"expiration_days must be positive, got {self.expiration_days}")

    @property
    def expiration_ms(self) -> int:
        return int(self.expiration_days * MS_PER_DAY)
