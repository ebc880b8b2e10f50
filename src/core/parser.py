"""Scan snapshot parsing (core domain).

Input is the text copied from an in-game probe scanner: one signature per
line, tab-separated ``id, category, subcategory, name, signal%, distance``.
Parsing is tolerant: anything that does not look like a signature line is
dropped without raising.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from core.models import ParsedRecord

LOGGER = logging.getLogger(__name__)

FIELD_SEPARATOR = "\t"
MIN_FIELDS = 6

_LEADING_FLOAT = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_FIRST_NUMBER = re.compile(r"[\d.]+")


def parse_signal_strength(text: str) -> float:
    """Return the leading float of a signal column (``"10.2%"`` -> 10.2), else 0."""

    match = _LEADING_FLOAT.match(text)
    if not match:
        return 0.0
    return float(match.group(1))


def parse_distance(text: str) -> float:
    """Return the first numeric run in a distance column, else 0."""

    match = _FIRST_NUMBER.search(text)
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        # A run of dots only, e.g. "..."
        return 0.0


def parse_line(line: str) -> Optional[ParsedRecord]:
    """Parse one snapshot line, or return None when it is not a signature."""

    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < MIN_FIELDS:
        return None

    identifier = parts[0].strip()
    if not identifier:
        return None

    return ParsedRecord(
        identifier=identifier,
        category=parts[1].strip(),
        subcategory=parts[2].strip(),
        name=parts[3].strip(),
        signal=parts[4].strip(),
        distance=parts[5].strip(),
        signal_strength=parse_signal_strength(parts[4]),
    )


def parse_block(text: str) -> List[ParsedRecord]:
    """Parse a pasted block, keeping line order and dropping rejects."""

    records: List[ParsedRecord] = []
    for line in text.strip().split("\n"):
        record = parse_line(line)
        if record is None:
            LOGGER.debug("Skipping unparseable scan line: %r", line)
            continue
        records.append(record)
    return records
