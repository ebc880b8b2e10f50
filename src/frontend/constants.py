"""Shared constants for the Textual UI."""

from __future__ import annotations

SCANNER_GREEN = "#22C55E"
FAVOURITE_YELLOW = "#FACC15"

COLUMNS = (
    ("ID", "id", 10),
    ("Status", "status", 8),
    ("Type", "type", 18),
    ("Name", "name", 32),
    ("Signal", "signal", 16),
    ("Distance", "distance", 12),
    ("", "flags", 4),
)

SAMPLE_DATA = "\n".join(
    [
        "IVW-652\tCosmic Signature\t\t\t0.0%\t34.37 AU",
        "LLX-689\tCosmic Signature\tCombat Site\tAmarr Rendezvous Point\t100.0%\t15.77 AU",
        "OQW-108\tCosmic Signature\t\t\t10.2%\t14.80 AU",
        "VRZ-889\tCosmic Anomaly\tCombat Site\tMinmatar Medium NVY-1\t100.0%\t9.25 AU",
        "NXJ-579\tCosmic Anomaly\tOre Site\tMedium Jaspet Deposit\t100.0%\t4.22 AU",
    ]
)
