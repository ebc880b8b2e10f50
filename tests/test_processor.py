from __future__ import annotations

from adapters.memory_kv import InMemoryKeyValueStore
from core.annotations import FAVOURITED_SIGNATURES_KEY
from core.config import MS_PER_DAY, ScanConfig
from core.known_store import KNOWN_SIGNATURES_KEY
from core.processor import ScanProcessor

NOW = 1_700_000_000_000

SAMPLE = "\n".join(
    [
        "IVW-652\tCosmic Signature\t\t\t0.0%\t34.37 AU",
        "LLX-689\tCosmic Signature\tCombat Site\tAmarr Rendezvous Point\t100.0%\t15.77 AU",
        "OQW-108\tCosmic Signature\t\t\t10.2%\t14.80 AU",
    ]
)


class FakeClock:
    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def _processor(kv: InMemoryKeyValueStore, clock: FakeClock, days: float = 3) -> ScanProcessor:
    return ScanProcessor(kv, ScanConfig(expiration_days=days), clock)


def test_resubmitting_same_batch_marks_everything_known() -> None:
    processor = _processor(InMemoryKeyValueStore(), FakeClock(NOW))

    first = processor.submit(SAMPLE)
    second = processor.submit(SAMPLE)

    assert [record.is_known for record in first] == [False, False, False]
    assert [record.is_known for record in second] == [True, True, True]


def test_favourite_survives_resubmission() -> None:
    kv = InMemoryKeyValueStore()
    processor = _processor(kv, FakeClock(NOW))
    processor.submit("AAA-111\tCosmic Signature\t\t\t0.0%\t10.00 AU")

    assert processor.toggle_favourite("AAA-111") is True
    assert processor.batch[0].is_favourited is True

    records = processor.submit("AAA-111\tCosmic Signature\t\t\t0.0%\t10.00 AU")
    assert records[0].is_favourited is True
    assert kv.get(FAVOURITED_SIGNATURES_KEY) == ["AAA-111"]


def test_toggle_ignore_updates_active_batch() -> None:
    processor = _processor(InMemoryKeyValueStore(), FakeClock(NOW))
    processor.submit(SAMPLE)

    processor.toggle_ignore("OQW-108")
    assert processor.find("OQW-108").is_ignored is True

    processor.toggle_ignore("OQW-108")
    assert processor.find("OQW-108").is_ignored is False


def test_remove_only_drops_from_active_batch() -> None:
    kv = InMemoryKeyValueStore()
    processor = _processor(kv, FakeClock(NOW))
    processor.submit(SAMPLE)

    processor.remove("IVW-652")

    assert processor.find("IVW-652") is None
    assert "IVW-652" in kv.get(KNOWN_SIGNATURES_KEY)
    assert processor.submit(SAMPLE)[0].is_known is True


def test_remove_globally_purges_store_flags_and_batch() -> None:
    kv = InMemoryKeyValueStore()
    processor = _processor(kv, FakeClock(NOW))
    processor.submit(SAMPLE)
    processor.toggle_favourite("IVW-652")
    processor.toggle_ignore("IVW-652")

    assert processor.remove_globally("IVW-652") is True

    assert processor.find("IVW-652") is None
    assert "IVW-652" not in kv.get(KNOWN_SIGNATURES_KEY)
    assert not processor.annotations.is_favourited("IVW-652")
    assert not processor.annotations.is_ignored("IVW-652")
    assert processor.submit(SAMPLE)[0].is_known is False
    assert processor.remove_globally("NOPE-000") is False


def test_reset_clears_everything_but_the_filter() -> None:
    kv = InMemoryKeyValueStore()
    processor = _processor(kv, FakeClock(NOW))
    processor.submit(SAMPLE)
    processor.toggle_favourite("LLX-689")
    processor.view.unknown_only = True

    processor.reset()

    assert processor.batch == []
    assert kv.get(KNOWN_SIGNATURES_KEY) is None
    assert kv.get(FAVOURITED_SIGNATURES_KEY) is None
    assert processor.view.unknown_only is True
    assert [record.is_known for record in processor.submit(SAMPLE)] == [False, False, False]


def test_blank_submission_empties_batch_and_keeps_store() -> None:
    kv = InMemoryKeyValueStore()
    processor = _processor(kv, FakeClock(NOW))
    processor.submit(SAMPLE)
    stored = kv.get(KNOWN_SIGNATURES_KEY)

    assert processor.submit("   \n") == []
    assert processor.batch == []
    assert kv.get(KNOWN_SIGNATURES_KEY) == stored


def test_entries_expire_between_submissions() -> None:
    clock = FakeClock(NOW)
    processor = _processor(InMemoryKeyValueStore(), clock, days=3)
    processor.submit(SAMPLE)

    clock.now = NOW + 3 * MS_PER_DAY - 1
    assert processor.submit(SAMPLE)[0].is_known is True

    # Exactly one expiration window after the last sighting.
    clock.now = NOW + 6 * MS_PER_DAY - 1
    assert processor.submit(SAMPLE)[0].is_known is False


def test_refresh_keeps_novelty_from_previous_batch() -> None:
    processor = _processor(InMemoryKeyValueStore(), FakeClock(NOW))
    processor.submit(SAMPLE)

    refreshed = processor.submit(SAMPLE, keep_known_state=True)
    assert [record.is_known for record in refreshed] == [False, False, False]

    checked = processor.submit(SAMPLE)
    assert [record.is_known for record in checked] == [True, True, True]

    extra = SAMPLE + "\nNEW-999\tCosmic Anomaly\tOre Site\tMedium Jaspet Deposit\t100.0%\t4.22 AU"
    refreshed = processor.submit(extra, keep_known_state=True)
    assert [record.is_known for record in refreshed] == [True, True, True, False]


def test_check_mode_shows_best_reading() -> None:
    processor = _processor(InMemoryKeyValueStore(), FakeClock(NOW))
    processor.submit("OQW-108\tCosmic Signature\tRelic Site\tForgotten Ruins\t80.0%\t14.80 AU")

    record = processor.submit("OQW-108\tCosmic Signature\t\t\t60.0%\t13.10 AU")[0]

    assert record.is_known is True
    assert record.signal_strength == 80.0
    assert record.name == "Forgotten Ruins"
    assert record.distance == "14.80 AU"


def test_visible_applies_view_state() -> None:
    processor = _processor(InMemoryKeyValueStore(), FakeClock(NOW))
    processor.submit(SAMPLE.split("\n")[0])
    processor.submit(SAMPLE)

    processor.view.sort_by("signal")
    processor.view.sort_by("signal")
    assert [record.identifier for record in processor.visible()] == ["LLX-689", "OQW-108", "IVW-652"]

    processor.view.unknown_only = True
    assert [record.identifier for record in processor.visible()] == ["LLX-689", "OQW-108"]
    assert len(processor.batch) == 3


def test_state_is_shared_through_the_key_value_port() -> None:
    kv = InMemoryKeyValueStore()
    first = _processor(kv, FakeClock(NOW))
    first.submit(SAMPLE)
    first.toggle_ignore("LLX-689")

    second = _processor(kv, FakeClock(NOW + 1000))
    records = second.submit(SAMPLE)

    assert all(record.is_known for record in records)
    assert second.find("LLX-689").is_ignored is True
