from __future__ import annotations

import asyncio

from rich.text import Text
from textual.widgets import Button, DataTable, Switch, TextArea
from textual.widgets.data_table import ColumnKey

from adapters.memory_kv import InMemoryKeyValueStore
from core.annotations import FAVOURITED_SIGNATURES_KEY, IGNORED_SIGNATURES_KEY
from core.config import ScanConfig
from core.known_store import KNOWN_SIGNATURES_KEY
from core.processor import ScanProcessor
from core.view import DESCENDING, UNKNOWN_ONLY_FILTER_KEY, UNSORTED, SortConfig
from frontend.app import ScannerApp

NOW = 1_700_000_000_000

SAMPLE = "\n".join(
    [
        "OQW-108\tCosmic Signature\t\t\t10.2%\t14.80 AU",
        "IVW-652\tCosmic Signature\t\t\t0.0%\t34.37 AU",
        "LLX-689\tCosmic Signature\tCombat Site\tAmarr Rendezvous Point\t100.0%\t15.77 AU",
    ]
)


def _app(kv: InMemoryKeyValueStore) -> ScannerApp:
    return ScannerApp(ScanProcessor(kv, ScanConfig(), lambda: NOW))


def _column(app: ScannerApp, index: int) -> list[str]:
    table = app.query_one("#signatures", DataTable)
    return [table.get_row_at(row)[index].plain for row in range(table.row_count)]


async def _process(app: ScannerApp, pilot, text: str, button: str = "#process") -> None:
    app.query_one("#scan-input", TextArea).text = text
    app.query_one(button, Button).press()
    await pilot.pause()


def test_process_button_renders_batch() -> None:
    async def scenario() -> None:
        app = _app(InMemoryKeyValueStore())
        async with app.run_test(size=(160, 40)) as pilot:
            assert app.status_message == "No signatures to display."

            await _process(app, pilot, SAMPLE)

            assert _column(app, 0) == ["OQW-108", "IVW-652", "LLX-689"]
            assert _column(app, 1) == ["New", "New", "New"]
            assert app.status_message == "3 signatures, 3 new"

            await _process(app, pilot, SAMPLE)
            assert _column(app, 1) == ["Known", "Known", "Known"]

    asyncio.run(scenario())


def test_blank_paste_empties_the_table() -> None:
    async def scenario() -> None:
        app = _app(InMemoryKeyValueStore())
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, "AAA-111\tA\t\t\t1%\t1 AU")
            assert app.query_one("#signatures", DataTable).row_count == 1

            await _process(app, pilot, "   ")

            assert app.query_one("#signatures", DataTable).row_count == 0
            assert app.processor.batch == []
            assert app.status_message == "No signatures to display."

    asyncio.run(scenario())


def test_refresh_button_keeps_previous_labels() -> None:
    async def scenario() -> None:
        app = _app(InMemoryKeyValueStore())
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, SAMPLE)

            await _process(app, pilot, SAMPLE, button="#refresh")
            assert _column(app, 1) == ["New", "New", "New"]

            await _process(app, pilot, SAMPLE)
            assert _column(app, 1) == ["Known", "Known", "Known"]

    asyncio.run(scenario())


def test_unknown_only_switch_filters_and_persists() -> None:
    async def scenario() -> None:
        kv = InMemoryKeyValueStore()
        app = _app(kv)
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, SAMPLE)
            await _process(app, pilot, SAMPLE)

            app.query_one("#unknown-only", Switch).value = True
            await pilot.pause()

            assert app.query_one("#signatures", DataTable).row_count == 0
            assert app.status_message == "No new signatures."
            assert kv.get(UNKNOWN_ONLY_FILTER_KEY) is True
            assert len(app.processor.batch) == 3

        reopened = _app(kv)
        async with reopened.run_test(size=(160, 40)):
            assert reopened.query_one("#unknown-only", Switch).value is True

    asyncio.run(scenario())


def test_header_selection_cycles_sort() -> None:
    async def scenario() -> None:
        app = _app(InMemoryKeyValueStore())
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, SAMPLE)
            table = app.query_one("#signatures", DataTable)

            async def select_id_header() -> None:
                table.post_message(DataTable.HeaderSelected(table, ColumnKey("id"), 0, Text("ID")))
                await pilot.pause()

            await select_id_header()
            assert app.processor.view.sort == SortConfig(key="id")
            assert _column(app, 0) == ["IVW-652", "LLX-689", "OQW-108"]

            await select_id_header()
            assert app.processor.view.sort == SortConfig(key="id", direction=DESCENDING)
            assert _column(app, 0) == ["OQW-108", "LLX-689", "IVW-652"]

            await select_id_header()
            assert app.processor.view.sort == UNSORTED
            assert _column(app, 0) == ["OQW-108", "IVW-652", "LLX-689"]

    asyncio.run(scenario())


def test_row_bindings_flag_remove_and_forget() -> None:
    async def scenario() -> None:
        kv = InMemoryKeyValueStore()
        app = _app(kv)
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, SAMPLE)
            app.query_one("#signatures", DataTable).focus()
            await pilot.pause()

            await pilot.press("f")
            assert kv.get(FAVOURITED_SIGNATURES_KEY) == ["OQW-108"]
            assert _column(app, 6)[0] == "★"

            await pilot.press("i")
            assert kv.get(IGNORED_SIGNATURES_KEY) == ["OQW-108"]
            assert app.processor.find("OQW-108").is_ignored is True

            await pilot.press("x")
            assert _column(app, 0) == ["IVW-652", "LLX-689"]
            assert "OQW-108" in kv.get(KNOWN_SIGNATURES_KEY)

            await pilot.press("delete")
            await pilot.pause()
            app.screen.query_one("#forget-confirm", Button).press()
            await pilot.pause()

            assert _column(app, 0) == ["LLX-689"]
            assert "IVW-652" not in kv.get(KNOWN_SIGNATURES_KEY)
            assert app.status_message == "IVW-652 forgotten"

    asyncio.run(scenario())


def test_delete_all_asks_before_wiping() -> None:
    async def scenario() -> None:
        kv = InMemoryKeyValueStore()
        app = _app(kv)
        async with app.run_test(size=(160, 40)) as pilot:
            await _process(app, pilot, SAMPLE)

            app.query_one("#delete-all", Button).press()
            await pilot.pause()
            app.screen.query_one("#delete-all-cancel", Button).press()
            await pilot.pause()
            assert len(kv.get(KNOWN_SIGNATURES_KEY)) == 3

            app.query_one("#delete-all", Button).press()
            await pilot.pause()
            app.screen.query_one("#delete-all-confirm", Button).press()
            await pilot.pause()

            assert kv.get(KNOWN_SIGNATURES_KEY) is None
            assert app.query_one("#signatures", DataTable).row_count == 0
            assert app.query_one("#scan-input", TextArea).text == ""
            assert app.status_message == "all known signatures and flags deleted"

    asyncio.run(scenario())
