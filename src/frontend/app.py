"""Main Textual app for the sigscope scanner."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Footer, Static, Switch, TextArea

from core.models import DisplayRecord
from core.processor import ScanProcessor
from core.view import ASCENDING

from .constants import COLUMNS, FAVOURITE_YELLOW, SAMPLE_DATA, SCANNER_GREEN
from .modals import DeleteAllScreen, ForgetSignatureScreen


def signal_bar(value: float, width: int = 10) -> Text:
    """Render a signal percentage as a block bar."""

    clamped = max(0.0, min(value, 100.0))
    filled = round(clamped / 100 * width)
    bar = Text("█" * filled, style=SCANNER_GREEN)
    bar.append("░" * (width - filled), style="dim")
    bar.append(f" {value:g}%")
    return bar


def build_row(record: DisplayRecord) -> list[Any]:
    """Cells for one table row; ignored rows are dimmed and struck through."""

    style = "dim strike" if record.is_ignored else ""
    status = Text("Known", style="dim") if record.is_known else Text("New", style=f"bold {SCANNER_GREEN}")
    star = Text("★", style=FAVOURITE_YELLOW) if record.is_favourited else Text("")
    return [
        Text(record.identifier, style=f"bold {style}".strip()),
        status,
        Text(record.effective_category, style=style),
        Text(record.name, style=style),
        signal_bar(record.signal_strength),
        Text(record.distance, style=style, justify="right"),
        star,
    ]


class ScannerApp(App):
    """Paste scan results, see what is new, flag what matters."""

    CSS = """
    Screen {
        background: #0f1a21;
        color: #e8eef5;
    }

    #header {
        height: 3;
        padding: 0 2;
        border-bottom: solid #2a3a46;
    }

    #title {
        text-style: bold;
    }

    .subtle {
        color: #c6d2dd;
    }

    #scan-input {
        height: 8;
    }

    #actions {
        height: 3;
    }

    #filter-row {
        width: auto;
        dock: right;
    }

    #signatures {
        height: 1fr;
    }

    #status {
        height: 1;
        color: #c6d2dd;
    }

    .modal-dialog {
        width: 60;
        height: auto;
        padding: 1 2;
        border: thick #2a3a46;
        background: #15232c;
    }

    .modal-title {
        text-style: bold;
    }

    .modal-actions {
        height: 3;
        margin-top: 1;
    }

    ModalScreen {
        align: center middle;
    }
    """

    BINDINGS = [
        ("f", "favourite", "Favourite"),
        ("i", "ignore", "Ignore"),
        ("x", "remove", "Remove"),
        ("delete", "forget", "Forget"),
        ("ctrl+s", "process", "Process"),
        ("ctrl+r", "refresh_scan", "Refresh"),
        ("q", "quit", "Quit"),
    ]

    def __init__(self, processor: ScanProcessor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.processor = processor
        self._row_ids: dict[str, str] = {}
        self.status_message = ""

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            yield Static(self._title_text(), id="title")
            yield Static(
                f"known signatures expire after {self.processor.store.expiration_ms / 86_400_000:g} days",
                classes="subtle",
            )
        with Vertical(id="body"):
            yield TextArea(
                id="scan-input",
                placeholder=f"Paste probe scan results here, for example:\n{SAMPLE_DATA}",
            )
            with Horizontal(id="actions"):
                yield Button("Process", id="process", variant="primary")
                yield Button("Refresh", id="refresh")
                yield Button("Delete All", id="delete-all", variant="error")
                with Horizontal(id="filter-row"):
                    yield Static("Show only unknown ", classes="subtle")
                    yield Switch(value=self.processor.view.unknown_only, id="unknown-only")
            yield DataTable(id="signatures", cursor_type="row")
            yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#signatures", DataTable)
        table.zebra_stripes = True
        self._render_table()

    @on(Button.Pressed, "#process")
    def _on_process(self) -> None:
        self.action_process()

    @on(Button.Pressed, "#refresh")
    def _on_refresh(self) -> None:
        self.action_refresh_scan()

    @on(Button.Pressed, "#delete-all")
    def _on_delete_all(self) -> None:
        self.push_screen(DeleteAllScreen(), self._handle_delete_all)

    @on(Switch.Changed, "#unknown-only")
    def _on_unknown_only(self, event: Switch.Changed) -> None:
        self.processor.view.unknown_only = event.value
        self._render_table()

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        key = event.column_key.value
        if key in (None, "flags"):
            return
        self.processor.view.sort_by(key)
        self._render_table()

    def action_process(self) -> None:
        self._submit(keep_known_state=False)

    def action_refresh_scan(self) -> None:
        self._submit(keep_known_state=True)

    def action_favourite(self) -> None:
        identifier = self._selected_id()
        if identifier is None:
            return
        self.processor.toggle_favourite(identifier)
        self._render_table(keep=identifier)

    def action_ignore(self) -> None:
        identifier = self._selected_id()
        if identifier is None:
            return
        self.processor.toggle_ignore(identifier)
        self._render_table(keep=identifier)

    def action_remove(self) -> None:
        identifier = self._selected_id()
        if identifier is None:
            return
        self.processor.remove(identifier)
        self._render_table()

    def action_forget(self) -> None:
        identifier = self._selected_id()
        if identifier is None:
            return

        def _handle(confirmed: bool | None) -> None:
            if confirmed:
                self.processor.remove_globally(identifier)
                self._render_table()
                self._set_status(f"{identifier} forgotten")

        self.push_screen(ForgetSignatureScreen(identifier), _handle)

    def _handle_delete_all(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        self.processor.reset()
        self.query_one("#scan-input", TextArea).text = ""
        self._render_table()
        self._set_status("all known signatures and flags deleted")

    def _submit(self, keep_known_state: bool) -> None:
        text = self.query_one("#scan-input", TextArea).text
        records = self.processor.submit(text, keep_known_state=keep_known_state)
        new_count = sum(1 for record in records if not record.is_known)
        self._set_status(f"{len(records)} signatures, {new_count} new")
        # An empty projection replaces the count with the empty-state message.
        self._render_table()

    def _render_table(self, keep: Optional[str] = None) -> None:
        table = self.query_one("#signatures", DataTable)
        table.clear(columns=True)
        sort = self.processor.view.sort
        for label, key, width in COLUMNS:
            if key == sort.key:
                label = f"{label} {'▲' if sort.direction == ASCENDING else '▼'}"
            table.add_column(label, key=key, width=width)

        self._row_ids = {}
        visible = self.processor.visible()
        cursor_row = 0
        for index, record in enumerate(visible):
            # Row keys must be unique even if a paste repeats an identifier.
            row_key = f"{index}:{record.identifier}"
            self._row_ids[row_key] = record.identifier
            table.add_row(*build_row(record), key=row_key)
            if keep is not None and record.identifier == keep:
                cursor_row = index
        if visible:
            table.move_cursor(row=cursor_row)
        elif self.processor.batch:
            self._set_status("No new signatures.")
        else:
            self._set_status("No signatures to display.")

    def _selected_id(self) -> Optional[str]:
        table = self.query_one("#signatures", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return self._row_ids.get(row_key.value or "")

    def _set_status(self, message: str) -> None:
        self.status_message = message
        self.query_one("#status", Static).update(message)

    @staticmethod
    def _title_text() -> Text:
        return Text.assemble(
            ("SIG", SCANNER_GREEN),
            ("SCOPE > Signature Scanner", "bold"),
        )
