"""Modal dialogs for the Textual scanner."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class DeleteAllScreen(ModalScreen[bool]):
    """Confirm wiping every known signature and flag."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete all?", classes="modal-title"),
            Static(
                "Known signatures, favourites, and ignored ids will be removed.",
                classes="modal-body",
            ),
            Horizontal(
                Button("Delete", id="delete-all-confirm", variant="error"),
                Button("Cancel", id="delete-all-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "delete-all-confirm")


class ForgetSignatureScreen(ModalScreen[bool]):
    """Confirm removing one signature from the store and flag sets."""

    def __init__(self, identifier: str) -> None:
        super().__init__()
        self._identifier = identifier

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Forget signature?", classes="modal-title"),
            Static(self._identifier, classes="modal-body"),
            Horizontal(
                Button("Forget", id="forget-confirm", variant="error"),
                Button("Cancel", id="forget-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "forget-confirm")
