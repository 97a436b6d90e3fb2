from __future__ import annotations
from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static

class ConfirmModal(ModalScreen[bool]):
    BINDINGS = [("escape", "cancel", "Cancel"), ("n", "cancel", "Cancel")]

    def __init__(self, title: str, body: str):
        super().__init__()
        self._title = title
        self._body = body

    def compose(self) -> ComposeResult:
        yield Container(
            Static(f"[b]{self._title}[/b]"),
            Static(self._body, markup=False),
            Horizontal(
                Button("Cancel", id="no", variant="error"),
                Button("Install", id="yes", variant="success"),
            ),
            id="modal",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_cancel(self) -> None:
        self.dismiss(False)
