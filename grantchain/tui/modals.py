"""Modal permission dialogs for the grantchain TUI"""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from grantchain.dialog.base import DialogSpec, TextDialog
from .themes import pick_tint


class PermissionDialogScreen(ModalScreen):
    """Modal rendering of a permission dialog. Buttons forward to the dialog's controls."""

    CSS = """
    PermissionDialogScreen {
        align: center middle;
    }

    #dialog-container {
        width: 64;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: tall $primary;
        padding: 1 2;
    }

    #dialog-message {
        text-style: bold;
        padding-bottom: 1;
    }

    #permission-list {
        height: auto;
        max-height: 12;
    }

    .permission-item {
        color: $text-muted;
    }

    #dialog-buttons {
        height: auto;
        align: right middle;
        padding-top: 1;
    }

    #dialog-buttons Button {
        margin-left: 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_dialog", "Cancel", show=False),
    ]

    def __init__(self, dialog: "TextualDialog"):
        super().__init__()
        self.dialog = dialog

    def compose(self) -> ComposeResult:
        spec = self.dialog.spec
        with Vertical(id="dialog-container"):
            yield Static(spec.message, id="dialog-message")
            with VerticalScroll(id="permission-list"):
                for permission in spec.permissions:
                    yield Static(f"  • {permission}", classes="permission-item")
            with Horizontal(id="dialog-buttons"):
                if spec.negative_text:
                    yield Button(spec.negative_text, id="negative")
                yield Button(spec.positive_text, id="positive", variant="primary")

    def on_mount(self):
        tint = pick_tint(self.dialog.spec.tint_colors, self.app.current_theme.dark)
        if tint:
            self.query_one("#dialog-container").styles.border = ("tall", tint)
            self.query_one("#positive", Button).styles.background = tint
        self.query_one("#positive", Button).focus()

    def on_button_pressed(self, event: Button.Pressed):
        event.stop()
        if event.button.id == "positive":
            self.dialog.positive_control.click()
        elif event.button.id == "negative" and self.dialog.negative_control:
            self.dialog.negative_control.click()

    def action_cancel_dialog(self):
        self.dialog.cancel()


class TextualDialog(TextDialog):
    """PermissionDialog adapter that pushes a PermissionDialogScreen on an app"""

    def __init__(self, app: App, spec: DialogSpec):
        super().__init__(spec)
        self.app = app
        self.modal: PermissionDialogScreen | None = None

    def show(self):
        super().show()
        self.modal = PermissionDialogScreen(self)
        self.app.push_screen(self.modal)

    def dismiss(self):
        super().dismiss()
        modal, self.modal = self.modal, None
        if modal is not None and self.app.is_running and modal.is_current:
            modal.dismiss()


def textual_dialog_factory(app: App):
    def factory(spec: DialogSpec) -> TextualDialog:
        return TextualDialog(app, spec)
    return factory
