"""Terminal UI demonstrating a permission request against a scripted device"""

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, RichLog, Static

from grantchain.config import Config
from grantchain.permission.request import PermissionRequest
from grantchain.runner import build_broker, build_request
from .modals import textual_dialog_factory
from .themes import THEMES, get_next_theme

logger = logging.getLogger(__name__)


class GrantChainApp(App):
    """Runs the configured request, rendering its dialogs as modal screens"""

    CSS = """
    Screen {
        background: $background;
    }

    #main-container {
        width: 100%;
        height: 100%;
    }

    #title {
        text-style: bold;
        color: $secondary;
        padding: 1 2;
    }

    #events {
        height: 1fr;
        padding: 0 2;
        background: $background;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=True),
        Binding("ctrl+r", "run_request", "Request", show=True),
        Binding("ctrl+t", "toggle_theme", "Theme", show=True),
    ]

    def __init__(self, config: Config, auto_start: bool = True):
        super().__init__()
        self.config = config
        self.auto_start = auto_start
        self.request: PermissionRequest | None = None
        self.broker = None
        self.last_result = None
        self._theme_name = "dark"

    def compose(self) -> ComposeResult:
        # Kept as attributes, queries only see the active screen while a dialog is open
        self.events = RichLog(id="events", wrap=True, markup=True)
        self.status_bar = Static("ctrl+r to request permissions", id="status-bar")
        with Container(id="main-container"):
            yield Static("grantchain", id="title")
            yield self.events
            yield self.status_bar
        yield Footer()

    def on_mount(self):
        for theme in THEMES.values():
            self.register_theme(theme)
        self.theme = "grantchain-dark"
        if self.auto_start:
            self.action_run_request()

    def _log(self, text: str):
        self.events.write(text)

    def _set_status(self, text: str):
        self.status_bar.update(text)

    def action_run_request(self):
        """Start a new request unless one is in flight"""
        if self.request is not None:
            self.notify("A permission request is already running")
            return

        self.broker = build_broker(self.config.scenario)
        self.request = build_request(self.config, self.broker, textual_dialog_factory(self))
        declared = self.request.normal_permissions + [k.value for k in self.request.special_permissions]
        self._log(f"[bold]Requesting[/] {', '.join(declared) or 'nothing'}")
        self._set_status("Waiting for permission decisions...")
        self.request.run(self._on_result)

    def _on_result(self, all_granted: bool, granted: list[str], denied: list[str]):
        self.request = None
        self.last_result = (all_granted, granted, denied)
        if all_granted:
            self._log("[bold green]All permissions are granted[/]")
        else:
            self._log(f"[bold red]Denied:[/] {', '.join(denied)}")
        if granted:
            self._log(f"[green]Granted:[/] {', '.join(granted)}")
        self._set_status("ctrl+r to request again")

    def _release_request(self):
        if self.request is not None:
            self.request.release()
            self.request = None

    def action_toggle_theme(self):
        """Toggle between themes"""
        self._theme_name = get_next_theme(self._theme_name)
        self.theme = f"grantchain-{self._theme_name}"
        self.notify(f"Theme: {self._theme_name}")

    async def action_quit(self):
        # Dismiss any open dialog before the screens go away
        self._release_request()
        self.exit()

    def on_unmount(self):
        self._release_request()
