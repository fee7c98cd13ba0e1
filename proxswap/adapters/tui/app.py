"""
Textual application shell.

All keyboard input routes through on_key to the TerminalController;
Textual BINDINGS are not used.
"""
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Static

from ...core.logging import get_logger
from .controller import TerminalController
from .views import (
    configurations_panel,
    proxies_panel,
    rules_panel,
    status_panel,
    wizard_panel,
)

logger = get_logger(__name__)


class ProxSwapApp(App):
    """Full-screen configuration browser"""
    
    TITLE = "ProxSwap"
    
    CSS = """
    Screen {
        layers: base overlay;
    }
    #title {
        height: 3;
        border: round cyan;
        color: cyan;
        content-align: center middle;
    }
    #panes {
        height: 1fr;
    }
    #configurations {
        width: 30%;
    }
    #proxies, #rules {
        width: 35%;
    }
    #status {
        height: 3;
    }
    #overlay {
        dock: top;
        layer: overlay;
        width: 100%;
        height: 100%;
        align: center middle;
        display: none;
    }
    #overlay.visible {
        display: block;
    }
    #wizard {
        width: 60%;
        height: auto;
    }
    """
    
    def __init__(self, controller: TerminalController):
        super().__init__()
        self.controller = controller
    
    def compose(self) -> ComposeResult:
        yield Static("ProxSwap", id="title")
        with Horizontal(id="panes"):
            yield Static(id="configurations")
            yield Static(id="proxies")
            yield Static(id="rules")
        yield Static(id="status")
        with Container(id="overlay"):
            yield Static(id="wizard")
    
    def on_mount(self) -> None:
        self.refresh_view()
    
    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        
        if not self.controller.handle_key(event.key, event.character):
            self.exit()
            return
        self.refresh_view()
    
    def refresh_view(self) -> None:
        """Redraw every pane from controller state"""
        controller = self.controller
        self.query_one("#configurations", Static).update(configurations_panel(controller))
        self.query_one("#proxies", Static).update(proxies_panel(controller))
        self.query_one("#rules", Static).update(rules_panel(controller))
        self.query_one("#status", Static).update(status_panel(controller))
        
        overlay = self.query_one("#overlay", Container)
        wizard = controller.wizard
        if wizard is not None:
            self.query_one("#wizard", Static).update(wizard_panel(wizard))
            overlay.add_class("visible")
        else:
            overlay.remove_class("visible")
