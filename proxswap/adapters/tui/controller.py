"""
Key dispatch and view state for the terminal interface
"""
from typing import Callable, Dict, Optional

from ...core.exceptions import ProxSwapError
from ...core.logging import get_logger
from ...domain.configuration import (
    Configuration,
    ConfigurationService,
    CreationWizard,
    SearchFilter,
)
from .modes import (
    InputMode,
    NormalMode,
    EditingMode,
    CreatingMode,
    Focus,
    NEXT_FOCUS,
    NORMAL_KEYMAP,
)

logger = get_logger(__name__)


def _printable(character: Optional[str]) -> bool:
    return character is not None and len(character) == 1 and character.isprintable()


class TerminalController:
    """
    Interface state machine, independent of any terminal library.
    
    ``handle_key`` takes one key event, routes it to the handler of the
    current mode, and returns False once the user has quit. Domain errors
    become the status message; they never escape the loop.
    """
    
    def __init__(self, service: ConfigurationService):
        self.service = service
        self.search = SearchFilter(service.store)
        self.mode: InputMode = NormalMode()
        self.focus = Focus.CONFIGURATIONS
        self.selected: Optional[int] = None
        self.status = ""
        self.running = True
        
        self._handlers: Dict[type, Callable[[str, Optional[str]], None]] = {
            NormalMode: self._handle_normal,
            EditingMode: self._handle_editing,
            CreatingMode: self._handle_creating,
        }
        self._clamp_selection()
    
    # ------------------------------------------------------------
    # View state
    # ------------------------------------------------------------
    
    @property
    def wizard(self) -> Optional[CreationWizard]:
        if isinstance(self.mode, CreatingMode):
            return self.mode.wizard
        return None
    
    @property
    def selected_config(self) -> Optional[Configuration]:
        index = self.search.store_index(self.selected)
        if index is None:
            return None
        return self.service.store[index]
    
    def _clamp_selection(self) -> None:
        count = len(self.search.visible)
        if count == 0:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        elif self.selected >= count:
            self.selected = count - 1
    
    def _refresh_filter(self) -> None:
        self.search.refresh()
        self._clamp_selection()
    
    # ------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------
    
    def handle_key(self, key: str, character: Optional[str] = None) -> bool:
        """
        Process one key event.
        
        Args:
            key: Key name (``"enter"``, ``"up"``, ``"a"`` ...)
            character: Printable character of the key, if any
        
        Returns:
            False when the interface should exit
        """
        handler = self._handlers[type(self.mode)]
        try:
            handler(key, character)
        except ProxSwapError as e:
            logger.error(f"{type(e).__name__}: {e}")
            self.status = f"Error: {e}"
        return self.running
    
    def _handle_normal(self, key: str, character: Optional[str]) -> None:
        action = NORMAL_KEYMAP.get(key)
        if action is None:
            return
        getattr(self, f"action_{action}")()
    
    def _handle_editing(self, key: str, character: Optional[str]) -> None:
        if key == "enter":
            self.mode = NormalMode()
        elif key == "escape":
            self.mode = NormalMode()
            self.search.clear()
        elif key == "backspace":
            self.search.backspace()
        elif _printable(character):
            self.search.insert(character)
        else:
            return
        self._clamp_selection()
    
    def _handle_creating(self, key: str, character: Optional[str]) -> None:
        wizard = self.mode.wizard
        if key == "escape":
            self.mode = NormalMode()
            self.status = "Creation cancelled"
        elif key == "down":
            wizard.next()
        elif key == "up":
            wizard.previous()
        elif key == "enter":
            if wizard.submit():
                self._finish_creation(wizard)
        elif key == "backspace":
            wizard.backspace()
        elif _printable(character):
            wizard.type_char(character)
    
    def _finish_creation(self, wizard: CreationWizard) -> None:
        # The session ends whatever the outcome
        self.mode = NormalMode()
        
        draft = wizard.build()
        result = self.service.create(draft.name, draft.proxies, draft.rules)
        self._refresh_filter()
        
        index = self.service.store.index_of(result.config.name)
        if index in self.search.visible:
            self.selected = self.search.visible.index(index)
        
        problems = list(result.warnings)
        if draft.skipped_ports:
            problems.append(f"skipped invalid ports {', '.join(draft.skipped_ports)}")
        if problems:
            self.status = f"Created '{result.config.name}' with warnings: {'; '.join(problems)}"
        else:
            self.status = f"Created '{result.config.name}'"
    
    # ------------------------------------------------------------
    # Normal mode actions
    # ------------------------------------------------------------
    
    def action_quit(self) -> None:
        self.running = False
    
    def action_new_search(self) -> None:
        self.search.clear()
        self._clamp_selection()
        self.mode = EditingMode()
    
    def action_edit_search(self) -> None:
        self.mode = EditingMode()
    
    def action_create(self) -> None:
        self.mode = CreatingMode()
    
    def action_cursor_down(self) -> None:
        count = len(self.search.visible)
        if count == 0:
            return
        if self.selected is None or self.selected >= count - 1:
            self.selected = 0
        else:
            self.selected += 1
    
    def action_cursor_up(self) -> None:
        count = len(self.search.visible)
        if count == 0:
            return
        if self.selected is None or self.selected == 0:
            self.selected = count - 1
        else:
            self.selected -= 1
    
    def action_cycle_focus(self) -> None:
        self.focus = NEXT_FOCUS[self.focus]
    
    def action_activate(self) -> None:
        config = self.selected_config
        if config is None:
            self.status = "No configuration selected"
            return
        self.service.activate(config)
        self.status = f"Activated '{config.name}'"
    
    def action_deactivate(self) -> None:
        previous = self.service.active_name
        self.service.deactivate()
        self.status = f"Deactivated '{previous}'" if previous else "Nothing active"
    
    def action_delete(self) -> None:
        config = self.selected_config
        if config is None:
            self.status = "No configuration selected"
            return
        try:
            self.service.delete(config)
        finally:
            self._refresh_filter()
        self.status = f"Deleted '{config.name}'"
