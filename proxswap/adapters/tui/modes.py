"""
Input modes and key maps for the terminal interface.

Each mode is its own type; the controller dispatches on the type of the
current mode and nothing else.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Tuple, Union

from ...domain.configuration.wizard import CreationWizard


@dataclass
class NormalMode:
    label: ClassVar[str] = "Normal"


@dataclass
class EditingMode:
    label: ClassVar[str] = "Editing"


@dataclass
class CreatingMode:
    label: ClassVar[str] = "Creating"
    wizard: CreationWizard = field(default_factory=CreationWizard)


InputMode = Union[NormalMode, EditingMode, CreatingMode]


class Focus(Enum):
    CONFIGURATIONS = "Configurations"
    PROXIES = "Proxies"
    RULES = "Rules"


NEXT_FOCUS: Dict[Focus, Focus] = {
    Focus.CONFIGURATIONS: Focus.PROXIES,
    Focus.PROXIES: Focus.RULES,
    Focus.RULES: Focus.CONFIGURATIONS,
}


# Key name -> action name, Normal mode only. Editing and Creating consume
# keys as text and are handled by their own handlers.
NORMAL_KEYMAP: Dict[str, str] = {
    "q": "quit",
    "slash": "new_search",
    "e": "edit_search",
    "c": "create",
    "x": "deactivate",
    "down": "cursor_down",
    "up": "cursor_up",
    "enter": "activate",
    "delete": "delete",
    "tab": "cycle_focus",
}


# Status line key help per mode
FOOTER_KEYS: Dict[type, List[Tuple[str, str]]] = {
    NormalMode: [
        ("q", "quit"),
        ("c", "create"),
        ("/", "search"),
        ("e", "edit search"),
        ("↑↓", "navigate"),
        ("enter", "activate"),
        ("del", "delete"),
    ],
    EditingMode: [
        ("esc", "cancel"),
        ("enter", "confirm"),
    ],
    CreatingMode: [
        ("esc", "cancel"),
        ("↑/↓", "navigate"),
        ("enter", "confirm"),
    ],
}
