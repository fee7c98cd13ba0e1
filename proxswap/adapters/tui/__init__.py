"""
Terminal interface
"""
from .controller import TerminalController
from .modes import NormalMode, EditingMode, CreatingMode, Focus

__all__ = [
    "TerminalController",
    "NormalMode",
    "EditingMode",
    "CreatingMode",
    "Focus",
]
