"""
Live name filter over the configuration store
"""
from typing import List, Optional

from .store import ConfigurationStore


class SearchFilter:
    """
    Query string plus the store indices whose name contains it.
    
    Matching is case-insensitive substring; an empty query matches
    everything. The visible list is recomputed on every change.
    """
    
    def __init__(self, store: ConfigurationStore):
        self.store = store
        self.query = ""
        self.visible: List[int] = []
        self.refresh()
    
    def refresh(self) -> List[int]:
        """Recompute the visible indices, in store order"""
        needle = self.query.lower()
        self.visible = [
            index
            for index, config in enumerate(self.store)
            if not needle or needle in config.name.lower()
        ]
        return self.visible
    
    def insert(self, character: str) -> None:
        self.query += character
        self.refresh()
    
    def backspace(self) -> None:
        self.query = self.query[:-1]
        self.refresh()
    
    def clear(self) -> None:
        self.query = ""
        self.refresh()
    
    def store_index(self, position: Optional[int]) -> Optional[int]:
        """Map a visible position to a store index"""
        if position is None or not (0 <= position < len(self.visible)):
            return None
        return self.visible[position]
