"""
Lifecycle event recording
"""
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
import time


@dataclass
class Event:
    """Event record"""
    name: str
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)


class Telemetry:
    """In-process event collector"""
    
    def __init__(self):
        self._events: list[Event] = []
    
    def record_event(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Record an event"""
        self._events.append(Event(name=name, metadata=metadata or {}))
    
    def get_events(self, name: Optional[str] = None) -> list[Event]:
        """Get recorded events, optionally only those with the given name"""
        if name is None:
            return self._events.copy()
        return [event for event in self._events if event.name == name]
    
    def clear(self) -> None:
        """Clear all events"""
        self._events.clear()


# Global telemetry instance
_telemetry = Telemetry()


def get_telemetry() -> Telemetry:
    """Get global telemetry instance"""
    return _telemetry
