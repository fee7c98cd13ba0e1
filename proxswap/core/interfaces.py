"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, TYPE_CHECKING

from .exceptions import ProxSwapError

if TYPE_CHECKING:
    from ..domain.configuration.models import Configuration, RedirectRule


@dataclass
class LoadFailure:
    """A persisted record that could not be loaded"""
    path: Path
    error: Exception
    
    def __str__(self) -> str:
        return f"{self.path.name}: {self.error}"


class ConfigurationRepository(ABC):
    """Persistence adapter for configuration records and chain files"""
    
    @abstractmethod
    def save(self, config: "Configuration") -> None:
        """Write the JSON record of a configuration"""
        pass
    
    @abstractmethod
    def save_chain(self, name: str, text: str) -> Path:
        """Write the chain definition of a configuration"""
        pass
    
    @abstractmethod
    def load_all(self) -> Tuple[List["Configuration"], List[LoadFailure]]:
        """Load every persisted record, isolating per-file failures"""
        pass
    
    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the record and chain file of a configuration"""
        pass
    
    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if a record exists for a name"""
        pass
    
    @abstractmethod
    def record_path(self, name: str) -> Path:
        """Path of the JSON record for a name"""
        pass
    
    @abstractmethod
    def chain_path(self, name: str) -> Path:
        """Path of the chain definition for a name"""
        pass


class RedirectionController(ABC):
    """Redirector process and NAT table control"""
    
    @abstractmethod
    def ensure_privileges(self) -> None:
        """Probe for elevated privileges, raising PrivilegeError on failure"""
        pass
    
    @abstractmethod
    def start_redirector(self, chain_file: Path) -> None:
        """Start the redirector against a chain definition"""
        pass
    
    @abstractmethod
    def stop_redirector(self) -> None:
        """Stop the redirector; no-op when none is running"""
        pass
    
    @abstractmethod
    def install_rule(self, rule: "RedirectRule") -> None:
        """Install one NAT redirect entry"""
        pass
    
    @abstractmethod
    def flush_rules(self) -> None:
        """Remove all installed NAT redirect entries"""
        pass
    
    def deactivate(self) -> None:
        """
        Stop the redirector, then flush rules.
        
        Both steps always run; the first failure is re-raised afterwards.
        """
        errors = []
        for step in (self.stop_redirector, self.flush_rules):
            try:
                step()
            except ProxSwapError as e:
                errors.append(e)
        if errors:
            raise errors[0]
