"""
In-memory configuration collection
"""
from typing import Callable, Iterator, List, Optional

from ...core.exceptions import ConfigurationNotFoundError, DuplicateNameError
from ...core.interfaces import ConfigurationRepository, LoadFailure
from ...core.logging import get_logger
from .models import Configuration

logger = get_logger(__name__)


class ConfigurationStore:
    """
    Ordered collection of configurations, keyed by name.
    
    Insertion order is display order.
    """
    
    def __init__(self, configs: Optional[List[Configuration]] = None):
        self._configs: List[Configuration] = []
        for config in configs or []:
            self.add(config)
    
    def __len__(self) -> int:
        return len(self._configs)
    
    def __iter__(self) -> Iterator[Configuration]:
        return iter(list(self._configs))
    
    def __getitem__(self, index: int) -> Configuration:
        return self.get(index)
    
    def names(self) -> List[str]:
        return [config.name for config in self._configs]
    
    def load(self, repository: ConfigurationRepository) -> List[LoadFailure]:
        """
        Add every persisted configuration.
        
        A record that fails to parse, or whose name is already taken, is
        returned as a failure and does not stop the rest from loading.
        """
        configs, failures = repository.load_all()
        for config in configs:
            try:
                self.add(config)
            except DuplicateNameError as e:
                logger.warning(f"Skipping duplicate configuration '{config.name}'")
                failures.append(LoadFailure(path=repository.record_path(config.name), error=e))
        
        logger.info(f"Loaded {len(configs)} configuration(s), {len(failures)} failure(s)")
        return failures
    
    def add(self, config: Configuration) -> None:
        """Append a configuration; names must be unique"""
        if self.find(config.name) is not None:
            raise DuplicateNameError(config.name)
        self._configs.append(config)
    
    def get(self, index: int) -> Configuration:
        if not (0 <= index < len(self._configs)):
            raise ConfigurationNotFoundError(f"No configuration at index {index}")
        return self._configs[index]
    
    def remove(
        self,
        index: int,
        before_remove: Optional[Callable[[Configuration], None]] = None,
    ) -> Configuration:
        """
        Remove the configuration at ``index``.
        
        Args:
            index: Store position
            before_remove: Called with the configuration before it is
                removed; an exception aborts the removal.
        
        Raises:
            ConfigurationNotFoundError: If index is out of range
        """
        config = self.get(index)
        if before_remove:
            before_remove(config)
        del self._configs[index]
        return config
    
    def find(self, name: str) -> Optional[Configuration]:
        """Lookup by name"""
        for config in self._configs:
            if config.name == name:
                return config
        return None
    
    def index_of(self, name: str) -> int:
        for index, config in enumerate(self._configs):
            if config.name == name:
                return index
        raise ConfigurationNotFoundError(f"Configuration '{name}' not found")
