"""
Configuration lifecycle service - business logic
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...core.exceptions import (
    DuplicateNameError,
    ExternalProcessError,
    PersistenceError,
    ConfigurationNotFoundError,
)
from ...core.interfaces import ConfigurationRepository, RedirectionController, LoadFailure
from ...core.logging import get_logger
from ...core.telemetry import get_telemetry
from .models import Configuration, Proxy, RedirectRule
from .renderer import render_chain
from .store import ConfigurationStore

logger = get_logger(__name__)
telemetry = get_telemetry()


@dataclass
class CreateResult:
    """Outcome of a create; warnings hold the non-fatal failures"""
    config: Configuration
    warnings: List[str] = field(default_factory=list)


class ConfigurationService:
    """
    Configuration lifecycle: create, activate, deactivate, delete.
    
    Owns the single active-configuration slot. The redirector process and
    the nat table are host-global, so every activation goes through
    ``activate`` which tears the previous chain down first.
    """
    
    def __init__(
        self,
        store: ConfigurationStore,
        repository: ConfigurationRepository,
        controller: RedirectionController,
    ):
        """
        Initialize configuration service.
        
        Args:
            store: In-memory configuration collection
            repository: Persistence adapter
            controller: Redirector / NAT control
        """
        self.store = store
        self.repository = repository
        self.controller = controller
        self._active_name: Optional[str] = None
    
    @property
    def active_name(self) -> Optional[str]:
        return self._active_name
    
    @property
    def active(self) -> Optional[Configuration]:
        if self._active_name is None:
            return None
        return self.store.find(self._active_name)
    
    def is_active(self, config: Configuration) -> bool:
        return config.name == self._active_name
    
    def load(self) -> List[LoadFailure]:
        """
        Fill the store from persisted records.
        
        Chain files are re-rendered so they always match their records.
        Rules are not installed.
        """
        failures = self.store.load(self.repository)
        for config in self.store:
            try:
                self.repository.save_chain(config.name, render_chain(config.proxies))
            except PersistenceError as e:
                logger.warning(f"Could not refresh chain file for '{config.name}': {e}")
        return failures
    
    def create(
        self,
        name: str,
        proxies: Sequence[Proxy],
        rules: Sequence[RedirectRule],
    ) -> CreateResult:
        """
        Create, persist and store a configuration.
        
        Persistence and rule installation are best-effort: failures are
        logged and returned as warnings, the configuration is stored anyway.
        
        Raises:
            ValidationError: If a field is invalid
            DuplicateNameError: If the name is taken in the store or on disk
        """
        config = Configuration(name=name, proxies=list(proxies), rules=list(rules))
        config.validate()
        
        if self.store.find(name) is not None or self.repository.exists(name):
            raise DuplicateNameError(name)
        
        result = CreateResult(config=config)
        
        try:
            self.repository.save_chain(name, render_chain(config.proxies))
            self.repository.save(config)
        except PersistenceError as e:
            logger.error(f"Persisting '{name}' failed: {e}")
            result.warnings.append(str(e))
        
        for rule in config.rules:
            try:
                self.controller.install_rule(rule)
            except ExternalProcessError as e:
                logger.error(f"Rule {rule.source_port} -> {rule.target_port} for '{name}' failed: {e}")
                result.warnings.append(str(e))
                telemetry.record_event("configuration.rule_failed", {
                    "name": name,
                    "source_port": rule.source_port,
                })
        
        self.store.add(config)
        
        telemetry.record_event("configuration.created", {
            "name": name,
            "proxies": len(config.proxies),
            "rules": len(config.rules),
        })
        logger.info(f"Configuration '{name}' created")
        return result
    
    def activate(self, config: Configuration) -> None:
        """
        Make ``config`` the active configuration.
        
        Whatever is running is deactivated first. If the redirector or a
        rule fails, the partial setup is torn down and nothing is active.
        
        Raises:
            ConfigurationNotFoundError: If config is not in the store
            ExternalProcessError: If deactivation or activation fails
            PersistenceError: If the chain file cannot be written
        """
        if self.store.find(config.name) is not config:
            raise ConfigurationNotFoundError(f"Configuration '{config.name}' not found")
        
        self.deactivate()
        
        chain_file = self.repository.save_chain(config.name, render_chain(config.proxies))
        try:
            self.controller.start_redirector(chain_file)
            for rule in config.rules:
                self.controller.install_rule(rule)
        except ExternalProcessError as e:
            logger.error(f"Activating '{config.name}' failed: {e}")
            try:
                self.controller.deactivate()
            except ExternalProcessError as cleanup_error:
                logger.error(f"Cleanup after failed activation failed: {cleanup_error}")
            raise
        
        self._active_name = config.name
        
        telemetry.record_event("configuration.activated", {"name": config.name})
        logger.info(f"Configuration '{config.name}' activated")
    
    def deactivate(self) -> None:
        """
        Stop the redirector and flush NAT rules.
        
        Safe to call with nothing active. On failure the active marker is
        kept, since the redirector may still be running.
        
        Raises:
            ExternalProcessError: If stopping or flushing fails
        """
        self.controller.deactivate()
        
        previous, self._active_name = self._active_name, None
        if previous is not None:
            telemetry.record_event("configuration.deactivated", {"name": previous})
            logger.info(f"Configuration '{previous}' deactivated")
    
    def delete(self, config: Configuration) -> None:
        """
        Remove a configuration from the store and from disk.
        
        The active configuration is deactivated first; if that fails,
        nothing is removed.
        
        Raises:
            ConfigurationNotFoundError: If config is not in the store
            ExternalProcessError: If the required deactivation fails
            PersistenceError: If the files cannot be removed
        """
        index = self.store.index_of(config.name)
        self.store.remove(index, before_remove=self._deactivate_if_active)
        
        telemetry.record_event("configuration.deleted", {"name": config.name})
        logger.info(f"Configuration '{config.name}' deleted")
        
        self.repository.delete(config.name)
    
    def _deactivate_if_active(self, config: Configuration) -> None:
        if self.is_active(config):
            self.deactivate()
