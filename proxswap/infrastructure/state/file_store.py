"""
File-based configuration storage implementation
"""
import json
from pathlib import Path
from typing import List, Optional, Tuple

from ...core.constants import (
    DEFAULT_CONFIG_DIR,
    CHAIN_SUBDIR,
    RECORD_SUFFIX,
    CHAIN_SUFFIX,
)
from ...core.exceptions import ParseError, PersistenceError, ProxSwapError, ValidationError
from ...core.interfaces import ConfigurationRepository, LoadFailure
from ...core.logging import get_logger
from ...domain.configuration.models import Configuration

logger = get_logger(__name__)


class FileConfigurationRepository(ConfigurationRepository):
    """
    File-based configuration storage.
    
    Layout:
    - {config_dir}/{name}.json - Configuration record
    - {chain_dir}/{name}.conf - Generated redsocks chain definition
    """
    
    def __init__(self, config_dir: Optional[Path] = None, chain_dir: Optional[Path] = None):
        """
        Initialize file repository.
        
        Args:
            config_dir: Directory holding JSON records
            chain_dir: Directory holding chain files (default: {config_dir}/redsocks)
        """
        if config_dir is None:
            config_dir = Path(DEFAULT_CONFIG_DIR)
        
        self.config_dir = Path(config_dir).expanduser()
        self.chain_dir = Path(chain_dir).expanduser() if chain_dir else self.config_dir / CHAIN_SUBDIR
        self.make_directories()
    
    def make_directories(self) -> None:
        """Create the record and chain directories"""
        try:
            self.chain_dir.mkdir(parents=True, exist_ok=True)
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create configuration directories: {e}") from e
    
    def record_path(self, name: str) -> Path:
        """Get record file path for configuration"""
        return self.config_dir / f"{name}{RECORD_SUFFIX}"
    
    def chain_path(self, name: str) -> Path:
        """Get chain file path for configuration"""
        return self.chain_dir / f"{name}{CHAIN_SUFFIX}"
    
    def save(self, config: Configuration) -> None:
        """Write configuration record"""
        record_file = self.record_path(config.name)
        try:
            record_file.write_text(json.dumps(config.to_dict(), indent=2), encoding='utf-8')
        except OSError as e:
            raise PersistenceError(f"Cannot write {record_file}: {e}") from e
    
    def save_chain(self, name: str, text: str) -> Path:
        """Write chain definition"""
        chain_file = self.chain_path(name)
        try:
            chain_file.write_text(text, encoding='utf-8')
        except OSError as e:
            raise PersistenceError(f"Cannot write {chain_file}: {e}") from e
        return chain_file
    
    def load(self, path: Path) -> Configuration:
        """
        Load a single configuration record.
        
        Raises:
            PersistenceError: If the file cannot be read
            ParseError: If the content is not a valid record, or its name
                does not match the file stem
        """
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e
        
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Malformed JSON in {path.name}: {e}") from e
        
        config = Configuration.from_dict(data)
        try:
            config.validate()
        except ValidationError as e:
            raise ParseError(f"Invalid record {path.name}: {e}") from e
        if config.name != path.stem:
            raise ParseError(
                f"Record {path.name} is named '{config.name}', expected '{path.stem}'"
            )
        return config
    
    def load_all(self) -> Tuple[List[Configuration], List[LoadFailure]]:
        """Load all records, sorted by file name"""
        configs: List[Configuration] = []
        failures: List[LoadFailure] = []
        
        for record_file in sorted(self.config_dir.glob(f"*{RECORD_SUFFIX}")):
            try:
                configs.append(self.load(record_file))
            except ProxSwapError as e:
                logger.warning(f"Skipping configuration {record_file.name}: {e}")
                failures.append(LoadFailure(path=record_file, error=e))
        
        return configs, failures
    
    def delete(self, name: str) -> None:
        """Delete record and chain file"""
        for path in (self.record_path(name), self.chain_path(name)):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f"Cannot delete {path}: {e}") from e
    
    def exists(self, name: str) -> bool:
        """Check if a record exists for a name"""
        return self.record_path(name).exists()
