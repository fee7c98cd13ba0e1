"""
Settings loader with priority: env > CLI > TOML > defaults
"""
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.constants import (
    DEFAULT_CONFIG_DIR,
    CHAIN_SUBDIR,
    SETTINGS_FILE_NAME,
    LOG_FILE_NAME,
    DEFAULT_REDIRECTOR_BIN,
    DEFAULT_NAT_CHAIN,
    DEFAULT_LOG_LEVEL,
    ENV_PREFIX,
)
from ...core.exceptions import SettingsError


@dataclass
class Settings:
    """Resolved application settings"""
    config_dir: Path
    chain_dir: Path
    redirector_bin: str = DEFAULT_REDIRECTOR_BIN
    nat_chain: str = DEFAULT_NAT_CHAIN
    use_sudo: bool = True
    command_timeout: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = None
    
    @property
    def default_log_file(self) -> Path:
        return self.log_file or self.config_dir / LOG_FILE_NAME
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create from a merged configuration dictionary"""
        config_dir = Path(str(data.get("config_dir") or DEFAULT_CONFIG_DIR)).expanduser()
        chain_dir = data.get("chain_dir")
        
        timeout = data.get("command_timeout")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError):
                raise SettingsError(f"Invalid command_timeout: {timeout!r}") from None
            if timeout <= 0:
                raise SettingsError(f"command_timeout must be positive, got {timeout}")
        
        log_file = data.get("log_file")
        
        return cls(
            config_dir=config_dir,
            chain_dir=Path(str(chain_dir)).expanduser() if chain_dir else config_dir / CHAIN_SUBDIR,
            redirector_bin=str(data.get("redirector_bin") or DEFAULT_REDIRECTOR_BIN),
            nat_chain=str(data.get("nat_chain") or DEFAULT_NAT_CHAIN),
            use_sudo=_parse_bool("use_sudo", data.get("use_sudo", True)),
            command_timeout=timeout,
            log_level=str(data.get("log_level") or DEFAULT_LOG_LEVEL).upper(),
            log_file=Path(str(log_file)).expanduser() if log_file else None,
        )


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.lower() in ("true", "yes", "on", "1"):
            return True
        if value.lower() in ("false", "no", "off", "0"):
            return False
    if value in (0, 1):
        return bool(value)
    raise SettingsError(f"Invalid {key}: {value!r}")


class ConfigLoader:
    """Settings loader with priority support"""
    
    def __init__(self):
        self._env_prefix = ENV_PREFIX
    
    def default_toml_path(self) -> Path:
        return Path(DEFAULT_CONFIG_DIR).expanduser() / SETTINGS_FILE_NAME
    
    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Load TOML settings file"""
        if not path.exists():
            raise SettingsError(f"Settings file not found: {path}")
        
        try:
            return tomllib.loads(path.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SettingsError(f"Failed to parse TOML settings: {e}") from e
    
    def load_env(self) -> Dict[str, Any]:
        """Load settings from environment variables"""
        config = {}
        
        for key in (
            "config_dir",
            "chain_dir",
            "redirector_bin",
            "nat_chain",
            "use_sudo",
            "command_timeout",
            "log_level",
            "log_file",
        ):
            value = os.getenv(f"{self._env_prefix}{key.upper()}")
            if value:
                config[key] = self._convert_value(value)
        
        return config
    
    def _convert_value(self, value: str) -> Any:
        """Convert string value to appropriate type"""
        # Try boolean
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False
        
        # Try number
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
        
        # Return as string
        return value
    
    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones.
        """
        result = {}
        
        for config in configs:
            result = self._deep_merge(result, config)
        
        return result
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries, ignoring None overrides"""
        result = base.copy()
        
        for key, value in override.items():
            if value is None:
                continue
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        
        return result
    
    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Settings:
        """
        Load settings with priority: env > CLI > TOML > defaults
        
        Args:
            toml_path: Path to TOML settings file; the default location is
                used when it exists
            cli_overrides: CLI parameter overrides (None values ignored)
            use_env: Whether to load from environment variables
        
        Returns:
            Resolved settings
        """
        configs = []
        
        # 1. Load TOML if provided or present at the default location
        if toml_path:
            configs.append(self.load_toml(Path(toml_path).expanduser()))
        elif self.default_toml_path().exists():
            configs.append(self.load_toml(self.default_toml_path()))
        
        # 2. Apply CLI overrides
        if cli_overrides:
            configs.append(cli_overrides)
        
        # 3. Load environment variables (highest priority)
        if use_env:
            env_config = self.load_env()
            if env_config:
                configs.append(env_config)
        
        return Settings.from_dict(self.merge_configs(*configs))
