"""
Configuration domain models
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List

from ...core.constants import (
    CHAIN_BASE_PORT,
    DEFAULT_RULE_ACTION,
    MIN_PORT,
    MAX_PORT,
)
from ...core.exceptions import ParseError, ValidationError


def _check_port(label: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Invalid {label}: {value!r}")
    if not (MIN_PORT <= value <= MAX_PORT):
        raise ValidationError(f"Invalid {label}: {value}")


@dataclass(frozen=True)
class Proxy:
    """One upstream hop of a proxy chain"""
    proxy_type: str
    host: str
    port: int
    
    def validate(self) -> None:
        """Validate proxy fields"""
        _check_port("proxy port", self.port)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record shape"""
        return {
            "proxy_type": self.proxy_type,
            "url": self.host,
            "port": self.port,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proxy":
        """Create from the persisted record shape"""
        try:
            return cls(
                proxy_type=str(data["proxy_type"]),
                host=str(data["url"]),
                port=int(data["port"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed proxy entry: {data!r}") from e


@dataclass(frozen=True)
class RedirectRule:
    """NAT redirect installed while the owning configuration is active"""
    source_port: int
    target_port: int = CHAIN_BASE_PORT
    action: str = DEFAULT_RULE_ACTION
    
    def validate(self) -> None:
        """Validate rule fields"""
        _check_port("source port", self.source_port)
        _check_port("target port", self.target_port)
        if not self.action:
            raise ValidationError("Rule action must not be empty")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted record shape"""
        return {
            "dport": self.source_port,
            "to_port": self.target_port,
            "action": self.action,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RedirectRule":
        """Create from the persisted record shape"""
        try:
            return cls(
                source_port=int(data["dport"]),
                target_port=int(data["to_port"]),
                action=str(data.get("action", DEFAULT_RULE_ACTION)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed rule entry: {data!r}") from e


@dataclass
class Configuration:
    """
    Named proxy chain plus the redirect rules that route traffic into it.
    
    The order of ``proxies`` is the redirector hop order.
    """
    name: str
    proxies: List[Proxy] = field(default_factory=list)
    rules: List[RedirectRule] = field(default_factory=list)
    
    def validate(self) -> None:
        """Validate configuration"""
        validate_name(self.name)
        for proxy in self.proxies:
            proxy.validate()
        for rule in self.rules:
            rule.validate()
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "name": self.name,
            "proxies": [proxy.to_dict() for proxy in self.proxies],
            "rules": [rule.to_dict() for rule in self.rules],
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Configuration":
        """Create from dictionary"""
        if not isinstance(data, dict):
            raise ParseError("Configuration record must be a JSON object")
        if not isinstance(data.get("name"), str):
            raise ParseError("Configuration record has no name")
        
        proxies = data.get("proxies") or []
        rules = data.get("rules") or []
        if not isinstance(proxies, list) or not isinstance(rules, list):
            raise ParseError(f"Configuration '{data['name']}' has malformed lists")
        
        return cls(
            name=data["name"],
            proxies=[Proxy.from_dict(item) for item in proxies],
            rules=[RedirectRule.from_dict(item) for item in rules],
        )


def validate_name(name: str) -> None:
    """Names double as file stems, so they must be safe path components"""
    if not name or not name.strip():
        raise ValidationError("Configuration name must not be empty")
    if "/" in name or "\\" in name or name.startswith("."):
        raise ValidationError(f"Invalid configuration name: {name!r}")
