"""
proxswap - switch local traffic between redsocks proxy chains

Keeps named configurations, each an ordered proxy chain plus the NAT
redirect rules feeding it, and activates one at a time:
- Chain definitions rendered for redsocks
- iptables nat rules installed and flushed
- Full-screen browser with live search and a creation wizard
"""

__version__ = "0.1.0"

from .domain.configuration import (
    Proxy,
    RedirectRule,
    Configuration,
    ConfigurationStore,
    ConfigurationService,
    SearchFilter,
    CreationWizard,
    render_chain,
)

__all__ = [
    "__version__",
    "Proxy",
    "RedirectRule",
    "Configuration",
    "ConfigurationStore",
    "ConfigurationService",
    "SearchFilter",
    "CreationWizard",
    "render_chain",
]
