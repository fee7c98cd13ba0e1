"""
Configuration domain module
"""
from .models import Proxy, RedirectRule, Configuration, validate_name
from .renderer import render_chain, local_port_for
from .store import ConfigurationStore
from .service import ConfigurationService, CreateResult
from .search import SearchFilter
from .wizard import CreationWizard, WizardField, WizardDraft

__all__ = [
    "Proxy",
    "RedirectRule",
    "Configuration",
    "validate_name",
    "render_chain",
    "local_port_for",
    "ConfigurationStore",
    "ConfigurationService",
    "CreateResult",
    "SearchFilter",
    "CreationWizard",
    "WizardField",
    "WizardDraft",
]
