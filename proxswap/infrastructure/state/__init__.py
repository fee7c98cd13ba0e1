"""
State storage implementations
"""
from .file_store import FileConfigurationRepository

__all__ = ["FileConfigurationRepository"]
