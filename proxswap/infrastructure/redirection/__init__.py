"""
External redirection tooling
"""
from .controller import RedsocksController
from .runner import CommandResult, exec_local

__all__ = ["RedsocksController", "CommandResult", "exec_local"]
