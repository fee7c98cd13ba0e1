"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import ConfigurationRepository, RedirectionController, LoadFailure
from .telemetry import Telemetry, get_telemetry

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "ConfigurationRepository",
    "RedirectionController",
    "LoadFailure",
    "Telemetry",
    "get_telemetry",
]
