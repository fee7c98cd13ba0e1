"""
Unified exception definitions
"""


class ProxSwapError(Exception):
    """Base exception class"""
    pass


class ValidationError(ProxSwapError):
    """Configuration field out of range or unusable name"""
    pass


class DuplicateNameError(ProxSwapError):
    """A configuration with the same name already exists"""

    def __init__(self, name: str):
        super().__init__(f"Configuration '{name}' already exists")
        self.name = name


class ConfigurationNotFoundError(ProxSwapError):
    """Index or name lookup miss"""
    pass


class PersistenceError(ProxSwapError):
    """Persisted file could not be read or written"""
    pass


class ParseError(ProxSwapError):
    """Malformed persisted record or numeric input"""
    pass


class ExternalProcessError(ProxSwapError):
    """Redirector or NAT tool failed to spawn or exited non-zero"""

    def __init__(self, message: str, command: str = "", exit_code: int = 1, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class PrivilegeError(ProxSwapError):
    """Elevated-privilege probe failed"""
    pass


class SettingsError(ProxSwapError):
    """Application settings could not be loaded"""
    pass
