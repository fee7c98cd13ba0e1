"""
Execution helpers for external tools

Simple, safe execution wrappers for local commands
"""
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from ...core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Result of an external command"""
    args: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    
    @property
    def success(self) -> bool:
        return self.exit_code == 0
    
    @property
    def command(self) -> str:
        return shlex.join(self.args)


def exec_local(
    args: List[str],
    timeout: Optional[float] = None,
    capture_output: bool = True,
) -> CommandResult:
    """
    Execute a local command.
    
    Args:
        args: Command as a list of arguments
        timeout: Command timeout in seconds (None waits forever)
        capture_output: Whether to capture stdout/stderr
        
    Returns:
        CommandResult. Spawn failures and timeouts are reported as
        non-zero results instead of raising.
    """
    logger.debug(f"exec: {shlex.join(args)}")
    try:
        result = subprocess.run(
            args,
            capture_output=capture_output,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return CommandResult(
            args=args,
            exit_code=124,  # Timeout exit code
            stderr=f"Command timed out after {timeout} seconds",
        )
    except OSError as e:
        return CommandResult(
            args=args,
            exit_code=127,
            stderr=f"Error executing command: {e}",
        )
    
    return CommandResult(
        args=args,
        exit_code=result.returncode,
        stdout=result.stdout if capture_output else "",
        stderr=result.stderr if capture_output else "",
    )
