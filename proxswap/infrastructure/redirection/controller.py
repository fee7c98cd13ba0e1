"""
Redsocks + iptables redirection controller
"""
import os
from pathlib import Path
from typing import Callable, List, Optional

from ...core.constants import DEFAULT_REDIRECTOR_BIN, DEFAULT_NAT_CHAIN
from ...core.exceptions import ExternalProcessError, PrivilegeError
from ...core.interfaces import RedirectionController
from ...core.logging import get_logger
from ...domain.configuration.models import RedirectRule
from .runner import CommandResult, exec_local

logger = get_logger(__name__)

# pkill: 0 = signalled, 1 = nothing matched
_PKILL_NO_MATCH = 1


class RedsocksController(RedirectionController):
    """
    Drives the redsocks redirector and the iptables nat table.
    
    Every call blocks until the external tool exits.
    """
    
    def __init__(
        self,
        redirector_bin: str = DEFAULT_REDIRECTOR_BIN,
        nat_chain: str = DEFAULT_NAT_CHAIN,
        use_sudo: bool = True,
        timeout: Optional[float] = None,
        runner: Callable[..., CommandResult] = exec_local,
    ):
        self.redirector_bin = redirector_bin
        self.nat_chain = nat_chain
        self.use_sudo = use_sudo and os.geteuid() != 0
        self.timeout = timeout
        self._run = runner
    
    def _privileged(self, args: List[str]) -> List[str]:
        return ["sudo", *args] if self.use_sudo else args
    
    def _check(self, result: CommandResult, what: str) -> CommandResult:
        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.exit_code}"
            raise ExternalProcessError(
                f"{what} failed: {detail}",
                command=result.command,
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result
    
    def ensure_privileges(self) -> None:
        """Validate (and cache) sudo credentials"""
        if os.geteuid() == 0:
            return
        if not self.use_sudo:
            raise PrivilegeError("Root privileges required: run as root or enable use_sudo")

        result = self._run(["sudo", "-v"], timeout=self.timeout, capture_output=False)
        if not result.success:
            raise PrivilegeError("Failed to obtain sudo privileges")
    
    def start_redirector(self, chain_file: Path) -> None:
        """Start redsocks with a chain definition"""
        result = self._run(
            [self.redirector_bin, "-c", str(chain_file)],
            timeout=self.timeout,
        )
        self._check(result, "Starting redirector")
        logger.info(f"Redirector started with {chain_file}")
    
    def stop_redirector(self) -> None:
        """Stop every running redsocks process"""
        result = self._run(
            self._privileged(["pkill", "-x", Path(self.redirector_bin).name]),
            timeout=self.timeout,
        )
        if result.exit_code == _PKILL_NO_MATCH:
            logger.debug("No redirector process running")
            return
        self._check(result, "Stopping redirector")
        logger.info("Redirector stopped")
    
    def install_rule(self, rule: RedirectRule) -> None:
        """Append one REDIRECT entry to the nat table"""
        result = self._run(
            self._privileged([
                "iptables", "-t", "nat", "-A", self.nat_chain,
                "-p", "tcp",
                "--dport", str(rule.source_port),
                "-j", rule.action,
                "--to-port", str(rule.target_port),
            ]),
            timeout=self.timeout,
        )
        self._check(result, f"Installing rule {rule.source_port} -> {rule.target_port}")
        logger.info(f"Installed rule {rule.source_port} -> {rule.target_port} ({rule.action})")
    
    def flush_rules(self) -> None:
        """Flush the nat chain"""
        result = self._run(
            self._privileged(["iptables", "-t", "nat", "-F", self.nat_chain]),
            timeout=self.timeout,
        )
        self._check(result, "Flushing NAT rules")
        logger.info(f"Flushed nat {self.nat_chain} chain")
