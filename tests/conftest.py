"""Shared fixtures: in-memory redirection controller and temp repositories."""

from pathlib import Path

import pytest

from proxswap.core.exceptions import ExternalProcessError
from proxswap.core.interfaces import RedirectionController
from proxswap.core.telemetry import get_telemetry
from proxswap.domain.configuration import (
    Configuration,
    ConfigurationService,
    ConfigurationStore,
    Proxy,
    RedirectRule,
)
from proxswap.infrastructure.state import FileConfigurationRepository


class RecordingController(RedirectionController):
    """Records every call as a tuple; ``fail`` names calls that should raise."""

    def __init__(self):
        self.calls = []
        self.fail = set()
        self.fail_ports = set()

    def _maybe_fail(self, name):
        if name in self.fail:
            raise ExternalProcessError(f"{name} failed", command=name)

    def ensure_privileges(self):
        self.calls.append(("ensure_privileges",))

    def start_redirector(self, chain_file: Path):
        self.calls.append(("start", chain_file))
        self._maybe_fail("start")

    def stop_redirector(self):
        self.calls.append(("stop",))
        self._maybe_fail("stop")

    def install_rule(self, rule):
        self.calls.append(("install", rule.source_port))
        if rule.source_port in self.fail_ports:
            raise ExternalProcessError(f"rule {rule.source_port} failed")
        self._maybe_fail("install")

    def flush_rules(self):
        self.calls.append(("flush",))
        self._maybe_fail("flush")

    def names(self):
        return [call[0] for call in self.calls]


def make_config(name, ports=(80,), proxies=None):
    return Configuration(
        name=name,
        proxies=proxies if proxies is not None else [Proxy("socks5", "10.0.0.1", 1080)],
        rules=[RedirectRule(source_port=port) for port in ports],
    )


@pytest.fixture(autouse=True)
def clear_telemetry():
    get_telemetry().clear()
    yield
    get_telemetry().clear()


@pytest.fixture
def repository(tmp_path):
    return FileConfigurationRepository(tmp_path / "proxswap")


@pytest.fixture
def controller():
    return RecordingController()


@pytest.fixture
def service(repository, controller):
    return ConfigurationService(ConfigurationStore(), repository, controller)
