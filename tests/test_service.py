"""Tests for the configuration lifecycle service."""

import json

import pytest

from proxswap.core.exceptions import (
    ConfigurationNotFoundError,
    DuplicateNameError,
    ExternalProcessError,
    PersistenceError,
    ValidationError,
)
from proxswap.core.telemetry import get_telemetry
from proxswap.domain.configuration import Proxy, RedirectRule, render_chain

from tests.conftest import make_config


def create(service, name, ports=(80,)):
    config = make_config(name, ports=ports)
    return service.create(config.name, config.proxies, config.rules).config


class TestCreate:

    def test_create_persists_renders_installs_and_stores(self, service, repository, controller):
        proxies = [Proxy("socks5", "10.0.0.1", 1080)]
        result = service.create("home", proxies, [RedirectRule(80), RedirectRule(443)])

        assert result.warnings == []
        assert service.store.names() == ["home"]
        assert repository.exists("home")
        assert repository.chain_path("home").read_text() == render_chain(proxies)
        assert controller.calls == [("install", 80), ("install", 443)]
        assert service.active_name is None

    def test_duplicate_name_fails_and_store_unchanged(self, service, controller):
        create(service, "home")
        controller.calls.clear()

        with pytest.raises(DuplicateNameError):
            create(service, "home", ports=(22,))

        assert service.store.names() == ["home"]
        assert service.store.find("home").rules[0].source_port == 80
        assert controller.calls == []

    def test_name_taken_on_disk_is_a_duplicate(self, service, repository):
        repository.save(make_config("orphan"))
        with pytest.raises(DuplicateNameError):
            create(service, "orphan")
        assert len(service.store) == 0

    def test_invalid_configuration_rejected(self, service):
        with pytest.raises(ValidationError):
            service.create("bad/name", [], [])
        assert len(service.store) == 0

    def test_rule_failure_is_reported_not_fatal(self, service, controller):
        controller.fail_ports = {443}

        result = service.create("home", [], [RedirectRule(80), RedirectRule(443), RedirectRule(8080)])

        assert service.store.names() == ["home"]
        assert len(result.warnings) == 1
        assert controller.calls == [("install", 80), ("install", 443), ("install", 8080)]
        assert get_telemetry().get_events("configuration.rule_failed")

    def test_persistence_failure_is_reported_not_fatal(self, service, repository, monkeypatch):
        def broken(*args, **kwargs):
            raise PersistenceError("disk full")

        monkeypatch.setattr(repository, "save", broken)

        result = service.create("home", [], [])

        assert result.warnings == ["disk full"]
        assert service.store.names() == ["home"]


class TestActivate:

    def test_activate_starts_redirector_and_installs_rules(self, service, repository, controller):
        config = create(service, "home", ports=(80, 443))
        controller.calls.clear()

        service.activate(config)

        assert controller.calls == [
            ("stop",),
            ("flush",),
            ("start", repository.chain_path("home")),
            ("install", 80),
            ("install", 443),
        ]
        assert service.active_name == "home"
        assert service.active is config

    def test_switching_deactivates_previous_first(self, service, controller):
        a = create(service, "a", ports=(80,))
        b = create(service, "b", ports=(443,))
        service.activate(a)
        controller.calls.clear()

        service.activate(b)

        names = controller.names()
        assert names.index("stop") < names.index("start")
        assert names.index("flush") < names.index("install")
        assert controller.calls[-1] == ("install", 443)
        assert service.active_name == "b"
        assert not service.is_active(a)

    def test_redirector_failure_is_hard_error_and_marker_cleared(self, service, controller):
        a = create(service, "a")
        b = create(service, "b")
        service.activate(a)
        controller.fail = {"start"}
        controller.calls.clear()

        with pytest.raises(ExternalProcessError):
            service.activate(b)

        assert service.active_name is None
        # Partial setup torn down after the failure
        assert controller.names()[-2:] == ["stop", "flush"]

    def test_rule_failure_during_activation_rolls_back(self, service, controller):
        config = create(service, "a", ports=(80, 443))
        controller.fail_ports = {443}
        controller.calls.clear()

        with pytest.raises(ExternalProcessError):
            service.activate(config)

        assert service.active_name is None
        assert controller.names()[-2:] == ["stop", "flush"]

    def test_failed_deactivation_aborts_switch(self, service, controller):
        a = create(service, "a")
        b = create(service, "b")
        service.activate(a)
        controller.fail = {"flush"}
        controller.calls.clear()

        with pytest.raises(ExternalProcessError):
            service.activate(b)

        assert service.active_name == "a"
        assert "start" not in controller.names()

    def test_activate_unknown_configuration(self, service):
        with pytest.raises(ConfigurationNotFoundError):
            service.activate(make_config("ghost"))

    def test_activate_rewrites_missing_chain_file(self, service, repository):
        config = create(service, "home")
        repository.chain_path("home").unlink()

        service.activate(config)

        assert repository.chain_path("home").exists()


class TestDeactivate:

    def test_deactivate_twice_with_nothing_active(self, service, controller):
        service.deactivate()
        service.deactivate()

        assert service.active_name is None
        assert controller.names() == ["stop", "flush", "stop", "flush"]
        assert get_telemetry().get_events("configuration.deactivated") == []

    def test_deactivate_clears_marker(self, service):
        config = create(service, "home")
        service.activate(config)

        service.deactivate()

        assert service.active_name is None
        assert len(get_telemetry().get_events("configuration.deactivated")) == 1

    def test_flush_still_runs_when_stop_fails(self, service, controller):
        config = create(service, "home")
        service.activate(config)
        controller.fail = {"stop"}
        controller.calls.clear()

        with pytest.raises(ExternalProcessError):
            service.deactivate()

        assert controller.names() == ["stop", "flush"]
        assert service.active_name == "home"


class TestDelete:

    def test_delete_inactive(self, service, repository, controller):
        config = create(service, "home")
        controller.calls.clear()

        service.delete(config)

        assert service.store.names() == []
        assert not repository.exists("home")
        assert not repository.chain_path("home").exists()
        assert controller.calls == []

    def test_delete_active_deactivates_first(self, service, repository, controller):
        config = create(service, "home")
        create(service, "other")
        service.activate(config)
        controller.calls.clear()

        service.delete(config)

        assert controller.names() == ["stop", "flush"]
        assert service.store.names() == ["other"]
        assert service.active_name is None
        assert not repository.exists("home")

    def test_delete_aborts_when_deactivation_fails(self, service, repository, controller):
        config = create(service, "home")
        service.activate(config)
        controller.fail = {"stop"}

        with pytest.raises(ExternalProcessError):
            service.delete(config)

        assert service.store.names() == ["home"]
        assert repository.exists("home")
        assert service.active_name == "home"

    def test_delete_unknown(self, service):
        with pytest.raises(ConfigurationNotFoundError):
            service.delete(make_config("ghost"))


class TestLoad:

    def test_load_fills_store_and_refreshes_chains(self, service, repository, controller):
        repository.save(make_config("a"))
        repository.save(make_config("b"))
        repository.record_path("c").write_text("oops")

        failures = service.load()

        assert service.store.names() == ["a", "b"]
        assert len(failures) == 1
        assert repository.chain_path("a").exists()
        # Loading never touches NAT rules
        assert controller.calls == []

    def test_invalid_record_never_reaches_store_or_disk(self, service, repository, tmp_path):
        record = make_config("../../escaped").to_dict()
        record["proxies"][0]["port"] = 0
        record["rules"][0]["dport"] = 99999
        repository.record_path("home").write_text(json.dumps(record))

        failures = service.load()

        assert service.store.names() == []
        assert [f.path.name for f in failures] == ["home.json"]
        assert not list(tmp_path.rglob("escaped.conf"))
