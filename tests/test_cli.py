"""Tests for the typer command line."""

import pytest
from typer.testing import CliRunner

from proxswap.adapters.cli import app as cli_app
from proxswap.domain.configuration import ConfigurationService, ConfigurationStore
from proxswap.infrastructure.state import FileConfigurationRepository

from tests.conftest import RecordingController, make_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("PROXSWAP_CONFIG_DIR", raising=False)
    monkeypatch.delenv("PROXSWAP_LOG_LEVEL", raising=False)


class TestListCommand:

    def test_lists_configurations(self, tmp_path):
        repo = FileConfigurationRepository(tmp_path / "cfg")
        repo.save(make_config("home", ports=(80, 443)))

        result = runner.invoke(cli_app.app, ["--config-dir", str(tmp_path / "cfg"), "list"])

        assert result.exit_code == 0
        assert "home" in result.output
        assert "10.0.0.1" in result.output

    def test_empty(self, tmp_path):
        result = runner.invoke(cli_app.app, ["--config-dir", str(tmp_path / "cfg"), "list"])
        assert result.exit_code == 0
        assert "No configurations" in result.output

    def test_bad_settings_file_exits_nonzero(self, tmp_path):
        result = runner.invoke(cli_app.app, ["--config", str(tmp_path / "missing.toml"), "list"])
        assert result.exit_code == 1


class TestDeactivateCommand:

    def test_deactivate_runs_stop_and_flush(self, tmp_path, monkeypatch):
        controller = RecordingController()

        def fake_service(settings):
            repo = FileConfigurationRepository(settings.config_dir)
            return ConfigurationService(ConfigurationStore(), repo, controller)

        monkeypatch.setattr(cli_app, "create_service", fake_service)

        result = runner.invoke(cli_app.app, ["--config-dir", str(tmp_path / "cfg"), "deactivate"])

        assert result.exit_code == 0
        assert controller.names() == ["ensure_privileges", "stop", "flush"]

    def test_deactivate_failure_exits_nonzero(self, tmp_path, monkeypatch):
        controller = RecordingController()
        controller.fail = {"flush"}

        def fake_service(settings):
            repo = FileConfigurationRepository(settings.config_dir)
            return ConfigurationService(ConfigurationStore(), repo, controller)

        monkeypatch.setattr(cli_app, "create_service", fake_service)

        result = runner.invoke(cli_app.app, ["--config-dir", str(tmp_path / "cfg"), "deactivate"])

        assert result.exit_code == 1


class TestSettingsWiring:

    def test_create_service_uses_settings(self, tmp_path):
        from proxswap.adapters.config import Settings

        settings = Settings.from_dict({
            "config_dir": str(tmp_path / "cfg"),
            "nat_chain": "PROXSWAP",
            "use_sudo": False,
        })
        service = cli_app.create_service(settings)

        assert service.repository.config_dir == tmp_path / "cfg"
        assert service.controller.nat_chain == "PROXSWAP"
        assert service.controller.use_sudo is False
