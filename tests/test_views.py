"""Tests for pane rendering."""

from rich.console import Console

from proxswap.adapters.tui import TerminalController
from proxswap.adapters.tui.views import (
    configurations_panel,
    proxies_panel,
    rules_panel,
    status_text,
    wizard_panel,
)
from proxswap.domain.configuration import Proxy, RedirectRule

from tests.conftest import make_config


def render(renderable, width=80):
    console = Console(width=width, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestPanes:

    def test_configurations_mark_active(self, service):
        for name in ("home", "work"):
            service.create(name, [], [])
        tc = TerminalController(service)
        service.activate(service.store.find("work"))

        text = render(configurations_panel(tc))

        assert "○ home" in text
        assert "● work" in text

    def test_proxies_and_rules_of_selection(self, service):
        service.create(
            "home",
            [Proxy("socks5", "10.0.0.1", 1080)],
            [RedirectRule(80), RedirectRule(443)],
        )
        tc = TerminalController(service)

        assert "socks5 - 10.0.0.1:1080" in render(proxies_panel(tc))
        rules = render(rules_panel(tc))
        assert "80 → 14888" in rules
        assert "443 → 14888" in rules

    def test_empty_selection_renders_empty_panes(self, service):
        tc = TerminalController(service)
        assert "Proxies" in render(proxies_panel(tc))


class TestStatusLine:

    def test_normal_mode(self, service):
        tc = TerminalController(service)
        line = status_text(tc)
        assert line.startswith("Mode: Normal")
        assert "x: deactivate" not in line

    def test_deactivate_hint_when_active(self, service):
        service.create("home", [], [])
        tc = TerminalController(service)
        tc.handle_key("enter")
        assert "x: deactivate proxy" in status_text(tc)

    def test_search_query_and_message_shown(self, service):
        tc = TerminalController(service)
        tc.handle_key("slash", "/")
        tc.handle_key("h", "h")
        line = status_text(tc)
        assert line.startswith("Mode: Editing")
        assert "Search: h" in line

    def test_creating_mode(self, service):
        tc = TerminalController(service)
        tc.handle_key("c", "c")
        assert status_text(tc).startswith("Mode: Creating")


class TestWizardPanel:

    def test_lists_fields_and_pending_port(self, service):
        tc = TerminalController(service)
        tc.handle_key("c", "c")
        for character in "home":
            tc.handle_key(character, character)
        for _ in range(4):
            tc.handle_key("down")
        for character in "80":
            tc.handle_key(character, character)
        tc.handle_key("enter")
        tc.handle_key("4", "4")

        text = render(wizard_panel(tc.wizard))

        assert "Create New Configuration" in text
        assert "Name: home" in text
        assert "Redirect Ports: 80" in text
        assert "Current Input: 4" in text

    def test_no_ports_shows_none(self, service):
        tc = TerminalController(service)
        tc.handle_key("c", "c")
        assert "Redirect Ports: None" in render(wizard_panel(tc.wizard))
