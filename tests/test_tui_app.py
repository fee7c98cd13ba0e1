"""Drives the textual application through its key loop."""

import pytest

from proxswap.adapters.tui import CreatingMode, NormalMode, TerminalController
from proxswap.adapters.tui.app import ProxSwapApp

from tests.conftest import make_config


@pytest.fixture
def app(service):
    for name in ("alpha", "beta"):
        config = make_config(name)
        service.create(name, config.proxies, config.rules)
    return ProxSwapApp(TerminalController(service))


async def test_keys_reach_controller(app):
    async with app.run_test() as pilot:
        await pilot.press("down", "enter")
        await pilot.pause()
        assert app.controller.service.active_name == "beta"


async def test_wizard_overlay_follows_mode(app):
    async with app.run_test() as pilot:
        overlay = app.query_one("#overlay")
        assert not overlay.has_class("visible")

        await pilot.press("c")
        await pilot.pause()
        assert isinstance(app.controller.mode, CreatingMode)
        assert overlay.has_class("visible")

        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.controller.mode, NormalMode)
        assert not overlay.has_class("visible")


async def test_search_from_keyboard(app):
    async with app.run_test() as pilot:
        await pilot.press("slash", "b", "enter")
        await pilot.pause()
        assert app.controller.search.query == "b"
        assert app.controller.search.visible == [1]


async def test_q_exits(app):
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert app.controller.running is False
