"""
Rich renderables for the interface panes
"""
from typing import Optional

from rich.console import Group
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from ...domain.configuration import Configuration, CreationWizard, WizardField
from .controller import TerminalController
from .modes import Focus, FOOTER_KEYS


def _border(controller: TerminalController, pane: Focus) -> str:
    return "cyan" if controller.focus is pane else "blue"


def configurations_panel(controller: TerminalController) -> Panel:
    """Filtered configuration list, active one marked"""
    text = Text()
    store = controller.service.store
    for position, index in enumerate(controller.search.visible):
        config = store[index]
        active = controller.service.is_active(config)
        style = "green" if active else "white"
        if position == controller.selected:
            style += " bold on grey23"
        if position:
            text.append("\n")
        text.append(f"{'●' if active else '○'} {config.name}", style=style)
    
    return Panel(text, title="Configurations", border_style=_border(controller, Focus.CONFIGURATIONS))


def proxies_panel(controller: TerminalController, config: Optional[Configuration] = None) -> Panel:
    config = config or controller.selected_config
    lines = [
        f"{proxy.proxy_type} - {proxy.host}:{proxy.port}"
        for proxy in (config.proxies if config else [])
    ]
    return Panel(Text("\n".join(lines)), title="Proxies", border_style=_border(controller, Focus.PROXIES))


def rules_panel(controller: TerminalController, config: Optional[Configuration] = None) -> Panel:
    config = config or controller.selected_config
    lines = [
        f"{rule.source_port} → {rule.target_port}"
        for rule in (config.rules if config else [])
    ]
    return Panel(Text("\n".join(lines)), title="Rules", border_style=_border(controller, Focus.RULES))


def status_text(controller: TerminalController) -> str:
    """Mode, key help, search query and last message on one line"""
    keys = list(FOOTER_KEYS[type(controller.mode)])
    if controller.service.active_name is not None and controller.wizard is None:
        keys.insert(2, ("x", "deactivate proxy"))
    
    parts = [f"Mode: {controller.mode.label}"]
    parts.extend(f"{key}: {description}" for key, description in keys)
    line = " │ ".join(parts)
    
    if controller.search.query:
        line += f"  Search: {controller.search.query}"
    if controller.status:
        line += f"  » {controller.status}"
    return line


def status_panel(controller: TerminalController) -> Panel:
    style = "green" if controller.service.active_name is not None else "white"
    return Panel(Text(status_text(controller), style=style), border_style="blue")


def _field_line(label: str, value: str, focused: bool) -> Text:
    line = Text()
    line.append(f"{label}: ", style="yellow" if focused else "grey62")
    line.append(value, style="bold reverse white" if focused else "grey62")
    return line


def wizard_panel(wizard: CreationWizard) -> Panel:
    """Overlay with every wizard field, the focused one highlighted"""
    values = {
        WizardField.NAME: wizard.name,
        WizardField.PROXY_TYPE: wizard.proxy_type,
        WizardField.PROXY_URL: wizard.proxy_url,
        WizardField.PROXY_PORT: wizard.proxy_port,
        WizardField.REDIRECT_PORTS: ", ".join(wizard.redirect_ports) or "None",
    }
    lines = [
        _field_line(field.value, value, wizard.field is field)
        for field, value in values.items()
    ]
    if wizard.field is WizardField.REDIRECT_PORTS:
        lines.append(_field_line("Current Input", wizard.port_input, True))
    lines.append(_field_line("Confirm", "[ create ]", wizard.field is WizardField.CONFIRM))
    
    help_lines = [
        Text.assemble(("↑/↓", "yellow"), ": Navigate Fields"),
        Text.assemble(("Enter", "yellow"), ": Confirm Field/Add Port"),
        Text.assemble(("Esc", "yellow"), ": Cancel"),
    ]
    return Panel(
        Group(*lines, Text(""), Rule(style="grey42"), *help_lines),
        title="Create New Configuration",
        border_style="yellow",
    )
