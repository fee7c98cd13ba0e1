"""
Creation wizard - field-by-field input state machine
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from ...core.constants import CHAIN_BASE_PORT, DEFAULT_RULE_ACTION, MIN_PORT, MAX_PORT
from ...core.exceptions import ValidationError
from ...core.logging import get_logger
from .models import Proxy, RedirectRule

logger = get_logger(__name__)


class WizardField(Enum):
    """Wizard fields, in input order"""
    NAME = "Name"
    PROXY_TYPE = "Proxy Type"
    PROXY_URL = "Proxy URL"
    PROXY_PORT = "Proxy Port"
    REDIRECT_PORTS = "Redirect Ports"
    CONFIRM = "Confirm"


FIELD_ORDER: List[WizardField] = list(WizardField)

NEXT_FIELD: Dict[WizardField, WizardField] = {
    **dict(zip(FIELD_ORDER, FIELD_ORDER[1:])),
    WizardField.CONFIRM: WizardField.CONFIRM,
}

PREVIOUS_FIELD: Dict[WizardField, WizardField] = {
    **dict(zip(FIELD_ORDER[1:], FIELD_ORDER)),
    WizardField.NAME: WizardField.NAME,
}

# Fields that only take digits
NUMERIC_FIELDS = {WizardField.PROXY_PORT, WizardField.REDIRECT_PORTS}


@dataclass
class WizardDraft:
    """Fields collected by a finished wizard"""
    name: str
    proxies: List[Proxy]
    rules: List[RedirectRule]
    skipped_ports: List[str] = field(default_factory=list)


class CreationWizard:
    """
    In-progress configuration, owned by the interface until confirmed.
    
    Nothing here touches the store; dropping the instance cancels.
    """
    
    def __init__(self):
        self.field = WizardField.NAME
        self.name = ""
        self.proxy_type = ""
        self.proxy_url = ""
        self.proxy_port = ""
        self.redirect_ports: List[str] = []
        self.port_input = ""
    
    def next(self) -> WizardField:
        self.field = NEXT_FIELD[self.field]
        return self.field
    
    def previous(self) -> WizardField:
        self.field = PREVIOUS_FIELD[self.field]
        return self.field
    
    def _buffer_attr(self) -> str:
        return {
            WizardField.NAME: "name",
            WizardField.PROXY_TYPE: "proxy_type",
            WizardField.PROXY_URL: "proxy_url",
            WizardField.PROXY_PORT: "proxy_port",
            WizardField.REDIRECT_PORTS: "port_input",
        }.get(self.field, "")
    
    def type_char(self, character: str) -> None:
        """Append to the focused buffer; non-digits are dropped on port fields"""
        attr = self._buffer_attr()
        if not attr:
            return
        if self.field in NUMERIC_FIELDS and not character.isdigit():
            return
        setattr(self, attr, getattr(self, attr) + character)
    
    def backspace(self) -> None:
        attr = self._buffer_attr()
        if attr:
            setattr(self, attr, getattr(self, attr)[:-1])
    
    def push_port(self) -> bool:
        """Move the pending port input into the port list"""
        if not self.port_input:
            return False
        self.redirect_ports.append(self.port_input)
        self.port_input = ""
        return True
    
    def submit(self) -> bool:
        """
        Handle the confirm key on the current field.
        
        On Redirect Ports this pushes the pending port and stays; on
        Confirm it reports readiness; elsewhere it advances.
        
        Returns:
            True when the wizard should be finished
        """
        if self.field is WizardField.CONFIRM:
            return True
        if self.field is WizardField.REDIRECT_PORTS:
            self.push_port()
        else:
            self.next()
        return False
    
    def build(self) -> WizardDraft:
        """
        Turn the collected text into proxies and rules.
        
        Redirect ports outside 1-65535 are skipped and listed in
        ``skipped_ports``.
        
        Raises:
            ValidationError: If the proxy is incomplete or its port invalid
        """
        if not self.proxy_type or not self.proxy_url:
            raise ValidationError("Proxy type and URL are required")
        try:
            proxy_port = int(self.proxy_port)
        except ValueError:
            raise ValidationError(f"Invalid proxy port: {self.proxy_port!r}") from None
        
        proxy = Proxy(proxy_type=self.proxy_type, host=self.proxy_url, port=proxy_port)
        proxy.validate()
        
        rules: List[RedirectRule] = []
        skipped: List[str] = []
        for entry in self.redirect_ports:
            try:
                port = int(entry)
            except ValueError:
                port = 0
            if MIN_PORT <= port <= MAX_PORT:
                rules.append(RedirectRule(
                    source_port=port,
                    target_port=CHAIN_BASE_PORT,
                    action=DEFAULT_RULE_ACTION,
                ))
            else:
                logger.warning(f"Skipping invalid redirect port {entry!r}")
                skipped.append(entry)
        
        return WizardDraft(name=self.name, proxies=[proxy], rules=rules, skipped_ports=skipped)
