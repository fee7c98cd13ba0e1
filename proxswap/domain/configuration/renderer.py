"""
Redsocks chain definition rendering
"""
from typing import Sequence

from ...core.constants import (
    CHAIN_BASE_PORT,
    CHAIN_LOCAL_IP,
    CHAIN_PREAMBLE,
    CHAIN_HOP_TEMPLATE,
)
from .models import Proxy


def local_port_for(index: int) -> int:
    """Local listening port of the hop at ``index``"""
    return CHAIN_BASE_PORT + index


def render_chain(proxies: Sequence[Proxy]) -> str:
    """
    Render an ordered proxy list as a redsocks configuration.
    
    Each hop gets ``CHAIN_BASE_PORT + index`` as its local port, so the
    output depends on list order. Blocks are separated by one blank line.
    
    Args:
        proxies: Proxies in chain order
    
    Returns:
        Chain definition text
    """
    blocks = [CHAIN_PREAMBLE]
    for index, proxy in enumerate(proxies):
        blocks.append(CHAIN_HOP_TEMPLATE.format(
            local_ip=CHAIN_LOCAL_IP,
            local_port=local_port_for(index),
            proxy_type=proxy.proxy_type,
            host=proxy.host,
            port=proxy.port,
        ))
    return "\n".join(blocks)
