"""
Project constants definitions
"""

# ============================================================
# Storage Layout
# ============================================================

DEFAULT_CONFIG_DIR = "~/.config/proxswap"
CHAIN_SUBDIR = "redsocks"
SETTINGS_FILE_NAME = "config.toml"
LOG_FILE_NAME = "proxswap.log"
RECORD_SUFFIX = ".json"
CHAIN_SUFFIX = ".conf"

# ============================================================
# Proxy Chain
# ============================================================

# First local port handed to the redirector; hop N listens on BASE + N
CHAIN_BASE_PORT = 14888
CHAIN_LOCAL_IP = "127.0.0.1"

CHAIN_PREAMBLE = """base {
    log_debug = off;
    log_info = off;
    daemon = on;
    redirector = iptables;
}
"""

CHAIN_HOP_TEMPLATE = """redsocks {{
    local_ip = {local_ip};
    local_port = {local_port};

    type = {proxy_type};
    ip = {host};
    port = {port};
}}
"""

# ============================================================
# Redirection Defaults
# ============================================================

DEFAULT_REDIRECTOR_BIN = "redsocks"
DEFAULT_NAT_CHAIN = "OUTPUT"
DEFAULT_RULE_ACTION = "REDIRECT"
DEFAULT_LOG_LEVEL = "INFO"

MIN_PORT = 1
MAX_PORT = 65535

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "PROXSWAP_"
