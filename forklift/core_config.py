"""
Core Configuration Definitions.

This module defines the default structure and values for the harness
configuration using `yacs`. It is the single source of truth for every
configurable parameter.

Configuration is organized into sections:
- ENGINE: External Aptos CLI binary and subprocess environment policy.
- WORKSPACE: Layout of the per-harness ephemeral workspace.
- SIMULATION: Defaults applied to simulation sessions.
- NETWORKS: Well-known live networks and their endpoints.
- HTTP: Fullnode REST client settings.
- LOGGING: Log level and optional log file.
"""

import os

from yacs.config import CfgNode as CN  # type: ignore[import-untyped]


def _env_list(name: str) -> list:
    raw = os.environ.get(name, "")
    return [item.strip() for item in raw.split(os.pathsep) if item.strip()]


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


_C = CN()

# -----------------------------------------------------------------------------
# Engine Configuration
# -----------------------------------------------------------------------------
_C.ENGINE = CN()
# Executable (or absolute path) of the Aptos CLI
_C.ENGINE.BINARY = os.environ.get("FORKLIFT_APTOS_BINARY", "aptos")
# PATH entries containing any of these fragments are dropped before spawning,
# so that locally installed wrappers cannot shadow the real CLI.
_C.ENGINE.PATH_EXCLUDE_PATTERNS = ["node_modules/.bin", *_env_list("FORKLIFT_PATH_EXCLUDE")]
# Variables copied from the host environment besides PATH
_C.ENGINE.ENV_PASSTHROUGH = ["SYSTEMROOT"]

# -----------------------------------------------------------------------------
# Workspace Configuration
# -----------------------------------------------------------------------------
_C.WORKSPACE = CN()
# Parent directory for workspaces (empty means the system temp dir)
_C.WORKSPACE.ROOT = os.environ.get("FORKLIFT_WORKSPACE_ROOT", "")
_C.WORKSPACE.PREFIX = "forklift-"
_C.WORKSPACE.SESSION_SUBDIR = "data"
_C.WORKSPACE.CONFIG_DIR = ".aptos"
_C.WORKSPACE.CONFIG_FILE = "config.yaml"

# -----------------------------------------------------------------------------
# Simulation Configuration
# -----------------------------------------------------------------------------
_C.SIMULATION = CN()
_C.SIMULATION.DEFAULT_PROFILE = "default"
# 100 APT, in octas
_C.SIMULATION.DEFAULT_FUNDING = 10_000_000_000
_C.SIMULATION.NETWORK_LABEL = "Custom"
# Recorded in simulation profiles; the session never contacts it.
_C.SIMULATION.PLACEHOLDER_REST_URL = "https://dummy.network.aptoslabs.com"

# -----------------------------------------------------------------------------
# Live Networks
# -----------------------------------------------------------------------------
# FAUCET_POLICY: "available" | "none" (no faucet exists) | "manual" (web UI only)
_C.NETWORKS = CN()

_C.NETWORKS.MAINNET = CN()
_C.NETWORKS.MAINNET.LABEL = "Mainnet"
_C.NETWORKS.MAINNET.REST_URL = "https://fullnode.mainnet.aptoslabs.com"
_C.NETWORKS.MAINNET.FAUCET_URL = ""
_C.NETWORKS.MAINNET.FAUCET_POLICY = "none"

_C.NETWORKS.TESTNET = CN()
_C.NETWORKS.TESTNET.LABEL = "Testnet"
_C.NETWORKS.TESTNET.REST_URL = "https://fullnode.testnet.aptoslabs.com"
_C.NETWORKS.TESTNET.FAUCET_URL = ""
_C.NETWORKS.TESTNET.FAUCET_POLICY = "manual"

_C.NETWORKS.DEVNET = CN()
_C.NETWORKS.DEVNET.LABEL = "Devnet"
_C.NETWORKS.DEVNET.REST_URL = "https://fullnode.devnet.aptoslabs.com"
_C.NETWORKS.DEVNET.FAUCET_URL = "https://faucet.devnet.aptoslabs.com"
_C.NETWORKS.DEVNET.FAUCET_POLICY = "available"

_C.NETWORKS.LOCAL = CN()
_C.NETWORKS.LOCAL.LABEL = "Local"
_C.NETWORKS.LOCAL.REST_URL = "http://127.0.0.1:8080"
_C.NETWORKS.LOCAL.FAUCET_URL = "http://127.0.0.1:8081"
_C.NETWORKS.LOCAL.FAUCET_POLICY = "available"

# -----------------------------------------------------------------------------
# HTTP Configuration
# -----------------------------------------------------------------------------
_C.HTTP = CN()
_C.HTTP.TIMEOUT_SEC = _env_float("FORKLIFT_HTTP_TIMEOUT", 30.0)

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------
_C.LOGGING = CN()
_C.LOGGING.LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
_C.LOGGING.FILE = os.environ.get("LOG_FILE", "")
_C.LOGGING.MAX_BYTES = 5 * 1024 * 1024
_C.LOGGING.BACKUP_COUNT = 5


def get_cfg_defaults():
    """Get a yacs CfgNode object with default values for the harness."""
    return _C.clone()
