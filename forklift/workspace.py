from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from .config import config
from .errors import InvalidSessionOptions
from .models import FaucetPolicy, NetworkEndpoints

logger = logging.getLogger(__name__)


def validate_session_options(
    network: str | None,
    api_key: str | None,
    network_version: int | str | None = None,
) -> bool:
    """Check a simulation session's fork options; returns True when forking."""
    if network and api_key:
        return True
    if network or api_key:
        raise InvalidSessionOptions(
            "Both network and apiKey must be provided together, or neither",
            network=network,
            api_key_set=bool(api_key),
        )
    if network_version is not None and str(network_version) != "":
        raise InvalidSessionOptions(
            "networkVersion cannot be set when network is not set",
            network_version=str(network_version),
        )
    return False


def simulation_network() -> NetworkEndpoints:
    return NetworkEndpoints(
        label=config.SIMULATION.NETWORK_LABEL,
        rest_url=config.SIMULATION.PLACEHOLDER_REST_URL,
        faucet_url=None,
        faucet_policy=FaucetPolicy.NONE,
    )


def resolve_live_network(network: str, faucet_url: str | None = None) -> NetworkEndpoints:
    """Map a network name (case-insensitive) or custom fullnode URL to endpoints."""
    if not network or not network.strip():
        raise InvalidSessionOptions("network is required in live mode")
    key = network.strip().upper()
    if key in config.NETWORKS:
        known = config.NETWORKS[key]
        return NetworkEndpoints(
            label=known.LABEL,
            rest_url=known.REST_URL,
            faucet_url=known.FAUCET_URL or None,
            faucet_policy=FaucetPolicy(known.FAUCET_POLICY),
        )
    return NetworkEndpoints(
        label="Custom",
        rest_url=network.strip().rstrip("/"),
        faucet_url=faucet_url or None,
        faucet_policy=FaucetPolicy.AVAILABLE if faucet_url else FaucetPolicy.UNCONFIGURED,
    )


class SessionContext:
    """Owns one ephemeral workspace directory and the paths derived from it."""

    def __init__(self, working_dir: Path):
        self.working_dir = working_dir

    @classmethod
    def create(cls) -> "SessionContext":
        root = config.WORKSPACE.ROOT or None
        if root:
            Path(root).mkdir(parents=True, exist_ok=True)
        working_dir = Path(tempfile.mkdtemp(prefix=config.WORKSPACE.PREFIX, dir=root)).resolve()
        logger.debug("Created harness workspace %s", working_dir)
        return cls(working_dir)

    @property
    def session_path(self) -> Path:
        return self.working_dir / config.WORKSPACE.SESSION_SUBDIR

    @property
    def cli_config_path(self) -> Path:
        return self.working_dir / config.WORKSPACE.CONFIG_DIR / config.WORKSPACE.CONFIG_FILE

    def release(self) -> None:
        if not self.working_dir.exists():
            return
        try:
            shutil.rmtree(self.working_dir)
        except OSError:
            logger.warning("Failed to cleanup temporary directory %s", self.working_dir, exc_info=True)
            shutil.rmtree(self.working_dir, ignore_errors=True)
