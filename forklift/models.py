"""
Data Models for forklift.

This module defines the Pydantic models returned by the harness. Engine and
fullnode payloads are loosely typed JSON; they are converted into these
models at the normalization boundary so callers never handle raw backend
documents directly. It covers:
- Harness modes and live-network endpoints (HarnessMode, NetworkEndpoints)
- Signing identities (Profile)
- Transaction outcomes and events (TransactionResult, Event)
- State reads (ResourceQueryResult, ResourceGroupResult, ViewResult)
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class HarnessMode(str, Enum):
    """Operating mode selected once when a harness is created."""
    LOCAL_SIMULATION = "local-simulation"
    FORKED_SIMULATION = "forked-simulation"
    LIVE = "live"

    @property
    def is_simulation(self) -> bool:
        return self is not HarnessMode.LIVE


class FaucetPolicy(str, Enum):
    """Whether a live network offers a programmatic faucet."""
    AVAILABLE = "available"
    NONE = "none"            # No faucet exists (e.g. Mainnet)
    MANUAL = "manual"        # Faucet requires interactive authentication
    UNCONFIGURED = "unconfigured"  # Custom endpoint without a faucet URL


class NetworkEndpoints(BaseModel):
    """Network label and endpoints recorded on a harness."""
    label: str
    rest_url: str
    faucet_url: Optional[str] = None
    faucet_policy: FaucetPolicy = FaucetPolicy.UNCONFIGURED


class Profile(BaseModel):
    """A named signing identity stored in the workspace CLI config."""
    name: str
    address: str
    private_key: str
    public_key: str
    network: str
    rest_url: str

    def to_config_entry(self) -> Dict[str, str]:
        return {
            "network": self.network,
            "rest_url": self.rest_url,
            "account": self.address,
            "private_key": self.private_key,
            "public_key": self.public_key,
        }


class Event(BaseModel):
    """An emitted event, identical in shape across simulation and live modes."""
    type: str
    data: Any = None


class TransactionResult(BaseModel):
    """Outcome of a transaction-executing operation.

    A transaction that ran but aborted is reported with `succeeded=False`
    rather than raised.
    """
    succeeded: bool
    transaction_hash: Optional[str] = None
    vm_status: Optional[str] = None
    gas_used: Optional[int] = None
    deployed_object_address: Optional[str] = None
    events: Optional[List[Event]] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class ViewResult(BaseModel):
    """Return values of a view function, in declaration order."""
    values: List[Any] = Field(default_factory=list)

    def __getitem__(self, index: int) -> Any:
        return self.values[index]

    def __len__(self) -> int:
        return len(self.values)


class ResourceQueryResult(BaseModel):
    """A single resource read. Missing resources and accounts are `present=False`."""
    present: bool
    value: Any = None


class ResourceGroupResult(BaseModel):
    """A resource group read, keyed by fully qualified resource type."""
    present: bool
    resources: Dict[str, Any] = Field(default_factory=dict)
