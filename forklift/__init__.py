from .errors import HarnessError
from .harness import Harness
from .logging_config import setup_logging
from .models import (
    Event,
    FaucetPolicy,
    HarnessMode,
    NetworkEndpoints,
    Profile,
    ResourceGroupResult,
    ResourceQueryResult,
    TransactionResult,
    ViewResult,
)
from .testing import assert_txn_success

__all__ = [
    "Event",
    "FaucetPolicy",
    "Harness",
    "HarnessError",
    "HarnessMode",
    "NetworkEndpoints",
    "Profile",
    "ResourceGroupResult",
    "ResourceQueryResult",
    "TransactionResult",
    "ViewResult",
    "assert_txn_success",
    "setup_logging",
]
