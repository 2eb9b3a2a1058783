from __future__ import annotations

import logging

from ..errors import FaucetUnavailable, FundingFailure, UnsupportedInMode
from ..models import Event, FaucetPolicy, HarnessMode, ResourceGroupResult, ResourceQueryResult
from ..normalizer import (
    APT_METADATA_ADDRESS,
    FUNGIBLE_STORE_TYPE,
    balance_from_store,
    events_from_transaction,
    primary_store_address,
    to_resource_result,
)
from ..output import unwrap_result
from ..rest_client import NodeRestClient
from .base import ModeAdapter

logger = logging.getLogger(__name__)

_FAUCET_REASONS = {
    FaucetPolicy.NONE: FaucetUnavailable.NO_FAUCET,
    FaucetPolicy.MANUAL: FaucetUnavailable.MANUAL_AUTH,
}


class LiveAdapter(ModeAdapter):
    """Commands against a real network through the profile's REST endpoint.

    Transactions go through the CLI, which reads the network from the
    workspace profile; state reads go to the fullnode REST API directly.
    """

    mode = HarnessMode.LIVE

    def __init__(self, *, rest_client: NodeRestClient | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.rest_client = rest_client or NodeRestClient(self.network.rest_url)

    def _transaction_target_flags(self) -> list[str]:
        return ["--assume-yes"]

    def _query_target_flags(self) -> list[str]:
        return []

    def build_fund(self, address: str, amount: int) -> list[str]:
        return [
            "account", "fund-with-faucet",
            "--account", address,
            "--faucet-url", str(self.network.faucet_url),
            "--amount", str(amount),
        ]

    def fund(self, account: str, amount: int) -> None:
        if not self.network.faucet_url:
            reason = _FAUCET_REASONS.get(self.network.faucet_policy, FaucetUnavailable.NOT_CONFIGURED)
            raise FaucetUnavailable(self.network.label, reason)
        address = self.resolve_account(account)
        result = unwrap_result(self.run_engine(self.build_fund(address, amount)))
        if not isinstance(result, str) or not result.startswith("Added"):
            raise FundingFailure("aptos account fund-with-faucet", result)
        logger.info("Funded %s with %s octas via %s", address, amount, self.network.faucet_url)

    def view_resource(self, account: str, resource_type: str) -> ResourceQueryResult:
        address = self.resolve_account(account)
        resource = self.rest_client.get_account_resource(address, resource_type)
        if resource is None:
            return to_resource_result(None)
        return to_resource_result(resource.get("data"))

    def view_resource_group(
        self,
        account: str,
        resource_group: str,
        derived_object_address: str | None = None,
    ) -> ResourceGroupResult:
        raise UnsupportedInMode(
            "view_resource_group",
            self.mode.value,
            "Use view_resource() to query individual resources within a group directly.",
        )

    def fungible_balance(self, account: str, metadata_address: str = APT_METADATA_ADDRESS) -> int:
        store_address = primary_store_address(self.resolve_account(account), metadata_address)
        resource = self.rest_client.get_account_resource(store_address, FUNGIBLE_STORE_TYPE)
        if resource is None:
            return 0
        return balance_from_store(resource.get("data"))

    def fetch_events(self, transaction_hash: str | None) -> list[Event] | None:
        if not transaction_hash:
            return None
        return events_from_transaction(self.rest_client.get_transaction_by_hash(transaction_hash))
