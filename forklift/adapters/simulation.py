from __future__ import annotations

import logging

from ..errors import FundingFailure, SessionInitFailure
from ..models import Event, HarnessMode, ResourceGroupResult, ResourceQueryResult
from ..normalizer import (
    APT_METADATA_ADDRESS,
    FUNGIBLE_STORE_TYPE,
    OBJECT_GROUP_TYPE,
    balance_from_store,
    read_simulation_events,
    to_resource_group_result,
    to_resource_result,
)
from ..output import unwrap_result
from ..workspace import validate_session_options
from .base import ModeAdapter

logger = logging.getLogger(__name__)


class SimulationAdapter(ModeAdapter):
    """Commands against the workspace's file-backed simulation session."""

    mode = HarnessMode.LOCAL_SIMULATION

    def _session_flags(self) -> list[str]:
        return ["--session", str(self.session.session_path)]

    def _transaction_target_flags(self) -> list[str]:
        return self._session_flags()

    def _query_target_flags(self) -> list[str]:
        return self._session_flags()

    def build_init_session(
        self,
        network: str | None = None,
        api_key: str | None = None,
        network_version: int | str | None = None,
    ) -> list[str]:
        args = ["move", "sim", "init", "--path", str(self.session.session_path)]
        if validate_session_options(network, api_key, network_version):
            args.extend(["--network", str(network), "--api-key", str(api_key)])
            if network_version is not None and str(network_version) != "":
                args.extend(["--network-version", str(network_version)])
        return args

    def initialize(self, **options) -> None:
        args = self.build_init_session(
            network=options.get("network"),
            api_key=options.get("api_key"),
            network_version=options.get("network_version"),
        )
        result = unwrap_result(self.run_engine(args))
        if result != "Success":
            raise SessionInitFailure(result)
        logger.info("Initialized %s session at %s", self.mode.value, self.session.session_path)

    def build_fund(self, account: str, amount: int) -> list[str]:
        return [
            "move", "sim", "fund",
            *self._session_flags(),
            "--account", account,
            "--amount", str(amount),
        ]

    def fund(self, account: str, amount: int) -> None:
        result = unwrap_result(self.run_engine(self.build_fund(account, amount)))
        if result != "Success":
            raise FundingFailure("aptos move sim fund", result)

    def view_resource(self, account: str, resource_type: str) -> ResourceQueryResult:
        args = [
            "move", "sim", "view-resource",
            *self._session_flags(),
            "--account", account,
            "--resource", resource_type,
        ]
        return to_resource_result(unwrap_result(self.run_engine(args)))

    def view_resource_group(
        self,
        account: str,
        resource_group: str,
        derived_object_address: str | None = None,
    ) -> ResourceGroupResult:
        args = [
            "move", "sim", "view-resource-group",
            *self._session_flags(),
            "--account", account,
            "--resource-group", resource_group,
        ]
        if derived_object_address:
            args.extend(["--derived-object-address", derived_object_address])
        return to_resource_group_result(unwrap_result(self.run_engine(args)))

    def fungible_balance(self, account: str, metadata_address: str = APT_METADATA_ADDRESS) -> int:
        # The session derives the primary store address itself.
        group = self.view_resource_group(account, OBJECT_GROUP_TYPE, metadata_address)
        return balance_from_store(group.resources.get(FUNGIBLE_STORE_TYPE))

    def fetch_events(self, transaction_hash: str | None) -> list[Event] | None:
        return read_simulation_events(self.session.session_path)


class ForkedSimulationAdapter(SimulationAdapter):
    """Simulation session seeded from a live network's state."""

    mode = HarnessMode.FORKED_SIMULATION
