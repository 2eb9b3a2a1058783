"""
Harness Facade.

`Harness` is the single entry point for driving the Aptos CLI from Python
tests and scripts. Each instance owns one ephemeral workspace (a CLI
profile file plus, in simulation, a session directory) and one mode
adapter chosen at creation time:

- local simulation: a fresh file-backed session (`Harness.create_local`)
- forked simulation: a session seeded from a live network
  (`Harness.create_network_fork`)
- live: commands against a real network (`Harness.create_live`)

Every public method and accessor refuses to run after `cleanup()`.

Usage:
    with Harness.create_local() as harness:
        harness.init_cli_profile("alice")
        harness.fund_account("alice", 100_000_000)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .adapters import build_mode_adapter
from .adapters.base import validate_amount
from .adapters.contracts import (
    DeployCodeObjectRequest,
    MoveRunRequest,
    MoveRunScriptRequest,
    PackageOptions,
    PublishRequest,
    TransactionOptions,
    UpgradeCodeObjectRequest,
    ViewRequest,
)
from .config import config
from .errors import ChainStateUnavailable, InvalidSessionOptions
from .lifecycle import guarded
from .models import (
    HarnessMode,
    NetworkEndpoints,
    Profile,
    ResourceGroupResult,
    ResourceQueryResult,
    TransactionResult,
    ViewResult,
)
from .normalizer import APT_METADATA_ADDRESS
from .process import ProcessInvoker
from .profiles import ProfileStore
from .rest_client import NodeRestClient
from .workspace import SessionContext, resolve_live_network, simulation_network, validate_session_options

logger = logging.getLogger(__name__)

Amount = Union[int, str]
PathLike = Union[str, Path]

TIMESTAMP_RESOURCE = "0x1::timestamp::CurrentTimeMicroseconds"
GAS_SCHEDULE_RESOURCE = "0x1::gas_schedule::GasScheduleV2"
FRAMEWORK_ADDRESS = "0x1"


def _tx_options(
    sender: str,
    gas_unit_price: Optional[int],
    max_gas: Optional[int],
    expiration_secs: Optional[int],
) -> TransactionOptions:
    return TransactionOptions(
        sender=sender,
        gas_unit_price=gas_unit_price,
        max_gas=max_gas,
        expiration_secs=expiration_secs,
    )


def _package_options(
    named_addresses: Optional[Dict[str, str]],
    included_artifacts: Optional[str],
    chunked: bool,
) -> PackageOptions:
    return PackageOptions(
        named_addresses=dict(named_addresses) if named_addresses else None,
        included_artifacts=included_artifacts,
        chunked=chunked,
    )


class Harness:
    """
    Drives the Aptos CLI against one simulation session or live network.

    Construction creates the workspace, writes the `default` profile and,
    in simulation, initializes the session and funds `default`. Any failure
    during construction removes the workspace before the error propagates.

    Instances are synchronous and not re-entrant; use one harness per unit
    of parallel work.
    """

    def __init__(
        self,
        mode: HarnessMode,
        network: NetworkEndpoints,
        *,
        fork_network: Optional[str] = None,
        api_key: Optional[str] = None,
        network_version: Optional[Union[int, str]] = None,
        invoker: Optional[ProcessInvoker] = None,
        rest_client: Optional[NodeRestClient] = None,
    ) -> None:
        self._released = False
        self._mode = mode
        self._network = network

        if mode.is_simulation:
            forking = validate_session_options(fork_network, api_key, network_version)
            if forking != (mode is HarnessMode.FORKED_SIMULATION):
                raise InvalidSessionOptions(
                    "network and apiKey are required for a network fork and not allowed otherwise",
                    mode=mode.value,
                )

        self._session = SessionContext.create()
        try:
            self._profiles = ProfileStore(self._session.cli_config_path, network)
            self._adapter = build_mode_adapter(
                mode,
                invoker=invoker or ProcessInvoker(),
                session=self._session,
                network=network,
                profiles=self._profiles,
                rest_client=rest_client,
            )
            default_profile = config.SIMULATION.DEFAULT_PROFILE
            self._profiles.init_profile(default_profile)
            if mode.is_simulation:
                self._adapter.initialize(
                    network=fork_network,
                    api_key=api_key,
                    network_version=network_version,
                )
                self._adapter.fund(default_profile, int(config.SIMULATION.DEFAULT_FUNDING))
        except BaseException:
            self._released = True
            self._session.release()
            raise
        logger.info(
            "Harness ready mode=%s network=%s working_dir=%s",
            mode.value,
            network.label,
            self._session.working_dir,
        )

    # -- creation ------------------------------------------------------------

    @classmethod
    def create_local(cls, **kwargs: Any) -> "Harness":
        """Harness over a fresh local simulation session."""
        return cls(HarnessMode.LOCAL_SIMULATION, simulation_network(), **kwargs)

    @classmethod
    def create_network_fork(
        cls,
        network: str,
        api_key: str,
        network_version: Optional[Union[int, str]] = None,
        **kwargs: Any,
    ) -> "Harness":
        """Harness over a simulation session forked from `network`.

        The fork is taken at `network_version` when given, otherwise at the
        latest ledger version. `api_key` authenticates state reads against
        the network's API gateway.
        """
        return cls(
            HarnessMode.FORKED_SIMULATION,
            simulation_network(),
            fork_network=network,
            api_key=api_key,
            network_version=network_version,
            **kwargs,
        )

    @classmethod
    def create_live(cls, network: str, faucet_url: Optional[str] = None, **kwargs: Any) -> "Harness":
        """Harness against a live network.

        `network` is `mainnet`, `testnet`, `devnet`, `local` or a fullnode URL.
        Operations in this mode spend real gas and change the chain.
        """
        return cls(HarnessMode.LIVE, resolve_live_network(network, faucet_url), **kwargs)

    # -- accessors -----------------------------------------------------------

    @property
    @guarded
    def working_dir(self) -> Path:
        return self._session.working_dir

    @property
    @guarded
    def session_path(self) -> Path:
        return self._session.session_path

    @property
    @guarded
    def mode(self) -> HarnessMode:
        return self._mode

    @property
    @guarded
    def network(self) -> NetworkEndpoints:
        return self._network

    @property
    def released(self) -> bool:
        """Whether `cleanup()` has run.

        The one accessor left unguarded, alongside `cleanup()` itself: it reads
        only the in-memory flag and is how callers observe the released state.
        """
        return self._released

    # -- profiles and funding ------------------------------------------------

    @guarded
    def init_cli_profile(self, name: str, private_key: Optional[str] = None) -> Profile:
        """Add profile `name` to the workspace, optionally from an existing Ed25519 key."""
        return self._profiles.init_profile(name, private_key)

    @guarded
    def get_account_address(self, profile: str) -> str:
        return self._adapter.account_address(profile)

    @guarded
    def fund_account(self, account: str, amount: Amount) -> None:
        """
        Credit `amount` octas to a profile or address.

        Simulation mints directly into the session; live mode asks the
        network's faucet. Amounts outside `[0, u64::MAX]` are rejected
        before anything is executed.
        """
        value = validate_amount(amount)
        self._adapter.fund(account, value)

    # -- transactions --------------------------------------------------------

    @guarded
    def run_move_function(
        self,
        *,
        sender: str,
        function_id: str,
        type_args: Optional[List[str]] = None,
        args: Optional[List[str]] = None,
        gas_unit_price: Optional[int] = None,
        max_gas: Optional[int] = None,
        expiration_secs: Optional[int] = None,
        extra_flags: Optional[List[str]] = None,
        include_events: bool = False,
    ) -> TransactionResult:
        """
        Execute an entry function.

        Args:
            sender: Profile name, or the address of a profile in this workspace.
            function_id: Fully qualified function, e.g. `0x1::aptos_account::transfer`.
            args: Type-tagged literals such as `u64:100` or `address:default`.
            include_events: Attach the emitted events when the transaction succeeds.
        """
        request = MoveRunRequest(
            tx=_tx_options(sender, gas_unit_price, max_gas, expiration_secs),
            function_id=function_id,
            type_args=list(type_args or []),
            args=list(args or []),
            extra_flags=list(extra_flags or []),
            include_events=include_events,
        )
        return self._adapter.run_function(request)

    @guarded
    def run_move_script(
        self,
        *,
        sender: str,
        package_dir: PathLike,
        script_name: str,
        type_args: Optional[List[str]] = None,
        args: Optional[List[str]] = None,
        named_addresses: Optional[Dict[str, str]] = None,
        gas_unit_price: Optional[int] = None,
        max_gas: Optional[int] = None,
        expiration_secs: Optional[int] = None,
        compile_extra_flags: Optional[List[str]] = None,
        run_extra_flags: Optional[List[str]] = None,
        include_events: bool = False,
    ) -> TransactionResult:
        """Compile the package in `package_dir` and run its script `script_name`."""
        request = MoveRunScriptRequest(
            tx=_tx_options(sender, gas_unit_price, max_gas, expiration_secs),
            package_dir=str(package_dir),
            script_name=script_name,
            type_args=list(type_args or []),
            args=list(args or []),
            named_addresses=dict(named_addresses) if named_addresses else None,
            compile_extra_flags=list(compile_extra_flags or []),
            run_extra_flags=list(run_extra_flags or []),
            include_events=include_events,
        )
        return self._adapter.run_script(request)

    @guarded
    def publish_package(
        self,
        *,
        sender: str,
        package_dir: PathLike,
        named_addresses: Optional[Dict[str, str]] = None,
        included_artifacts: Optional[str] = None,
        chunked: bool = False,
        gas_unit_price: Optional[int] = None,
        max_gas: Optional[int] = None,
        expiration_secs: Optional[int] = None,
        extra_flags: Optional[List[str]] = None,
        include_events: bool = False,
    ) -> TransactionResult:
        """Publish the package under the sender's account."""
        request = PublishRequest(
            tx=_tx_options(sender, gas_unit_price, max_gas, expiration_secs),
            package_dir=str(package_dir),
            package=_package_options(named_addresses, included_artifacts, chunked),
            extra_flags=list(extra_flags or []),
            include_events=include_events,
        )
        return self._adapter.publish(request)

    @guarded
    def deploy_code_object(
        self,
        *,
        sender: str,
        package_dir: PathLike,
        package_address_name: str,
        named_addresses: Optional[Dict[str, str]] = None,
        included_artifacts: Optional[str] = None,
        chunked: bool = False,
        gas_unit_price: Optional[int] = None,
        max_gas: Optional[int] = None,
        expiration_secs: Optional[int] = None,
        extra_flags: Optional[List[str]] = None,
        include_events: bool = False,
    ) -> TransactionResult:
        """
        Publish the package into a new code object.

        `package_address_name` is the named address the object's address is
        bound to. The result's `deployed_object_address` is `0x`-prefixed.
        """
        request = DeployCodeObjectRequest(
            tx=_tx_options(sender, gas_unit_price, max_gas, expiration_secs),
            package_dir=str(package_dir),
            package_address_name=package_address_name,
            package=_package_options(named_addresses, included_artifacts, chunked),
            extra_flags=list(extra_flags or []),
            include_events=include_events,
        )
        return self._adapter.deploy_object(request)

    @guarded
    def upgrade_code_object(
        self,
        *,
        sender: str,
        package_dir: PathLike,
        package_address_name: str,
        object_address: str,
        named_addresses: Optional[Dict[str, str]] = None,
        included_artifacts: Optional[str] = None,
        chunked: bool = False,
        gas_unit_price: Optional[int] = None,
        max_gas: Optional[int] = None,
        expiration_secs: Optional[int] = None,
        extra_flags: Optional[List[str]] = None,
        include_events: bool = False,
    ) -> TransactionResult:
        request = UpgradeCodeObjectRequest(
            tx=_tx_options(sender, gas_unit_price, max_gas, expiration_secs),
            package_dir=str(package_dir),
            package_address_name=package_address_name,
            object_address=object_address,
            package=_package_options(named_addresses, included_artifacts, chunked),
            extra_flags=list(extra_flags or []),
            include_events=include_events,
        )
        return self._adapter.upgrade_object(request)

    # -- reads ---------------------------------------------------------------

    @guarded
    def run_view_function(
        self,
        *,
        function_id: str,
        type_args: Optional[List[str]] = None,
        args: Optional[List[str]] = None,
        extra_flags: Optional[List[str]] = None,
    ) -> ViewResult:
        request = ViewRequest(
            function_id=function_id,
            type_args=list(type_args or []),
            args=list(args or []),
            extra_flags=list(extra_flags or []),
        )
        return self._adapter.view(request)

    @guarded
    def view_resource(self, account: str, resource_type: str) -> ResourceQueryResult:
        """Read one resource; a missing resource or account is `present=False`."""
        return self._adapter.view_resource(account, resource_type)

    @guarded
    def view_resource_group(
        self,
        account: str,
        resource_group: str,
        derived_object_address: Optional[str] = None,
    ) -> ResourceGroupResult:
        """Read a resource group. Simulation only."""
        return self._adapter.view_resource_group(account, resource_group, derived_object_address)

    @guarded
    def get_fungible_balance(self, account: str, metadata_address: str) -> int:
        """Balance of the account's primary store for the given asset metadata; 0 if none."""
        return self._adapter.fungible_balance(account, metadata_address)

    @guarded
    def get_apt_balance_fungible_store(self, account: str) -> int:
        return self._adapter.fungible_balance(account, APT_METADATA_ADDRESS)

    @guarded
    def get_current_time_micros(self) -> int:
        resource = self._adapter.view_resource(FRAMEWORK_ADDRESS, TIMESTAMP_RESOURCE)
        value = resource.value if resource.present else None
        micros = value.get("microseconds") if isinstance(value, dict) else None
        if micros is None:
            raise ChainStateUnavailable("current time micros")
        return int(micros)

    @guarded
    def get_gas_schedule(self) -> Dict[str, Any]:
        resource = self._adapter.view_resource(FRAMEWORK_ADDRESS, GAS_SCHEDULE_RESOURCE)
        if not resource.present or not isinstance(resource.value, dict):
            raise ChainStateUnavailable("gas schedule")
        return resource.value

    # -- teardown ------------------------------------------------------------

    def cleanup(self) -> None:
        """
        Release the workspace.

        The harness is marked released before anything is removed, so every
        later call except `cleanup()` fails even if removal is incomplete.
        Repeated calls do nothing.
        """
        self._released = True
        self._session.release()

    @guarded
    def __enter__(self) -> "Harness":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
