from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from ..errors import InvalidFundingAmount, ManifestError, ProfileNotFound
from ..models import (
    Event,
    HarnessMode,
    NetworkEndpoints,
    ResourceGroupResult,
    ResourceQueryResult,
    TransactionResult,
    ViewResult,
)
from ..normalizer import (
    APT_METADATA_ADDRESS,
    looks_like_address,
    normalize_address,
    to_transaction_result,
    to_view_result,
)
from ..output import unwrap_result
from ..process import ProcessInvoker
from ..profiles import ProfileStore
from ..workspace import SessionContext
from .contracts import (
    DeployCodeObjectRequest,
    MoveRunRequest,
    MoveRunScriptRequest,
    PackageOptions,
    PublishRequest,
    TransactionOptions,
    UpgradeCodeObjectRequest,
    ViewRequest,
)

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1


def validate_amount(amount: int | str) -> int:
    if isinstance(amount, bool):
        raise InvalidFundingAmount(amount, "expected an integer")
    if isinstance(amount, str):
        text = amount.strip()
        if not re.fullmatch(r"-?[0-9]+", text):
            raise InvalidFundingAmount(amount, "expected an integer")
        value = int(text)
    elif isinstance(amount, int):
        value = amount
    else:
        raise InvalidFundingAmount(amount, "expected an integer")
    if value < 0:
        raise InvalidFundingAmount(amount, "amount cannot be negative")
    if value > U64_MAX:
        raise InvalidFundingAmount(amount, "amount exceeds u64::MAX")
    return value


def read_package_name(package_dir: Path) -> str:
    manifest_path = package_dir / "Move.toml"
    if not manifest_path.exists():
        raise ManifestError(str(manifest_path), "Move.toml not found")
    try:
        with open(manifest_path, "r", encoding="utf-8") as f:
            document = tomlkit.parse(f.read())
    except TOMLKitError as exc:
        raise ManifestError(str(manifest_path), f"Failed to parse manifest: {exc}") from exc
    package = document.get("package")
    name = package.get("name") if isinstance(package, dict) else None
    if not isinstance(name, str) or not name.strip():
        raise ManifestError(str(manifest_path), "Could not find package.name")
    return name.strip()


def compiled_script_path(package_dir: Path, package_name: str, script_name: str) -> Path:
    return package_dir / "build" / package_name / "bytecode_scripts" / f"{script_name}.mv"


def transaction_flags(options: TransactionOptions) -> list[str]:
    flags: list[str] = []
    if options.gas_unit_price is not None:
        flags.extend(["--gas-unit-price", str(options.gas_unit_price)])
    if options.max_gas is not None:
        flags.extend(["--max-gas", str(options.max_gas)])
    if options.expiration_secs is not None:
        flags.extend(["--expiration-secs", str(options.expiration_secs)])
    return flags


def named_address_flags(named_addresses: dict[str, str] | None) -> list[str]:
    if not named_addresses:
        return []
    rendered = ",".join(f"{key}={value}" for key, value in named_addresses.items())
    return ["--named-addresses", rendered]


def function_argument_flags(type_args: list[str], args: list[str]) -> list[str]:
    flags: list[str] = []
    if type_args:
        flags.extend(["--type-args", *type_args])
    if args:
        flags.extend(["--args", *args])
    return flags


def package_flags(options: PackageOptions) -> list[str]:
    flags = named_address_flags(options.named_addresses)
    if options.included_artifacts:
        flags.extend(["--included-artifacts", options.included_artifacts])
    if options.chunked:
        flags.append("--chunked-publish")
    return flags


class ModeAdapter(ABC):
    """Command construction and response interpretation for one harness mode.

    Subclasses decide how commands address the ledger (a session path or
    the profile's network) and how state reads are served; everything that
    is identical across modes lives here.
    """

    mode: HarnessMode

    def __init__(
        self,
        *,
        invoker: ProcessInvoker,
        session: SessionContext,
        network: NetworkEndpoints,
        profiles: ProfileStore,
    ) -> None:
        self.invoker = invoker
        self.session = session
        self.network = network
        self.profiles = profiles

    # -- per-mode flags ------------------------------------------------------

    @abstractmethod
    def _transaction_target_flags(self) -> list[str]:
        """Flags placed after the subcommand of a transaction-executing command."""

    @abstractmethod
    def _query_target_flags(self) -> list[str]:
        """Flags placed after the subcommand of a read-only command."""

    def _object_target_flags(self) -> list[str]:
        # Object deployment asks for confirmation in every mode.
        return ["--assume-yes", *self._query_target_flags()]

    # -- per-mode operations -------------------------------------------------

    def initialize(self, **options: Any) -> None:
        """Prepare the backend after the default profile exists."""

    @abstractmethod
    def fund(self, account: str, amount: int) -> None:
        ...

    @abstractmethod
    def view_resource(self, account: str, resource_type: str) -> ResourceQueryResult:
        ...

    @abstractmethod
    def view_resource_group(
        self,
        account: str,
        resource_group: str,
        derived_object_address: str | None = None,
    ) -> ResourceGroupResult:
        ...

    @abstractmethod
    def fungible_balance(self, account: str, metadata_address: str = APT_METADATA_ADDRESS) -> int:
        ...

    @abstractmethod
    def fetch_events(self, transaction_hash: str | None) -> list[Event] | None:
        ...

    # -- engine plumbing -----------------------------------------------------

    def run_engine(self, args: list[str]) -> dict[str, Any]:
        return self.invoker.run(args, cwd=self.session.working_dir)

    def resolve_sender(self, sender: str) -> str:
        """Profile name for `--profile`; a stored profile's address is accepted too."""
        if not looks_like_address(sender):
            return sender
        name = self.profiles.find_by_address(sender)
        if name is None:
            raise ProfileNotFound(sender)
        return name

    def account_address(self, profile: str) -> str:
        result = unwrap_result(self.run_engine(["config", "show-profiles"]))
        entry = result.get(profile) if isinstance(result, dict) else None
        account = entry.get("account") if isinstance(entry, dict) else None
        if not isinstance(account, str) or not account:
            raise ProfileNotFound(profile)
        return normalize_address(account)

    def resolve_account(self, account: str) -> str:
        if looks_like_address(account):
            return normalize_address(account)
        return self.account_address(account)

    # -- command construction ------------------------------------------------

    def _sender_flags(self, tx: TransactionOptions) -> list[str]:
        return ["--profile", self.resolve_sender(tx.sender)]

    def build_run_function(self, request: MoveRunRequest) -> list[str]:
        return [
            "move", "run",
            *self._transaction_target_flags(),
            *self._sender_flags(request.tx),
            "--function-id", request.function_id,
            *function_argument_flags(request.type_args, request.args),
            *transaction_flags(request.tx),
            *request.extra_flags,
        ]

    def build_compile(self, request: MoveRunScriptRequest) -> list[str]:
        return [
            "move", "compile",
            "--package-dir", request.package_dir,
            *named_address_flags(request.named_addresses),
            *request.compile_extra_flags,
        ]

    def build_run_script(self, request: MoveRunScriptRequest, script_path: Path) -> list[str]:
        return [
            "move", "run-script",
            *self._transaction_target_flags(),
            *self._sender_flags(request.tx),
            "--compiled-script-path", str(script_path),
            *function_argument_flags(request.type_args, request.args),
            *transaction_flags(request.tx),
            *request.run_extra_flags,
        ]

    def build_publish(self, request: PublishRequest) -> list[str]:
        return [
            "move", "publish",
            *self._transaction_target_flags(),
            *self._sender_flags(request.tx),
            "--package-dir", request.package_dir,
            *package_flags(request.package),
            *transaction_flags(request.tx),
            *request.extra_flags,
        ]

    def build_deploy_object(self, request: DeployCodeObjectRequest) -> list[str]:
        return [
            "move", "deploy-object",
            *self._object_target_flags(),
            *self._sender_flags(request.tx),
            "--package-dir", request.package_dir,
            "--address-name", request.package_address_name,
            *package_flags(request.package),
            *transaction_flags(request.tx),
            *request.extra_flags,
        ]

    def build_upgrade_object(self, request: UpgradeCodeObjectRequest) -> list[str]:
        return [
            "move", "upgrade-object",
            *self._object_target_flags(),
            *self._sender_flags(request.tx),
            "--package-dir", request.package_dir,
            "--address-name", request.package_address_name,
            "--object-address", request.object_address,
            *package_flags(request.package),
            *transaction_flags(request.tx),
            *request.extra_flags,
        ]

    def build_view(self, request: ViewRequest) -> list[str]:
        return [
            "move", "view",
            *self._query_target_flags(),
            "--function-id", request.function_id,
            *function_argument_flags(request.type_args, request.args),
            *request.extra_flags,
        ]

    # -- operations shared by every mode -------------------------------------

    def _execute_transaction(self, args: list[str], include_events: bool) -> TransactionResult:
        result = to_transaction_result(unwrap_result(self.run_engine(args)))
        if include_events and result.succeeded:
            events = self._safe_fetch_events(result.transaction_hash)
            if events is not None:
                result.events = events
                result.raw["events"] = [event.model_dump() for event in events]
        return result

    def _safe_fetch_events(self, transaction_hash: str | None) -> list[Event] | None:
        try:
            return self.fetch_events(transaction_hash)
        except Exception:
            logger.warning("Failed to fetch events for transaction %s", transaction_hash, exc_info=True)
            return None

    def run_function(self, request: MoveRunRequest) -> TransactionResult:
        return self._execute_transaction(self.build_run_function(request), request.include_events)

    def run_script(self, request: MoveRunScriptRequest) -> TransactionResult:
        self.run_engine(self.build_compile(request))
        package_dir = Path(request.package_dir)
        script_path = compiled_script_path(package_dir, read_package_name(package_dir), request.script_name)
        return self._execute_transaction(self.build_run_script(request, script_path), request.include_events)

    def publish(self, request: PublishRequest) -> TransactionResult:
        return self._execute_transaction(self.build_publish(request), request.include_events)

    def deploy_object(self, request: DeployCodeObjectRequest) -> TransactionResult:
        return self._execute_transaction(self.build_deploy_object(request), request.include_events)

    def upgrade_object(self, request: UpgradeCodeObjectRequest) -> TransactionResult:
        return self._execute_transaction(self.build_upgrade_object(request), request.include_events)

    def view(self, request: ViewRequest) -> ViewResult:
        return to_view_result(unwrap_result(self.run_engine(self.build_view(request))))
