from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TransactionOptions:
    sender: str
    gas_unit_price: int | None = None
    max_gas: int | None = None
    expiration_secs: int | None = None


@dataclass(frozen=True)
class PackageOptions:
    named_addresses: dict[str, str] | None = None
    included_artifacts: str | None = None
    chunked: bool = False


@dataclass(frozen=True)
class MoveRunRequest:
    tx: TransactionOptions
    function_id: str
    type_args: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    extra_flags: list[str] = field(default_factory=list)
    include_events: bool = False


@dataclass(frozen=True)
class MoveRunScriptRequest:
    tx: TransactionOptions
    package_dir: str
    script_name: str
    type_args: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    named_addresses: dict[str, str] | None = None
    compile_extra_flags: list[str] = field(default_factory=list)
    run_extra_flags: list[str] = field(default_factory=list)
    include_events: bool = False


@dataclass(frozen=True)
class PublishRequest:
    tx: TransactionOptions
    package_dir: str
    package: PackageOptions = field(default_factory=PackageOptions)
    extra_flags: list[str] = field(default_factory=list)
    include_events: bool = False


@dataclass(frozen=True)
class DeployCodeObjectRequest:
    tx: TransactionOptions
    package_dir: str
    package_address_name: str
    package: PackageOptions = field(default_factory=PackageOptions)
    extra_flags: list[str] = field(default_factory=list)
    include_events: bool = False


@dataclass(frozen=True)
class UpgradeCodeObjectRequest:
    tx: TransactionOptions
    package_dir: str
    package_address_name: str
    object_address: str
    package: PackageOptions = field(default_factory=PackageOptions)
    extra_flags: list[str] = field(default_factory=list)
    include_events: bool = False


@dataclass(frozen=True)
class ViewRequest:
    function_id: str
    type_args: list[str] = field(default_factory=list)
    args: list[str] = field(default_factory=list)
    extra_flags: list[str] = field(default_factory=list)
