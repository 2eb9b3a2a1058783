from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from .errors import OutputParseFailure
from .keys import derive_object_address
from .models import Event, ResourceGroupResult, ResourceQueryResult, TransactionResult, ViewResult

logger = logging.getLogger(__name__)

APT_METADATA_ADDRESS = "0xa"
OBJECT_GROUP_TYPE = "0x1::object::ObjectGroup"
FUNGIBLE_STORE_TYPE = "0x1::fungible_asset::FungibleStore"


def normalize_address(value: str) -> str:
    text = value.strip().lower()
    if not text.startswith("0x"):
        text = f"0x{text}"
    return text


def looks_like_address(value: str) -> bool:
    text = value.strip().lower()
    if not text.startswith("0x") or len(text) <= 2:
        return False
    try:
        int(text[2:], 16)
    except ValueError:
        return False
    return True


def primary_store_address(owner: str, metadata_address: str = APT_METADATA_ADDRESS) -> str:
    return derive_object_address(owner, metadata_address)


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        return int(value.strip())
    return None


def to_transaction_result(result: Any) -> TransactionResult:
    if not isinstance(result, dict):
        raise OutputParseFailure(
            "transaction Result is not an object",
            json.dumps({"Result": result}, ensure_ascii=False, indent=2),
        )
    raw = dict(result)
    deployed = raw.get("deployed_object_address")
    if isinstance(deployed, str) and deployed:
        deployed = normalize_address(deployed)
        raw["deployed_object_address"] = deployed
    else:
        deployed = None
    tx_hash = raw.get("transaction_hash")
    vm_status = raw.get("vm_status")
    return TransactionResult(
        succeeded=raw.get("success") is True,
        transaction_hash=tx_hash if isinstance(tx_hash, str) else None,
        vm_status=vm_status if isinstance(vm_status, str) else None,
        gas_used=_optional_int(raw.get("gas_used")),
        deployed_object_address=deployed,
        raw=raw,
    )


def to_view_result(result: Any) -> ViewResult:
    if result is None:
        return ViewResult(values=[])
    if not isinstance(result, list):
        return ViewResult(values=[result])
    return ViewResult(values=list(result))


def to_resource_result(result: Any) -> ResourceQueryResult:
    if result is None:
        return ResourceQueryResult(present=False, value=None)
    return ResourceQueryResult(present=True, value=result)


def to_resource_group_result(result: Any) -> ResourceGroupResult:
    if not isinstance(result, dict):
        return ResourceGroupResult(present=False)
    return ResourceGroupResult(present=True, resources=dict(result))


def balance_from_store(store: Any) -> int:
    if not isinstance(store, dict):
        return 0
    balance = _optional_int(store.get("balance"))
    return balance if balance is not None else 0


def reshape_simulation_event(record: Any) -> Event | None:
    """Convert a session `events.json` record to the `{type, data}` REST shape.

    Simulation records are tagged by event version, e.g.
    `{"V2": {"type_tag": ..., "event_data": ...}}`.
    """
    if not isinstance(record, dict):
        return None
    for version in ("V2", "V1"):
        body = record.get(version)
        if isinstance(body, dict) and isinstance(body.get("type_tag"), str):
            return Event(type=body["type_tag"], data=body.get("event_data"))
    if isinstance(record.get("type"), str):
        return Event(type=record["type"], data=record.get("data"))
    return None


def reshape_rest_event(record: Any) -> Event | None:
    if isinstance(record, dict) and isinstance(record.get("type"), str):
        return Event(type=record["type"], data=record.get("data"))
    return None


def _reshape_all(records: list[Any], reshape) -> list[Event]:
    events: list[Event] = []
    for record in records:
        event = reshape(record)
        if event is None:
            logger.warning("Skipping event record with unrecognized shape: %r", record)
            continue
        events.append(event)
    return events


def read_simulation_events(session_path: Path) -> list[Event] | None:
    """Events of the most recent transaction in a simulation session.

    The session's `config.json` counts executed operations; the output of
    operation N lives in a directory whose name starts with `[N]`.
    """
    if not session_path.exists():
        return None
    try:
        session_config = json.loads((session_path / "config.json").read_text(encoding="utf-8"))
        ops = session_config.get("ops") if isinstance(session_config, dict) else None
        if not isinstance(ops, int) or ops < 1:
            return None
        prefix = f"[{ops - 1}]"
        tx_dir = next(
            (entry for entry in sorted(session_path.iterdir()) if entry.is_dir() and entry.name.startswith(prefix)),
            None,
        )
        if tx_dir is None:
            return None
        events_path = tx_dir / "events.json"
        if not events_path.exists():
            return None
        raw_events = json.loads(events_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read events from session %s: %s", session_path, exc)
        return None
    if not isinstance(raw_events, list):
        return None
    return _reshape_all(raw_events, reshape_simulation_event)


def events_from_transaction(transaction: Any) -> list[Event] | None:
    if not isinstance(transaction, dict):
        return None
    raw_events = transaction.get("events")
    if not isinstance(raw_events, list):
        return None
    return _reshape_all(raw_events, reshape_rest_event)
