import httpx
import pytest

from forklift.adapters.contracts import MoveRunRequest, TransactionOptions
from forklift.adapters.live import LiveAdapter
from forklift.errors import FaucetUnavailable, FundingFailure, UnsupportedInMode
from forklift.keys import derive_object_address
from forklift.profiles import ProfileStore
from forklift.rest_client import NodeRestClient
from forklift.workspace import SessionContext, resolve_live_network

FEE_EVENT = {"type": "0x1::transaction_fee::FeeStatement", "data": {"total_charge_gas_units": "7"}}


class _ScriptedInvoker:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def run(self, args, cwd=None):
        self.calls.append(list(args))
        return self.responses.pop(0)


def _live(tmp_path, network="local", faucet_url=None, responses=(), handler=None):
    endpoints = resolve_live_network(network, faucet_url)
    session = SessionContext(tmp_path)
    transport = httpx.MockTransport(handler or (lambda request: httpx.Response(404)))
    invoker = _ScriptedInvoker(responses)
    adapter = LiveAdapter(
        invoker=invoker,
        session=session,
        network=endpoints,
        profiles=ProfileStore(session.cli_config_path, endpoints),
        rest_client=NodeRestClient(endpoints.rest_url, transport=transport),
    )
    return adapter, invoker


@pytest.mark.parametrize(
    "network,reason",
    [
        ("mainnet", FaucetUnavailable.NO_FAUCET),
        ("testnet", FaucetUnavailable.MANUAL_AUTH),
        ("http://node.example", FaucetUnavailable.NOT_CONFIGURED),
    ],
)
def test_fund_without_faucet_reports_reason(tmp_path, network, reason):
    adapter, invoker = _live(tmp_path, network)
    with pytest.raises(FaucetUnavailable) as exc_info:
        adapter.fund("default", 100)
    assert exc_info.value.reason == reason
    assert invoker.calls == []


def test_testnet_message_points_to_web_faucet(tmp_path):
    adapter, _ = _live(tmp_path, "testnet")
    with pytest.raises(FaucetUnavailable, match="web UI"):
        adapter.fund("default", 1)


def test_fund_with_faucet_resolves_profile_address(tmp_path):
    adapter, invoker = _live(
        tmp_path,
        responses=[
            {"Result": {"alice": {"account": "ABCDEF"}}},
            {"Result": "Added 100 Octas to account 0xabcdef"},
        ],
    )
    adapter.fund("alice", 100)
    assert invoker.calls[0] == ["config", "show-profiles"]
    assert invoker.calls[1] == [
        "account", "fund-with-faucet",
        "--account", "0xabcdef",
        "--faucet-url", "http://127.0.0.1:8081",
        "--amount", "100",
    ]


def test_fund_rejects_unexpected_faucet_answer(tmp_path):
    adapter, _ = _live(tmp_path, responses=[{"Result": "Rate limited"}])
    with pytest.raises(FundingFailure):
        adapter.fund("0x1", 100)


def test_view_resource_reads_rest_data(tmp_path):
    def handler(request):
        assert request.url.path.startswith("/v1/accounts/0x1/resource/")
        return httpx.Response(200, json={"type": "0x1::timestamp::CurrentTimeMicroseconds", "data": {"microseconds": "99"}})

    adapter, _ = _live(tmp_path, handler=handler)
    result = adapter.view_resource("0x1", "0x1::timestamp::CurrentTimeMicroseconds")
    assert result.present is True
    assert result.value == {"microseconds": "99"}


def test_view_resource_absent_is_not_an_error(tmp_path):
    adapter, _ = _live(tmp_path)
    result = adapter.view_resource("0x1", "0x1::missing::Thing")
    assert result.present is False
    assert result.value is None


def test_view_resource_group_is_unsupported(tmp_path):
    adapter, _ = _live(tmp_path)
    with pytest.raises(UnsupportedInMode, match="view_resource"):
        adapter.view_resource_group("0x1", "0x1::object::ObjectGroup")


def test_fungible_balance_reads_primary_store(tmp_path):
    owner = "0x" + "ab" * 32
    store = derive_object_address(owner, "0xa")

    def handler(request):
        if request.url.path.startswith(f"/v1/accounts/{store}/resource/"):
            return httpx.Response(200, json={"type": "0x1::fungible_asset::FungibleStore", "data": {"balance": "123"}})
        return httpx.Response(404)

    adapter, _ = _live(tmp_path, handler=handler)
    assert adapter.fungible_balance(owner) == 123
    assert adapter.fungible_balance("0x" + "cd" * 32) == 0


def test_include_events_fetches_transaction_by_hash(tmp_path):
    def handler(request):
        assert request.url.path == "/v1/transactions/by_hash/0xfeed"
        return httpx.Response(200, json={"hash": "0xfeed", "events": [FEE_EVENT]})

    adapter, invoker = _live(
        tmp_path,
        responses=[{"Result": {"success": True, "transaction_hash": "0xfeed", "vm_status": "Executed successfully"}}],
        handler=handler,
    )
    result = adapter.run_function(
        MoveRunRequest(tx=TransactionOptions(sender="default"), function_id="0x1::m::f", include_events=True)
    )
    assert invoker.calls[0][:3] == ["move", "run", "--assume-yes"]
    assert [event.model_dump() for event in result.events] == [FEE_EVENT]
    assert result.raw["events"] == [FEE_EVENT]


def test_event_fetch_failure_leaves_events_unset(tmp_path):
    adapter, _ = _live(
        tmp_path,
        responses=[{"Result": {"success": True, "transaction_hash": "0xfeed"}}],
        handler=lambda request: httpx.Response(503),
    )
    result = adapter.run_function(
        MoveRunRequest(tx=TransactionOptions(sender="default"), function_id="0x1::m::f", include_events=True)
    )
    assert result.succeeded is True
    assert result.events is None
    assert "events" not in result.raw


def test_failed_transaction_skips_event_fetch(tmp_path):
    def handler(request):
        raise AssertionError("no request expected")

    adapter, _ = _live(tmp_path, responses=[{"Result": {"success": False, "transaction_hash": "0xfeed"}}], handler=handler)
    result = adapter.run_function(
        MoveRunRequest(tx=TransactionOptions(sender="default"), function_id="0x1::m::f", include_events=True)
    )
    assert result.succeeded is False
    assert result.events is None
