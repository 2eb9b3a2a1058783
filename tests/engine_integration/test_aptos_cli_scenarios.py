"""
End-to-end scenarios against a real Aptos CLI.

Skipped unless `aptos` (or FORKLIFT_APTOS_BINARY) resolves to an executable.
Set FORKLIFT_FORK_NETWORK and FORKLIFT_FORK_API_KEY to also run the forked
simulation scenario.
"""

import os
import re
import shutil
from pathlib import Path

import pytest

from forklift import Harness, assert_txn_success
from forklift.config import config
from forklift.errors import InvalidFundingAmount, ProcessExitFailure

MESSAGE_PACKAGE = Path(__file__).resolve().parents[1] / "fixtures" / "move_packages" / "message"
FEE_STATEMENT = "0x1::transaction_fee::FeeStatement"
U64_MAX = 2**64 - 1

pytestmark = pytest.mark.skipif(
    shutil.which(config.ENGINE.BINARY) is None,
    reason="Aptos CLI not found on PATH",
)


@pytest.fixture
def harness():
    instance = Harness.create_local()
    try:
        yield instance
    finally:
        instance.cleanup()


@pytest.fixture
def package_dir(tmp_path):
    target = tmp_path / "message"
    shutil.copytree(MESSAGE_PACKAGE, target)
    return target


def test_default_profile_is_funded(harness):
    assert re.match(r"^0x[0-9a-f]{64}$", harness.get_account_address("default"))
    assert harness.get_apt_balance_fungible_store("default") == 10_000_000_000


def test_fund_transfer_and_view_sequence_number(harness):
    harness.fund_account("default", 100_000_000)
    assert_txn_success(
        harness.run_move_function(
            sender="default",
            function_id="0x1::aptos_account::transfer",
            args=["address:default", "u64:100"],
        )
    )
    view = harness.run_view_function(
        function_id="0x1::account::get_sequence_number",
        args=["address:default"],
    )
    assert view[0] == "1"


def test_funding_bounds(harness):
    harness.init_cli_profile("whale")
    harness.fund_account("whale", U64_MAX)
    assert harness.get_apt_balance_fungible_store("whale") == U64_MAX

    harness.init_cli_profile("almost")
    harness.fund_account("almost", U64_MAX - 10)
    with pytest.raises(ProcessExitFailure):
        harness.fund_account("almost", 20)
    with pytest.raises(InvalidFundingAmount):
        harness.fund_account("almost", -100)


def test_publish_set_and_view_message(harness, package_dir):
    assert_txn_success(
        harness.publish_package(
            sender="default",
            package_dir=package_dir,
            named_addresses={"simple_message": "default"},
            include_events=True,
        )
    )
    result = harness.run_move_function(
        sender="default",
        function_id="default::message::set_message",
        args=["string:Hello, Aptos!"],
        include_events=True,
    )
    assert_txn_success(result)
    assert any(event.type == FEE_STATEMENT for event in result.events)

    view = harness.run_view_function(
        function_id="default::message::get_message",
        args=["address:default"],
    )
    assert view[0] == "Hello, Aptos!"


def test_run_script(harness, package_dir):
    harness.publish_package(
        sender="default",
        package_dir=package_dir,
        named_addresses={"simple_message": "default"},
    )
    assert_txn_success(
        harness.run_move_script(
            sender="default",
            package_dir=package_dir,
            script_name="script_hello_aptos",
            named_addresses={"simple_message": "default"},
        )
    )


def test_chain_state(harness):
    assert harness.get_current_time_micros() == 0
    assert "entries" in harness.get_gas_schedule()


@pytest.mark.skipif(
    not (os.environ.get("FORKLIFT_FORK_NETWORK") and os.environ.get("FORKLIFT_FORK_API_KEY")),
    reason="network fork credentials not configured",
)
def test_network_fork():
    harness = Harness.create_network_fork(
        os.environ["FORKLIFT_FORK_NETWORK"],
        os.environ["FORKLIFT_FORK_API_KEY"],
    )
    try:
        harness.init_cli_profile("forked")
        harness.fund_account("forked", 100_000_000)
        assert harness.get_apt_balance_fungible_store("forked") == 100_000_000
    finally:
        harness.cleanup()
