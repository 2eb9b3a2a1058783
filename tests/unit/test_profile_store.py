import re

import pytest
import yaml

from forklift.errors import ConfigParseFailure, DuplicateProfileFailure, InvalidPrivateKey, ProfileNotFound
from forklift.keys import generate_keypair
from forklift.profiles import ProfileStore
from forklift.workspace import resolve_live_network, simulation_network


def _store(tmp_path, network=None):
    return ProfileStore(tmp_path / ".aptos" / "config.yaml", network or simulation_network())


def test_init_profile_writes_cli_config_entry(tmp_path):
    store = _store(tmp_path)
    profile = store.init_profile("alice")

    document = yaml.safe_load(store.config_path.read_text(encoding="utf-8"))
    entry = document["profiles"]["alice"]
    assert entry == {
        "network": "Custom",
        "rest_url": "https://dummy.network.aptoslabs.com",
        "account": profile.address,
        "private_key": profile.private_key,
        "public_key": profile.public_key,
    }
    assert re.match(r"^0x[0-9a-f]{64}$", profile.address)


def test_init_profile_with_given_key_uses_its_address(tmp_path):
    keypair = generate_keypair()
    store = _store(tmp_path)
    profile = store.init_profile("bob", "0x" + keypair.private_bytes.hex())
    assert profile.address == keypair.account_address
    assert profile.private_key == keypair.private_key_aip80


def test_duplicate_profile_fails_without_mutating_config(tmp_path):
    store = _store(tmp_path)
    store.init_profile("dup")
    before = store.config_path.read_bytes()

    with pytest.raises(DuplicateProfileFailure, match="already exists"):
        store.init_profile("dup")

    assert store.config_path.read_bytes() == before


def test_interrupted_write_keeps_previous_config(tmp_path, monkeypatch):
    store = _store(tmp_path)
    store.init_profile("default")
    before = store.config_path.read_bytes()

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("forklift.profiles.os.replace", fail_replace)
    with pytest.raises(OSError, match="disk full"):
        store.init_profile("eve")

    assert store.config_path.read_bytes() == before


def test_invalid_private_key_leaves_no_profile(tmp_path):
    store = _store(tmp_path)
    store.init_profile("default")
    with pytest.raises(InvalidPrivateKey):
        store.init_profile("charlie", "invalid_key")
    assert store.names() == ["default"]


def test_corrupt_config_raises_parse_failure(tmp_path):
    store = _store(tmp_path)
    store.config_path.parent.mkdir(parents=True)
    store.config_path.write_text("profiles: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigParseFailure):
        store.init_profile("alice")


def test_non_mapping_config_raises_parse_failure(tmp_path):
    store = _store(tmp_path)
    store.config_path.parent.mkdir(parents=True)
    store.config_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigParseFailure):
        store.names()


def test_profiles_keep_existing_entries_and_sort_keys(tmp_path):
    store = _store(tmp_path)
    store.init_profile("zed")
    store.init_profile("amy")
    text = store.config_path.read_text(encoding="utf-8")
    assert text.index("amy:") < text.index("zed:")
    assert store.names() == ["amy", "zed"]


def test_get_and_find_by_address(tmp_path):
    store = _store(tmp_path, resolve_live_network("devnet"))
    profile = store.init_profile("carol")

    assert store.get("carol") == profile
    assert store.find_by_address(profile.address.upper().replace("0X", "0x")) == "carol"
    assert store.find_by_address("0x1") is None
    with pytest.raises(ProfileNotFound):
        store.get("nobody")
