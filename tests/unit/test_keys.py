import hashlib
import re

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from forklift.errors import InvalidPrivateKey
from forklift.keys import (
    address_to_bytes,
    derive_object_address,
    generate_keypair,
    keypair_from_private_key,
    parse_private_key,
)

ADDRESS_RE = re.compile(r"^0x[0-9a-f]{64}$")


def test_generated_keypair_renders_aip80_strings():
    keypair = generate_keypair()
    assert keypair.private_key_aip80.startswith("ed25519-priv-0x")
    assert keypair.public_key_string.startswith("ed25519-pub-0x")
    assert ADDRESS_RE.match(keypair.account_address)


def test_account_address_is_sha3_of_public_key_and_scheme():
    keypair = generate_keypair()
    expected = "0x" + hashlib.sha3_256(keypair.public_bytes + b"\x00").hexdigest()
    assert keypair.account_address == expected


def test_private_key_forms_are_equivalent():
    raw = bytes(range(32))
    hex_text = raw.hex()
    forms = [hex_text, f"0x{hex_text}", f"ed25519-priv-0x{hex_text}", f"0X{hex_text.upper()}"]
    addresses = {keypair_from_private_key(form).account_address for form in forms}
    assert len(addresses) == 1


def test_imported_key_round_trips_generated_identity():
    original = generate_keypair()
    restored = keypair_from_private_key(original.private_key_aip80)
    assert restored == original


def test_public_key_is_derived_from_private_key():
    key = Ed25519PrivateKey.from_private_bytes(bytes(range(32)))
    keypair = keypair_from_private_key(bytes(range(32)).hex())
    assert keypair.public_bytes == key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


@pytest.mark.parametrize("value", ["invalid_key", "0x1234", "", "ed25519-priv-0xzz"])
def test_malformed_private_key_is_rejected(value):
    with pytest.raises(InvalidPrivateKey):
        parse_private_key(value)


def test_address_to_bytes_left_pads_short_addresses():
    assert address_to_bytes("0xa") == b"\x00" * 31 + b"\x0a"
    assert address_to_bytes("0x1") == address_to_bytes("0x" + "0" * 63 + "1")
    with pytest.raises(ValueError):
        address_to_bytes("0x" + "1" * 65)


def test_derive_object_address_for_primary_store():
    owner = generate_keypair().account_address
    expected = hashlib.sha3_256(
        bytes.fromhex(owner[2:]) + b"\x00" * 31 + b"\x0a" + b"\xfc"
    ).hexdigest()
    assert derive_object_address(owner, "0xa") == f"0x{expected}"
    assert derive_object_address(owner, "0xa") == derive_object_address(owner.upper().replace("0X", "0x"), "0x000a")
