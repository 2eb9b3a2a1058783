from __future__ import annotations

import hashlib
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .errors import InvalidPrivateKey


ED25519_PRIVATE_PREFIX = "ed25519-priv-"
ED25519_PUBLIC_PREFIX = "ed25519-pub-"
# Authentication-key scheme byte for single-signer Ed25519 accounts.
ED25519_SCHEME = b"\x00"
# Scheme byte for objects derived from an address (primary fungible stores).
DERIVE_OBJECT_ADDRESS_FROM_OBJECT_SCHEME = b"\xfc"
ADDRESS_LENGTH = 32


@dataclass(frozen=True)
class Ed25519KeyPair:
    private_bytes: bytes
    public_bytes: bytes

    @property
    def private_key_aip80(self) -> str:
        return f"{ED25519_PRIVATE_PREFIX}0x{self.private_bytes.hex()}"

    @property
    def public_key_string(self) -> str:
        return f"{ED25519_PUBLIC_PREFIX}0x{self.public_bytes.hex()}"

    @property
    def account_address(self) -> str:
        return "0x" + hashlib.sha3_256(self.public_bytes + ED25519_SCHEME).hexdigest()


def _raw_private_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _raw_public_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def parse_private_key(value: str) -> bytes:
    """Accepts `ed25519-priv-0x…`, `0x…` or bare hex; returns the 32 raw bytes."""
    if not isinstance(value, str):
        raise InvalidPrivateKey("expected a hex string")
    text = value.strip()
    if text.startswith(ED25519_PRIVATE_PREFIX):
        text = text[len(ED25519_PRIVATE_PREFIX):]
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        raw = bytes.fromhex(text)
    except ValueError as exc:
        raise InvalidPrivateKey(f"not a hex string: {value!r}") from exc
    if len(raw) != 32:
        raise InvalidPrivateKey(f"expected 32 bytes, got {len(raw)}")
    return raw


def generate_keypair() -> Ed25519KeyPair:
    key = Ed25519PrivateKey.generate()
    return Ed25519KeyPair(private_bytes=_raw_private_bytes(key), public_bytes=_raw_public_bytes(key))


def keypair_from_private_key(value: str) -> Ed25519KeyPair:
    raw = parse_private_key(value)
    key = Ed25519PrivateKey.from_private_bytes(raw)
    return Ed25519KeyPair(private_bytes=raw, public_bytes=_raw_public_bytes(key))


def address_to_bytes(address: str) -> bytes:
    """32-byte form of an address, left-padding short forms such as `0xa`."""
    text = address.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if not text or len(text) > ADDRESS_LENGTH * 2:
        raise ValueError(f"invalid account address: {address!r}")
    return bytes.fromhex(text.rjust(ADDRESS_LENGTH * 2, "0"))


def derive_object_address(source_address: str, derive_from_address: str) -> str:
    """Address of the object derived from `source_address` and `derive_from_address`.

    Matches `object::create_user_derived_object_address`; for an owner and a
    fungible asset metadata address this is the owner's primary store.
    """
    digest = hashlib.sha3_256()
    digest.update(address_to_bytes(source_address))
    digest.update(address_to_bytes(derive_from_address))
    digest.update(DERIVE_OBJECT_ADDRESS_FROM_OBJECT_SCHEME)
    return "0x" + digest.hexdigest()
