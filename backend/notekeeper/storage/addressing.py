"""Deterministic record addresses.

A note lives at an address computed from ("note", owner identity, title).
There is no lookup table: the address is recomputed on every access.

Each candidate address also mixes in a one-byte discriminator ("bump").
Candidates whose first byte has the high bit set are reserved, so the
canonical bump is the first value counting down from 255 that yields an
unreserved address. The bump is stored with the record and must reproduce
the same address on every later access.
"""
from __future__ import annotations

import hashlib

DOMAIN_TAG = b"note"
NAMESPACE = hashlib.sha256(b"notekeeper").digest()
_MARKER = b"RecordDerivedAddress"

ADDRESS_SIZE = 32


class AddressDerivationError(ValueError):
    pass


def _candidate(owner: bytes, title: bytes, bump: int) -> bytes:
    h = hashlib.sha256()
    for part in (DOMAIN_TAG, owner, title, bytes([bump]), NAMESPACE, _MARKER):
        h.update(part)
    return h.digest()


def _is_reserved(candidate: bytes) -> bool:
    return candidate[0] >= 0x80


def create_address(owner: bytes, title: str, bump: int) -> bytes:
    if not 0 <= bump <= 255:
        raise AddressDerivationError("bump must fit in one byte")
    candidate = _candidate(owner, title.encode("utf-8"), bump)
    if _is_reserved(candidate):
        raise AddressDerivationError("bump yields a reserved address")
    return candidate


def find_address(owner: bytes, title: str) -> tuple[bytes, int]:
    raw_title = title.encode("utf-8")
    for bump in range(255, -1, -1):
        candidate = _candidate(owner, raw_title, bump)
        if not _is_reserved(candidate):
            return candidate, bump
    raise AddressDerivationError("no valid bump for these seeds")


def verify_address(address: bytes, owner: bytes, title: str, bump: int) -> bool:
    try:
        return create_address(owner, title, bump) == address
    except AddressDerivationError:
        return False


def address_to_str(address: bytes) -> str:
    return address.hex()


def address_from_str(value: str) -> bytes:
    try:
        raw = bytes.fromhex(value)
    except ValueError as exc:
        raise AddressDerivationError("Invalid address") from exc
    if len(raw) != ADDRESS_SIZE:
        raise AddressDerivationError("Invalid address")
    return raw
