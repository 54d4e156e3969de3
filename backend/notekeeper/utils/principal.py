"""Fixed-width principal identities.

A principal is known to the HTTP layer by its user id. Records store the
owner as a 32-byte identity, so a user id is encoded as UTF-8 and padded
with NUL bytes on the right. Ids that cannot round-trip are rejected.
"""
from __future__ import annotations

IDENTITY_SIZE = 32


class InvalidPrincipal(ValueError):
    pass


def encode_identity(user_id: str) -> bytes:
    if not user_id:
        raise InvalidPrincipal("Invalid user_id")
    raw = user_id.encode("utf-8")
    if len(raw) > IDENTITY_SIZE or b"\x00" in raw:
        raise InvalidPrincipal("Invalid user_id")
    return raw.ljust(IDENTITY_SIZE, b"\x00")


def decode_identity(identity: bytes) -> str:
    if len(identity) != IDENTITY_SIZE:
        raise InvalidPrincipal("Identity must be 32 bytes")
    return identity.rstrip(b"\x00").decode("utf-8")


def is_valid_user_id(user_id: str) -> bool:
    try:
        encode_identity(user_id)
    except InvalidPrincipal:
        return False
    return True
