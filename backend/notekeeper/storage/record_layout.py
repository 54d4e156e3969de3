"""Fixed-size binary layout of a note record.

Every record occupies RECORD_SIZE bytes no matter how long its title and
content are, so an update never has to grow or shrink the stored file:

    tag          8   sha256(b"account:Note")[:8]
    owner       32   fixed-width identity
    title     4+50   u32 length prefix, zero-padded buffer
    content  4+500   u32 length prefix, zero-padded buffer
    created_at   8   i64 unix seconds
    updated_at   8   i64 unix seconds
    bump         1   u8 address-derivation discriminator

All integers are little endian.
"""
from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, replace
from typing import Any, Optional

from notekeeper.storage.errors import ContentTooLong, CorruptRecord, InvalidText, TitleEmpty, TitleTooLong
from notekeeper.utils.principal import IDENTITY_SIZE, InvalidPrincipal, decode_identity

MAX_TITLE_LEN = 50
MAX_CONTENT_LEN = 500

RECORD_TAG = hashlib.sha256(b"account:Note").digest()[:8]

_LAYOUT = struct.Struct(f"<8s{IDENTITY_SIZE}sI{MAX_TITLE_LEN}sI{MAX_CONTENT_LEN}sqqB")
RECORD_SIZE = _LAYOUT.size  # 615


def _encode(text: str, field: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidText(f"{field} is not valid UTF-8 text") from exc


def validate_title(title: str) -> bytes:
    raw = _encode(title, "Title")
    if not raw:
        raise TitleEmpty()
    if len(raw) > MAX_TITLE_LEN:
        raise TitleTooLong()
    return raw


def validate_content(content: str) -> bytes:
    raw = _encode(content, "Content")
    if len(raw) > MAX_CONTENT_LEN:
        raise ContentTooLong()
    return raw


@dataclass(frozen=True)
class Note:
    owner: bytes
    title: str
    content: str
    created_at: int
    updated_at: int
    bump: int

    @property
    def owner_user_id(self) -> str:
        return decode_identity(self.owner)

    def with_changes(
        self,
        updated_at: int,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> "Note":
        return replace(
            self,
            title=self.title if title is None else title,
            content=self.content if content is None else content,
            updated_at=updated_at,
        )

    def pack(self) -> bytes:
        if len(self.owner) != IDENTITY_SIZE:
            raise ValueError("owner must be a 32-byte identity")
        title = validate_title(self.title)
        content = validate_content(self.content)
        return _LAYOUT.pack(
            RECORD_TAG,
            self.owner,
            len(title),
            title,
            len(content),
            content,
            self.created_at,
            self.updated_at,
            self.bump,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "Note":
        if len(data) != RECORD_SIZE:
            raise CorruptRecord(f"expected {RECORD_SIZE} bytes, got {len(data)}")
        tag, owner, title_len, title, content_len, content, created_at, updated_at, bump = _LAYOUT.unpack(data)
        if tag != RECORD_TAG:
            raise CorruptRecord("unknown record tag")
        if title_len > MAX_TITLE_LEN or content_len > MAX_CONTENT_LEN:
            raise CorruptRecord("length prefix exceeds field capacity")
        try:
            decode_identity(owner)
            return cls(
                owner=owner,
                title=title[:title_len].decode("utf-8"),
                content=content[:content_len].decode("utf-8"),
                created_at=created_at,
                updated_at=updated_at,
                bump=bump,
            )
        except (UnicodeDecodeError, InvalidPrincipal) as exc:
            raise CorruptRecord(str(exc)) from exc

    def to_dict(self, address: str) -> dict[str, Any]:
        return {
            "address": address,
            "owner_user_id": self.owner_user_id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "bump": self.bump,
        }
