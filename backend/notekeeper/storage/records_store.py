import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

from notekeeper.storage.address_locks import AddressLocks
from notekeeper.storage.addressing import address_from_str, address_to_str, find_address, verify_address
from notekeeper.storage.errors import AlreadyExists, AddressMismatch, NotFound, Unauthorized
from notekeeper.storage.record_layout import RECORD_SIZE, Note, validate_content, validate_title
from notekeeper.utils.principal import encode_identity

logger = logging.getLogger(__name__)


def _unix_now() -> int:
    return int(time.time())


def _records_dir(base_dir: Path) -> Path:
    return base_dir / "records"


def _record_path(base_dir: Path, address: str) -> Path:
    # normalizes case and rejects anything that is not a 32-byte hex address
    key = address_to_str(address_from_str(address))
    return _records_dir(base_dir) / f"{key}.bin"


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("wb") as f:
        f.write(data)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


class RecordStore:
    """Keyed collection of fixed-layout note records.

    One file per derived address. Every mutation validates and authorizes
    first, then writes the whole record atomically, so a failed call leaves
    the stored record untouched.
    """

    def __init__(self, base_dir: Path, clock: Callable[[], int] = _unix_now):
        self.base_dir = base_dir
        self.clock = clock
        self._locks = AddressLocks()

    def _load(self, address: str) -> Optional[Note]:
        path = _record_path(self.base_dir, address)
        if not path.exists():
            return None
        return Note.unpack(path.read_bytes())

    def _authorize(self, user_id: str, address: str) -> Note:
        note = self._load(address)
        if note is None:
            raise NotFound()

        owner = encode_identity(user_id)
        if owner != note.owner:
            logger.warning("Rejected %s on note %s: not the owner", user_id, address)
            raise Unauthorized()

        # the stored title and bump must still reproduce the address
        if not verify_address(address_from_str(address), owner, note.title, note.bump):
            raise AddressMismatch()
        return note

    def create_note(self, user_id: str, title: str, content: str) -> tuple[str, Note]:
        validate_title(title)
        validate_content(content)

        owner = encode_identity(user_id)
        raw_address, bump = find_address(owner, title)
        address = address_to_str(raw_address)

        with self._locks.hold(address):
            path = _record_path(self.base_dir, address)
            if path.exists():
                raise AlreadyExists()

            now = self.clock()
            note = Note(
                owner=owner,
                title=title,
                content=content,
                created_at=now,
                updated_at=now,
                bump=bump,
            )
            _atomic_write_bytes(path, note.pack())

        logger.info("Created note %s for %s (%d bytes reserved)", address, user_id, RECORD_SIZE)
        return address, note

    def get_note(self, address: str) -> Optional[Note]:
        with self._locks.hold(address_to_str(address_from_str(address))):
            return self._load(address)

    def update_note(
        self,
        user_id: str,
        address: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        key = address_to_str(address_from_str(address))
        with self._locks.hold(key):
            note = self._authorize(user_id, key)

            if title is not None:
                validate_title(title)
            if content is not None:
                validate_content(content)

            updated = note.with_changes(updated_at=max(self.clock(), note.updated_at), title=title, content=content)
            _atomic_write_bytes(_record_path(self.base_dir, key), updated.pack())

        logger.info("Updated note %s", key)
        return updated

    def delete_note(self, user_id: str, address: str) -> None:
        key = address_to_str(address_from_str(address))
        with self._locks.hold(key):
            self._authorize(user_id, key)
            _record_path(self.base_dir, key).unlink()

        logger.info("Deleted note %s, %d bytes returned to %s", key, RECORD_SIZE, user_id)
