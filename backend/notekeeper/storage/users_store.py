from __future__ import annotations

import json
import os
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from notekeeper.utils.principal import encode_identity


def _principal_path(base_dir: Path, user_id: str) -> Path:
    # the identity is hex, so user ids never reach the filesystem directly
    return base_dir / "principals" / f"{encode_identity(user_id).hex()}.json"


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    identity: str
    hashed_password: str
    created_at: str


class UsersStore:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def get(self, user_id: str) -> Optional[UserRecord]:
        p = _principal_path(self.base_dir, user_id)
        if not p.exists():
            return None
        raw = json.loads(p.read_text(encoding="utf-8"))
        return UserRecord(
            user_id=raw["user_id"],
            identity=raw["identity"],
            hashed_password=raw["hashed_password"],
            created_at=raw["created_at"],
        )

    def create(self, user_id: str, hashed_password: str) -> UserRecord:
        p = _principal_path(self.base_dir, user_id)
        if p.exists():
            raise FileExistsError("User exists")

        rec = UserRecord(
            user_id=user_id,
            identity=encode_identity(user_id).hex(),
            hashed_password=hashed_password,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        p.parent.mkdir(parents=True, exist_ok=True)
        tmp = p.with_name(f"{p.name}.{uuid.uuid4().hex}.tmp")
        try:
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(asdict(rec), f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # link fails if another registration won the race
            os.link(tmp, p)
        finally:
            tmp.unlink(missing_ok=True)
        return rec
