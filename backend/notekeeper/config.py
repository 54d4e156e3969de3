from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# backend/notekeeper/config.py -> repository root
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


def data_dir() -> Path:
    return Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR)))


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")


def log_file() -> Optional[str]:
    return os.getenv("LOG_FILE") or None


def allow_user_id_header() -> bool:
    return os.getenv("ALLOW_USER_ID_HEADER", "1").lower() in {"1", "true", "yes"}
