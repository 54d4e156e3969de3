"""Password hashing for registered principals.

- hash_password(plain: str) -> str
- verify_password(plain: str, hashed: str) -> bool

bcrypt through passlib's CryptContext, with the cost taken from the
``BCRYPT_ROUNDS`` environment variable when it is a valid integer. If the
bcrypt backend cannot hash at import time, pbkdf2_sha256 is used instead
and a RuntimeWarning is issued.
"""
from __future__ import annotations

import logging
import os
import warnings
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


def _rounds_from_env() -> Optional[int]:
    value = os.environ.get("BCRYPT_ROUNDS")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer BCRYPT_ROUNDS=%r", value)
        return None


def _build_context(scheme: str, rounds: Optional[int]) -> CryptContext:
    options = {f"{scheme}__rounds": rounds} if rounds else {}
    return CryptContext(schemes=[scheme], deprecated="auto", **options)


def _init_context() -> CryptContext:
    rounds = _rounds_from_env()
    try:
        ctx = _build_context("bcrypt", rounds)
        ctx.hash("probe")
        return ctx
    except Exception as exc:
        warnings.warn(
            "bcrypt backend not available or failed to initialize; falling back to pbkdf2_sha256. "
            f"Original error: {exc}",
            RuntimeWarning,
        )
        return _build_context("pbkdf2_sha256", rounds)


pwd_context = _init_context()


def hash_password(plain: str) -> str:
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if ``plain`` matches ``hashed``; malformed hashes never match."""
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False
