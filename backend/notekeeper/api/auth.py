from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from notekeeper.config import data_dir
from notekeeper.models.auth import LoginRequest, RegisterRequest, TokenResponse
from notekeeper.storage.users_store import UsersStore
from notekeeper.utils.auth_hash import hash_password, verify_password
from notekeeper.utils.jwt_auth import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

DATA_DIR = data_dir()
users = UsersStore(DATA_DIR)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest):
    if users.get(req.user_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    try:
        rec = users.create(req.user_id, hash_password(req.password))
    except FileExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    logger.info("Registered principal %s", rec.user_id)
    return {"user_id": rec.user_id, "identity": rec.identity}


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest):
    rec = users.get(req.user_id)
    if rec is None or not verify_password(req.password, rec.hashed_password):
        logger.warning("Failed login for %s", req.user_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(subject=req.user_id))
