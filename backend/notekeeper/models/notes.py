from typing import Optional

from pydantic import BaseModel

# Size limits are counted in bytes and enforced by the record store, which
# reports each violation with its own error code.


class NoteCreate(BaseModel):
    title: str
    content: str = ""


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class NoteOut(BaseModel):
    address: str
    owner_user_id: str
    title: str
    content: str
    created_at: int
    updated_at: int
    bump: int
