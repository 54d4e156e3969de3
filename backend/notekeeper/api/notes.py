from fastapi import APIRouter, Depends, HTTPException, Path, Response

from notekeeper.config import data_dir
from notekeeper.models.notes import NoteCreate, NoteOut, NoteUpdate
from notekeeper.storage.errors import NoteError, NotFound
from notekeeper.storage.records_store import RecordStore
from notekeeper.utils.jwt_auth import get_current_user

router = APIRouter(prefix="/notes", tags=["notes"])

DATA_DIR = data_dir()
store = RecordStore(DATA_DIR)

# 32-byte derived address, lowercase hex
ADDRESS_PATTERN = "^[0-9a-f]{64}$"


def _http_error(exc: NoteError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.to_dict())


@router.post("", response_model=NoteOut, status_code=201)
def create_note(payload: NoteCreate, user_id: str = Depends(get_current_user)) -> NoteOut:
    try:
        address, note = store.create_note(user_id=user_id, title=payload.title, content=payload.content)
    except NoteError as exc:
        raise _http_error(exc)
    return NoteOut(**note.to_dict(address))


# Records are readable by any authenticated principal; only the owner may change them.
@router.get("/{address}", response_model=NoteOut, dependencies=[Depends(get_current_user)])
def get_note(address: str = Path(pattern=ADDRESS_PATTERN)) -> NoteOut:
    note = store.get_note(address)
    if note is None:
        raise _http_error(NotFound())
    return NoteOut(**note.to_dict(address))


@router.put("/{address}", response_model=NoteOut)
def update_note(
    payload: NoteUpdate,
    address: str = Path(pattern=ADDRESS_PATTERN),
    user_id: str = Depends(get_current_user),
) -> NoteOut:
    try:
        note = store.update_note(user_id=user_id, address=address, title=payload.title, content=payload.content)
    except NoteError as exc:
        raise _http_error(exc)
    return NoteOut(**note.to_dict(address))


@router.delete("/{address}", status_code=204)
def delete_note(
    address: str = Path(pattern=ADDRESS_PATTERN),
    user_id: str = Depends(get_current_user),
) -> Response:
    try:
        store.delete_note(user_id=user_id, address=address)
    except NoteError as exc:
        raise _http_error(exc)
    return Response(status_code=204)
