from __future__ import annotations


class NoteError(Exception):
    """Base class for failed preconditions of a note operation.

    Every subclass is terminal: the store raises it before writing anything,
    so the caller may fix the input and resubmit.
    """

    code = "NoteError"
    status_code = 400
    message = "Note operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": str(self)}


class TitleEmpty(NoteError):
    code = "TitleEmpty"
    status_code = 422
    message = "Title cannot be empty"


class TitleTooLong(NoteError):
    code = "TitleTooLong"
    status_code = 422
    message = "Title too long (max 50 characters)"


class ContentTooLong(NoteError):
    code = "ContentTooLong"
    status_code = 422
    message = "Content too long (max 500 characters)"


class InvalidText(NoteError):
    code = "InvalidText"
    status_code = 422
    message = "Text is not valid UTF-8"


class Unauthorized(NoteError):
    code = "Unauthorized"
    status_code = 403
    message = "Unauthorized"


class AlreadyExists(NoteError):
    code = "AlreadyExists"
    status_code = 409
    message = "A note with this title already exists"


class NotFound(NoteError):
    code = "NotFound"
    status_code = 404
    message = "Note not found"


class AddressMismatch(NoteError):
    code = "AddressMismatch"
    status_code = 409
    message = "Note address does not match its seeds"


class CorruptRecord(ValueError):
    """Stored bytes do not decode as a note record."""
