"""
Error kinds returned by the note access service.

Messages are safe to show to callers: they never contain identifier values,
and NotFound/Unauthorized do not confirm whether some other note exists.
"""


class NoteServiceError(Exception):
    """
    Base error. `status_code` is what the HTTP layer answers with; `detail` is
    logged there and only sent to the caller when `expose_detail` is set.
    """
    status_code = 500
    expose_detail = False

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class InvalidInput(NoteServiceError):
    status_code = 422
    expose_detail = True

    def __init__(self, message: str = "Invalid input", detail: str | None = None):
        super().__init__(message=message, detail=detail)


class NotFound(NoteServiceError):
    status_code = 404

    def __init__(self, message: str = "Note not found"):
        super().__init__(message=message)


class Unauthorized(NoteServiceError):
    """The edit identifier does not belong to the addressed note."""
    status_code = 403

    def __init__(self, message: str = "Invalid edit token"):
        super().__init__(message=message)


class IdentifierExhaustion(NoteServiceError):
    status_code = 500

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(message="Failed to create note", detail=f"identifier collision after {attempts} attempts")


class StorageFailure(NoteServiceError):
    status_code = 503

    def __init__(self, message: str = "Storage unavailable"):
        super().__init__(message=message)
