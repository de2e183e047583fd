"""
Error taxonomy for the intake service.

Client input errors are raised before any row store call. Storage errors
are scoped to a single submission and never stop the process.
"""

from typing import Optional

from fastapi import status


class IntakeError(Exception):
    """Base error rendered as ``{"success": false, "message": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_content(self) -> dict:
        return {"success": False, "message": self.message}


class MissingFieldError(IntakeError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, mode_label: Optional[str] = None):
        self.field = field
        if mode_label:
            message = f"Missing required field ({mode_label} mode): {field}"
        else:
            message = f"Missing required field: {field}"
        super().__init__("E_MISSING_FIELD", message)


class InvalidInputModeError(IntakeError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, value: object):
        self.value = value
        super().__init__("E_INPUT_MODE", "Invalid input mode")


class RecordNotFoundError(IntakeError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__("E_NOT_FOUND", "Application number not found.")


class RecordIdConflictError(IntakeError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        attempts: int,
        code: str = "E_RECORD_ID_CONFLICT",
        message: str = "Could not allocate an application number, please resubmit",
    ):
        self.attempts = attempts
        super().__init__(code, message)


class RecordIdSequenceExhaustedError(RecordIdConflictError):
    """Every number of the sequence is taken; the counter wrapped onto stored rows."""

    def __init__(self, attempts: int):
        super().__init__(
            attempts,
            "E_RECORD_ID_EXHAUSTED",
            "Application number sequence exhausted, contact the laboratory",
        )


class StorageFailureError(IntakeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__("E_STORAGE", message)


class PartialSubmissionError(StorageFailureError):
    """The main row is stored but a child table append failed."""

    def __init__(self, record_id: str, table: str, message: str):
        self.record_id = record_id
        self.table = table
        super().__init__(message)

    def to_content(self) -> dict:
        content = super().to_content()
        content["recordId"] = self.record_id
        return content
