"""Exceptions raised by the record stores and services.

Each class names the outcome status a service reports when it catches it.
Store errors also record whether the file was being read ("loading") or
written ("saving").
"""
from typing import Optional

LOADING = "loading"
SAVING = "saving"


class ClinicError(Exception):
    status = "error"


class RecordValidationError(ClinicError):
    status = "invalid"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RecordNotFoundError(ClinicError):
    status = "not_found"


class ForeignKeyError(ClinicError):
    status = "foreign_key"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class RecordStoreError(ClinicError):
    status = "error"

    def __init__(self, message: str, operation: str = SAVING):
        super().__init__(message)
        self.operation = operation


class PersistenceError(RecordStoreError):
    """The backing file could not be read, written or locked."""


class MalformedRecordError(RecordStoreError):
    """A stored line (or a value about to be stored) does not fit the row format."""

    def __init__(self, message: str, path: Optional[str] = None, line_number: Optional[int] = None,
                 operation: str = LOADING):
        if path is not None and line_number is not None:
            message = f"{path}:{line_number}: {message}"
        super().__init__(message, operation)
        self.path = path
        self.line_number = line_number
