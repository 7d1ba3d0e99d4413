"""Errors raised by the record services, carrying the message shown to the user."""

from __future__ import annotations


class RecordError(Exception):
    def __init__(self, message: str, code: str = "invalid"):
        super().__init__(message)
        self.message = message
        self.code = code


class RecordNotFoundError(RecordError):
    def __init__(self, message: str):
        super().__init__(message, "not_found")


class SelectionRequiredError(RecordError):
    """A create form was submitted without its required association."""

    def __init__(self, message: str):
        super().__init__(message, "selection_required")


class InvalidFieldError(RecordError):
    def __init__(self, message: str, field: str):
        super().__init__(message, "invalid_field")
        self.field = field
