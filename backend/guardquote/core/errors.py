"""Error taxonomy for the quote core.

Every error here is a caller-recoverable condition except StorageUnavailable,
which signals that the database could not be reached. The API layer renders
them as ``{"detail": ..., "code": ..., "fields": [...]}`` with the status code
declared on the class.
"""
from typing import Iterable


class QuoteServiceError(Exception):
    status_code = 400
    code = "error"

    def __init__(self, message: str, fields: Iterable[str] | None = None):
        super().__init__(message)
        self.message = message
        self.fields: list[str] = list(fields or [])

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "fields": self.fields}


class IncompleteIntake(QuoteServiceError):
    status_code = 422
    code = "incomplete_intake"


class ValidationError(QuoteServiceError):
    status_code = 422
    code = "validation_error"

    def __init__(self, message: str, fields: Iterable[str] | None = None, errors: dict[str, str] | None = None):
        super().__init__(message, fields if fields is not None else list((errors or {}).keys()))
        self.errors = dict(errors or {})

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class InvalidTransition(QuoteServiceError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, target: str, message: str | None = None):
        super().__init__(message or f"Cannot move quote from '{current}' to '{target}'", ["status"])
        self.current = current
        self.target = target


class ImmutableFieldError(QuoteServiceError):
    status_code = 400
    code = "immutable_field"


class NotFound(QuoteServiceError):
    status_code = 404
    code = "not_found"


class Forbidden(QuoteServiceError):
    status_code = 403
    code = "forbidden"


class Unauthorized(QuoteServiceError):
    status_code = 401
    code = "unauthorized"


class StorageUnavailable(QuoteServiceError):
    status_code = 503
    code = "storage_unavailable"
