"""
Typed application errors.

Each error carries the HTTP status code it maps to; the handlers registered
in ``sportshub.main`` render them as ``{"success": false, "error": ...}``.
"""
from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    status_code = 404


class ValidationError(AppError):
    status_code = 400

    def __init__(self, errors: List[FieldError]):
        super().__init__(", ".join(e.message for e in errors))
        self.errors = errors


class DuplicateConstraintError(AppError):
    status_code = 400


class AuthorizationError(AppError):
    status_code = 403


class GeoResolutionError(AppError):
    status_code = 400


class UploadError(AppError):
    status_code = 400
