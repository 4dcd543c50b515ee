"""
Typed domain errors.

Services raise these; main.py maps each onto the error envelope
(error, message, request_id, details) with its status_code.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class ArmoryError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ArmoryError):
    status_code = 400
    code = "validation_error"


class AuthorizationError(ArmoryError):
    status_code = 403
    code = "forbidden"


class NotFoundError(ArmoryError):
    status_code = 404
    code = "not_found"


class StorageError(ArmoryError):
    status_code = 500
    code = "storage_error"
