"""
Typed errors raised by the record services and the validation layer.
Each carries an HTTP status, a machine-readable code and a human message.
"""

import re
from typing import Optional, Dict, Any


def field_code(field: str) -> str:
    """equipmentId -> EQUIPMENT_ID, serial_number -> SERIAL_NUMBER"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", field).upper()


class TrackerError(RuntimeError):
    """Base error for tracker operations."""

    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        if self.field:
            body["field"] = self.field
        return body


class InvalidIdentifier(TrackerError):
    """Raised when a record id is missing or not an integer."""

    status_code = 400
    default_code = "INVALID_ID"

    def __init__(self, message: str = "Valid ID is required"):
        super().__init__(message)


class MissingRequiredField(TrackerError):
    """Raised when a required field is absent or blank."""

    status_code = 400

    def __init__(self, field: str, reason: Optional[str] = None):
        super().__init__(
            reason or f"{field} is required",
            code=f"MISSING_{field_code(field)}",
            field=field,
        )


class InvalidFieldType(TrackerError):
    """Raised when a supplied value cannot be parsed or is not allowed."""

    status_code = 400

    def __init__(self, field: str, reason: Optional[str] = None):
        super().__init__(
            reason or f"{field} is invalid",
            code=f"INVALID_{field_code(field)}",
            field=field,
        )


class NotFound(TrackerError):
    """Raised when a record, or a record it references, does not exist."""

    status_code = 404
    default_code = "NOT_FOUND"


class DuplicateValue(TrackerError):
    """Raised when a write would break a unique constraint."""

    status_code = 409
    default_code = "DUPLICATE_VALUE"


class ReferentialIntegrityViolation(TrackerError):
    """Raised when a delete is blocked by dependent records."""

    status_code = 409
    default_code = "FOREIGN_KEY_CONSTRAINT"


class Internal(TrackerError):
    """Raised when the store fails unexpectedly."""

    status_code = 500
    default_code = "INTERNAL_ERROR"


# Codes for errors raised by the HTTP layer itself (auth, routing)
HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    500: "INTERNAL_ERROR",
}


def http_error_body(status_code: int, detail: Any) -> Dict[str, Any]:
    """Body for an HTTPException in the same shape as TrackerError.to_dict()"""
    return {
        "error": detail if isinstance(detail, str) else "Request failed",
        "code": HTTP_ERROR_CODES.get(status_code, "HTTP_ERROR"),
    }
