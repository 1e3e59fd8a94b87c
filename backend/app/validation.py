"""
Validation layer.

Field types used by the request schemas (trimming, blank handling, required checks)
and translation of request validation failures into typed tracker errors.
"""

from typing import Any, Optional, Annotated
from pydantic import BeforeValidator, AfterValidator
from pydantic_core import PydanticCustomError
from fastapi.exceptions import RequestValidationError

from app.errors import (
    TrackerError, InvalidIdentifier, MissingRequiredField, InvalidFieldType
)

# Range of a 64-bit signed INTEGER column
DB_INT_MIN = -(2 ** 63)
DB_INT_MAX = 2 ** 63 - 1

# Error types that mean "the caller did not supply a usable value"
MISSING_ERROR_TYPES = {"missing", "required_blank"}


def _strip(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def _blank_to_none(value: Any) -> Any:
    value = _strip(value)
    return None if value == "" else value


def _require_value(value: Any) -> Any:
    value = _strip(value)
    if value is None or value == "":
        raise PydanticCustomError("required_blank", "Field is required")
    return value


def _reject_blank(value: Any) -> Any:
    value = _strip(value)
    if value is None or value == "":
        raise PydanticCustomError("blank", "Value cannot be empty")
    return value


def _fits_column(value: Any) -> Any:
    if value is not None and not DB_INT_MIN <= value <= DB_INT_MAX:
        raise PydanticCustomError("int_out_of_range", "Number is out of range")
    return value


def not_blank() -> BeforeValidator:
    """Reject null or blank input for a field that may be omitted"""
    return BeforeValidator(_reject_blank)


def default_if_blank(default: Any) -> BeforeValidator:
    """Treat null or blank input as the column default"""
    def _apply(value: Any) -> Any:
        value = _strip(value)
        return default if value is None or value == "" else value
    return BeforeValidator(_apply)


# ==================== FIELD TYPES ====================

# Create: absent, null or blank -> MISSING_<FIELD>
RequiredText = Annotated[str, BeforeValidator(_require_value)]
RequiredInt = Annotated[int, BeforeValidator(_require_value), AfterValidator(_fits_column)]

# Update: may be omitted, but null or blank -> INVALID_<FIELD>
NonBlankText = Annotated[str, not_blank()]
NonBlankInt = Annotated[int, not_blank(), AfterValidator(_fits_column)]

# Optional columns: blank -> null
OptionalText = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
OptionalInt = Annotated[Optional[int], BeforeValidator(_blank_to_none), AfterValidator(_fits_column)]
OptionalFloat = Annotated[Optional[float], BeforeValidator(_blank_to_none)]

# Epoch milliseconds
Timestamp = OptionalInt


def parse_identifier(raw: Optional[str]) -> int:
    """Parse a record id supplied as text (query string)."""
    if raw is None:
        raise InvalidIdentifier()
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise InvalidIdentifier()
    if not 1 <= value <= DB_INT_MAX:
        raise InvalidIdentifier()
    return value


def translate_validation_error(exc: RequestValidationError) -> TrackerError:
    """
    Map the first FastAPI/Pydantic validation error to a typed error.

    - path parameters        -> InvalidIdentifier
    - absent / blank value   -> MissingRequiredField
    - anything else          -> InvalidFieldType
    """
    errors = exc.errors()
    if not errors:
        return InvalidFieldType("body", "Request could not be validated")

    error = errors[0]
    loc = tuple(error.get("loc") or ())
    source = loc[0] if loc else "body"
    field = str(loc[1]) if len(loc) > 1 and isinstance(loc[1], str) else str(source)
    error_type = error.get("type", "")

    if source == "path":
        return InvalidIdentifier()

    if error_type == "json_invalid":
        return InvalidFieldType("body", "Request body must be valid JSON")

    if error_type in MISSING_ERROR_TYPES:
        return MissingRequiredField(field, f"{field} is required")

    return InvalidFieldType(field, f"Invalid value for {field}: {error.get('msg', 'invalid input')}")
