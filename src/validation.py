from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, Field, ValidationError
from pydantic_core import PydanticCustomError

T = TypeVar("T")


class ErrorCode(str, Enum):
    INVALID_URL = "invalid_url"
    INVALID_DOMAIN = "invalid_domain"
    INVALID_GEO_ENTRY = "invalid_geo_entry"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    EMPTY_BATCH = "empty_batch"
    BATCH_TOO_LARGE = "batch_too_large"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_VALUE = "invalid_value"


# встроенные типы ошибок pydantic, у которых есть аналог в нашей таксономии
PYDANTIC_ERROR_CODES = {
    "missing": ErrorCode.MISSING_REQUIRED_FIELD,
    "literal_error": ErrorCode.INVALID_ENUM_VALUE,
    "enum": ErrorCode.INVALID_ENUM_VALUE,
}


class FieldError(BaseModel):
    field: str
    code: ErrorCode
    message: str
    context: dict[str, Any] = Field(default_factory=dict)


class ValidationResult(BaseModel, Generic[T]):
    value: Optional[T] = None
    errors: list[FieldError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def error_code_for(error_type: str) -> ErrorCode:
    if error_type in PYDANTIC_ERROR_CODES:
        return PYDANTIC_ERROR_CODES[error_type]
    try:
        return ErrorCode(error_type)
    except ValueError:
        return ErrorCode.INVALID_VALUE


def field_errors_from(exc: ValidationError, prefix: str = "") -> list[FieldError]:
    """Flatten a pydantic ValidationError into field-scoped diagnostics.

    Field paths are dot-joined locations. Errors of map keys and map values
    share the entry path, so both kinds of geo errors land on
    ``geo.<country code>`` and carry that code in their context.
    """
    errors = []
    for error in exc.errors():
        code = error_code_for(error["type"])
        context = dict(error.get("ctx") or {})
        path = [str(part) for part in error["loc"] if part != "[key]"]
        if code is ErrorCode.INVALID_GEO_ENTRY and path:
            context.setdefault("country_code", path[-1])
        if prefix:
            path.insert(0, prefix)
        errors.append(FieldError(
            field=".".join(path),
            code=code,
            message=error["msg"],
            context={key: value for key, value in context.items() if _is_plain(value)}
        ))
    return errors


def validate_model(model: type[BaseModel], raw: Any, prefix: str = "") -> ValidationResult:
    try:
        return ValidationResult(value=model.model_validate(raw))
    except ValidationError as exc:
        return ValidationResult(errors=field_errors_from(exc, prefix=prefix))


def _is_plain(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool, list, tuple)) or value is None


def one_of(allowed):
    """Before-validator restricting a field to a fixed set of literals."""
    def check(value):
        if value not in allowed:
            raise PydanticCustomError(
                ErrorCode.INVALID_ENUM_VALUE.value,
                "Invalid value '{value}', expected one of: {expected}",
                {"value": str(value), "expected": ", ".join(allowed), "allowed": list(allowed)}
            )
        return value
    return BeforeValidator(check)


def require_text(value: str, field_name: str) -> str:
    if not value:
        raise PydanticCustomError(
            ErrorCode.MISSING_REQUIRED_FIELD.value,
            "{field_name} is required.",
            {"field_name": field_name}
        )
    return value
