"""Form Validation — turn pydantic ValidationError into a dashboard FormValidationError.

Invariants:
    - Only the first error is reported; the page shows one message at a time
    - Messages raised by our own validators are shown verbatim (no "Value error," prefix)
"""

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from zargon_web.core.errors import FormValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_VALUE_ERROR_PREFIX = "Value error, "


def first_error(exc: ValidationError) -> tuple[str, str]:
    """(field, message) of the first validation error."""
    err = exc.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"]) or "form"
    message = err["msg"]
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    return field, message


def validate_form(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        field, message = first_error(e)
        raise FormValidationError(message, field) from e


def checkbox(value: Any) -> bool:
    """HTML checkboxes post "on" (or nothing)."""
    return str(value).lower() in ("on", "true", "1", "yes")


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value
