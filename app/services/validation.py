"""
Payload Validation Service

Turns a raw JSON body into a typed schema, or into a validation error
report that clients can show next to form fields.

Report format:
    {
        "title": ["Title can not be empty"],
        "authorId": ["Author id is required"]
    }

Keys are wire names (aliases). Problems with the body as a whole, such as
a JSON array instead of an object, go under "_errors".
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from app.exceptions import PayloadValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_ERRORS_KEY = "_errors"

# Message templates keyed by pydantic error type.
# {label} is the field's title=; other names come from the error's ctx.
MESSAGES = {
    "missing": "{label} is required",
    "string_type": "{label} must be a string",
    "int_type": "{label} must be a number",
    "int_parsing": "{label} must be a number",
    "int_from_float": "{label} must be an integer",
    "finite_number": "{label} must be a number",
    "string_too_long": "{label} must be at most {max_length} characters long",
    "model_type": "Expected an object",
    "model_attributes_type": "Expected an object",
}


def _fields_by_wire_name(model: type[BaseModel]) -> dict[str, FieldInfo]:
    return {
        field.alias or name: field
        for name, field in model.model_fields.items()
    }


def _message(error: dict[str, Any], field: FieldInfo | None, key: str) -> str:
    label = field.title if field is not None and field.title else key
    ctx = error.get("ctx") or {}

    if error["type"] == "string_too_short":
        if ctx.get("min_length") == 1:
            return f"{label} can not be empty"
        return f"{label} must be at least {ctx.get('min_length')} characters long"

    template = MESSAGES.get(error["type"])
    if template is None:
        return error["msg"]
    return template.format(label=label, **ctx)


def format_validation_errors(
    exc: ValidationError,
    model: type[BaseModel],
) -> dict[str, list[str]]:
    """
    Build the per-field error report for a failed validation.

    Args:
        exc: The error raised by model.model_validate()
        model: The schema that was being validated

    Returns:
        Mapping of wire field name to a list of messages
    """
    fields = _fields_by_wire_name(model)
    report: dict[str, list[str]] = {}

    for error in exc.errors():
        key = str(error["loc"][0]) if error["loc"] else FORM_ERRORS_KEY
        message = _message(error, fields.get(key), key)
        report.setdefault(key, []).append(message)

    return report


def validate_payload(model: type[ModelT], data: Any) -> ModelT:
    """
    Validate a decoded JSON body into model.

    Raises:
        PayloadValidationError: with the error report if validation fails
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise PayloadValidationError(format_validation_errors(exc, model)) from exc
