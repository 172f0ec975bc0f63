"""Payload validation for task requests.

Runs before any storage call and reports every failing field at once.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..schemas.task import TaskCreate, TaskUpdate


REQUEST_LOCATIONS = ("body", "query", "path", "header")


def field_errors(exc) -> dict[str, str]:
    """Flatten pydantic or FastAPI request errors into ``{field: message}``.

    The first message per field wins. FastAPI's location prefix ("body",
    "path"...) is dropped when a field name follows it.
    """
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = tuple(err.get("loc", ()))
        if len(loc) > 1 and loc[0] in REQUEST_LOCATIONS:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        ctx = err.get("ctx") or {}
        if err.get("type") == "value_error" and "error" in ctx:
            message = str(ctx["error"])
        else:
            message = err.get("msg", "Invalid value")
        errors.setdefault(field, message)
    return errors


def validate_task_payload(payload: Any, *, require_title: bool = False) -> dict[str, Any]:
    """Validate a task payload.

    Args:
        payload: Decoded JSON body
        require_title: True for creation, where a title is mandatory

    Returns:
        For creation, every task field (None where absent). For updates,
        only the fields present in ``payload``.

    Raises:
        ValidationError: with a field map naming every invalid field
    """
    if not isinstance(payload, dict):
        raise ValidationError(errors={"body": "Request body must be a JSON object"})

    schema = TaskCreate if require_title else TaskUpdate
    try:
        data = schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(errors=field_errors(exc)) from None

    if require_title:
        return data.model_dump()
    return data.model_dump(exclude_unset=True)
