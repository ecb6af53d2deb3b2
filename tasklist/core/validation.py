"""
Turning pydantic validation failures into application ValidationErrors.

Every violated rule is reported, not just the first one.
"""

from __future__ import annotations

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tasklist.core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)

# Leading location parts FastAPI adds that mean nothing to a client
_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def format_errors(errors: Iterable[dict[str, Any]]) -> list[str]:
    """
    Render pydantic error dicts as "field: message" strings.

    Example:
        [{"loc": ("body", "title"), "msg": "Field required"}] -> ["title: Field required"]
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        msg = error.get("msg", "Invalid value")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def validate_input(model: type[M], data: Any) -> M:
    """
    Validate raw data against a model.

    Raises:
        ValidationError: listing every failed rule
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e
