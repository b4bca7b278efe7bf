"""
orderdesk.validation

Typed request-shape validation with a tagged result.

Responsibilities:
- Validate an arbitrary JSON payload against a Pydantic model.
- Return `Valid(value)` or `Invalid(message, errors)` instead of raising, so
  route handlers decide how a bad request surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from orderdesk.errors import ValidationFailed

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class Valid(Generic[M]):
    value: M


@dataclass(frozen=True, slots=True)
class Invalid:
    message: str
    errors: list[dict[str, Any]] = field(default_factory=list)


def parse_model(model: type[M], payload: Any) -> Valid[M] | Invalid:
    if payload is None:
        return Invalid(message="Request body is required")
    try:
        return Valid(model.model_validate(payload))
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        return Invalid(message=_summarize(errors), errors=errors)


def require_valid(result: Valid[M] | Invalid) -> M:
    if isinstance(result, Invalid):
        raise ValidationFailed(result.message)
    return result.value


def _summarize(errors: list[Any]) -> str:
    parts = []
    for err in errors:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"
