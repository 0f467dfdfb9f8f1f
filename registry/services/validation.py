"""Payload checks for user create/update.

Wraps the ``UserCreate``/``UserUpdate`` models so every failing rule comes
back as one ``ValidationFailure`` listing ``{field, rule, message}``.
Text and boolean fields are strict: ``"true"`` is not ``True``.
"""

from typing import Any

from pydantic import ValidationError

from registry.core.exceptions import ValidationFailure
from registry.models.user import UserCreate, UserUpdate

# pydantic error type -> rule name; custom errors already carry the rule
_RULES = {
    "missing": "required",
    "extra_forbidden": "unknown",
    "string_type": "type",
    "bool_type": "type",
    "model_type": "type",
}


def _errors(exc: ValidationError) -> list[dict[str, str]]:
    out = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        if field in ("id", "_id"):
            out.append({"field": "id", "rule": "immutable", "message": "id is assigned by the store and cannot be set"})
            continue
        if field == "role" and err["type"] != "type":
            rule = "enum"
        else:
            rule = _RULES.get(err["type"], err["type"])
        out.append({"field": field, "rule": rule, "message": f"{field}: {err['msg']}"})
    return out


def validate_user_payload(payload: Any, partial: bool = False) -> dict[str, Any]:
    """Check a create (or, with ``partial``, update) payload.

    Returns the cleaned fields; on create, ``role`` and ``validated`` carry
    their defaults when absent. Raises ``ValidationFailure``.
    """
    model = UserUpdate if partial else UserCreate
    try:
        data = model.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailure(_errors(e)) from e
    return data.model_dump(exclude_unset=partial)
