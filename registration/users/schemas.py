from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError


class UserCreate(BaseModel):
    """Payload accepted by POST /users."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: StrictStr = Field(min_length=1)
    email: StrictStr = Field(min_length=1)
    age: StrictInt


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    user_id: int = Field(
        validation_alias=AliasChoices("userId", "user_id"),
        serialization_alias="userId",
    )
    name: str
    email: str
    age: int


@dataclass
class ValidationResult:
    value: Optional[UserCreate] = None
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.errors


def validate_user_payload(payload: Any) -> ValidationResult:
    """
    Check a decoded JSON body against UserCreate.

    Returns a result holding either the typed payload or one
    ``{"field", "message"}`` entry per invalid field.
    """
    if not isinstance(payload, dict):
        return ValidationResult(errors=[{"field": "body", "message": "Request body must be a JSON object"}])

    try:
        return ValidationResult(value=UserCreate.model_validate(payload))
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]) or "body", "message": err["msg"]}
            for err in exc.errors()
        ]
        return ValidationResult(errors=errors)
