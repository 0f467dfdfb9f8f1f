from enum import Enum

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr, field_validator
from pydantic_core import PydanticCustomError


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class User(Document):
    name: str
    email: Indexed(str, unique=True)
    role: Role = Role.USER
    validated: bool = False

    class Settings:
        name = "users"


class UserRecord(BaseModel):
    """Backend-neutral view of a stored user, as returned by every store."""

    id: str
    name: str
    email: str
    role: Role = Role.USER
    validated: bool = False

    @classmethod
    def from_document(cls, doc: User) -> "UserRecord":
        return cls(
            id=str(doc.id),
            name=doc.name,
            email=doc.email,
            role=doc.role,
            validated=doc.validated,
        )

    def to_response(self) -> dict:
        return self.model_dump(mode="json")


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: StrictStr
    email: StrictStr
    role: Role = Role.USER
    validated: StrictBool = False

    @field_validator("name", "email")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("non_empty", "must not be empty")
        return v


class UserUpdate(BaseModel):
    """Partial update: only the fields sent are applied (``exclude_unset``)."""

    model_config = ConfigDict(extra="forbid")

    name: StrictStr | None = None
    email: StrictStr | None = None
    role: Role | None = None
    validated: StrictBool | None = None

    @field_validator("name", "email", "role", "validated", mode="before")
    @classmethod
    def _not_null(cls, v):
        if v is None:
            raise PydanticCustomError("type", "must not be null")
        return v

    @field_validator("name", "email")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise PydanticCustomError("non_empty", "must not be empty")
        return v
