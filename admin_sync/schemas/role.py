"""Pydantic schemas for roles and partial role updates."""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# Wire JSON is camelCase; attributes are snake_case. Either form is accepted on input.
WIRE_MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "extra": "ignore",
}


class Role(BaseModel):
    """A role as returned by the remote API."""

    model_config = WIRE_MODEL_CONFIG

    id: str = Field(..., min_length=1, description="Unique role identifier.")
    name: str = Field(..., description="Display name.")
    description: str | None = Field(default=None, description="Optional long description.")
    is_default: bool = Field(
        default=False,
        description="Assigned to new users absent another selection; exactly one role is default.",
    )
    updated_at: datetime | None = Field(default=None, description="Last modification time.")


class RoleUpdate(BaseModel):
    """Partial role update. Only the fields explicitly set are sent to the server."""

    model_config = WIRE_MODEL_CONFIG

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    is_default: bool | None = None

    def to_payload(self) -> dict:
        """Wire body for PATCH /roles/{id}: camelCase keys, unset fields omitted."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    @property
    def touches_default(self) -> bool:
        return "is_default" in self.model_fields_set and self.is_default is not None
