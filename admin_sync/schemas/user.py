"""Pydantic schemas for users and the display-ready user+role composite."""

from datetime import datetime

from pydantic import BaseModel, Field

from admin_sync.schemas.role import WIRE_MODEL_CONFIG, Role


class User(BaseModel):
    """A user as returned by the remote API."""

    model_config = WIRE_MODEL_CONFIG

    id: str = Field(..., min_length=1, description="Unique user identifier.")
    first: str = Field(..., description="Given name.")
    last: str = Field(..., description="Family name.")
    photo: str | None = Field(default=None, description="Optional avatar URI.")
    role_id: str = Field(..., min_length=1, description="Foreign key into roles.")
    created_at: datetime | None = Field(default=None, description="Creation time.")


class EnrichedUser(User):
    """
    A user with its role attached by foreign-key lookup.

    Derived view only: recomputed whenever users or roles change, never sent back to the server.
    """

    role: Role | None = Field(default=None, description="Role matching role_id, if loaded.")
