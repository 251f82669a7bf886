"""Pydantic schema for the single ephemeral notification slot."""

from typing import Literal

from pydantic import BaseModel, Field

NotificationKind = Literal["success", "error", "info"]


class Notification(BaseModel):
    """The one notification that can be live at a time."""

    title: str = Field(default="")
    description: str = Field(default="")
    kind: NotificationKind = Field(default="info")
    visible: bool = Field(default=False)
