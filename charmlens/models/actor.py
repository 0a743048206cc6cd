"""Actor (identity context) model for charmlens."""

from typing import Optional
from pydantic import BaseModel, Field


class Actor(BaseModel):
    """The authenticated caller an action is attributed to."""

    id: str = Field(..., description="Unique actor identifier")
    email: Optional[str] = Field(None, description="Actor email address")
    display_name: Optional[str] = Field(None, description="Actor display name")
    is_admin: bool = Field(False, description="Whether the actor may read the audit log")
