"""Authentication schemas."""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from mice.core.constants import UserRole


class TokenPayload(BaseModel):
    """Claims carried by a bearer token."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: int = Field(..., alias="userId")
    role: UserRole
    email: Optional[str] = None
