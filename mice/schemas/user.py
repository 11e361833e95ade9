"""User schemas."""
from typing import Optional

from mice.core.constants import UserRole
from mice.schemas.common import CamelModel


class UserSummary(CamelModel):
    id: int
    name: str
    email: str
    organization: Optional[str] = None


class UserWithRole(UserSummary):
    role: UserRole
