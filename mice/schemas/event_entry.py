"""Event entry schemas."""
from datetime import datetime
from typing import List, Optional, Union
from pydantic import Field

from mice.schemas.common import CamelModel
from mice.schemas.user import UserSummary, UserWithRole


class EventEntryRequest(CamelModel):
    # Raw payload of the scanned personal QR: the user id as text or number
    user_id: Optional[Union[int, str]] = Field(None)


class EventEntryResponse(CamelModel):
    message: str
    already_checked_in: bool
    entry_time: datetime
    user: UserSummary


class EventEntryOut(CamelModel):
    id: int
    user_id: int
    entered_at: datetime
    user: UserWithRole


class EventEntryStats(CamelModel):
    total_entries: int
    total_attendees: int
    check_in_rate: str
    entries: List[EventEntryOut]
