"""Dynamic QR and entry pass schemas."""
from datetime import datetime

from mice.schemas.common import CamelModel


class DynamicQRResponse(CamelModel):
    session_id: int
    dynamic_token: str
    expires_in: int
    generated_at: datetime


class DynamicQRStreamEvent(DynamicQRResponse):
    refresh_in: int


class EntryPassResponse(CamelModel):
    user_id: int
    qr_data: str
    qr_image: str
