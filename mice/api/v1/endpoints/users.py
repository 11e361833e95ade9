"""Endpoints for the signed-in user."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mice.api.deps import get_db, verify_access_token
from mice.schemas import EntryPassResponse, TokenPayload
from mice.services.entry_pass import build_entry_pass

router = APIRouter()


@router.get("/me/entry-pass", response_model=EntryPassResponse)
async def get_entry_pass_endpoint(
    current_user: TokenPayload = Depends(verify_access_token),
    db: Session = Depends(get_db),
):
    """
    Personal QR code presented at the venue entrance.

    qrData is the plain user id; qrImage is the same payload rendered as a
    base64 PNG.
    """
    return EntryPassResponse(**build_entry_pass(db, current_user.user_id))
