"""Personal entry pass rendering."""
import base64
import io

import qrcode
from sqlalchemy.orm import Session

from mice.core.exceptions import NotFoundError
from mice.services.utils import get_user


def entry_pass_payload(user_id: int) -> str:
    """
    Text encoded in a user's personal QR code: the decimal user id.

    The payload is unsigned and never expires, so a photo of the code admits
    its holder just like the original. Event staff treat the pass like a
    printed badge.
    """
    return str(user_id)


def render_qr_png_base64(data: str) -> str:
    """Render data as a QR code and return the PNG as a base64 string."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffered = io.BytesIO()
    img.save(buffered, format="PNG")
    return base64.b64encode(buffered.getvalue()).decode()


def build_entry_pass(db: Session, user_id: int) -> dict:
    """Entry pass for an existing user: payload plus rendered QR image."""
    user = get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    data = entry_pass_payload(user.id)
    return {
        "user_id": user.id,
        "qr_data": data,
        "qr_image": render_qr_png_base64(data),
    }
