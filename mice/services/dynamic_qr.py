"""Dynamic QR token issuance."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from mice.core.cache import TTLCache
from mice.core.config import settings
from mice.core.logging_config import get_logger
from mice.core.security import generate_dynamic_token
from mice.services.utils import get_session_or_404

logger = get_logger(__name__)


@dataclass(frozen=True)
class DynamicToken:
    """A token as handed to the QR display; the cache only keeps token -> session_id."""

    token: str
    session_id: int
    issued_at: datetime
    ttl_seconds: int


def issue_dynamic_token(
    db: Session,
    cache: TTLCache,
    session_id: int,
    ttl_seconds: Optional[int] = None,
) -> DynamicToken:
    """Mint a fresh dynamic token for a conference session.

    Args:
        db: SQLAlchemy session
        cache: Token cache shared with the redemption endpoint
        session_id: ID of the conference session the token admits to
        ttl_seconds: Token lifetime (default: DYNAMIC_QR_TTL_SECONDS)

    Returns:
        DynamicToken with the token string, its TTL and issuance time

    Raises:
        NotFoundError if the session does not exist

    Tokens issued earlier for the same session are left alone: each one stays
    redeemable until its own TTL runs out.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.DYNAMIC_QR_TTL_SECONDS

    get_session_or_404(db, session_id)

    token = generate_dynamic_token()
    issued_at = datetime.now(timezone.utc)
    cache.set(token, session_id, ttl_seconds)

    logger.info("dynamic_token_issued", session_id=session_id, ttl_seconds=ttl_seconds)

    return DynamicToken(token=token, session_id=session_id, issued_at=issued_at, ttl_seconds=ttl_seconds)

