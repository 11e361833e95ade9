"""Server-Sent Events feed that keeps a session's QR display rotating."""
import asyncio
import json
import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError, DatabaseError
from sqlalchemy.orm import Session, sessionmaker

from mice.api.deps import get_db, get_session_factory, get_token_cache, require_admin
from mice.core.cache import TTLCache
from mice.core.config import settings
from mice.core.exceptions import CheckinError
from mice.schemas import DynamicQRStreamEvent
from mice.services.dynamic_qr import issue_dynamic_token
from mice.services.utils import get_session_or_404

logger = logging.getLogger(__name__)
router = APIRouter()


async def event_generator(request: Request, data_func: Callable[[], Dict[str, Any]], interval: float = 50):
    """
    Generic SSE event generator.

    Args:
        request: FastAPI request object to check for client disconnect
        data_func: Function that returns the data to send
        interval: Seconds between updates
    """
    consecutive_errors = 0
    max_consecutive_errors = 3

    try:
        while True:
            if await request.is_disconnected():
                break

            try:
                data = data_func()
                yield f"data: {json.dumps(data)}\n\n"
                consecutive_errors = 0
            except (SQLAlchemyError, DatabaseError) as e:
                # Transient database errors: retry on the next tick
                consecutive_errors += 1
                logger.warning(f"SSE database error (attempt {consecutive_errors}/{max_consecutive_errors}): {e}")

                if consecutive_errors >= max_consecutive_errors:
                    yield f"event: error\ndata: {json.dumps({'error': 'Service temporarily unavailable'})}\n\n"
                    break
            except CheckinError as e:
                # The session was deleted while its display was running
                logger.info(f"SSE feed stopped: {e.message}")
                yield f"event: error\ndata: {json.dumps({'error': e.message})}\n\n"
                break
            except Exception as e:
                logger.exception(f"SSE unexpected error: {e}")
                yield f"event: error\ndata: {json.dumps({'error': 'Internal error'})}\n\n"
                break

            await asyncio.sleep(interval)

    except asyncio.CancelledError:
        # Client disconnected
        pass


@router.get("/{session_id}/dynamic-qr/stream", dependencies=[Depends(require_admin)])
async def dynamic_qr_stream(
    request: Request,
    session_id: int,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_token_cache),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    SSE feed of dynamic QR tokens for one session (admin only).

    Sends a newly issued token immediately and then every
    DYNAMIC_QR_REFRESH_SECONDS, which is always shorter than the token TTL,
    so the code on screen is replaced before it stops working. Each event
    carries the same fields as GET /dynamic-qr plus refreshIn, the seconds
    until the next event, which drives the on-screen countdown.

    The client should reconnect automatically if disconnected.
    """
    # Fail with a plain 404 before the stream starts
    get_session_or_404(db, session_id)

    refresh_in = settings.DYNAMIC_QR_REFRESH_SECONDS

    def get_data():
        with session_factory() as feed_db:
            issued = issue_dynamic_token(feed_db, cache, session_id)
        event = DynamicQRStreamEvent(
            session_id=issued.session_id,
            dynamic_token=issued.token,
            expires_in=issued.ttl_seconds,
            generated_at=issued.issued_at,
            refresh_in=refresh_in,
        )
        return event.model_dump(mode="json", by_alias=True)

    return StreamingResponse(
        event_generator(request, get_data, interval=refresh_in),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering in nginx
        }
    )
