"""Rate limiting configuration."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from mice.core.config import settings


def get_client_ip(request):
    """Get client IP for rate limiting, considering proxies."""
    # X-Forwarded-For can contain multiple IPs, take the first one
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return get_remote_address(request)


# Uses Redis if REDIS_URL is set (multi-worker deployments), memory otherwise
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=settings.REDIS_URL or "memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Venue WiFi often puts hundreds of attendees behind one NAT address, so the
# per-IP limits for the scan endpoints are generous
RATE_LIMITS = {
    "check_in": "200/minute",
    "event_entry": "200/minute",
    "dynamic_qr": "120/minute",
}
