"""Main API router."""
from fastapi import APIRouter

from mice.api.v1.endpoints import sessions, admin, users, sse

api_router = APIRouter(prefix="/api")

# Include all endpoint routers
api_router.include_router(sse.router, prefix="/sessions", tags=["Dynamic QR"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
