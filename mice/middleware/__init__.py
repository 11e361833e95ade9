"""HTTP middleware."""
from mice.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
