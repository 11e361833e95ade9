"""Database package."""
from mice.db.session import engine, SessionLocal, get_db, create_tables
from mice.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "create_tables", "Base"]
