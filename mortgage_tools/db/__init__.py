"""
Database configuration and models.
"""

from mortgage_tools.db.database import engine, SessionLocal, get_db
from mortgage_tools.db.models import Base, Preset

__all__ = ["engine", "SessionLocal", "get_db", "Base", "Preset"]
