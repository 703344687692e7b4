"""
Preset store connection and session management.

Presets live in a local SQLite file (``database_url`` in settings). The file's
directory is created on first use so a fresh checkout can save presets without
any setup step.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session

from mortgage_tools.config import get_settings
from mortgage_tools.db.models import Base

logger = logging.getLogger(__name__)

settings = get_settings()


def sqlite_file(database_url: str) -> Optional[Path]:
    """Path of the SQLite file behind a URL; None for in-memory or other databases."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return None
    return Path(url.database)


def create_preset_engine(database_url: str) -> Engine:
    """Engine for the preset store, creating the SQLite file's directory if needed."""
    path = sqlite_file(database_url)
    if path is None:
        return create_engine(database_url)

    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created preset store directory {path.parent}")

    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},  # Sessions cross FastAPI's threadpool
    )


engine = create_preset_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create the presets table if it does not exist."""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting a preset store session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Preset store session for scripts; commits on success, rolls back on error."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
