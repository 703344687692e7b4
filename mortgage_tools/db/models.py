"""
SQLAlchemy ORM models for saved calculator presets.
"""

from datetime import datetime
from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    JSON,
    String,
)
from sqlalchemy.orm import declarative_base
import uuid

Base = declarative_base()


def generate_uuid():
    return str(uuid.uuid4())


class AuditMixin:
    """Mixin for audit fields on all models."""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Preset(AuditMixin, Base):
    """Named snapshot of calculator inputs."""

    __tablename__ = "presets"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    preset_type = Column(String(20), default="regular", nullable=False, index=True)

    # Milliseconds since the epoch, as stored by the browser calculator
    timestamp = Column(BigInteger, nullable=False, index=True)

    # Calculator inputs, kept exactly as submitted (camelCase keys)
    data = Column(JSON, default=dict, nullable=False)
