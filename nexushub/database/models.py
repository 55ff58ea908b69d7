"""SQLAlchemy database models for nexushub."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime

from nexushub.database.database import Base


class KeyValueDB(Base):
    """One storage key and its serialized value."""

    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
