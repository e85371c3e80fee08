from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime, timezone

from ..db.connection import Base


class Profile(Base):
    """Per-user profile; owns the provider quota counters."""

    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    email = Column(String(320))
    full_name = Column(String(256))
    api_quota_used = Column(Integer, nullable=False, default=0)
    api_quota_limit = Column(Integer, nullable=False, default=50)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
