from sqlalchemy import Boolean, Column, DateTime, Float, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime, timezone

from ..db.connection import Base


class Analysis(Base):
    """
    One row per dispatch. Append-only: never updated after insert.

    raw_result holds the provider (or fallback) payload as-is; its shape is vendor-defined.
    """

    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True)

    file_id = Column(String(64), nullable=False)
    user_id = Column(String(64), nullable=False)
    status = Column(String(32), nullable=False, default="completed")
    confidence_score = Column(Float)
    is_deepfake = Column(Boolean)
    detection_method = Column(String(64))
    raw_result = Column(JSONB)
    processing_time = Column(Integer)

    request_id = Column(String(64))
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("idx_analyses_user_id", "user_id"),
        Index("idx_analyses_file_id", "file_id"),
        Index("idx_analyses_status", "status"),
    )
