from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String, Text
from datetime import datetime, timezone

from ..db.connection import Base


class UploadedFile(Base):
    __tablename__ = "files"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("profiles.id"), nullable=False, index=True)
    file_name = Column(String(512), nullable=False)
    file_type = Column(String(128))
    file_url = Column(Text)
    file_size = Column(BigInteger)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
