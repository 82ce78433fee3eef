import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, BigInteger, Float, DateTime, Text, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from subcast.core.database.base import Base
from subcast.core.common.enums import FileStatus, MediaType

def utc_now():
    return datetime.now(timezone.utc)

class MediaFileModel(Base):
    """
    One uploaded source file with its derived artifact locations
    and the processing status polled by clients.
    """
    __tablename__ = "media_files"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(String, nullable=False, index=True)

    filename = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    media_type = Column(SQLEnum(MediaType), nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    duration_seconds = Column(Float, nullable=True)

    # Derived artifacts (preview/thumbnail are video-only)
    original_url = Column(Text, nullable=True)
    preview_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)
    audio_url = Column(Text, nullable=True)
    storage_url = Column(Text, nullable=True)

    status = Column(SQLEnum(FileStatus), default=FileStatus.UPLOADING, nullable=False, index=True)
    progress = Column(Integer, default=0, nullable=False)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
