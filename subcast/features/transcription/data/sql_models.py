import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from subcast.core.database.base import Base


def utc_now():
    return datetime.now(timezone.utc)


class TranscriptionModel(Base):
    """
    The Header record for a transcription.
    """
    __tablename__ = "transcriptions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    owner_id = Column(String, nullable=False, index=True)
    media_file_id = Column(UUID(as_uuid=True), ForeignKey("media_files.id", ondelete="SET NULL"), nullable=True)

    title = Column(String, nullable=False)
    language = Column(String, nullable=True)
    provider = Column(String, nullable=False)

    full_text = Column(Text, nullable=False)
    # Mean of the per-segment confidences, when the provider reports them
    confidence = Column(Float, nullable=True)
    duration_seconds = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)

    segments = relationship(
        "TranscriptionSegmentModel",
        back_populates="transcription",
        cascade="all, delete-orphan",
        order_by="TranscriptionSegmentModel.segment_index",
    )
    translated_segments = relationship(
        "TranslatedSegmentModel",
        back_populates="transcription",
        cascade="all, delete-orphan",
    )


class TranscriptionSegmentModel(Base):
    """
    One display-ready cue. Text may hold a single line break.
    """
    __tablename__ = "transcription_segments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transcription_id = Column(UUID(as_uuid=True), ForeignKey("transcriptions.id"), nullable=False, index=True)

    segment_index = Column(Integer, nullable=False)
    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)
    text = Column(Text, nullable=False)
    confidence = Column(Float, nullable=True)

    transcription = relationship("TranscriptionModel", back_populates="segments")


class TranslatedSegmentModel(Base):
    """
    Translation of one segment into one target language.
    """
    __tablename__ = "translated_segments"
    __table_args__ = (
        UniqueConstraint("transcription_id", "target_language", "segment_index", name="uq_translated_segment"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    transcription_id = Column(UUID(as_uuid=True), ForeignKey("transcriptions.id"), nullable=False, index=True)
    original_segment_id = Column(UUID(as_uuid=True), ForeignKey("transcription_segments.id"), nullable=False)

    segment_index = Column(Integer, nullable=False)
    target_language = Column(String, nullable=False)
    translated_text = Column(Text, nullable=False)
    start_time = Column(Float, nullable=False)
    end_time = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now)

    transcription = relationship("TranscriptionModel", back_populates="translated_segments")
    original_segment = relationship("TranscriptionSegmentModel")
