# File: subcast/features/transcription/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, unique
from typing import List, Optional
from uuid import UUID

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import RawSegment


@unique
class ResponseShape(str, Enum):
    # Whisper-style verbose JSON: start / end / text / avg_logprob
    VERBOSE_JSON = "verbose_json"
    # Already in the internal shape: startTime / endTime / text / confidence
    NORMALIZED = "normalized"


@dataclass(frozen=True)
class TranscriptionResult:
    """
    Provider output after normalisation. Nothing provider-specific survives past this point.
    """
    text: str
    provider: str
    segments: List[RawSegment] = field(default_factory=list)
    language: Optional[str] = None
    duration: Optional[float] = None

    @property
    def average_confidence(self) -> Optional[float]:
        scores = [s.confidence for s in self.segments if s.confidence is not None]
        return sum(scores) / len(scores) if scores else None


@dataclass(frozen=True)
class TranscriptionRecord:
    """
    Header of a stored transcription.
    """
    id: UUID
    owner_id: str
    title: str
    provider: str
    full_text: str
    media_file_id: Optional[UUID] = None
    language: Optional[str] = None
    confidence: Optional[float] = None
    duration_seconds: Optional[float] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class StoredSegment:
    id: UUID
    index: int
    start: float
    end: float
    text: str
    confidence: Optional[float] = None


@dataclass(frozen=True)
class TranslatedSegment:
    """
    Provider-translated text aligned 1:1 with an original segment; timing is copied from it.
    """
    transcription_id: UUID
    original_segment_id: UUID
    segment_index: int
    target_language: str
    translated_text: str
    start: float
    end: float

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError(f"Translated segment {self.segment_index} ends before it starts")


@dataclass(frozen=True)
class TranslationItem:
    index: int
    text: str


@unique
class TranslationStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TranslationProgress:
    status: TranslationStatus
    progress: int = 0
    current_batch: int = 0
    total_batches: int = 0
    error: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.progress <= 100:
            raise ValidationError(f"Progress must be within 0-100: {self.progress}")

    @classmethod
    def after_batch(cls, done: int, total: int, error: Optional[str] = None) -> "TranslationProgress":
        progress = round(done / total * 100) if total else 100
        if error:
            return cls(TranslationStatus.FAILED, progress, done, total, error)
        status = TranslationStatus.COMPLETED if done >= total else TranslationStatus.PROCESSING
        return cls(status, progress, done, total)
