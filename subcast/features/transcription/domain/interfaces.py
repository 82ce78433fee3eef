from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from subcast.features.segmentation.domain.models import SubtitleSegment
from .models import StoredSegment, TranscriptionRecord, TranslatedSegment


class ITranscriptionRepository(ABC):
    """
    Contract for transcription persistence.
    Segments and translations are owned by their transcription.
    """

    @abstractmethod
    def create(self, record: TranscriptionRecord, segments: Sequence[SubtitleSegment]) -> UUID:
        pass

    @abstractmethod
    def get(self, transcription_id: UUID) -> Optional[TranscriptionRecord]:
        pass

    @abstractmethod
    def list_segments(self, transcription_id: UUID) -> List[StoredSegment]:
        """Segments ordered by index."""
        pass

    @abstractmethod
    def replace_segments(self, transcription_id: UUID, segments: Sequence[SubtitleSegment]) -> int:
        """Swaps the whole segment list. Existing translations no longer line up and are dropped."""
        pass

    @abstractmethod
    def save_translations(self, transcription_id: UUID, target_language: str,
                          segments: Sequence[TranslatedSegment]) -> int:
        """Replaces any earlier translation into the same language."""
        pass

    @abstractmethod
    def list_translations(self, transcription_id: UUID, target_language: str) -> List[TranslatedSegment]:
        pass

    @abstractmethod
    def delete(self, transcription_id: UUID) -> bool:
        pass
