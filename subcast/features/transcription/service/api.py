# File: subcast/features/transcription/service/api.py
import logging
import uuid
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import RawSegment, SplitOptions, SubtitleSegment
from subcast.features.segmentation.service.api import build_subtitle_segments
from ..domain.interfaces import ITranscriptionRepository
from ..domain.models import TranscriptionRecord, TranscriptionResult, TranslationItem
from .translation import build_translated_segments

logger = logging.getLogger(__name__)

# Machine translation carries no provider score
TRANSLATED_CONFIDENCE = 1.0


class TranscriptionService:
    """
    Facade for the Transcription Feature.
    Turns normalised provider output into stored, display-ready cues.
    """

    def __init__(self, repo: ITranscriptionRepository):
        self.repo = repo

    def store_transcription(self, owner_id: str, title: str, result: TranscriptionResult,
                            media_file_id: Optional[UUID] = None,
                            options: SplitOptions = SplitOptions()) -> UUID:
        cues = build_subtitle_segments(result.segments, options)

        record = TranscriptionRecord(
            id=uuid.uuid4(),
            owner_id=owner_id,
            media_file_id=media_file_id,
            title=title,
            language=result.language,
            provider=result.provider,
            full_text=result.text,
            confidence=result.average_confidence,
            duration_seconds=result.duration,
        )
        transcription_id = self.repo.create(record, cues)

        logger.info(f"Stored transcription {transcription_id}: {len(result.segments)} spans -> {len(cues)} cues")
        return transcription_id

    def resplit_transcription(self, transcription_id: UUID, max_chars_per_line: int = 42,
                              max_lines: int = 2) -> Tuple[int, int]:
        """
        Re-runs splitting and balancing over the stored cues with new limits.
        Returns (segments before, segments after).
        """
        options = SplitOptions(max_chars_per_line=max_chars_per_line, max_lines=max_lines)

        if not self.repo.get(transcription_id):
            raise KeyError(f"Transcription {transcription_id} not found")

        existing = self.repo.list_segments(transcription_id)
        if not existing:
            raise ValidationError(f"No segments found for transcription {transcription_id}")

        # Stored text is already balanced; line breaks are rejoined before splitting
        raw = [
            RawSegment(start=s.start, end=s.end, text=" ".join(s.text.split()), confidence=s.confidence)
            for s in existing
        ]
        cues = build_subtitle_segments(raw, options)
        self.repo.replace_segments(transcription_id, cues)

        logger.info(f"Re-split transcription {transcription_id}: {len(existing)} -> {len(cues)} segments")
        return len(existing), len(cues)

    def list_segments_for_export(self, transcription_id: UUID, language: Optional[str] = None) -> List[SubtitleSegment]:
        if language:
            translated = self.repo.list_translations(transcription_id, language)
            if not translated:
                raise ValidationError(f"No translated segments found for language: {language}")
            return [
                SubtitleSegment(index=t.segment_index, start=t.start, end=t.end,
                                text=t.translated_text, confidence=TRANSLATED_CONFIDENCE)
                for t in translated
            ]

        return [
            SubtitleSegment(index=s.index, start=s.start, end=s.end, text=s.text, confidence=s.confidence)
            for s in self.repo.list_segments(transcription_id)
        ]

    def save_translation(self, transcription_id: UUID, target_language: str,
                         results: Sequence[TranslationItem]) -> int:
        originals = self.repo.list_segments(transcription_id)
        if not originals:
            raise ValidationError(f"No segments found for transcription {transcription_id}")

        translated = build_translated_segments(transcription_id, originals, results, target_language)
        count = self.repo.save_translations(transcription_id, target_language, translated)

        logger.info(f"Saved {count} {target_language} segments for transcription {transcription_id}")
        return count

    def delete_transcription(self, transcription_id: UUID) -> bool:
        return self.repo.delete(transcription_id)
