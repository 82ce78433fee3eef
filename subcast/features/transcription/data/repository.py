from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import sessionmaker

from subcast.features.segmentation.domain.models import SubtitleSegment
from .sql_models import TranscriptionModel, TranscriptionSegmentModel, TranslatedSegmentModel
from ..domain.interfaces import ITranscriptionRepository
from ..domain.models import StoredSegment, TranscriptionRecord, TranslatedSegment


def _segment_rows(transcription_id: UUID, segments: Sequence[SubtitleSegment]) -> List[TranscriptionSegmentModel]:
    return [
        TranscriptionSegmentModel(
            transcription_id=transcription_id,
            segment_index=i,
            start_time=seg.start,
            end_time=seg.end,
            text=seg.text,
            confidence=seg.confidence,
        )
        for i, seg in enumerate(segments)
    ]


class SqlTranscriptionRepository(ITranscriptionRepository):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, record: TranscriptionRecord, segments: Sequence[SubtitleSegment]) -> UUID:
        with self.session_factory() as db:
            try:
                header = TranscriptionModel(
                    id=record.id,
                    owner_id=record.owner_id,
                    media_file_id=record.media_file_id,
                    title=record.title,
                    language=record.language,
                    provider=record.provider,
                    full_text=record.full_text,
                    confidence=record.confidence,
                    duration_seconds=record.duration_seconds,
                )
                db.add(header)
                db.flush()
                db.add_all(_segment_rows(header.id, segments))
                db.commit()
                return header.id
            except Exception:
                db.rollback()
                raise

    def get(self, transcription_id: UUID) -> Optional[TranscriptionRecord]:
        with self.session_factory() as db:
            row = db.get(TranscriptionModel, transcription_id)
            if not row:
                return None
            return TranscriptionRecord(
                id=row.id,
                owner_id=row.owner_id,
                media_file_id=row.media_file_id,
                title=row.title,
                language=row.language,
                provider=row.provider,
                full_text=row.full_text,
                confidence=row.confidence,
                duration_seconds=row.duration_seconds,
                created_at=row.created_at,
            )

    def list_segments(self, transcription_id: UUID) -> List[StoredSegment]:
        with self.session_factory() as db:
            rows = (
                db.query(TranscriptionSegmentModel)
                .filter(TranscriptionSegmentModel.transcription_id == transcription_id)
                .order_by(TranscriptionSegmentModel.segment_index)
                .all()
            )
            return [
                StoredSegment(id=r.id, index=r.segment_index, start=r.start_time, end=r.end_time,
                              text=r.text, confidence=r.confidence)
                for r in rows
            ]

    def replace_segments(self, transcription_id: UUID, segments: Sequence[SubtitleSegment]) -> int:
        with self.session_factory() as db:
            try:
                # Translations reference the old segments, so they go first
                db.query(TranslatedSegmentModel).filter(
                    TranslatedSegmentModel.transcription_id == transcription_id
                ).delete(synchronize_session=False)
                db.query(TranscriptionSegmentModel).filter(
                    TranscriptionSegmentModel.transcription_id == transcription_id
                ).delete(synchronize_session=False)

                db.add_all(_segment_rows(transcription_id, segments))
                db.commit()
                return len(segments)
            except Exception:
                db.rollback()
                raise

    def save_translations(self, transcription_id: UUID, target_language: str,
                          segments: Sequence[TranslatedSegment]) -> int:
        with self.session_factory() as db:
            try:
                db.query(TranslatedSegmentModel).filter(
                    TranslatedSegmentModel.transcription_id == transcription_id,
                    TranslatedSegmentModel.target_language == target_language,
                ).delete(synchronize_session=False)

                db.add_all([
                    TranslatedSegmentModel(
                        transcription_id=transcription_id,
                        original_segment_id=seg.original_segment_id,
                        segment_index=seg.segment_index,
                        target_language=target_language,
                        translated_text=seg.translated_text,
                        start_time=seg.start,
                        end_time=seg.end,
                    )
                    for seg in segments
                ])
                db.commit()
                return len(segments)
            except Exception:
                db.rollback()
                raise

    def list_translations(self, transcription_id: UUID, target_language: str) -> List[TranslatedSegment]:
        with self.session_factory() as db:
            rows = (
                db.query(TranslatedSegmentModel)
                .filter(
                    TranslatedSegmentModel.transcription_id == transcription_id,
                    TranslatedSegmentModel.target_language == target_language,
                )
                .order_by(TranslatedSegmentModel.segment_index)
                .all()
            )
            return [
                TranslatedSegment(
                    transcription_id=r.transcription_id,
                    original_segment_id=r.original_segment_id,
                    segment_index=r.segment_index,
                    target_language=r.target_language,
                    translated_text=r.translated_text,
                    start=r.start_time,
                    end=r.end_time,
                )
                for r in rows
            ]

    def delete(self, transcription_id: UUID) -> bool:
        with self.session_factory() as db:
            row = db.get(TranscriptionModel, transcription_id)
            if not row:
                return False
            # ORM delete so the relationship cascade removes the children
            db.delete(row)
            db.commit()
            return True
