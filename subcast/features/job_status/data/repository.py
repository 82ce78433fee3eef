from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import sessionmaker

from .sql_models import MediaFileModel
from ..domain.interfaces import IMediaFileRepository
from ..domain.models import MediaFileRecord

# Columns copied verbatim between the record and the row
_FIELDS = (
    "owner_id", "filename", "mime_type", "media_type", "size_bytes", "duration_seconds",
    "original_url", "preview_url", "thumbnail_url", "audio_url", "storage_url",
    "status", "progress", "error_message", "created_at", "updated_at",
)


def _to_record(row: MediaFileModel) -> MediaFileRecord:
    return MediaFileRecord(id=row.id, **{name: getattr(row, name) for name in _FIELDS})


class SqlMediaFileRepository(IMediaFileRepository):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, record: MediaFileRecord) -> UUID:
        with self.session_factory() as db:
            row = MediaFileModel(id=record.id, **{name: getattr(record, name) for name in _FIELDS})
            db.add(row)
            db.commit()
            return row.id

    def get(self, file_id: UUID) -> Optional[MediaFileRecord]:
        with self.session_factory() as db:
            row = db.get(MediaFileModel, file_id)
            return _to_record(row) if row else None

    def save(self, record: MediaFileRecord) -> None:
        with self.session_factory() as db:
            row = db.get(MediaFileModel, record.id)
            if not row:
                raise KeyError(f"Media file {record.id} not found")
            for name in _FIELDS:
                setattr(row, name, getattr(record, name))
            db.commit()

    def delete(self, file_id: UUID) -> bool:
        with self.session_factory() as db:
            row = db.get(MediaFileModel, file_id)
            if not row:
                return False
            db.delete(row)
            db.commit()
            return True

    def list_for_owner(self, owner_id: str) -> List[MediaFileRecord]:
        with self.session_factory() as db:
            rows = (
                db.query(MediaFileModel)
                .filter(MediaFileModel.owner_id == owner_id)
                .order_by(MediaFileModel.created_at.desc())
                .all()
            )
            return [_to_record(r) for r in rows]
