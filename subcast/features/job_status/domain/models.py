# File: subcast/features/job_status/domain/models.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, Optional
from uuid import UUID

from subcast.core.common.enums import FileStatus, MediaType
from subcast.core.errors import ValidationError


def utc_now():
    return datetime.now(timezone.utc)


class Milestone(IntEnum):
    """
    Coarse progress checkpoints of one processing job (percent).
    """
    UPLOADED = 10
    PROCESSING_STARTED = 20
    TRANSCODED = 50
    AUDIO_UPLOADED = 70
    ARTIFACTS_UPLOADED = 90
    FINALIZED = 100


class EventKind(str, Enum):
    PROGRESS = "progress"
    READY = "ready"
    ERROR = "error"
    RESTART = "restart"


# Fields a READY event may set on the record
DERIVED_FIELDS = ("preview_url", "thumbnail_url", "audio_url", "storage_url", "duration_seconds")


@dataclass(frozen=True)
class ProgressEvent:
    """
    One state change written by a job and applied when the status is read.
    """
    file_id: UUID
    kind: EventKind
    progress: int = 0
    error: Optional[str] = None
    updates: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StatusSnapshot:
    """
    Read-only view returned to pollers.
    """
    file_id: UUID
    status: FileStatus
    progress: int
    error: Optional[str] = None
    original_url: Optional[str] = None
    preview_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    audio_url: Optional[str] = None
    storage_url: Optional[str] = None
    duration_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": str(self.file_id),
            "status": self.status.value,
            "progress": self.progress,
            "previewUrl": self.preview_url,
            "thumbnailUrl": self.thumbnail_url,
            "audioUrl": self.audio_url,
            "storageUrl": self.storage_url,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class MediaFileRecord:
    """
    One uploaded source and its derived artifacts.
    Mutated only through apply(); status moves uploading -> processing -> ready|error.
    """
    owner_id: str
    filename: str
    mime_type: str
    media_type: MediaType
    size_bytes: int
    original_url: Optional[str] = None
    id: UUID = field(default_factory=uuid.uuid4)
    duration_seconds: Optional[float] = None
    preview_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    audio_url: Optional[str] = None
    storage_url: Optional[str] = None
    status: FileStatus = FileStatus.UPLOADING
    progress: int = 0
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def apply(self, event: ProgressEvent) -> None:
        if event.kind == EventKind.RESTART:
            self._restart()
        elif self.status.is_terminal:
            raise ValidationError(f"File {self.id} is already {self.status.value}; cannot apply {event.kind.value}")
        elif event.kind == EventKind.PROGRESS:
            self._advance(event.progress)
        elif event.kind == EventKind.READY:
            self._finish(event.updates)
        elif event.kind == EventKind.ERROR:
            self._fail(event.error or "Processing failed")

        self.updated_at = utc_now()

    def _advance(self, progress: int) -> None:
        if not 0 <= progress <= 100:
            raise ValidationError(f"Progress out of range: {progress}")
        self.status = FileStatus.PROCESSING
        # Monotonic while processing: stale or out-of-order checkpoints never move it back
        self.progress = max(self.progress, progress)

    def _finish(self, updates: Dict[str, Any]) -> None:
        unknown = set(updates) - set(DERIVED_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown fields for ready transition: {sorted(unknown)}")
        for name, value in updates.items():
            setattr(self, name, value)
        self.status = FileStatus.READY
        self.progress = int(Milestone.FINALIZED)
        self.error_message = None

    def _fail(self, message: str) -> None:
        self.status = FileStatus.ERROR
        self.error_message = message
        self.preview_url = None
        self.thumbnail_url = None
        self.audio_url = None
        self.storage_url = None

    def _restart(self) -> None:
        self.status = FileStatus.PROCESSING
        self.progress = 0
        self.error_message = None
        self.preview_url = None
        self.thumbnail_url = None
        self.audio_url = None
        self.storage_url = None

    def snapshot(self) -> StatusSnapshot:
        return StatusSnapshot(
            file_id=self.id,
            status=self.status,
            progress=self.progress,
            error=self.error_message,
            original_url=self.original_url,
            preview_url=self.preview_url,
            thumbnail_url=self.thumbnail_url,
            audio_url=self.audio_url,
            storage_url=self.storage_url,
            duration_seconds=self.duration_seconds,
        )
