from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import UUID

from subcast.core.common.enums import MediaType


@dataclass(frozen=True)
class ProcessingRequest:
    """
    Everything one background job needs; the source file is consumed (released) by the job.
    """
    file_id: UUID
    source_path: Path
    owner_id: str
    media_type: MediaType

    @property
    def upload_id(self) -> str:
        # The record id doubles as the random per-upload key component
        return str(self.file_id)


@dataclass(frozen=True)
class DerivedArtifacts:
    audio_url: str
    duration_seconds: float
    preview_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @property
    def storage_url(self) -> str:
        # Preview for video, audio for audio-only
        return self.preview_url or self.audio_url

    def as_updates(self) -> dict:
        return {
            "preview_url": self.preview_url,
            "thumbnail_url": self.thumbnail_url,
            "audio_url": self.audio_url,
            "storage_url": self.storage_url,
            "duration_seconds": round(self.duration_seconds),
        }
