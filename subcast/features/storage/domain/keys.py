# File: subcast/features/storage/domain/keys.py
import re

from subcast.core.common.enums import ArtifactKind

# Top-level folders per artifact kind
STORAGE_DIRS = {
    ArtifactKind.ORIGINAL: "upload",
    ArtifactKind.PREVIEW: "video",
    ArtifactKind.THUMBNAIL: "video",
    ArtifactKind.AUDIO: "audio",
    ArtifactKind.SUBTITLE: "subs",
}

_UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")


def _segment(value) -> str:
    return _UNSAFE.sub("_", str(value))


class StorageKeys:
    """
    Deterministic key layout: {kind folder}/{owner}/{upload id}{artifact suffix}
    """

    @staticmethod
    def upload_key(owner_id, upload_id: str, extension: str) -> str:
        return f"{STORAGE_DIRS[ArtifactKind.ORIGINAL]}/{_segment(owner_id)}/{_segment(upload_id)}-original.{_segment(extension)}"

    @staticmethod
    def video_key(owner_id, upload_id: str) -> str:
        return f"{STORAGE_DIRS[ArtifactKind.PREVIEW]}/{_segment(owner_id)}/{_segment(upload_id)}-480p.mp4"

    @staticmethod
    def audio_key(owner_id, upload_id: str) -> str:
        return f"{STORAGE_DIRS[ArtifactKind.AUDIO]}/{_segment(owner_id)}/{_segment(upload_id)}.mp3"

    @staticmethod
    def thumbnail_key(owner_id, upload_id: str) -> str:
        return f"{STORAGE_DIRS[ArtifactKind.THUMBNAIL]}/{_segment(owner_id)}/{_segment(upload_id)}-thumb.jpg"

    @staticmethod
    def subtitle_key(owner_id, upload_id: str, fmt: str) -> str:
        return f"{STORAGE_DIRS[ArtifactKind.SUBTITLE]}/{_segment(owner_id)}/{_segment(upload_id)}.{_segment(fmt)}"
