# File: subcast/core/common/enums.py

from enum import Enum, unique

@unique
class MediaType(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"

@unique
class FileStatus(str, Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.READY, FileStatus.ERROR)

@unique
class ArtifactKind(str, Enum):
    ORIGINAL = "original"
    PREVIEW = "preview"
    AUDIO = "audio"
    THUMBNAIL = "thumbnail"
    SUBTITLE = "subtitle"

@unique
class SubtitleFormat(str, Enum):
    SRT = "srt"
    VTT = "vtt"
    ASS = "ass"
    TXT = "txt"
    JSON = "json"
