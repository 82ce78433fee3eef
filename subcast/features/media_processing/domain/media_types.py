# File: subcast/features/media_processing/domain/media_types.py
from typing import Optional

from subcast.core.common.enums import MediaType
from subcast.core.errors import ValidationError

AUDIO_MIME_TYPES = (
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/m4a",
    "audio/aiff",
    "audio/ogg",
    "audio/flac",
    "audio/wma",
    "audio/aac",
)

VIDEO_MIME_TYPES = (
    "video/mp4",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-matroska",
    "video/webm",
    "video/x-flv",
    "video/x-ms-wmv",
)

ALLOWED_MIME_TYPES = AUDIO_MIME_TYPES + VIDEO_MIME_TYPES

# 2 GB
MAX_FILE_SIZE_BYTES = 2 * 1024 * 1024 * 1024


def is_audio_type(mime_type: str) -> bool:
    return mime_type in AUDIO_MIME_TYPES


def is_video_type(mime_type: str) -> bool:
    return mime_type in VIDEO_MIME_TYPES


def is_allowed_mime_type(mime_type: str) -> bool:
    return mime_type in ALLOWED_MIME_TYPES


def media_type_for(mime_type: str) -> MediaType:
    return MediaType.VIDEO if is_video_type(mime_type) else MediaType.AUDIO


def validate_upload(mime_type: str, size_bytes: Optional[int] = None,
                    max_size_bytes: int = MAX_FILE_SIZE_BYTES) -> MediaType:
    """
    Rejects unsupported types and oversized files. Returns the media type.
    """
    if not is_allowed_mime_type(mime_type):
        raise ValidationError(f"Unsupported file type: {mime_type}")
    if size_bytes is not None and size_bytes > max_size_bytes:
        raise ValidationError(f"File too large: {size_bytes} bytes (max {max_size_bytes})")
    if size_bytes == 0:
        raise ValidationError("File is empty")
    return media_type_for(mime_type)
