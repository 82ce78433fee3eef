# File: subcast/features/media_transcoding/domain/models.py
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class MediaInfo:
    """
    Structured probe output for one media file.
    """
    duration: float
    bitrate: int
    container: str
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    codec: Optional[str] = None
    has_video: bool = False
    has_audio: bool = False


@dataclass(frozen=True)
class ConversionResult:
    output_path: Path
    size_bytes: int
    duration_seconds: float


@dataclass(frozen=True)
class ThumbnailResult:
    output_path: Path
    size_bytes: int


@dataclass(frozen=True)
class TranscodeProfile:
    """
    Fixed encoding parameters.
    Preview targets fast streaming, audio targets speech recognition input.
    """
    # 480p web preview
    preview_height: int = 480
    preview_video_codec: str = "libx264"
    preview_preset: str = "fast"
    preview_crf: int = 28
    preview_audio_codec: str = "aac"
    preview_audio_bitrate: str = "128k"

    # Transcription audio (mono, 16kHz, low bitrate MP3)
    audio_channels: int = 1
    audio_sample_rate_hz: int = 16000
    audio_bitrate: str = "64k"
    audio_format: str = "mp3"

    # Thumbnail
    thumbnail_max_width: int = 720
    thumbnail_jpeg_quality: int = 2
    thumbnail_position_percent: float = 25.0


# Burn-in rendering. CRF: lower = better quality, larger file.
BURN_CRF_BY_QUALITY: Dict[str, int] = {
    "high": 16,
    "medium": 20,
    "low": 26,
}

# Rate caps per output resolution
BURN_BITRATE_BY_RESOLUTION: Dict[str, str] = {
    "720p": "8M",
    "1080p": "12M",
    "4k": "68M",
}

# Target height, None keeps the source resolution
BURN_HEIGHT_BY_RESOLUTION: Dict[str, Optional[int]] = {
    "720p": 720,
    "1080p": 1080,
    "4k": None,
}
