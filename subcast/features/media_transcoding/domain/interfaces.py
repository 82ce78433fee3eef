from abc import ABC, abstractmethod
from pathlib import Path
from .models import MediaInfo, ConversionResult, ThumbnailResult


class IMediaTranscoder(ABC):
    """
    Contract for the external codec tool.
    Abstracts away FFmpeg from the processing pipeline.
    Every output path is allocated in the scratch directory; the caller releases it.
    """

    @abstractmethod
    def probe(self, path: Path) -> MediaInfo:
        """
        Raises:
            ProbeError: tool exited non-zero or its output could not be parsed.
        """
        pass

    @abstractmethod
    def has_video_stream(self, path: Path) -> bool:
        pass

    @abstractmethod
    def to_preview(self, path: Path) -> ConversionResult:
        """
        480p H.264/AAC preview with streaming-friendly metadata placement.

        Raises:
            TranscodeError: partial output is removed before raising.
        """
        pass

    @abstractmethod
    def extract_audio(self, path: Path) -> ConversionResult:
        """
        Mono 16kHz MP3 for speech recognition.

        Raises:
            TranscodeError
        """
        pass

    @abstractmethod
    def extract_thumbnail(self, path: Path, percent: float = 25.0) -> ThumbnailResult:
        """
        Single JPEG frame taken at `percent` of the duration.

        Raises:
            ProbeError, TranscodeError
        """
        pass

    @abstractmethod
    def burn_subtitles(self, path: Path, subtitle_path: Path,
                       resolution: str = "1080p", quality: str = "high") -> ConversionResult:
        """
        Renders the subtitle script permanently into the video frames.
        """
        pass
