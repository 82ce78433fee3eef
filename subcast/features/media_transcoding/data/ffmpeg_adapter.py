import json
import logging
from pathlib import Path
from typing import Optional

from subcast.core.config.settings import Settings
from subcast.core.errors import ProbeError, TranscodeError
from subcast.features.temp_files.domain.interfaces import ITempFileManager

from ..domain.interfaces import IMediaTranscoder
from ..domain.models import (
    BURN_BITRATE_BY_RESOLUTION,
    BURN_CRF_BY_QUALITY,
    BURN_HEIGHT_BY_RESOLUTION,
    ConversionResult,
    MediaInfo,
    ThumbnailResult,
    TranscodeProfile,
)
from .process_runner import run_tool

logger = logging.getLogger(__name__)


def _to_int(value, default: Optional[int] = 0) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def escape_filter_path(path: Path) -> str:
    """Escapes a file path for use inside an FFmpeg filter graph argument."""
    return (
        str(path)
        .replace("\\", "/")
        .replace(":", "\\:")
        .replace("'", "'\\''")
    )


class FFmpegTranscoder(IMediaTranscoder):
    """
    Concrete implementation of IMediaTranscoder using ffmpeg/ffprobe subprocesses.
    """

    def __init__(self, temp: ITempFileManager, config: Settings, profile: TranscodeProfile = TranscodeProfile()):
        self.temp = temp
        self.config = config
        self.profile = profile

    # --- Probing ---

    def probe(self, path: Path) -> MediaInfo:
        cmd = [
            self.config.FFPROBE_BINARY,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path)
        ]

        try:
            result = run_tool(cmd, self.config.PROBE_TIMEOUT_SECONDS, self.config.MAX_OUTPUT_BYTES, "ffprobe")
        except TranscodeError as e:
            raise ProbeError(f"Failed to get media info for {Path(path).name}: {e}") from e

        try:
            data = json.loads(result.stdout.decode(errors="replace"))
        except ValueError as e:
            raise ProbeError(f"Unparsable probe output for {Path(path).name}") from e

        if not isinstance(data, dict):
            raise ProbeError(f"Unexpected probe output for {Path(path).name}")

        fmt = data.get("format") or {}
        streams = data.get("streams") or []
        video = next((s for s in streams if s.get("codec_type") == "video"), None)
        audio = next((s for s in streams if s.get("codec_type") == "audio"), None)

        return MediaInfo(
            duration=_to_float(fmt.get("duration")),
            width=_to_int(video.get("width"), None) if video else None,
            height=_to_int(video.get("height"), None) if video else None,
            codec=(video or {}).get("codec_name") or (audio or {}).get("codec_name"),
            bitrate=_to_int(fmt.get("bit_rate")),
            container=fmt.get("format_name") or "unknown",
            size=_to_int(fmt.get("size")),
            has_video=video is not None,
            has_audio=audio is not None,
        )

    def has_video_stream(self, path: Path) -> bool:
        cmd = [
            self.config.FFPROBE_BINARY,
            "-v", "quiet",
            "-select_streams", "v",
            "-show_entries", "stream=codec_type",
            "-of", "csv=p=0",
            str(path)
        ]

        try:
            result = run_tool(cmd, self.config.PROBE_TIMEOUT_SECONDS, self.config.MAX_OUTPUT_BYTES, "ffprobe")
        except TranscodeError as e:
            # Unreadable input is treated as "no video"; the audio step reports the real failure.
            logger.warning(f"Video stream check failed for {path}: {e}")
            return False

        lines = result.stdout.decode(errors="replace").split()
        return "video" in lines

    # --- Conversions ---

    def _convert(self, cmd_tail: list, source: Path, output: Path, action: str,
                 timeout: float, max_output: int) -> None:
        cmd = [self.config.FFMPEG_BINARY, "-hide_banner", "-i", str(source), *cmd_tail, "-y", str(output)]
        try:
            run_tool(cmd, timeout, max_output, action)
            if not output.exists() or output.stat().st_size == 0:
                raise TranscodeError(f"{action} produced no output")
        except Exception:
            # Clean up on failure
            self.temp.release(output)
            raise

    def _result_for(self, output: Path, action: str) -> ConversionResult:
        try:
            info = self.probe(output)
        except ProbeError as e:
            self.temp.release(output)
            raise TranscodeError(f"{action} output is unreadable: {e}") from e

        return ConversionResult(
            output_path=output,
            size_bytes=output.stat().st_size,
            duration_seconds=info.duration
        )

    def to_preview(self, path: Path) -> ConversionResult:
        p = self.profile
        output = self.temp.allocate("mp4", suffix=f"{p.preview_height}p")

        # -vf scale=-2:H keeps aspect ratio with an even width
        # -movflags +faststart moves the index to the front for streaming
        self._convert([
            "-vf", f"scale=-2:{p.preview_height}",
            "-c:v", p.preview_video_codec,
            "-preset", p.preview_preset,
            "-crf", str(p.preview_crf),
            "-c:a", p.preview_audio_codec,
            "-b:a", p.preview_audio_bitrate,
            "-movflags", "+faststart",
        ], path, output, "Preview transcode", self.config.CODEC_TIMEOUT_SECONDS, self.config.MAX_OUTPUT_BYTES)

        return self._result_for(output, "Preview transcode")

    def extract_audio(self, path: Path) -> ConversionResult:
        p = self.profile
        output = self.temp.allocate(p.audio_format)

        self._convert([
            "-vn",
            "-ac", str(p.audio_channels),
            "-ar", str(p.audio_sample_rate_hz),
            "-b:a", p.audio_bitrate,
            "-f", p.audio_format,
        ], path, output, "Audio extraction", self.config.CODEC_TIMEOUT_SECONDS, self.config.MAX_OUTPUT_BYTES)

        return self._result_for(output, "Audio extraction")

    def extract_thumbnail(self, path: Path, percent: float = 25.0) -> ThumbnailResult:
        p = self.profile
        info = self.probe(path)
        position = max(0.0, (info.duration or 0.0) * percent / 100)

        output = self.temp.allocate("jpg", suffix="thumb")
        cmd = [
            self.config.FFMPEG_BINARY,
            "-hide_banner",
            "-ss", str(position),
            "-i", str(path),
            "-vframes", "1",
            "-vf", f"scale='min({p.thumbnail_max_width},iw)':-1",
            "-q:v", str(p.thumbnail_jpeg_quality),
            "-y", str(output)
        ]

        try:
            run_tool(cmd, self.config.CODEC_TIMEOUT_SECONDS, self.config.MAX_THUMBNAIL_OUTPUT_BYTES, "Thumbnail extraction")
            if not output.exists():
                raise TranscodeError("Thumbnail extraction produced no output")
        except Exception:
            self.temp.release(output)
            raise

        return ThumbnailResult(output_path=output, size_bytes=output.stat().st_size)

    def burn_subtitles(self, path: Path, subtitle_path: Path,
                       resolution: str = "1080p", quality: str = "high") -> ConversionResult:
        if resolution not in BURN_BITRATE_BY_RESOLUTION:
            raise TranscodeError(f"Unsupported burn-in resolution: {resolution}")
        if quality not in BURN_CRF_BY_QUALITY:
            raise TranscodeError(f"Unsupported burn-in quality: {quality}")

        subtitles_filter = f"subtitles='{escape_filter_path(subtitle_path)}'"
        height = BURN_HEIGHT_BY_RESOLUTION[resolution]
        vf = f"scale=-2:{height},{subtitles_filter}" if height else subtitles_filter
        bitrate = BURN_BITRATE_BY_RESOLUTION[resolution]

        output = self.temp.allocate("mp4", suffix="burned")
        logger.info(f"Burning subtitles at {resolution} ({quality}) into {Path(path).name}")

        self._convert([
            "-vf", vf,
            "-c:v", "libx264",
            "-preset", "slow",
            "-crf", str(BURN_CRF_BY_QUALITY[quality]),
            "-maxrate", bitrate,
            "-bufsize", bitrate,
            "-profile:v", "high",
            "-level", "4.1",
            "-pix_fmt", "yuv420p",
            "-c:a", "aac",
            "-b:a", "256k",
            "-movflags", "+faststart",
        ], path, output, "Subtitle burn-in", self.config.BURN_TIMEOUT_SECONDS, self.config.MAX_BURN_OUTPUT_BYTES)

        return self._result_for(output, "Subtitle burn-in")
