# File: subcast/features/media_transcoding/service/api.py
import logging
from pathlib import Path
from typing import Optional, Sequence

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import SubtitleSegment
from subcast.features.subtitle_export.domain.models import SubtitleStyle
from subcast.features.subtitle_export.service.writers import generate_ass
from subcast.features.temp_files.domain.interfaces import ITempFileManager
from subcast.features.temp_files.service.api import TempScope

from ..domain.interfaces import IMediaTranscoder
from ..domain.models import BURN_BITRATE_BY_RESOLUTION, BURN_CRF_BY_QUALITY, ConversionResult

logger = logging.getLogger(__name__)


def render_burned_video(transcoder: IMediaTranscoder, temp: ITempFileManager, source_path: Path,
                        segments: Sequence[SubtitleSegment], style: Optional[SubtitleStyle] = None,
                        resolution: str = "1080p", quality: str = "high",
                        title: Optional[str] = None) -> ConversionResult:
    """
    Public API: renders the cues as a styled script and composites them into the video.

    The intermediate script is always removed; the burned video is a scratch
    file owned by the caller, who must release it once it has been stored.
    """
    if resolution not in BURN_BITRATE_BY_RESOLUTION:
        raise ValidationError(f"Unsupported resolution: {resolution}")
    if quality not in BURN_CRF_BY_QUALITY:
        raise ValidationError(f"Unsupported quality: {quality}")
    if not segments:
        raise ValidationError("No subtitle segments to burn")

    with TempScope(temp) as scope:
        script_path = scope.allocate("ass", suffix="subs")
        script_path.write_text(generate_ass(segments, title=title, style=style), encoding="utf-8")

        logger.info(f"Burning {len(segments)} cues into {Path(source_path).name} at {resolution}")
        return transcoder.burn_subtitles(source_path, script_path, resolution=resolution, quality=quality)
