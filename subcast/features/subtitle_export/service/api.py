# File: subcast/features/subtitle_export/service/api.py
import logging
from typing import Optional, Sequence, Union

from subcast.core.common.enums import SubtitleFormat
from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import SubtitleSegment
from subcast.features.storage.domain.interfaces import IObjectStorage
from subcast.features.storage.domain.keys import StorageKeys
from ..domain.models import MIME_TYPES, SubtitleStyle
from .writers import generate_ass, generate_json, generate_srt, generate_txt, generate_vtt

logger = logging.getLogger(__name__)


def _coerce_format(fmt: Union[str, SubtitleFormat]) -> SubtitleFormat:
    try:
        return SubtitleFormat(fmt)
    except ValueError:
        raise ValidationError(f"Unsupported subtitle format: {fmt}") from None


def generate_subtitles(segments: Sequence[SubtitleSegment], fmt: Union[str, SubtitleFormat],
                       title: Optional[str] = None, include_timestamps: bool = False,
                       style: Optional[SubtitleStyle] = None) -> str:
    fmt = _coerce_format(fmt)

    if fmt == SubtitleFormat.SRT:
        return generate_srt(segments)
    if fmt == SubtitleFormat.VTT:
        return generate_vtt(segments)
    if fmt == SubtitleFormat.ASS:
        return generate_ass(segments, title=title, style=style)
    if fmt == SubtitleFormat.TXT:
        return generate_txt(segments, include_timestamps)
    return generate_json(segments)


def mime_type_for(fmt: Union[str, SubtitleFormat]) -> str:
    return MIME_TYPES[_coerce_format(fmt)]


def extension_for(fmt: Union[str, SubtitleFormat]) -> str:
    return _coerce_format(fmt).value


def export_to_storage(storage: IObjectStorage, owner_id: str, export_id: str,
                      segments: Sequence[SubtitleSegment], fmt: Union[str, SubtitleFormat],
                      **options) -> str:
    """
    Renders the cues and uploads them under the owner's subtitle namespace.
    Returns the public URL.
    """
    fmt = _coerce_format(fmt)
    content = generate_subtitles(segments, fmt, **options)
    key = StorageKeys.subtitle_key(owner_id, export_id, extension_for(fmt))

    url = storage.upload(key, content.encode("utf-8"), mime_type_for(fmt))
    logger.info(f"Exported {len(segments)} cues as {fmt.value} to {key}")
    return url
