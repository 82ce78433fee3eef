# File: subcast/features/subtitle_export/service/parsers.py
import re
from typing import List

import srt

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import SubtitleSegment

# HH:MM:SS,mmm (SRT), [HH:]MM:SS.mmm (VTT), H:MM:SS.cc (ASS)
_TIMESTAMP = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{2})[,.](\d{2,3})$")


def parse_timestamp(value: str) -> float:
    match = _TIMESTAMP.match(value.strip())
    if not match:
        raise ValidationError(f"Unrecognised timestamp: {value!r}")

    hours, minutes, seconds, fraction = match.groups()
    return (
        int(hours or 0) * 3600
        + int(minutes) * 60
        + int(seconds)
        + int(fraction) / (10 ** len(fraction))
    )


def parse_srt(content: str) -> List[SubtitleSegment]:
    """
    Reads SRT back into cues (0-based index, no confidence).
    """
    try:
        subtitles = list(srt.parse(content))
    except srt.SRTParseError as e:
        raise ValidationError(f"Malformed SRT: {e}") from e

    return [
        SubtitleSegment(
            index=i,
            start=sub.start.total_seconds(),
            end=sub.end.total_seconds(),
            text=sub.content,
        )
        for i, sub in enumerate(subtitles)
    ]
