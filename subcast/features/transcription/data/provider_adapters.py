# File: subcast/features/transcription/data/provider_adapters.py
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import RawSegment
from ..domain.models import ResponseShape, TranscriptionResult

logger = logging.getLogger(__name__)


def detect_shape(payload: Mapping[str, Any]) -> ResponseShape:
    segments = payload.get("segments") or []
    if segments and "startTime" in segments[0]:
        return ResponseShape.NORMALIZED
    return ResponseShape.VERBOSE_JSON


def _number(segment: Mapping[str, Any], key: str, position: int) -> float:
    value = segment.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"Segment {position} has no numeric '{key}': {value!r}")
    return float(value)


def _verbose_segments(raw: List[Dict[str, Any]]) -> List[RawSegment]:
    segments = []
    for i, seg in enumerate(raw):
        # avg_logprob is a log-probability; exp() maps it back to 0..1
        logprob = seg.get("avg_logprob")
        segments.append(RawSegment(
            start=_number(seg, "start", i),
            end=_number(seg, "end", i),
            text=(seg.get("text") or "").strip(),
            confidence=math.exp(logprob) if logprob else None,
        ))
    return segments


def _normalized_segments(raw: List[Dict[str, Any]]) -> List[RawSegment]:
    return [
        RawSegment(
            start=_number(seg, "startTime", i),
            end=_number(seg, "endTime", i),
            text=(seg.get("text") or "").strip(),
            confidence=seg.get("confidence"),
        )
        for i, seg in enumerate(raw)
    ]


def normalize_provider_response(payload: Mapping[str, Any], provider: str,
                                shape: Optional[ResponseShape] = None) -> TranscriptionResult:
    """
    Converts one provider response into a TranscriptionResult.
    Missing text is rebuilt from the segments and a missing duration is taken
    from the last segment's end.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(f"{provider} response is not an object")

    shape = shape or detect_shape(payload)
    raw = payload.get("segments") or []

    if shape == ResponseShape.NORMALIZED:
        segments = _normalized_segments(raw)
    else:
        segments = _verbose_segments(raw)

    duration = payload.get("duration") or (segments[-1].end if segments else None)
    text = payload.get("text") or " ".join(s.text for s in segments)

    logger.debug(f"Normalised {provider} response ({shape.value}): {len(segments)} segments")

    return TranscriptionResult(
        text=text.strip(),
        provider=provider,
        segments=segments,
        language=payload.get("language"),
        duration=float(duration) if duration is not None else None,
    )
