import math

import pytest

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import RawSegment
from subcast.features.transcription.data.provider_adapters import detect_shape, normalize_provider_response
from subcast.features.transcription.domain.models import ResponseShape, TranscriptionResult

VERBOSE = {
    "text": " Hello world ",
    "language": "en",
    "duration": 3.0,
    "segments": [
        {"id": 0, "start": 0, "end": 1.5, "text": " Hello", "avg_logprob": -0.1},
        {"id": 1, "start": 1.5, "end": 3.0, "text": "world", "avg_logprob": 0},
    ],
}

NORMALIZED = {
    "segments": [
        {"startTime": 0.0, "endTime": 2.0, "text": "Hi there", "confidence": 0.9},
        {"startTime": 2.0, "endTime": 4.5, "text": " again ", "confidence": None},
    ],
}


def test_detect_shape():
    assert detect_shape(VERBOSE) == ResponseShape.VERBOSE_JSON
    assert detect_shape(NORMALIZED) == ResponseShape.NORMALIZED
    assert detect_shape({}) == ResponseShape.VERBOSE_JSON


def test_verbose_json():
    result = normalize_provider_response(VERBOSE, "whisper")

    assert result.provider == "whisper"
    assert result.text == "Hello world"
    assert result.language == "en"
    assert result.duration == 3.0
    assert result.segments[0] == RawSegment(start=0.0, end=1.5, text="Hello", confidence=math.exp(-0.1))
    # A zero log-probability is treated as "not reported"
    assert result.segments[1].confidence is None


def test_normalized_shape_with_fallbacks():
    result = normalize_provider_response(NORMALIZED, "custom")

    assert result.text == "Hi there again"
    assert result.duration == 4.5
    assert result.language is None
    assert [s.text for s in result.segments] == ["Hi there", "again"]
    assert result.segments[0].confidence == 0.9


def test_explicit_shape_wins():
    with pytest.raises(ValidationError):
        # Verbose segments have no startTime
        normalize_provider_response(VERBOSE, "whisper", shape=ResponseShape.NORMALIZED)


def test_empty_response():
    result = normalize_provider_response({"text": ""}, "whisper")

    assert result.segments == []
    assert result.text == ""
    assert result.duration is None


@pytest.mark.parametrize("segment", [
    {"start": "0", "end": 1.0, "text": "x"},
    {"start": 0.0, "text": "x"},
    {"start": True, "end": 1.0, "text": "x"},
])
def test_non_numeric_timing_is_rejected(segment):
    with pytest.raises(ValidationError):
        normalize_provider_response({"segments": [segment]}, "whisper")


def test_inverted_timing_is_rejected():
    with pytest.raises(ValidationError):
        normalize_provider_response({"segments": [{"start": 2.0, "end": 1.0, "text": "x"}]}, "whisper")


def test_non_object_payload():
    with pytest.raises(ValidationError):
        normalize_provider_response(["not", "a", "dict"], "whisper")


def test_average_confidence():
    result = TranscriptionResult(text="a b", provider="p", segments=[
        RawSegment(0.0, 1.0, "a", 0.8),
        RawSegment(1.0, 2.0, "b", 0.6),
        RawSegment(2.0, 3.0, "c"),
    ])
    assert result.average_confidence == pytest.approx(0.7)
    assert TranscriptionResult(text="", provider="p").average_confidence is None
