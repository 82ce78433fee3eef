import pytest

from subcast.core.errors import ValidationError
from subcast.features.segmentation.domain.models import SubtitleSegment
from subcast.features.subtitle_export.service.parsers import parse_srt, parse_timestamp
from subcast.features.subtitle_export.service.writers import generate_srt


@pytest.mark.parametrize("value, expected", [
    ("00:01:02,500", 62.5),
    ("00:01:02.500", 62.5),
    ("01:02.50", 62.5),
    ("1:02:03.46", 3723.46),
    (" 10:00:00,001 ", 36000.001),
])
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == pytest.approx(expected)


@pytest.mark.parametrize("value", ["abc", "1:2", "00:00:00", "00:00:00,1"])
def test_parse_timestamp_rejects_garbage(value):
    with pytest.raises(ValidationError):
        parse_timestamp(value)


def test_srt_reads_back_what_was_written():
    cues = [
        SubtitleSegment(index=0, start=0.0, end=1.2345, text="First line"),
        SubtitleSegment(index=1, start=1.2345, end=4.0, text="Second\nline"),
        SubtitleSegment(index=2, start=3700.5, end=3702.0, text="Much later"),
    ]

    parsed = parse_srt(generate_srt(cues))

    assert [c.index for c in parsed] == [0, 1, 2]
    assert [c.text for c in parsed] == ["First line", "Second\nline", "Much later"]
    for original, back in zip(cues, parsed):
        assert back.start == pytest.approx(original.start, abs=0.001)
        assert back.end == pytest.approx(original.end, abs=0.001)
        assert back.confidence is None


def test_parse_srt_rejects_malformed_input():
    with pytest.raises(ValidationError):
        parse_srt("this is not a subtitle file")
