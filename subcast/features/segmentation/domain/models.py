# File: subcast/features/segmentation/domain/models.py
from dataclasses import dataclass
from typing import Optional

from subcast.core.errors import ValidationError

# Reading rate assumed when a span has no duration to derive one from
FALLBACK_CHARS_PER_SECOND = 15.0


@dataclass(frozen=True)
class RawSegment:
    """
    One recognized-speech span as produced by the ASR provider.
    Zero-length spans are accepted; some providers emit them for short interjections.
    """
    start: float
    end: float
    text: str
    confidence: Optional[float] = None

    def __post_init__(self):
        if self.start < 0:
            raise ValidationError(f"Segment start cannot be negative: {self.start}")
        if self.end < self.start:
            raise ValidationError(f"Segment end ({self.end}) is before its start ({self.start})")

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class SubtitleSegment:
    """
    A display-ready cue. `text` may contain one "\\n" line break.
    """
    index: int
    start: float
    end: float
    text: str
    confidence: Optional[float] = None

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError(f"Cue end ({self.end}) is before its start ({self.start})")

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class SplitOptions:
    max_chars_per_line: int = 42
    max_lines: int = 2
    min_duration: float = 1.0

    def __post_init__(self):
        if self.max_chars_per_line <= 0:
            raise ValidationError(f"max_chars_per_line must be positive: {self.max_chars_per_line}")
        if self.max_lines <= 0:
            raise ValidationError(f"max_lines must be positive: {self.max_lines}")
        if self.min_duration < 0:
            raise ValidationError(f"min_duration cannot be negative: {self.min_duration}")

    @property
    def max_chars(self) -> int:
        return self.max_chars_per_line * self.max_lines
