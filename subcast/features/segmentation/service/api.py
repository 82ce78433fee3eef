from dataclasses import replace
from typing import Iterable, List

from ..domain.models import RawSegment, SplitOptions, SubtitleSegment
from .line_balancer import balance_lines
from .splitter import split_long_segments


def build_subtitle_segments(segments: Iterable[RawSegment], options: SplitOptions = SplitOptions()) -> List[SubtitleSegment]:
    """
    Public API: raw recognized spans -> split, renumbered and line-balanced cues.
    """
    return [
        replace(cue, text=balance_lines(cue.text, options.max_chars_per_line))
        for cue in split_long_segments(segments, options)
    ]
