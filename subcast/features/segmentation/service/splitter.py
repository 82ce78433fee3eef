# File: subcast/features/segmentation/service/splitter.py
import logging
from typing import Iterable, List

from ..domain.models import FALLBACK_CHARS_PER_SECOND, RawSegment, SplitOptions, SubtitleSegment

logger = logging.getLogger(__name__)

SENTENCE_ENDS = (". ", "! ", "? ", ".\n", "!\n", "?\n")
CLAUSE_BREAKS = (", ", "; ", ": ", " - ", " – ")
BALANCE_PUNCTUATION = ",;:.!?"

# Minimum position (fraction of the chunk budget) for each break type
SENTENCE_MIN_RATIO = 0.3
CLAUSE_MIN_RATIO = 0.4
WORD_MIN_RATIO = 0.5


def enforce_max_length(text: str, limit: int) -> str:
    """
    Emergency truncation: guarantees len(result) <= limit.
    Cuts at the last space inside the limit when there is one.
    """
    if len(text) <= limit:
        return text
    cut = text[:limit]
    if text[limit] != " ":
        space = cut.rfind(" ")
        if space > 0:
            cut = cut[:space]
    return cut.rstrip()


def find_best_split_point(text: str, max_chars: int) -> int:
    """
    Returns the index to cut at within the first `max_chars` characters, or -1.
    Priority: sentence end > clause break > word boundary > any space.
    """
    window = text[:max_chars]

    for end in SENTENCE_ENDS:
        index = window.rfind(end)
        if index > max_chars * SENTENCE_MIN_RATIO:
            # Keep the punctuation with the left chunk
            return index + len(end) - 1

    for br in CLAUSE_BREAKS:
        index = window.rfind(br)
        if index > max_chars * CLAUSE_MIN_RATIO:
            return index + len(br) - 1

    last_space = window.rfind(" ")
    if last_space > max_chars * WORD_MIN_RATIO:
        return last_space

    if last_space > 0:
        return last_space

    return -1


def find_balanced_split_point(text: str, max_chars: int) -> int:
    """
    When the rest fits in two chunks, prefer a cut near the middle so the
    trailing chunk is not a short fragment. Falls back to find_best_split_point.
    """
    length = len(text)
    if length <= max_chars * 2:
        target = length // 2
        search_range = min(20, length // 4)

        best_split = -1
        best_distance = float("inf")

        for i in range(max(0, target - search_range), min(length - 1, target + search_range) + 1):
            if text[i] != " ":
                continue
            # Both halves must still respect the chunk budget
            if i > max_chars or length - i - 1 > max_chars:
                continue

            distance = abs(i - target)
            if i > 0 and text[i - 1] in BALANCE_PUNCTUATION:
                distance -= 5

            if distance < best_distance:
                best_distance = distance
                best_split = i

        if best_split > 0:
            return best_split

    return find_best_split_point(text, max_chars)


def split_text_into_chunks(text: str, max_chars: int) -> List[str]:
    chunks = []
    remaining = text.strip()

    while len(remaining) > max_chars:
        split_index = find_balanced_split_point(remaining, max_chars)
        if split_index <= 0:
            # No break point at all: hard cut
            split_index = max_chars

        chunks.append(remaining[:split_index].strip())
        remaining = remaining[split_index:].strip()

    if remaining:
        chunks.append(remaining)

    return chunks


def split_segment(segment: RawSegment, options: SplitOptions = SplitOptions(), index: int = 0) -> List[SubtitleSegment]:
    """
    Splits one recognized span into subtitle-sized cues.

    Timing is proportional to chunk length at the span's own reading rate,
    floored at `min_duration`, chained end-to-start, and the last cue always
    ends exactly at the span's end. Once the floors would reach the end of
    the span, the remaining time is divided by chunk length, so every cue of
    a non-empty span keeps end > start.
    """
    text = segment.text.strip()
    max_chars = options.max_chars

    if len(text) <= max_chars:
        return [SubtitleSegment(index=index, start=segment.start, end=segment.end,
                                text=text, confidence=segment.confidence)]

    duration = segment.duration
    chars_per_second = len(text) / duration if duration > 0 else FALLBACK_CHARS_PER_SECOND

    chunks = [enforce_max_length(c, max_chars) for c in split_text_into_chunks(text, max_chars)]

    result = []
    current = segment.start
    for i, chunk in enumerate(chunks):
        chunk_duration = max(options.min_duration, len(chunk) / chars_per_second)
        if i == len(chunks) - 1:
            end = segment.end
        elif current + chunk_duration < segment.end:
            end = current + chunk_duration
        else:
            # The floors ran out of span: what is left is shared by length
            remaining_chars = sum(len(c) for c in chunks[i:])
            end = current + (segment.end - current) * len(chunk) / remaining_chars

        result.append(SubtitleSegment(
            index=index + i,
            start=current,
            end=end,
            text=chunk,
            confidence=segment.confidence
        ))
        current = end

    return result


def split_long_segments(segments: Iterable[RawSegment], options: SplitOptions = SplitOptions()) -> List[SubtitleSegment]:
    """
    Splits every segment and renumbers the whole batch sequentially from 0.
    """
    result: List[SubtitleSegment] = []
    count_in = 0

    for segment in segments:
        count_in += 1
        result.extend(split_segment(segment, options, index=len(result)))

    logger.debug(f"Split {count_in} segments into {len(result)} cues")
    return result
