# File: subcast/features/transcription/service/translation.py
from typing import List, Sequence
from uuid import UUID

from ..domain.models import StoredSegment, TranslatedSegment, TranslationItem

DEFAULT_BATCH_SIZE = 25
MAX_CHARS_PER_BATCH = 4000


def translation_items(segments: Sequence[StoredSegment]) -> List[TranslationItem]:
    return [TranslationItem(index=i, text=seg.text) for i, seg in enumerate(segments)]


def create_translation_batches(items: Sequence[TranslationItem], batch_size: int = DEFAULT_BATCH_SIZE,
                               max_chars_per_batch: int = MAX_CHARS_PER_BATCH) -> List[List[TranslationItem]]:
    """
    Groups items for the translation provider. A batch closes when it holds
    `batch_size` items or the next item would push it past `max_chars_per_batch`.
    A single oversized item still gets a batch of its own.
    """
    batches: List[List[TranslationItem]] = []
    current: List[TranslationItem] = []
    current_chars = 0

    for item in items:
        if len(current) >= batch_size or current_chars + len(item.text) > max_chars_per_batch:
            if current:
                batches.append(current)
            current = []
            current_chars = 0

        current.append(item)
        current_chars += len(item.text)

    if current:
        batches.append(current)

    return batches


def build_translated_segments(transcription_id: UUID, originals: Sequence[StoredSegment],
                              results: Sequence[TranslationItem], target_language: str) -> List[TranslatedSegment]:
    # Indices the provider skipped (or returned empty) keep the original text
    by_index = {r.index: r.text for r in results}

    return [
        TranslatedSegment(
            transcription_id=transcription_id,
            original_segment_id=original.id,
            segment_index=i,
            target_language=target_language,
            translated_text=by_index.get(i) or original.text,
            start=original.start,
            end=original.end,
        )
        for i, original in enumerate(originals)
    ]
