# File: subcast/features/subtitle_export/service/writers.py
import json
from typing import Optional, Sequence, Tuple

from subcast.features.segmentation.domain.models import SubtitleSegment
from ..domain.models import PLAY_RES_X, PLAY_RES_Y, SubtitleStyle
from .styling import style_line

# Typographic characters that limited subtitle fonts tend not to carry
_ASCII_FALLBACKS = {
    **{chr(c): "-" for c in range(0x2010, 0x2016)},
    "\u2212": "-", "\ufe58": "-", "\ufe63": "-", "\uff0d": "-",
    "\u2018": "'", "\u2019": "'", "\u201a": "'", "\u201b": "'",
    "\u201c": '"', "\u201d": '"', "\u201e": '"', "\u201f": '"',
    "\u00a0": " ", **{chr(c): " " for c in range(0x2000, 0x200c)},
    "\u202f": " ", "\u205f": " ", "\u3000": " ",
    "\u2026": "...",
    "\u2022": "*", "\u2023": "*", "\u2043": "*",
    "\u2192": "->", "\u2190": "<-",
    "\u00d7": "x", "\u00f7": "/",
}
_ASCII_TABLE = str.maketrans(_ASCII_FALLBACKS)


def normalize_text(text: str) -> str:
    return text.translate(_ASCII_TABLE)


def _split_millis(seconds: float) -> Tuple[int, int, int, int]:
    # Round once to whole milliseconds so float noise never floors a value down
    total_ms = int(round(max(seconds, 0.0) * 1000))
    hours, rest = divmod(total_ms, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return hours, minutes, secs, millis


def format_srt_time(seconds: float) -> str:
    h, m, s, ms = _split_millis(seconds)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"


def format_vtt_time(seconds: float) -> str:
    h, m, s, ms = _split_millis(seconds)
    return f"{h:02d}:{m:02d}:{s:02d}.{ms:03d}"


def format_ass_time(seconds: float) -> str:
    total_cs = int(round(max(seconds, 0.0) * 100))
    hours, rest = divmod(total_cs, 360_000)
    minutes, rest = divmod(rest, 6000)
    secs, cs = divmod(rest, 100)
    return f"{hours}:{minutes:02d}:{secs:02d}.{cs:02d}"


def generate_srt(segments: Sequence[SubtitleSegment]) -> str:
    return "\n".join(
        f"{i}\n{format_srt_time(seg.start)} --> {format_srt_time(seg.end)}\n{seg.text.strip()}\n"
        for i, seg in enumerate(segments, start=1)
    )


def generate_vtt(segments: Sequence[SubtitleSegment]) -> str:
    cues = "\n".join(
        f"{i}\n{format_vtt_time(seg.start)} --> {format_vtt_time(seg.end)}\n{seg.text.strip()}\n"
        for i, seg in enumerate(segments, start=1)
    )
    return "WEBVTT\n\n" + cues


def generate_ass(segments: Sequence[SubtitleSegment], title: Optional[str] = None,
                 style: Optional[SubtitleStyle] = None) -> str:
    style = style or SubtitleStyle()

    header = (
        "[Script Info]\n"
        f"Title: {title or 'Subtitles'}\n"
        "ScriptType: v4.00+\n"
        "WrapStyle: 0\n"
        "ScaledBorderAndShadow: yes\n"
        "YCbCr Matrix: TV.709\n"
        f"PlayResX: {PLAY_RES_X}\n"
        f"PlayResY: {PLAY_RES_Y}\n"
        "\n"
        "[V4+ Styles]\n"
        "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, "
        "Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, "
        "Shadow, Alignment, MarginL, MarginR, MarginV, Encoding\n"
        f"{style_line(style)}\n"
        "\n"
        "[Events]\n"
        "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text\n"
    )

    events = []
    for seg in segments:
        # \N is the ASS hard line break
        text = normalize_text(seg.text.strip()).replace("\n", "\\N")
        events.append(f"Dialogue: 0,{format_ass_time(seg.start)},{format_ass_time(seg.end)},Default,,0,0,0,,{text}")

    return header + "\n".join(events) + "\n"


def generate_txt(segments: Sequence[SubtitleSegment], include_timestamps: bool = False) -> str:
    if include_timestamps:
        return "\n".join(f"[{format_vtt_time(seg.start)}] {seg.text.strip()}" for seg in segments)
    return " ".join(seg.text.strip() for seg in segments)


def generate_json(segments: Sequence[SubtitleSegment]) -> str:
    data = [
        {
            "index": i,
            "startTime": seg.start,
            "endTime": seg.end,
            "text": seg.text.strip(),
            "confidence": seg.confidence,
        }
        for i, seg in enumerate(segments, start=1)
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)
