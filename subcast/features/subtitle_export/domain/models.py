# File: subcast/features/subtitle_export/domain/models.py
from dataclasses import dataclass
from typing import Optional

from subcast.core.common.enums import SubtitleFormat
from subcast.core.errors import ValidationError

# ASS colours are &HAABBGGRR with alpha 00 = opaque
DEFAULT_PRIMARY_COLOUR = "&H00FFFFFF"
DEFAULT_BACK_COLOUR = "&H80000000"
TRANSPARENT_COLOUR = "&HFF000000"

PLAY_RES_X = 1920
PLAY_RES_Y = 1080
MARGIN_V = 50

# User-facing vertical padding range and the share of font size it maps to
PADDING_RANGE = (2, 8)
PADDING_PERCENT_RANGE = (0.10, 0.25)
MIN_BOX_PADDING_PX = 6

MIME_TYPES = {
    SubtitleFormat.SRT: "application/x-subrip",
    SubtitleFormat.VTT: "text/vtt",
    SubtitleFormat.ASS: "text/x-ssa",
    SubtitleFormat.TXT: "text/plain",
    SubtitleFormat.JSON: "application/json",
}


@dataclass(frozen=True)
class SubtitleStyle:
    """
    Render options for the styled (ASS) output.
    Colours are "#RRGGBB"; opacity is 0-100 with 100 fully opaque.
    """
    font_name: str = "Arial"
    font_size: int = 48
    font_color: Optional[str] = None
    show_background: bool = True
    background_color: Optional[str] = None
    background_opacity: int = 80
    padding_y: int = 5

    def __post_init__(self):
        if self.font_size <= 0:
            raise ValidationError(f"Font size must be positive: {self.font_size}")
        if not 0 <= self.background_opacity <= 100:
            raise ValidationError(f"Opacity must be within 0-100: {self.background_opacity}")
        low, high = PADDING_RANGE
        if not low <= self.padding_y <= high:
            raise ValidationError(f"padding_y must be within {low}-{high}: {self.padding_y}")

    @property
    def border_style(self) -> int:
        # 3 = opaque box, 1 = outline + drop shadow
        return 3 if self.show_background else 1
