# File: subcast/features/subtitle_export/service/styling.py
import logging
import math
import re
from typing import Tuple

from subcast.core.errors import ValidationError
from ..domain.models import (
    DEFAULT_BACK_COLOUR, DEFAULT_PRIMARY_COLOUR, MARGIN_V, MIN_BOX_PADDING_PX,
    PADDING_PERCENT_RANGE, PADDING_RANGE, TRANSPARENT_COLOUR, SubtitleStyle
)

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#?([0-9A-Fa-f]{6})$")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def hex_to_ass(hex_color: str, opacity: int = 100) -> str:
    """
    "#RRGGBB" + opacity (100 = opaque) -> "&HAABBGGRR" (alpha 00 = opaque, FF = transparent).

    >>> hex_to_ass("#FFFFFF", 80)
    '&H33FFFFFF'
    """
    match = _HEX_COLOR.match(hex_color.strip())
    if not match:
        raise ValidationError(f"Invalid hex color: {hex_color!r}")
    if not 0 <= opacity <= 100:
        raise ValidationError(f"Opacity must be within 0-100: {opacity}")

    hex_value = match.group(1).upper()
    r, g, b = hex_value[0:2], hex_value[2:4], hex_value[4:6]
    alpha = _round_half_up((100 - opacity) * 2.55)
    return f"&H{alpha:02X}{b}{g}{r}"


def box_padding(font_size: int, padding_y: int) -> int:
    """
    Maps the user padding (2-8) linearly onto 10-25% of the font size,
    floored at MIN_BOX_PADDING_PX.
    """
    low, high = PADDING_RANGE
    min_pct, max_pct = PADDING_PERCENT_RANGE
    percent = min_pct + ((padding_y - low) / (high - low)) * (max_pct - min_pct)
    return max(_round_half_up(font_size * percent), MIN_BOX_PADDING_PX)


def resolve_colours(style: SubtitleStyle) -> Tuple[str, str, str]:
    """
    Returns (primary, outline, back). With an opaque box (BorderStyle 3) most
    renderers paint the box with OutlineColour, so both get the background.
    """
    primary = DEFAULT_PRIMARY_COLOUR
    if style.font_color:
        primary = hex_to_ass(style.font_color, 100)

    if not style.show_background:
        outline = back = TRANSPARENT_COLOUR
    elif style.background_color:
        outline = back = hex_to_ass(style.background_color, style.background_opacity)
    else:
        outline = back = DEFAULT_BACK_COLOUR

    return primary, outline, back


def outline_and_shadow(style: SubtitleStyle) -> Tuple[int, int]:
    if style.border_style == 3:
        return box_padding(style.font_size, style.padding_y), 0
    return 2, 2


def style_line(style: SubtitleStyle) -> str:
    primary, outline_colour, back = resolve_colours(style)
    outline, shadow = outline_and_shadow(style)

    logger.debug(
        f"ASS style: BorderStyle={style.border_style}, Outline={outline}, Shadow={shadow}, "
        f"Primary={primary}, OutlineColour={outline_colour}, Back={back}"
    )

    return (
        f"Style: Default,{style.font_name},{style.font_size},{primary},&H000000FF,"
        f"{outline_colour},{back},0,0,0,0,100,100,0,0,{style.border_style},{outline},{shadow},"
        f"2,10,10,{MARGIN_V},1"
    )
