"""Hex color conversion and linear mixing helpers."""
from __future__ import annotations

import math
import re
from typing import Optional

from svg_flattener.model.color_model import RGBColor

_SHORT_HEX = re.compile(r"#([0-9a-fA-F]{3})")
_LONG_HEX = re.compile(r"#([0-9a-fA-F]{6})")


def hex_to_rgb(value: object) -> Optional[RGBColor]:
    """Parse ``#rgb`` / ``#rrggbb`` (leading ``#`` optional) into an RGBColor.

    Returns ``None`` for anything else; callers treat that as "cannot derive".
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text.startswith("#"):
        text = "#" + text

    match = _SHORT_HEX.fullmatch(text)
    if match:
        digits = match.group(1)
        return RGBColor(*(int(nibble * 2, 16) for nibble in digits))

    match = _LONG_HEX.fullmatch(text)
    if match is None:
        return None
    packed = int(match.group(1), 16)
    return RGBColor((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format channels as lowercase ``#rrggbb``; values are not clamped."""
    return "#" + "".join(f"{channel:02x}" for channel in (r, g, b))


def mix_colors(foreground: str, background: str, ratio: float) -> str:
    """Blend ``foreground`` over ``background``; ratio 0 is bg, ratio 1 is fg.

    If either color is not a hex value the foreground is returned unchanged.
    """
    fg = hex_to_rgb(foreground)
    bg = hex_to_rgb(background)
    if fg is None or bg is None:
        return foreground

    mixed = [_round_half_up(b + (f - b) * ratio) for f, b in zip(fg.as_tuple(), bg.as_tuple())]
    return rgb_to_hex(*mixed)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
