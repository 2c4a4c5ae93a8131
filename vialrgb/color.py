"""
VialRGB — color parsing, RGB→HSV conversion, and white-point correction.

All values are 0–255 integers; hue is degrees scaled onto 0–255, which is
how QMK/Vial stores it.
"""

import math
import re
from dataclasses import dataclass

from vialrgb.errors import InvalidInput

_HEX_RE = re.compile(r"[0-9a-fA-F]{6}")


def _round(x):
    """Round half away from zero (non-negative inputs only)."""
    return int(math.floor(x + 0.5))


# ── Hex parsing ──────────────────────────────────────────────────────────
def parse_hex_rgb(text):
    """Parse 'RRGGBB' or '#RRGGBB' into an (r, g, b) tuple."""
    s = text.removeprefix("#")
    if not _HEX_RE.fullmatch(s):
        raise InvalidInput(f"color must be 6 hex characters (0-9, a-f), e.g. ff00ff, got '{text}'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


# ── Color space ──────────────────────────────────────────────────────────
def rgb_to_hsv(r, g, b):
    """Convert 8-bit RGB to 8-bit HSV.

    >>> rgb_to_hsv(255, 0, 0)
    (0, 255, 255)
    >>> rgb_to_hsv(255, 0, 255)
    (213, 255, 255)
    """
    red, green, blue = r / 255.0, g / 255.0, b / 255.0

    mx = max(red, green, blue)
    delta = mx - min(red, green, blue)

    if delta == 0:
        hue = 0.0
    elif mx == red:
        hue = 60.0 * (((green - blue) / delta) % 6.0)
    elif mx == green:
        hue = 60.0 * (((blue - red) / delta) + 2.0)
    else:
        hue = 60.0 * (((red - green) / delta) + 4.0)

    sat = 0.0 if mx == 0 else delta / mx

    return (_round(hue / 360.0 * 255.0), _round(sat * 255.0), _round(mx * 255.0))


# ── White point ──────────────────────────────────────────────────────────
@dataclass(frozen=True)
class WhitePoint:
    """Per-channel gain applied before conversion, to correct LED tint.

    Each channel is 1–255. Zero is rejected, never clamped.
    """

    r: int
    g: int
    b: int

    def __post_init__(self):
        for name, value in zip(("red", "green", "blue"), (self.r, self.g, self.b)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidInput(f"white point {name} must be an integer")
            if not 1 <= value <= 255:
                raise InvalidInput("white point channels must be 1-255")

    def apply(self, r, g, b):
        return (_round(r * self.r / 255.0),
                _round(g * self.g / 255.0),
                _round(b * self.b / 255.0))

    def as_list(self):
        return [self.r, self.g, self.b]


def parse_white_point(text):
    """Parse 'R,G,B' (e.g. '200,255,230') into a WhitePoint."""
    parts = text.split(",")
    if len(parts) != 3:
        raise InvalidInput("expected 3 comma-separated values, e.g. 200,255,230")

    values = []
    for name, part in zip(("red", "green", "blue"), parts):
        part = part.strip()
        if not (part.isascii() and part.isdigit()):
            raise InvalidInput(f"{name}: invalid value '{part}'")
        value = int(part)
        if value > 255:
            raise InvalidInput(f"{name}: {value} is out of range 1-255")
        values.append(value)

    return WhitePoint(*values)
