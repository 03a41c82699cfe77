"""
Color and randomization helpers for card backgrounds.

This module provides:
- Random hex colors and integers
- Evenly spaced gradient stop maps with random colors
- Hex color brightness adjustment
"""

import math
import random
import re
from typing import Dict

HEX_DIGITS = "0123456789ABCDEF"
_HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{6})$")


def random_hex_color() -> str:
    """Generate a random color such as '#3FA2C0'."""
    return "#" + "".join(random.choice(HEX_DIGITS) for _ in range(6))


def random_int(min_value: float, max_value: float) -> int:
    """
    Random integer between min_value (inclusive) and max_value (exclusive).

    Bounds are rounded inwards (ceil of the minimum, floor of the maximum).
    An empty range returns the rounded minimum.
    """
    low = math.ceil(min_value)
    high = math.floor(max_value)
    if high <= low:
        return low
    return random.randrange(low, high)


def gradient_stops(count: int) -> Dict[float, str]:
    """
    Build a gradient stop map of offset -> random color.

    Offsets start at 0 and advance by round(1 / count, 1). When the stepping
    does not land exactly on 1 a final stop at 1 is added, so
    gradient_stops(3) yields offsets 0, 0.3, 0.6, 0.9 and 1.

    Args:
        count: Requested number of stops (must be positive)

    Returns:
        Ordered dict of offset to hex color
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")

    # One decimal of precision: anything above 20 stops would round to 0
    increment = max(round(1 / count, 1), 0.1)

    stops: Dict[float, str] = {}
    index = 0
    offset = 0.0
    while offset < 1:
        stops[offset] = random_hex_color()
        index += 1
        offset = round(index * increment, 1)

    if 1 not in stops:
        stops[1.0] = random_hex_color()
    return stops


def adjust_brightness(hex_color: str, delta: int) -> str:
    """
    Add delta to each RGB channel of a '#rrggbb' color, clamping to [0, 255].

    Channels that end up unchanged keep their original digits, so a delta of
    0 returns the input as is. Changed channels are written in upper case when
    the input's letters are all upper case, otherwise in lower case. Anything
    that is not a six digit hex color is returned unchanged.
    """
    match = _HEX_COLOR_RE.match(hex_color)
    if not match:
        return hex_color

    digits = match.group(1)
    upper = digits.upper() == digits and any(c.isalpha() for c in digits)
    fmt = "{:02X}" if upper else "{:02x}"

    result = "#"
    for start in (0, 2, 4):
        original = digits[start:start + 2]
        channel = int(original, 16)
        adjusted = max(0, min(255, channel + delta))
        result += original if adjusted == channel else fmt.format(adjusted)
    return result
