###############################################################
#
# Deckhand – page-based StreamDeck controller
#
# Copyright (C) 2026 Peter Damerau
# https://www.talla83.de
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
###############################################################

"""
Color specifications

A color is given either as a hex string ("#RRGGBB" or "#RRGGBBAA") or as an
explicit (red, green, blue) triple. Both resolve to an RGBA tuple usable by
PIL.
"""

import string

from .errors import ColorError

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
CYAN = (0, 255, 255, 255)
YELLOW = (255, 255, 0, 255)


def parse_hex_color(text):
    """
    Convert a hex color string to an RGBA tuple

    Args:
        text: "#RRGGBB" (fully opaque) or "#RRGGBBAA"

    Returns:
        (r, g, b, a) tuple

    Raises:
        ColorError: missing '#', non-hex digits or wrong digit count
    """
    if not isinstance(text, str) or not text.startswith('#'):
        raise ColorError(text, "hex color must start with '#'")

    digits = text[1:]
    if not digits or any(c not in string.hexdigits for c in digits):
        raise ColorError(text, "invalid hex color")

    num = int(digits, 16)
    match len(digits):
        case 6:
            return ((num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF, 255)
        case 8:
            return ((num >> 24) & 0xFF, (num >> 16) & 0xFF, (num >> 8) & 0xFF, num & 0xFF)
        case _:
            raise ColorError(text, "hex color needs 6 or 8 digits")


def resolve_color(spec):
    """
    Resolve a color specification to an RGBA tuple

    Args:
        spec: hex string or (red, green, blue) sequence

    Returns:
        (r, g, b, a) tuple
    """
    if isinstance(spec, str):
        return parse_hex_color(spec)

    try:
        red, green, blue = spec
    except (TypeError, ValueError):
        raise ColorError(spec, "color must be a hex string or an RGB triple") from None

    channels = []
    for value in (red, green, blue):
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
            raise ColorError(spec, "RGB components must be integers 0-255")
        channels.append(value)
    return (channels[0], channels[1], channels[2], 255)
