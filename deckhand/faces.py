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
Face compositing

A face specification describes what to draw on a key: background color,
background image and up to three text layers. compose() turns it into a
fixed-size RGB image once, at construction time. The resulting RenderedFace
is shared by every slot showing it and never modified afterwards.
"""

from collections import namedtuple

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from .colors import resolve_color
from .errors import FaceImageError, FontError

# Text layer of a face. color None means "use the default color"
TextSpec = namedtuple('TextSpec', 'text color', defaults=(None,))

# What to draw on a key. image is a path, all fields are optional
FaceSpec = namedtuple(
    'FaceSpec',
    'color image label sublabel superlabel',
    defaults=(None, None, None, None, None),
)

# Text layers: (FaceSpec field, Defaults field, initial size divisor, vertical anchor)
TEXT_LAYERS = (
    ('label', 'label', 1.1, 1 / 2),
    ('sublabel', 'sublabel', 4.0, 4 / 5),
    ('superlabel', 'superlabel', 4.0, 1 / 5),
)

# Text is shrunk until it fits this fraction of the key width
MAX_TEXT_WIDTH = 0.9
MIN_FONT_SIZE = 1


class FontSource:
    """
    Scalable font used for labels

    Uses a TrueType file when a path is given, otherwise the scalable
    default font bundled with Pillow.
    """

    def __init__(self, path=None):
        self.path = path

    def get(self, size):
        """
        Get the font at a given pixel size

        Raises:
            FontError: font file missing, not a usable font or size rejected
        """
        try:
            if self.path is None:
                return ImageFont.load_default(size)
            return ImageFont.truetype(self.path, size)
        except (OSError, ValueError) as e:
            raise FontError("cannot load font {} at size {}: {}".format(
                self.path or "<default>", size, e)) from e

    def __repr__(self):
        return "FontSource({!r})".format(self.path)


DEFAULT_FONT = FontSource()


class RenderedFace:
    """
    Pre-rendered key image

    Holds the RGB image and the FaceSpec it was composed from. Treat the
    image as read-only: it is shared between slots.
    """

    __slots__ = ('image', 'spec')

    def __init__(self, image, spec):
        self.image = image
        self.spec = spec

    @property
    def size(self):
        return self.image.size

    def __repr__(self):
        return "RenderedFace(size={}, spec={!r})".format(self.image.size, self.spec)


def _load_background_image(path, size):
    """
    Load an image and scale it to exactly the key size

    Args:
        path: image file path
        size: (width, height) of the key

    Returns:
        RGBA PIL.Image of the given size
    """
    try:
        with Image.open(path) as src:
            # Convert to RGBA for transparency support
            return src.convert("RGBA").resize(size, Image.LANCZOS)
    except (OSError, UnidentifiedImageError, ValueError) as e:
        raise FaceImageError(path, e) from e


def _draw_text(draw, text_spec, default_color, divisor, anchor, size, font):
    width, height = size
    color = default_color if text_spec.color is None else resolve_color(text_spec.color)
    text = text_spec.text

    # Start large and shrink until the text fits the key width
    font_size = height / divisor
    fnt = font.get(font_size)
    text_width = draw.textlength(text, font=fnt)
    if text_width > width * MAX_TEXT_WIDTH:
        # Very long text stays at the smallest size and is clipped
        font_size = max(MIN_FONT_SIZE, font_size * width * MAX_TEXT_WIDTH / text_width)
        fnt = font.get(font_size)

    left, top, right, bottom = draw.textbbox((0, 0), text, font=fnt)
    x = (width - (right - left)) / 2 - left
    y = height * anchor - (bottom - top) / 2 - top
    draw.text((x, y), text, font=fnt, fill=color[:3])


def compose(face_spec, geometry, defaults, font=None):
    """
    Render a face specification

    Rendering order:
    1. Fill with the background color (or the default background)
    2. Alpha-composite the background image, scaled to the key size
    3. Drop alpha, draw label, sublabel and superlabel on top

    Args:
        face_spec: FaceSpec to render
        geometry: DeviceGeometry giving the key image size
        defaults: Defaults for unset colors
        font: FontSource for the text layers (Pillow default font if None)

    Returns:
        RenderedFace

    Raises:
        ColorError, FaceImageError, FontError
    """
    if font is None:
        font = DEFAULT_FONT
    size = geometry.size

    if face_spec.color is None:
        background = defaults.background
    else:
        background = resolve_color(face_spec.color)

    image = Image.new("RGBA", size, background)

    if face_spec.image:
        overlay = _load_background_image(face_spec.image, size)
        image = Image.alpha_composite(image, overlay)

    image = image.convert("RGB")

    draw = ImageDraw.Draw(image)
    for field, default_field, divisor, anchor in TEXT_LAYERS:
        text_spec = getattr(face_spec, field)
        if text_spec is None:
            continue
        _draw_text(draw, text_spec, getattr(defaults, default_field), divisor, anchor, size, font)

    return RenderedFace(image, face_spec)
