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

from collections import namedtuple

from .colors import BLACK, CYAN, WHITE, YELLOW, resolve_color

# Optional default colors as read from the [defaults] section
DefaultsSpec = namedtuple(
    'DefaultsSpec',
    'background label sublabel superlabel',
    defaults=(None, None, None, None),
)


class Defaults(namedtuple('Defaults', 'background label sublabel superlabel')):
    """
    Concrete fallback colors used when a face leaves a color unset

    All fields are RGBA tuples.
    """

    __slots__ = ()

    @classmethod
    def from_spec(cls, spec=None):
        """
        Resolve optional default colors

        Args:
            spec: DefaultsSpec or None

        Returns:
            Defaults with built-in fallbacks for every unset color

        Raises:
            ColorError: a provided color is malformed
        """
        if spec is None:
            spec = DefaultsSpec()

        def pick(value, fallback):
            return fallback if value is None else resolve_color(value)

        return cls(
            background=pick(spec.background, BLACK),
            label=pick(spec.label, WHITE),
            sublabel=pick(spec.sublabel, CYAN),
            superlabel=pick(spec.superlabel, YELLOW),
        )
