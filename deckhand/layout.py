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
Device geometry and button positions

Slots are numbered row by row starting at the top right corner: the column
axis runs right-to-left on the physical panel. Positions in the configuration
use array-style indices, so negative values count from the far edge.
"""

from collections import namedtuple


class DeviceGeometry(namedtuple('DeviceGeometry', 'rows cols width height')):
    """Key grid (rows x cols) and key image size in pixels of a deck"""

    __slots__ = ()

    @classmethod
    def from_deck(cls, deck):
        """
        Read the geometry from an opened StreamDeck device

        Args:
            deck: StreamDeck device reference

        Returns:
            DeviceGeometry
        """
        rows, cols = deck.key_layout()  # IMPORTANT: returns (rows, cols)
        width, height = deck.key_image_format()['size']
        return cls(rows, cols, width, height)

    @property
    def slot_count(self):
        return self.rows * self.cols

    @property
    def size(self):
        return (self.width, self.height)

    def mirror_index(self, index):
        """
        Mirror the column of a flat index

        Converts between slot numbering (right-to-left) and the
        left-to-right key numbering of the StreamDeck library. The
        conversion is its own inverse.
        """
        row, col = divmod(index, self.cols)
        return row * self.cols + (self.cols - 1 - col)


class Axis(namedtuple('Axis', 'from_end offset')):
    """Position on one axis, counted from the start or from the end"""

    __slots__ = ()

    @classmethod
    def from_index(cls, index):
        # -1 is the last element, i.e. offset 0 from the end
        if index < 0:
            return cls(True, -index - 1)
        return cls(False, index)


class Position(namedtuple('Position', 'row col')):
    """Position of a button on a page"""

    __slots__ = ()

    @classmethod
    def from_indices(cls, row, col):
        return cls(Axis.from_index(row), Axis.from_index(col))

    def to_slot_index(self, geometry):
        """
        Resolve to a flat slot index

        Args:
            geometry: DeviceGeometry of the target deck

        Returns:
            Zero-based slot index, clamped into the key grid
        """
        rows, cols = geometry.rows, geometry.cols

        if self.row.from_end:
            row = rows - (self.row.offset + 1)
        else:
            row = self.row.offset

        # Columns are counted from right to left
        if self.col.from_end:
            col = self.col.offset
        else:
            col = cols - (self.col.offset + 1)

        row = min(rows - 1, max(0, row))
        col = min(cols - 1, max(0, col))
        return col + row * cols
