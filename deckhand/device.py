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
StreamDeck device adapter

Pushes rendered faces to the deck and turns key callbacks into events.
The StreamDeck library numbers keys left-to-right, slots are numbered
right-to-left, so every key index crossing this boundary is mirrored.
"""

from StreamDeck.ImageHelpers import PILHelper

from .events import ButtonPressed, ButtonReleased
from .log import vprint


def open_first_deck(decks, brightness=30):
    """
    Open the first visual deck

    Args:
        decks: devices as returned by DeviceManager().enumerate()
        brightness: display brightness in percent

    Returns:
        Opened deck, or None if no visual deck is connected
    """
    for deck in decks:
        # Skip non-visual devices (e.g., Stream Deck Pedal)
        if not deck.is_visual():
            continue

        # Open and reset device
        deck.open()
        deck.reset()

        vprint("Opened '{}' device (serial number: '{}', fw: '{}')".format(
            deck.deck_type(), deck.get_serial_number(), deck.get_firmware_version()
        ))

        vprint("Set brightness to {}".format(brightness))
        deck.set_brightness(brightness)
        return deck
    return None


class DeckSink:
    """
    Pushes faces to the keys of a deck

    Args:
        deck: opened StreamDeck device
        geometry: DeviceGeometry of the deck
    """

    def __init__(self, deck, geometry):
        self.deck = deck
        self.geometry = geometry

    def __call__(self, faces):
        with self.deck:
            for slot_index, face in faces:
                key = self.geometry.mirror_index(slot_index)
                # Convert to native deck format
                native = PILHelper.to_native_key_format(self.deck, face.image)
                self.deck.set_key_image(key, native)


def make_key_callback(geometry, events):
    """
    Create a key callback for deck.set_key_callback()

    Args:
        geometry: DeviceGeometry of the deck
        events: queue.Queue receiving ButtonPressed/ButtonReleased

    Returns:
        callback(deck, key, state)
    """
    def key_change_callback(deck, key, state):
        slot = geometry.mirror_index(key)
        vprint("Deck {} Key {} (slot {}) = {}".format(deck.id(), key, slot, state))
        if state:
            events.put(ButtonPressed(slot))
        else:
            events.put(ButtonReleased(slot))

    return key_change_callback
