#!/usr/bin/env python3
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

import argparse
import queue
import sys

from StreamDeck.DeviceManager import DeviceManager
from StreamDeck.Transport.Transport import TransportError

from . import log
from .app_state import AppState
from .config import load_config
from .device import DeckSink, make_key_callback, open_first_deck
from .errors import DeckError, WindowWatcherError
from .events import ForegroundWindowChanged, run_control_loop
from .faces import FontSource
from .layout import DeviceGeometry
from .log import vprint
from .scripting import ScriptRunner
from .window_watch import start_window_watcher


def keyboard_names():
    """Keyboard controller for handler scripts, empty without a desktop session"""
    try:
        from pynput.keyboard import Controller, Key
    except ImportError as e:
        vprint("Keyboard simulation unavailable: {}".format(e))
        return {}
    return {'keyboard': Controller(), 'Key': Key}


def main(argv=None):
    # Parse command line arguments
    ap = argparse.ArgumentParser(
        prog='deckhand',
        description='Page-based StreamDeck controller with window-dependent pages and Python handlers'
    )
    ap.add_argument('configfile', help='Path to configuration INI file')
    ap.add_argument('-v', '--verbose', action='store_true', help='Print what is going on')
    args = ap.parse_args(argv)

    try:
        config = load_config(args.configfile)
    except DeckError as e:
        print("deckhand: {}".format(e), file=sys.stderr)
        return 1

    log.set_verbose(args.verbose or config.verbose)

    # Enumerate and open StreamDeck devices
    decks = DeviceManager().enumerate()
    vprint("Deckhand found {} deck(s).".format(len(decks)))

    deck = open_first_deck(decks, config.brightness)
    if deck is None:
        print("deckhand: no StreamDeck with keys found", file=sys.stderr)
        return 1

    geometry = DeviceGeometry.from_deck(deck)
    vprint("Deck layout: {}x{}, key={}x{}".format(geometry.rows, geometry.cols, geometry.width, geometry.height))

    try:
        state = AppState.from_config(config, geometry, FontSource(config.font_file))
    except DeckError as e:
        print("deckhand: {}".format(e), file=sys.stderr)
        with deck:
            deck.reset()
            deck.close()
        return 1

    events = queue.Queue()

    # Register hardware callback for key events
    deck.set_key_callback(make_key_callback(geometry, events))

    try:
        start_window_watcher(lambda window: events.put(ForegroundWindowChanged(window)))
    except WindowWatcherError as e:
        vprint("Pages will not follow the foreground window: {}".format(e))

    runner = ScriptRunner(state, **keyboard_names())

    if state.init_handler is not None:
        vprint("Running init script")
        runner(state.init_handler)

    try:
        run_control_loop(state, events, DeckSink(deck, geometry), runner)
    except TransportError as e:
        # Deck was unplugged or connection lost
        print("deckhand: lost connection to deck: {}".format(e), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        # Clean shutdown on Ctrl+C
        vprint("Shutting down...")
        with deck:
            deck.reset()  # Clear all images
            deck.close()  # Close connection
    return 0


if __name__ == "__main__":
    sys.exit(main())
