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
Input events and the control loop

Producer threads (deck key callback, window watcher) never touch the
AppState. They put immutable events on a queue.Queue which the control
thread consumes one at a time.
"""

from collections import namedtuple

from .log import vprint

ButtonPressed = namedtuple('ButtonPressed', 'slot')
ButtonReleased = namedtuple('ButtonReleased', 'slot')
ForegroundWindowChanged = namedtuple('ForegroundWindowChanged', 'window')


def apply_event(app_state, event):
    """
    Apply one event to the state

    Returns:
        EventHandler to run, or None
    """
    match event:
        case ButtonPressed(slot=slot):
            return app_state.on_button_pressed(slot)
        case ButtonReleased(slot=slot):
            return app_state.on_button_released(slot)
        case ForegroundWindowChanged(window=window):
            vprint("New foreground window: title={!r}, executable={!r}, class={!r}".format(
                window.title, window.executable, window.class_name))
            app_state.on_foreground_window(window)
            return None
        case _:
            raise TypeError("unknown event: {!r}".format(event))


def run_control_loop(app_state, events, sink, runner, max_events=None):
    """
    Main loop of the control thread

    Each iteration:
    1. Push the faces of all dirty keys to the sink
    2. Wait (without timeout) for the next event
    3. Apply it and run the resulting handler, if any

    A slow handler blocks the whole loop.

    Args:
        app_state: AppState, owned by the calling thread
        events: queue.Queue of events
        sink: callable taking a list of (slot index, RenderedFace)
        runner: callable taking an EventHandler
        max_events: stop after this many events (None runs forever)
    """
    handled = 0
    while max_events is None or handled < max_events:
        faces = app_state.flush_dirty_faces()
        if faces:
            sink(faces)

        vprint("Waiting for input events")
        event = events.get()
        handler = apply_event(app_state, event)
        handled += 1

        if handler is not None:
            runner(handler)

    # Show the result of the last event
    faces = app_state.flush_dirty_faces()
    if faces:
        sink(faces)
