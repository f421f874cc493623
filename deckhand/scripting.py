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
Execution of event handler scripts

Handlers are Python source. They run in one namespace shared by all
handlers, so a handler can keep values for later ones. The namespace
provides:

    state       ScriptState, to switch pages and change button faces
    keyboard    keyboard controller (pynput) when running on a desktop
    Key         pynput special keys, e.g. keyboard.press(Key.space)

Anything a handler prints goes to the verbose log. Handlers are not
sandboxed and run on the control thread: a slow handler stalls the deck.
"""

import contextlib
import io

from .log import vprint


class ScriptState:
    """Access to the application state from handler scripts"""

    def __init__(self, app_state):
        self._state = app_state

    def load_page(self, page_name):
        self._state.load_page(page_name)

    def unload_page(self, page_name):
        self._state.unload_page(page_name)

    def set_named_button_up_face(self, button_name, **properties):
        """
        Change the up face of a named button

        Accepted properties: color, file, label, label_color, sublabel,
        sublabel_color, superlabel, superlabel_color.
        """
        self._state.set_named_button_up_face(button_name, **properties)

    @property
    def loaded_pages(self):
        return self._state.loaded_pages

    @property
    def foreground_window(self):
        return self._state.foreground_window


class ScriptRunner:
    """
    Runs EventHandler scripts

    Args:
        app_state: AppState exposed to the scripts as `state`
        **names: additional names for the script namespace
    """

    def __init__(self, app_state, **names):
        self.namespace = {'__name__': '__deckhand__', 'state': ScriptState(app_state)}
        self.namespace.update(names)

    def __call__(self, handler):
        return self.run(handler)

    def run(self, handler):
        """
        Execute a handler

        Errors raised by the script are reported and do not propagate.

        Returns:
            True if the script finished without error
        """
        output = io.StringIO()
        ok = True
        try:
            code = compile(handler.source_text, handler.origin or '<handler>', 'exec')
            with contextlib.redirect_stdout(output):
                exec(code, self.namespace)
        except Exception as e:
            vprint("Handler failed: {}: {}".format(type(e).__name__, e))
            ok = False
        finally:
            for line in output.getvalue().splitlines():
                vprint("script: {}".format(line))

        if ok:
            vprint("Handler finished successfully")
        return ok
