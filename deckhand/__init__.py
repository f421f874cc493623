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
Deckhand – page-based StreamDeck controller

Keys show pre-rendered faces and run Python handlers on press and release.
Pages of key bindings stack on top of each other and can follow the
foreground window.
"""

from .app_state import AppState
from .config import DeckConfig, load_config
from .errors import DeckError, PageNotFound
from .layout import DeviceGeometry

__version__ = "0.1.0"

__all__ = ['AppState', 'DeckConfig', 'DeckError', 'DeviceGeometry', 'PageNotFound',
           'load_config', '__version__']
