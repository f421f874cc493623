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
Errors raised by Deckhand

Construction-time errors (everything except PageNotFound and ButtonNotFound)
are fatal: they abort startup before the deck is driven. Runtime errors are
reported to the caller, which skips the offending page switch or edit.
"""


class DeckError(Exception):
    """Base class of all Deckhand errors"""


class ConfigError(DeckError):
    """Configuration file is missing values or contradicts itself"""


class ColorError(ConfigError):
    """Color specification is malformed"""

    def __init__(self, value, reason="invalid color"):
        super().__init__("{}: {!r}".format(reason, value))
        self.value = value


class FaceImageError(DeckError):
    """Background image of a face could not be read or decoded"""

    def __init__(self, path, cause):
        super().__init__("cannot load face image {}: {}".format(path, cause))
        self.path = path


class FontError(DeckError):
    """Font resource used for labels is unusable"""


class ConditionError(ConfigError):
    """Foreground window condition holds an invalid regular expression"""


class DuplicateButtonError(ConfigError):
    """Two buttons were declared under the same name"""

    def __init__(self, name):
        super().__init__("duplicate named button: {}".format(name))
        self.name = name


class HandlerFileError(DeckError):
    """Event handler script file could not be read"""

    def __init__(self, path, cause):
        super().__init__("cannot read handler file {}: {}".format(path, cause))
        self.path = path


class PageNotFound(DeckError):
    """Requested page is not known"""

    def __init__(self, name):
        super().__init__("page not found: {}".format(name))
        self.name = name


class ButtonNotFound(DeckError):
    """Requested named button is not known"""

    def __init__(self, name):
        super().__init__("named button not found: {}".format(name))
        self.name = name


class WindowWatcherError(DeckError):
    """Foreground window watcher could not be started"""


class AlreadyStarted(WindowWatcherError):
    """A foreground window watcher is already running in this process"""
