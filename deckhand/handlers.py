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

from .errors import ConfigError, HandlerFileError

# Handler as configured: inline code or a script file, exactly one of them
HandlerSpec = namedtuple('HandlerSpec', 'code file', defaults=(None, None))


class EventHandler(namedtuple('EventHandler', 'source_text origin', defaults=(None,))):
    """
    Script to execute when an event occurs

    origin is the file the script was read from, if any, and is used as
    the filename in tracebacks.
    """

    __slots__ = ()

    @classmethod
    def from_spec(cls, spec):
        """
        Build the handler, reading the script file if needed

        Raises:
            ConfigError: both or neither of code and file given
            HandlerFileError: script file could not be read
        """
        if spec.code is not None and spec.file is not None:
            raise ConfigError("handler must have either code or a file, not both")

        if spec.code is not None:
            return cls(spec.code)

        if spec.file is None:
            raise ConfigError("handler needs code or a file")

        try:
            with open(spec.file, encoding='utf-8') as f:
                return cls(f.read(), spec.file)
        except (OSError, UnicodeDecodeError) as e:
            raise HandlerFileError(spec.file, e) from e


def build_handler(spec):
    """Build an EventHandler from an optional HandlerSpec"""
    if spec is None:
        return None
    return EventHandler.from_spec(spec)
