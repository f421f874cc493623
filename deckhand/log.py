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

verbose = False


def set_verbose(enabled):
    """Switch verbose output on or off for the whole process"""
    global verbose
    verbose = bool(enabled)


def vprint(*args, **kwargs):
    """Print only if verbose mode is enabled"""
    if verbose:
        kwargs.setdefault('flush', True)
        print(*args, **kwargs)
