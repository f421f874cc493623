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

# Handler script for the "status" button of deckhand.example.ini.
# Runs in the shared handler namespace, so `busy` survives between presses.

busy = not globals().get('busy', False)

if busy:
    state.set_named_button_up_face("status", label="busy", color="#803000")
else:
    state.set_named_button_up_face("status", label="idle", color="#101010")

print("status is now", "busy" if busy else "idle")
