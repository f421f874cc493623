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

from .buttons import NamedOccupant, build_button_setup
from .conditions import ForegroundWindowCondition
from .errors import DuplicateButtonError
from .layout import Position

# Page entry as configured. button is a name or a ButtonConfig
PageButtonConfig = namedtuple('PageButtonConfig', 'row col button')

PageConfig = namedtuple(
    'PageConfig',
    'name buttons conditions unload_if_not_matching',
    defaults=((), (), False),
)

PositionedButton = namedtuple('PositionedButton', 'position occupant')


def inline_button_name(page_name, slot_index):
    """Name given to an unnamed button declared inline on a page"""
    return "{}@{}".format(page_name, slot_index)


class Page:
    """
    Loadable set of key bindings

    Pages can be loaded on top of each other. A page with conditions is
    loaded when the foreground window matches any of them and, if
    unload_if_not_matching is set, unloaded again when none matches.
    """

    def __init__(self, name, buttons, conditions=(), unload_if_not_matching=False):
        self.name = name
        self.buttons = list(buttons)
        self.conditions = list(conditions)
        self.unload_if_not_matching = unload_if_not_matching

    def __repr__(self):
        return "Page({!r}, {} buttons, {} conditions)".format(
            self.name, len(self.buttons), len(self.conditions))

    def bindings(self, geometry):
        """
        Resolve bindings against a deck

        Returns:
            list of (slot index, occupant) in declaration order
        """
        return [(b.position.to_slot_index(geometry), b.occupant) for b in self.buttons]

    def slot_indices(self, geometry):
        return {index for index, _ in self.bindings(geometry)}

    def occupant_for(self, slot_index, geometry):
        """Occupant bound to a slot (last binding wins), or None"""
        occupant = None
        for index, bound in self.bindings(geometry):
            if index == slot_index:
                occupant = bound
        return occupant

    @property
    def has_conditions(self):
        return bool(self.conditions)

    def matches(self, window):
        return any(condition.matches(window) for condition in self.conditions)


def build_page(config, context):
    """
    Create a page from its configuration

    Inline buttons are registered as named buttons: with their configured
    name, or with a name derived from page name and slot index. The page
    binds them by that name like any other reference.

    Args:
        config: PageConfig
        context: BuildContext

    Returns:
        (Page, dict name -> ButtonSetup of the buttons this page introduces)

    Raises:
        ConditionError, DuplicateButtonError and any face/handler error
    """
    conditions = [ForegroundWindowCondition.from_config(c) for c in config.conditions]

    buttons = []
    named_buttons = {}
    for entry in config.buttons:
        position = Position.from_indices(entry.row, entry.col)

        if isinstance(entry.button, str):
            # Just a reference to a named button
            buttons.append(PositionedButton(position, NamedOccupant(entry.button)))
            continue

        setup = build_button_setup(entry.button, context)
        name = entry.button.name
        if name is None:
            name = inline_button_name(config.name, position.to_slot_index(context.geometry))

        if name in named_buttons:
            raise DuplicateButtonError(name)
        named_buttons[name] = setup
        # Bound by name so face changes made through the registry reach the slot
        buttons.append(PositionedButton(position, NamedOccupant(name)))

    page = Page(config.name, buttons, conditions, config.unload_if_not_matching)
    return page, named_buttons
