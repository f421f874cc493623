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
Button setups, occupants and the per-slot button state

A ButtonSetup is what can be shown on a key: faces for the up and down
state and handlers for press and release. A setup is not tied to a key.
ButtonSlot is the state of one physical key: which setup occupies it,
whether it is pressed and how it was last rendered.
"""

from collections import namedtuple
from enum import Enum

from .errors import DuplicateButtonError
from .faces import FaceSpec, compose
from .handlers import build_handler

# Reserved name of the button shown on keys without any page binding
EMPTY_BUTTON = "empty"

# Button as configured. name is optional for buttons declared inline on a page
ButtonConfig = namedtuple(
    'ButtonConfig',
    'name up_face down_face up_handler down_handler',
    defaults=(None, None, None, None, None),
)

# Everything needed to render faces: geometry, default colors and label font
BuildContext = namedtuple('BuildContext', 'geometry defaults font', defaults=(None,))

# Faces are RenderedFace or None, handlers EventHandler or None
ButtonSetup = namedtuple(
    'ButtonSetup',
    'up_face down_face up_handler down_handler',
    defaults=(None, None, None, None),
)


def build_button_setup(config, context):
    """
    Create a ButtonSetup from its configuration

    Args:
        config: ButtonConfig (name is ignored)
        context: BuildContext

    Returns:
        ButtonSetup

    Raises:
        ColorError, FaceImageError, FontError, HandlerFileError
    """
    def face(spec):
        if spec is None:
            return None
        return compose(spec, context.geometry, context.defaults, context.font)

    return ButtonSetup(
        up_face=face(config.up_face),
        down_face=face(config.down_face),
        up_handler=build_handler(config.up_handler),
        down_handler=build_handler(config.down_handler),
    )


def build_empty_button(context):
    """The reserved "empty" button: plain background, no handlers"""
    return build_button_setup(ButtonConfig(EMPTY_BUTTON, up_face=FaceSpec()), context)


def build_named_buttons(configs, context):
    """
    Create the named buttons declared in the configuration

    Args:
        configs: iterable of ButtonConfig, each with a name
        context: BuildContext

    Returns:
        dict name -> ButtonSetup

    Raises:
        DuplicateButtonError: a name is declared twice
    """
    named_buttons = {}
    for config in configs:
        if config.name in named_buttons:
            raise DuplicateButtonError(config.name)
        named_buttons[config.name] = build_button_setup(config, context)
    return named_buttons


class NamedOccupant(namedtuple('NamedOccupant', 'name')):
    """Occupant referring to a named button, looked up on every use"""

    __slots__ = ()

    def resolve(self, named_buttons):
        return named_buttons.get(self.name)

    def uses(self, name):
        return self.name == name


class InlineOccupant(namedtuple('InlineOccupant', 'setup')):
    """Occupant owning its ButtonSetup directly"""

    __slots__ = ()

    def resolve(self, named_buttons):
        return self.setup

    def uses(self, name):
        return False


class PressState(Enum):
    """Press state of a key"""
    UP = 0
    DOWN = 1


class ButtonSlot:
    """
    State of one physical key

    render_state holds the press state the key was last rendered with, or
    None if the key was never rendered with its current occupant. The key
    needs rendering whenever render_state differs from press_state.
    """

    def __init__(self, occupant=None):
        self.occupant = NamedOccupant(EMPTY_BUTTON) if occupant is None else occupant
        self.press_state = PressState.UP
        self.render_state = None

    def __repr__(self):
        return "ButtonSlot({!r}, {}, rendered={})".format(
            self.occupant, self.press_state.name, self.render_state and self.render_state.name)

    @property
    def needs_rendering(self):
        return self.render_state != self.press_state

    def set_needs_rendering(self):
        self.render_state = None

    def set_occupant(self, occupant):
        """Change the occupant, forcing a re-render"""
        self.occupant = occupant
        self.render_state = None

    def uses(self, name):
        return self.occupant.uses(name)

    def setup(self, named_buttons):
        """Resolve the occupant to a ButtonSetup (None if unknown)"""
        return self.occupant.resolve(named_buttons)

    def press(self, named_buttons):
        """
        Mark the key pressed

        Returns:
            down handler of the occupant, or None
        """
        self.press_state = PressState.DOWN
        setup = self.setup(named_buttons)
        return setup.down_handler if setup is not None else None

    def release(self, named_buttons):
        """
        Mark the key released

        Returns:
            up handler of the occupant, or None
        """
        self.press_state = PressState.UP
        setup = self.setup(named_buttons)
        return setup.up_handler if setup is not None else None

    def take_face(self, named_buttons):
        """
        Mark the key rendered and get the face to show

        Prefers the face matching the press state and falls back to the
        other one.

        Returns:
            RenderedFace, or None if nothing needs to be (or can be) shown
        """
        if not self.needs_rendering:
            return None
        self.render_state = self.press_state

        setup = self.setup(named_buttons)
        if setup is None:
            return None

        if self.press_state == PressState.DOWN:
            preferred, fallback = setup.down_face, setup.up_face
        else:
            preferred, fallback = setup.up_face, setup.down_face
        return preferred if preferred is not None else fallback
