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
Live state of the deck

AppState owns one ButtonSlot per key and the stack of loaded pages. It is
not thread-safe: a single control thread applies events to it one at a
time (see events.run_control_loop).
"""

from .buttons import (EMPTY_BUTTON, BuildContext, ButtonSlot, NamedOccupant,
                      build_empty_button, build_named_buttons)
from .config import resolve_path
from .defaults import Defaults
from .errors import ButtonNotFound, DuplicateButtonError, PageNotFound
from .faces import FaceSpec, TextSpec, compose
from .handlers import build_handler
from .log import vprint
from .pages import build_page


def _merge_text(current, text, color):
    """Apply a text and/or color change to an optional TextSpec"""
    if text is None and color is None:
        return current
    if text is None:
        if current is None:
            return None
        text = current.text
    if color is None and current is not None:
        color = current.color
    return TextSpec(text, color)


class AppState:
    """
    The complete runtime state

    Args:
        context: BuildContext (geometry, defaults, font)
        named_buttons: dict name -> ButtonSetup
        pages: dict name -> Page
        init_handler: optional EventHandler to run once at startup
        base_dir: directory relative image paths from scripts are resolved against
    """

    def __init__(self, context, named_buttons, pages, init_handler=None, base_dir='.'):
        self.context = context
        self._named_buttons = dict(named_buttons)
        self._pages = dict(pages)
        self._init_handler = init_handler
        self.base_dir = base_dir
        self._loaded_pages = []
        self._foreground_window = None

        # The empty button can be overridden by configuration
        if EMPTY_BUTTON not in self._named_buttons:
            self._named_buttons[EMPTY_BUTTON] = build_empty_button(context)

        self._slots = [ButtonSlot() for _ in range(context.geometry.slot_count)]

    @classmethod
    def from_config(cls, config, geometry, font=None):
        """
        Create the state from a loaded configuration

        Builds defaults, named buttons and pages, then loads the default
        pages in order.

        Args:
            config: DeckConfig
            geometry: DeviceGeometry of the target deck
            font: FontSource for labels (Pillow default font if None)

        Returns:
            AppState

        Raises:
            DeckError subclasses for any invalid configuration,
            PageNotFound if a default page does not exist
        """
        defaults = Defaults.from_spec(config.defaults)
        context = BuildContext(geometry, defaults, font)

        named_buttons = build_named_buttons(config.buttons, context)

        pages = {}
        for page_config in config.pages:
            page, page_buttons = build_page(page_config, context)
            for name, setup in page_buttons.items():
                # Only a [button.empty] section may replace the empty button
                if name in named_buttons or name == EMPTY_BUTTON:
                    raise DuplicateButtonError(name)
                named_buttons[name] = setup
            pages[page.name] = page

        state = cls(context, named_buttons, pages, build_handler(config.init_handler),
                    base_dir=config.base_dir)

        for page_name in config.default_pages:
            state.load_page(page_name)
        return state

    @property
    def geometry(self):
        return self.context.geometry

    @property
    def slot_count(self):
        return len(self._slots)

    @property
    def init_handler(self):
        """Handler to run once after startup, or None"""
        return self._init_handler

    @property
    def foreground_window(self):
        """Last WindowInfo seen, or None"""
        return self._foreground_window

    @property
    def loaded_pages(self):
        """Loaded page names, oldest first"""
        return tuple(self._loaded_pages)

    @property
    def page_names(self):
        return sorted(self._pages)

    def named_button(self, name):
        """ButtonSetup registered under name, or None"""
        return self._named_buttons.get(name)

    def slot(self, slot_index):
        return self._slots[slot_index]

    def _get_slot(self, slot_index):
        if 0 <= slot_index < len(self._slots):
            return self._slots[slot_index]
        return None

    def on_button_pressed(self, slot_index):
        """
        Key pressed

        Returns:
            down handler to run, or None
        """
        slot = self._get_slot(slot_index)
        if slot is None:
            return None
        return slot.press(self._named_buttons)

    def on_button_released(self, slot_index):
        """
        Key released

        Returns:
            up handler to run, or None
        """
        slot = self._get_slot(slot_index)
        if slot is None:
            return None
        return slot.release(self._named_buttons)

    def flush_dirty_faces(self):
        """
        Collect the faces of all keys needing rendering

        Marks those keys rendered. Keys whose setup has no face are marked
        rendered but not returned.

        Returns:
            list of (slot index, RenderedFace)
        """
        result = []
        for index, slot in enumerate(self._slots):
            if not slot.needs_rendering:
                continue
            face = slot.take_face(self._named_buttons)
            if face is not None:
                result.append((index, face))
        return result

    def _get_page(self, page_name):
        page = self._pages.get(page_name)
        if page is None:
            raise PageNotFound(page_name)
        return page

    def load_page(self, page_name):
        """
        Load a page on top of the loaded ones

        Loading an already loaded page moves it to the top of the stack.

        Raises:
            PageNotFound
        """
        page = self._get_page(page_name)

        if page_name in self._loaded_pages:
            self._loaded_pages.remove(page_name)
        self._loaded_pages.append(page_name)

        for index, occupant in page.bindings(self.geometry):
            self._slots[index].set_occupant(occupant)

        vprint("Page {} loaded".format(page_name))

    def unload_page(self, page_name):
        """
        Unload a page

        Every key the page claims shows what the remaining loaded pages put
        there (latest loaded wins), or the empty button.

        Raises:
            PageNotFound
        """
        page = self._get_page(page_name)

        self._loaded_pages = [p for p in self._loaded_pages if p != page_name]

        for index in sorted(page.slot_indices(self.geometry)):
            slot = self._slots[index]
            slot.set_occupant(NamedOccupant(EMPTY_BUTTON))
            # Replay the remaining stack, oldest first
            for stacked_name in self._loaded_pages:
                occupant = self._pages[stacked_name].occupant_for(index, self.geometry)
                if occupant is not None:
                    slot.set_occupant(occupant)

        vprint("Page {} unloaded".format(page_name))

    def on_foreground_window(self, window):
        """
        React to a new foreground window

        Pages with a matching condition are loaded. Afterwards, loaded pages
        flagged unload_if_not_matching whose conditions all fail are unloaded.
        """
        to_load = []
        to_unload = []
        for name, page in self._pages.items():
            if not page.has_conditions:
                continue
            if page.matches(window):
                to_load.append(name)
            elif page.unload_if_not_matching and name in self._loaded_pages:
                to_unload.append(name)

        self._foreground_window = window

        for name in to_load:
            self.load_page(name)
        for name in to_unload:
            self.unload_page(name)

    def set_named_button_up_face(self, button_name, color=None, file=None,
                                 label=None, label_color=None,
                                 sublabel=None, sublabel_color=None,
                                 superlabel=None, superlabel_color=None):
        """
        Change the up face of a named button

        Values left as None keep their previous setting. A relative file is
        resolved against base_dir. The face is rendered again and every key
        showing the button is re-rendered.

        Raises:
            ButtonNotFound, ColorError, FaceImageError, FontError
        """
        setup = self._named_buttons.get(button_name)
        if setup is None:
            raise ButtonNotFound(button_name)

        spec = setup.up_face.spec if setup.up_face is not None else FaceSpec()
        spec = spec._replace(
            color=spec.color if color is None else color,
            image=spec.image if file is None else resolve_path(file, self.base_dir),
            label=_merge_text(spec.label, label, label_color),
            sublabel=_merge_text(spec.sublabel, sublabel, sublabel_color),
            superlabel=_merge_text(spec.superlabel, superlabel, superlabel_color),
        )
        face = compose(spec, self.geometry, self.context.defaults, self.context.font)
        self._named_buttons[button_name] = setup._replace(up_face=face)

        for slot in self._slots:
            if slot.uses(button_name):
                slot.set_needs_rendering()
