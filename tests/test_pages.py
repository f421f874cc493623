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

from __future__ import annotations

import pytest

from deckhand.buttons import ButtonConfig, NamedOccupant
from deckhand.conditions import ConditionConfig, WindowInfo
from deckhand.errors import ConditionError, DuplicateButtonError
from deckhand.faces import FaceSpec
from deckhand.pages import PageButtonConfig, PageConfig, build_page, inline_button_name


def test_reference_and_inline_buttons(context) -> None:
    config = PageConfig(
        name="main",
        buttons=(
            PageButtonConfig(0, 0, "shared"),
            PageButtonConfig(0, 1, ButtonConfig("mute", up_face=FaceSpec(color="#FF0000"))),
            PageButtonConfig(-1, -1, ButtonConfig(up_face=FaceSpec(color="#00FF00"))),
        ),
    )

    page, named_buttons = build_page(config, context)
    geometry = context.geometry

    # (0, 0) is the top left key, slot 4 on a 5 column deck
    assert page.bindings(geometry)[0] == (4, NamedOccupant("shared"))
    assert page.bindings(geometry)[1] == (3, NamedOccupant("mute"))

    # Unnamed inline buttons are bound through their derived name
    assert page.bindings(geometry)[2] == (10, NamedOccupant(inline_button_name("main", 10)))
    assert named_buttons["main@10"].up_face.spec.color == "#00FF00"

    assert sorted(named_buttons) == ["main@10", "mute"]
    assert page.slot_indices(geometry) == {3, 4, 10}


def test_last_binding_of_a_slot_wins(context) -> None:
    config = PageConfig(name="p", buttons=(
        PageButtonConfig(0, 0, "first"),
        PageButtonConfig(0, 0, "second"),
    ))

    page, _ = build_page(config, context)

    assert page.occupant_for(4, context.geometry) == NamedOccupant("second")
    assert page.occupant_for(0, context.geometry) is None


def test_duplicate_inline_name(context) -> None:
    config = PageConfig(name="p", buttons=(
        PageButtonConfig(0, 0, ButtonConfig("twice")),
        PageButtonConfig(0, 1, ButtonConfig("twice")),
    ))

    with pytest.raises(DuplicateButtonError):
        build_page(config, context)


def test_page_matches_any_condition(context) -> None:
    config = PageConfig(name="p", conditions=(
        ConditionConfig(executable="vim"),
        ConditionConfig(title="Terminal"),
    ))
    page, _ = build_page(config, context)

    assert page.has_conditions
    assert page.matches(WindowInfo("Terminal", "bash", "xterm"))
    assert page.matches(WindowInfo("x", "/usr/bin/vim", "xterm"))
    assert not page.matches(WindowInfo("x", "bash", "xterm"))


def test_page_without_conditions(context) -> None:
    page, _ = build_page(PageConfig(name="p"), context)

    assert not page.has_conditions
    assert not page.matches(WindowInfo("a", "b", "c"))
    assert not page.unload_if_not_matching


def test_invalid_condition(context) -> None:
    with pytest.raises(ConditionError):
        build_page(PageConfig(name="p", conditions=(ConditionConfig(title="["),)), context)
