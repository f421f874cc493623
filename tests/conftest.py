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

"""Pytest configuration to ensure the deckhand package is importable."""
from __future__ import annotations

import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
_root_str = str(_REPO_ROOT)
if _root_str not in sys.path:
    sys.path.insert(0, _root_str)

import pytest

from deckhand.buttons import BuildContext, ButtonConfig
from deckhand.conditions import ConditionConfig
from deckhand.config import DeckConfig
from deckhand.defaults import Defaults
from deckhand.faces import FaceSpec, TextSpec
from deckhand.handlers import HandlerSpec
from deckhand.layout import DeviceGeometry
from deckhand.pages import PageButtonConfig, PageConfig

# Original StreamDeck: 3 rows of 5 keys, 72x72 pixel key images
ORIGINAL = DeviceGeometry(rows=3, cols=5, width=72, height=72)

ALL_GEOMETRIES = (
    DeviceGeometry(rows=2, cols=3, width=80, height=80),
    ORIGINAL,
    DeviceGeometry(rows=4, cols=8, width=96, height=96),
    DeviceGeometry(rows=2, cols=4, width=120, height=120),
)


@pytest.fixture
def geometry() -> DeviceGeometry:
    return ORIGINAL


@pytest.fixture
def context(geometry) -> BuildContext:
    return BuildContext(geometry, Defaults.from_spec(None))


def _full_config(duplicate_name: bool = False) -> DeckConfig:
    # Five named buttons and three pages, each page covering all 15 keys
    named_buttons = [
        ButtonConfig(
            name="named_button{}".format(i),
            up_face=FaceSpec(color="#FF0000"),
            up_handler=HandlerSpec(code="on_named_button{}_up".format(i)),
            down_handler=HandlerSpec(code="on_named_button{}_down".format(i)),
        )
        for i in range(5)
    ]

    pages = []
    for page_id in range(3):
        entries = []
        for button_id in range(15):
            if duplicate_name and page_id == 0 and button_id == 0:
                name = "named_button0"
            else:
                name = "page{}_button{}".format(page_id, button_id)
            entries.append(PageButtonConfig(
                row=button_id // 5,
                col=button_id % 5,
                button=ButtonConfig(
                    name=name,
                    up_face=FaceSpec(label=TextSpec("page{}_button{}".format(page_id, button_id))),
                    up_handler=HandlerSpec(code="on_page{}_button{}_up".format(page_id, button_id)),
                    down_handler=HandlerSpec(code="on_page{}_button{}_down".format(page_id, button_id)),
                ),
            ))
        pages.append(PageConfig(
            name="page{}".format(page_id),
            buttons=tuple(entries),
            conditions=(ConditionConfig(
                executable=".*page{}_exec.*".format(page_id),
                title=".*page{}_title.*".format(page_id),
            ),),
        ))

    return DeckConfig(
        buttons=tuple(named_buttons),
        pages=tuple(pages),
        default_pages=("page0",),
    )


@pytest.fixture
def make_full_config():
    return _full_config


@pytest.fixture
def full_config() -> DeckConfig:
    return _full_config()
