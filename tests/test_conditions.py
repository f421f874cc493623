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

from deckhand.conditions import ConditionConfig, ForegroundWindowCondition, WindowInfo
from deckhand.errors import ConditionError, ConfigError

WINDOW = WindowInfo(title="notes.txt - Editor", executable="/usr/bin/editor --new", class_name="Editor")


def test_all_patterns_must_match() -> None:
    condition = ForegroundWindowCondition.from_config(
        ConditionConfig(title="notes", executable="editor", class_name="Editor"))
    assert condition.matches(WINDOW)

    condition = ForegroundWindowCondition.from_config(
        ConditionConfig(title="notes", executable="browser"))
    assert not condition.matches(WINDOW)


def test_patterns_match_anywhere() -> None:
    assert ForegroundWindowCondition.from_config(ConditionConfig(title="txt")).matches(WINDOW)
    assert not ForegroundWindowCondition.from_config(ConditionConfig(title="^txt")).matches(WINDOW)
    assert ForegroundWindowCondition.from_config(ConditionConfig(title="^notes")).matches(WINDOW)


def test_missing_patterns_match_everything() -> None:
    condition = ForegroundWindowCondition.from_config(ConditionConfig())

    assert condition.matches(WINDOW)
    assert condition.matches(WindowInfo("", "", ""))


def test_class_pattern() -> None:
    assert ForegroundWindowCondition.from_config(ConditionConfig(class_name="^Editor$")).matches(WINDOW)
    assert not ForegroundWindowCondition.from_config(ConditionConfig(class_name="Term")).matches(WINDOW)


def test_invalid_pattern() -> None:
    with pytest.raises(ConditionError) as excinfo:
        ForegroundWindowCondition.from_config(ConditionConfig(executable="(unclosed"))

    assert isinstance(excinfo.value, ConfigError)
    assert "executable" in str(excinfo.value)


def test_repr_lists_patterns() -> None:
    condition = ForegroundWindowCondition.from_config(ConditionConfig(title="a"))
    assert repr(condition) == "ForegroundWindowCondition(title='a')"
