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

import re
from collections import namedtuple

from .errors import ConditionError

# Identity of the window in the foreground, as reported by the window watcher
WindowInfo = namedtuple('WindowInfo', 'title executable class_name')

# Condition as configured: regular expressions, each optional
ConditionConfig = namedtuple(
    'ConditionConfig',
    'title executable class_name',
    defaults=(None, None, None),
)


def _compile(field, pattern):
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConditionError("invalid {} pattern {!r}: {}".format(field, pattern, e)) from e


class ForegroundWindowCondition:
    """
    Condition on the foreground window

    A missing pattern always matches. The condition holds if every present
    pattern matches somewhere in the corresponding window field.
    """

    FIELDS = ('title', 'executable', 'class_name')

    def __init__(self, title=None, executable=None, class_name=None):
        self.title = title
        self.executable = executable
        self.class_name = class_name

    @classmethod
    def from_config(cls, config):
        """
        Compile a ConditionConfig

        Raises:
            ConditionError: a pattern is not a valid regular expression
        """
        return cls(*(_compile(field, getattr(config, field)) for field in cls.FIELDS))

    def matches(self, window):
        for field in self.FIELDS:
            pattern = getattr(self, field)
            if pattern is not None and not pattern.search(getattr(window, field)):
                return False
        return True

    def __repr__(self):
        patterns = ("{}={!r}".format(f, getattr(self, f).pattern)
                    for f in self.FIELDS if getattr(self, f) is not None)
        return "ForegroundWindowCondition({})".format(", ".join(patterns))
