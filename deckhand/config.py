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
Configuration file loading

The configuration is an INI file:

    [General]
    Verbose = true
    Brightness = 30
    FontFile = Roboto-Regular.ttf
    DefaultPages = main, media
    InitScript = print("ready")          (or InitScriptFile = init.py)

    [defaults]
    BackgroundColor = #000000
    LabelColor = 255, 255, 255
    SublabelColor = #00FFFF
    SuperlabelColor = #FFFF00

    [button.NAME]
    UpColor, UpImage, UpLabel, UpLabelColor, UpSublabel, UpSublabelColor,
    UpSuperlabel, UpSuperlabelColor, UpHandler, UpHandlerFile
    (and the same keys with the Down prefix)

    [page.NAME]
    UnloadIfNotMatching = false

    [page.NAME.condition.ID]
    Title = regex
    Executable = regex
    Class = regex

    [page.NAME.button.ROW.COL]
    Button = NAME                        (reference to a named button)
    or inline: optional Name plus the Up/Down keys of [button.NAME]

ROW and COL may be negative to count from the bottom/left edge. Relative
file paths are resolved against the directory of the configuration file.
Indentation of multi-line values is not preserved by the INI format, so
handlers with Python blocks belong in a HandlerFile.
"""

import configparser
import os
import re
from collections import namedtuple

from .buttons import ButtonConfig
from .conditions import ConditionConfig
from .defaults import DefaultsSpec
from .errors import ConfigError
from .faces import FaceSpec, TextSpec
from .handlers import HandlerSpec
from .pages import PageButtonConfig, PageConfig

# base_dir is where relative paths given at runtime (by scripts) are resolved
DeckConfig = namedtuple(
    'DeckConfig',
    'defaults buttons pages default_pages init_handler font_file brightness verbose base_dir',
    defaults=(None, (), (), (), None, None, 30, False, '.'),
)

GENERAL_SECTION = 'General'
DEFAULTS_SECTION = 'defaults'

BUTTON_SECTION = re.compile(r'^button\.(?P<name>.+)$')
PAGE_SECTION = re.compile(r'^page\.(?P<page>[^.]+)$')
CONDITION_SECTION = re.compile(r'^page\.(?P<page>[^.]+)\.condition\.(?P<id>[^.]+)$')
PAGE_BUTTON_SECTION = re.compile(
    r'^page\.(?P<page>[^.]+)\.button\.(?P<row>-?\d+)\.(?P<col>-?\d+)$')

FACE_KEYS = ('color', 'image', 'label', 'labelcolor', 'sublabel',
             'sublabelcolor', 'superlabel', 'superlabelcolor')
HANDLER_KEYS = ('handler', 'handlerfile')


def parse_color(value):
    """
    Parse a color option

    "#RRGGBB" / "#RRGGBBAA" stay strings, "r, g, b" becomes an int triple.
    Validation happens when the color is resolved.
    """
    value = value.strip()
    if value.startswith('#'):
        return value
    parts = [p.strip() for p in value.split(',')]
    try:
        return tuple(int(p) for p in parts)
    except ValueError:
        raise ConfigError("invalid color value: {!r}".format(value)) from None


def parse_list(value):
    return [item.strip() for item in value.split(',') if item.strip()]


def resolve_path(value, base_dir):
    """Absolute paths (after ~ expansion) stay, relative ones join base_dir"""
    if value is None:
        return None
    value = os.path.expanduser(value)
    return value if os.path.isabs(value) else os.path.join(base_dir, value)


class ConfigLoader:
    """
    Turns a parsed INI file into a DeckConfig

    Args:
        parser: ConfigParser holding the file
        base_dir: directory relative paths are resolved against
    """

    def __init__(self, parser, base_dir='.'):
        self.config = parser
        self.base_dir = base_dir

    def path(self, value):
        return resolve_path(value, self.base_dir)

    def color(self, opts, key):
        value = opts.get(key)
        return None if value is None else parse_color(value)

    def face(self, opts, prefix):
        """Read the face with the given prefix ('up' or 'down'), None if absent"""
        if not any(prefix + k in opts for k in FACE_KEYS):
            return None

        def text(kind):
            value = opts.get(prefix + kind)
            if value is None:
                return None
            return TextSpec(value, self.color(opts, prefix + kind + 'color'))

        return FaceSpec(
            color=self.color(opts, prefix + 'color'),
            image=self.path(opts.get(prefix + 'image')),
            label=text('label'),
            sublabel=text('sublabel'),
            superlabel=text('superlabel'),
        )

    def handler(self, opts, code_key, file_key):
        code = opts.get(code_key)
        file = opts.get(file_key)
        if code is None and file is None:
            return None
        if code is not None and file is not None:
            raise ConfigError("{} and {} are mutually exclusive".format(code_key, file_key))
        return HandlerSpec(code=code, file=self.path(file))

    def button(self, opts, name):
        return ButtonConfig(
            name=name,
            up_face=self.face(opts, 'up'),
            down_face=self.face(opts, 'down'),
            up_handler=self.handler(opts, 'uphandler', 'uphandlerfile'),
            down_handler=self.handler(opts, 'downhandler', 'downhandlerfile'),
        )

    def has_button_keys(self, opts):
        for prefix in ('up', 'down'):
            if any(prefix + k in opts for k in FACE_KEYS + HANDLER_KEYS):
                return True
        return False

    def defaults(self):
        if DEFAULTS_SECTION not in self.config.sections():
            return None
        opts = self.config[DEFAULTS_SECTION]
        return DefaultsSpec(
            background=self.color(opts, 'BackgroundColor'),
            label=self.color(opts, 'LabelColor'),
            sublabel=self.color(opts, 'SublabelColor'),
            superlabel=self.color(opts, 'SuperlabelColor'),
        )

    def page_button(self, section, row, col):
        opts = self.config[section]
        reference = opts.get('Button')
        if reference is not None:
            if self.has_button_keys(opts) or 'name' in opts:
                raise ConfigError(
                    "[{}]: Button cannot be combined with inline button settings".format(section))
            return PageButtonConfig(row, col, reference.strip())
        return PageButtonConfig(row, col, self.button(opts, opts.get('Name')))

    def load(self):
        """
        Build the DeckConfig

        Raises:
            ConfigError: invalid values or contradicting settings
        """
        if GENERAL_SECTION in self.config.sections():
            general = self.config[GENERAL_SECTION]
        else:
            self.config[GENERAL_SECTION] = {}
            general = self.config[GENERAL_SECTION]

        try:
            verbose = general.getboolean('Verbose', False)
            brightness = general.getint('Brightness', 30)
        except ValueError as e:
            raise ConfigError("[{}]: {}".format(GENERAL_SECTION, e)) from e

        buttons = []
        page_order = []
        page_opts = {}
        page_buttons = {}
        page_conditions = {}

        # Sections are handled in file order, which is the binding order
        for section in self.config.sections():
            if m := BUTTON_SECTION.match(section):
                buttons.append(self.button(self.config[section], m.group('name')))
            elif m := PAGE_SECTION.match(section):
                page_opts[m.group('page')] = self.config[section]
                if m.group('page') not in page_order:
                    page_order.append(m.group('page'))
            elif m := CONDITION_SECTION.match(section):
                opts = self.config[section]
                page_conditions.setdefault(m.group('page'), []).append(ConditionConfig(
                    title=opts.get('Title'),
                    executable=opts.get('Executable'),
                    class_name=opts.get('Class'),
                ))
            elif m := PAGE_BUTTON_SECTION.match(section):
                page = m.group('page')
                entry = self.page_button(section, int(m.group('row')), int(m.group('col')))
                page_buttons.setdefault(page, []).append(entry)
                if page not in page_order:
                    page_order.append(page)

        for page in page_conditions:
            if page not in page_order:
                page_order.append(page)

        pages = []
        for page in page_order:
            opts = page_opts.get(page)
            try:
                unload = opts.getboolean('UnloadIfNotMatching', False) if opts else False
            except ValueError as e:
                raise ConfigError("[page.{}]: {}".format(page, e)) from e
            pages.append(PageConfig(
                name=page,
                buttons=tuple(page_buttons.get(page, ())),
                conditions=tuple(page_conditions.get(page, ())),
                unload_if_not_matching=unload,
            ))

        return DeckConfig(
            defaults=self.defaults(),
            buttons=tuple(buttons),
            pages=tuple(pages),
            default_pages=tuple(parse_list(general.get('DefaultPages', ''))),
            init_handler=self.handler(general, 'InitScript', 'InitScriptFile'),
            font_file=self.path(general.get('FontFile')),
            brightness=brightness,
            verbose=verbose,
            base_dir=self.base_dir,
        )


def new_parser():
    # No interpolation: handler code may contain '%'
    return configparser.ConfigParser(interpolation=None)


def load_config_string(text, base_dir='.'):
    """Parse configuration text (see module docstring)"""
    parser = new_parser()
    try:
        parser.read_string(text)
    except configparser.Error as e:
        raise ConfigError(str(e)) from e
    return ConfigLoader(parser, base_dir).load()


def load_config(path):
    """
    Load a configuration file

    Raises:
        ConfigError: file unreadable or invalid
    """
    parser = new_parser()
    try:
        with open(path, encoding='utf-8') as f:
            parser.read_file(f)
    except OSError as e:
        raise ConfigError("cannot read configuration {}: {}".format(path, e)) from e
    except configparser.Error as e:
        raise ConfigError(str(e)) from e
    return ConfigLoader(parser, os.path.dirname(os.path.abspath(path))).load()
