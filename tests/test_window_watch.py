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

import os
import stat
import sys

import psutil
import pytest

from deckhand import window_watch
from deckhand.conditions import WindowInfo
from deckhand.errors import AlreadyStarted, WindowWatcherError
from deckhand.window_watch import (Win32WindowWatcher, WindowWatcher, X11WindowWatcher,
                                   parse_active_window, parse_window_properties,
                                   read_process_command, read_process_executable,
                                   start_window_watcher, watcher_class)

FAKE_XPROP = """#!/bin/sh
if [ "$1" = "-spy" ]; then
    echo '_NET_ACTIVE_WINDOW(WINDOW): window id # 0x1'
    echo '_NET_ACTIVE_WINDOW(WINDOW): window id # 0x1'
    echo '_NET_ACTIVE_WINDOW(WINDOW): window id # 0x0'
    echo '_NET_ACTIVE_WINDOW(WINDOW): window id # 0x2'
else
    echo "_NET_WM_NAME(UTF8_STRING) = \\"window $2\\""
    echo 'WM_CLASS(STRING) = "term", "Term"'
fi
"""


class RecordingWatcher(WindowWatcher):

    def __init__(self):
        self.windows = []
        super().__init__(self.windows.append)


def test_parse_active_window() -> None:
    assert parse_active_window("_NET_ACTIVE_WINDOW(WINDOW): window id # 0x3a00007") == 0x3a00007
    assert parse_active_window("_NET_ACTIVE_WINDOW(WINDOW): window id # 0x0") is None
    assert parse_active_window("_NET_ACTIVE_WINDOW:  not found.") is None


def test_parse_window_properties() -> None:
    props = parse_window_properties(
        '_NET_WM_NAME(UTF8_STRING) = "main.py – Code"\n'
        'WM_NAME(STRING) = "main.py"\n'
        'WM_CLASS(STRING) = "code", "Code"\n'
        '_NET_WM_PID(CARDINAL) = 4242\n'
    )

    assert props == {'title': "main.py – Code", 'class_name': "Code", 'pid': 4242}


def test_parse_window_properties_falls_back_to_wm_name() -> None:
    props = parse_window_properties('WM_NAME(STRING) = "say \\"hi\\""\n_NET_WM_NAME:  not found.\n')
    assert props == {'title': 'say "hi"'}


class FakeProcess:

    def __init__(self, pid):
        if pid != 42:
            raise psutil.NoSuchProcess(pid)
        self.pid = pid

    def cmdline(self):
        return ["/usr/bin/vim", "notes.txt"]

    def exe(self):
        raise psutil.AccessDenied(self.pid)


def test_read_process_command(monkeypatch) -> None:
    monkeypatch.setattr(window_watch.psutil, "Process", FakeProcess)

    assert read_process_command(42) == "/usr/bin/vim notes.txt"
    assert read_process_command(43) == ""
    assert read_process_command(None) == ""


def test_read_process_executable(monkeypatch) -> None:
    monkeypatch.setattr(window_watch.psutil, "Process", FakeProcess)

    # Access denied and vanished processes both read as unknown
    assert read_process_executable(42) == ""
    assert read_process_executable(43) == ""
    assert read_process_executable(0) == ""


def test_same_window_is_reported_once() -> None:
    watcher = RecordingWatcher()
    first = WindowInfo("a", "", "")
    second = WindowInfo("b", "", "")

    watcher.emit(1, first)
    watcher.emit(1, first)
    watcher.emit(2, second)
    watcher.emit(1, first)

    assert watcher.windows == [first, second, first]


def test_watcher_class() -> None:
    assert watcher_class("win32") is Win32WindowWatcher
    assert watcher_class("linux") is X11WindowWatcher
    assert watcher_class("freebsd13") is X11WindowWatcher
    with pytest.raises(WindowWatcherError):
        watcher_class("darwin")


def test_missing_xprop() -> None:
    watcher = X11WindowWatcher(lambda window: None, xprop="no-such-xprop-binary")
    with pytest.raises(WindowWatcherError):
        watcher.check()


def test_only_one_watcher_per_process(monkeypatch) -> None:
    monkeypatch.setattr(window_watch, "_started", True)

    with pytest.raises(AlreadyStarted):
        start_window_watcher(lambda window: None)


def test_failed_start_can_be_retried(monkeypatch) -> None:
    monkeypatch.setattr(window_watch, "_started", False)

    with pytest.raises(WindowWatcherError) as excinfo:
        start_window_watcher(lambda window: None, platform="darwin")

    assert not isinstance(excinfo.value, AlreadyStarted)
    assert window_watch._started is False


@pytest.mark.skipif(sys.platform.startswith("win"), reason="needs a POSIX shell")
def test_x11_watcher_reports_focus_changes(tmp_path) -> None:
    xprop = tmp_path / "xprop"
    xprop.write_text(FAKE_XPROP)
    xprop.chmod(xprop.stat().st_mode | stat.S_IXUSR)
    windows = []

    watcher = X11WindowWatcher(windows.append, xprop=str(xprop))
    with pytest.raises(WindowWatcherError):
        # Ends when the fake xprop exits
        watcher.watch()

    assert windows == [
        WindowInfo(title="window 0x1", executable="", class_name="Term"),
        WindowInfo(title="window 0x2", executable="", class_name="Term"),
    ]


def test_read_own_process() -> None:
    assert read_process_command(os.getpid())
    assert os.path.basename(read_process_executable(os.getpid()))
