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
Foreground window watchers

A watcher runs in a daemon thread and calls on_window(WindowInfo) once at
start and then whenever another window gets the focus. Only one watcher
may run per process; starting a second one raises AlreadyStarted.

On X11 the watcher follows _NET_ACTIVE_WINDOW with `xprop -spy` and reads
the command line of the owning process through psutil. On Windows it polls
GetForegroundWindow through ctypes and reports the executable path.
"""

import os
import re
import shutil
import subprocess
import sys
import threading
import time

import psutil

from .conditions import WindowInfo
from .errors import AlreadyStarted, WindowWatcherError
from .log import vprint

ACTIVE_WINDOW_RE = re.compile(r'window id # (0x[0-9a-fA-F]+)')
PROPERTY_RE = re.compile(r'^(?P<name>[A-Z_]+)\((?P<type>[A-Z0-9_]+)\) = (?P<value>.*)$')
QUOTED_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')

_start_lock = threading.Lock()
_started = False


def parse_active_window(line):
    """Window id from a `xprop -root _NET_ACTIVE_WINDOW` line, or None"""
    m = ACTIVE_WINDOW_RE.search(line)
    if m is None:
        return None
    window_id = int(m.group(1), 16)
    return window_id or None


def parse_window_properties(text):
    """
    Parse `xprop -id ...` output

    Returns:
        dict with the keys title, class_name and pid (missing ones omitted)
    """
    result = {}
    for line in text.splitlines():
        m = PROPERTY_RE.match(line.strip())
        if m is None:
            continue
        name, value = m.group('name'), m.group('value')
        strings = [s.replace('\\"', '"').replace('\\\\', '\\') for s in QUOTED_RE.findall(value)]
        if name in ('_NET_WM_NAME', 'WM_NAME') and strings:
            # Prefer _NET_WM_NAME (UTF-8) over WM_NAME
            if name == '_NET_WM_NAME' or 'title' not in result:
                result['title'] = strings[0]
        elif name == 'WM_CLASS' and strings:
            # WM_CLASS holds "instance", "class"
            result['class_name'] = strings[-1]
        elif name == '_NET_WM_PID':
            try:
                result['pid'] = int(value.strip())
            except ValueError:
                pass
    return result


def read_process_command(pid):
    """Command line of a process, arguments separated by spaces ('' if unknown)"""
    if not pid:
        return ''
    try:
        return " ".join(psutil.Process(pid).cmdline())
    except psutil.Error:
        return ''


def read_process_executable(pid):
    """Executable path of a process ('' if unknown)"""
    if not pid:
        return ''
    try:
        return psutil.Process(pid).exe()
    except psutil.Error:
        return ''


class WindowWatcher:
    """
    Base class of the platform watchers

    Args:
        on_window: callable receiving each new WindowInfo
    """

    def __init__(self, on_window):
        self.on_window = on_window
        self._last_window = None
        self.thread = None

    def start(self):
        self.thread = threading.Thread(target=self._run, name='window-watcher', daemon=True)
        self.thread.start()
        return self

    def _run(self):
        try:
            self.watch()
        except WindowWatcherError as e:
            vprint("Window watcher stopped: {}".format(e))

    def emit(self, window_id, info):
        # Same window again: nothing changed
        if window_id == self._last_window:
            return
        self._last_window = window_id
        self.on_window(info)

    def watch(self):
        raise NotImplementedError


class X11WindowWatcher(WindowWatcher):

    def __init__(self, on_window, xprop='xprop'):
        super().__init__(on_window)
        self.xprop = xprop

    def check(self):
        if shutil.which(self.xprop) is None:
            raise WindowWatcherError("{} not found, cannot follow the foreground window".format(self.xprop))
        if not os.environ.get('DISPLAY'):
            raise WindowWatcherError("DISPLAY is not set")

    def window_info(self, window_id):
        result = subprocess.run(
            [self.xprop, '-id', hex(window_id), '_NET_WM_NAME', 'WM_NAME', 'WM_CLASS', '_NET_WM_PID'],
            capture_output=True, text=True, errors='replace',
        )
        props = parse_window_properties(result.stdout)
        return WindowInfo(
            title=props.get('title', ''),
            executable=read_process_command(props.get('pid')),
            class_name=props.get('class_name', ''),
        )

    def watch(self):
        try:
            proc = subprocess.Popen(
                [self.xprop, '-spy', '-root', '_NET_ACTIVE_WINDOW'],
                stdout=subprocess.PIPE, text=True, errors='replace',
            )
        except OSError as e:
            raise WindowWatcherError("cannot run {}: {}".format(self.xprop, e)) from e

        # The first line reports the window focused right now
        for line in proc.stdout:
            window_id = parse_active_window(line)
            if window_id is None:
                vprint("No active window selected")
                continue
            self.emit(window_id, self.window_info(window_id))

        raise WindowWatcherError("{} exited with status {}".format(self.xprop, proc.wait()))


class Win32WindowWatcher(WindowWatcher):

    def __init__(self, on_window, interval=0.25):
        super().__init__(on_window)
        self.interval = interval

    def check(self):
        pass

    def window_info(self, hwnd):
        import ctypes
        from ctypes import wintypes

        user32 = ctypes.windll.user32

        length = user32.GetWindowTextLengthW(hwnd)
        title = ctypes.create_unicode_buffer(length + 1)
        user32.GetWindowTextW(hwnd, title, length + 1)

        class_name = ctypes.create_unicode_buffer(256)
        user32.GetClassNameW(hwnd, class_name, 256)

        pid = wintypes.DWORD()
        user32.GetWindowThreadProcessId(hwnd, ctypes.byref(pid))

        return WindowInfo(
            title=title.value,
            executable=read_process_executable(pid.value),
            class_name=class_name.value,
        )

    def watch(self):
        import ctypes

        user32 = ctypes.windll.user32
        while True:
            hwnd = int(user32.GetForegroundWindow() or 0)
            if hwnd:
                self.emit(hwnd, self.window_info(hwnd))
            time.sleep(self.interval)


def watcher_class(platform=None):
    platform = sys.platform if platform is None else platform
    if platform.startswith('win'):
        return Win32WindowWatcher
    if platform.startswith('linux') or 'bsd' in platform:
        return X11WindowWatcher
    raise WindowWatcherError("no foreground window watcher for platform {}".format(platform))


def start_window_watcher(on_window, platform=None):
    """
    Start the foreground window watcher for this platform

    Args:
        on_window: callable receiving each new WindowInfo (runs on the
            watcher thread, so it should only queue the value)
        platform: sys.platform style name, defaults to the running one

    Returns:
        the started watcher

    Raises:
        AlreadyStarted: a watcher was started before
        WindowWatcherError: the platform cannot be watched
    """
    global _started
    with _start_lock:
        if _started:
            raise AlreadyStarted("foreground window watcher already started")
        watcher = watcher_class(platform)(on_window)
        watcher.check()
        _started = True
    return watcher.start()
