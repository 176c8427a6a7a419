"""
color.py
========

Minimal ANSI terminal colors for log records and the ``oclkit`` inspector.

Every color function receives and returns a ``str`` so results can be used in
any string formatting situation, and functions compose::

    >>> print(bold(red('Invariant')) + ' ' + grey('IncomeInvariant'))

Coloring is switched off globally with ``set_color_enabled(False)``, by the
``OCLKIT_COLOR=0`` environment variable, by ``NO_COLOR``, or whenever stdout is
not a terminal.
"""

import os
import sys
from typing import Callable, Optional, Union


_color_enabled = os.getenv("OCLKIT_COLOR", "1") == "1" and "NO_COLOR" not in os.environ


def set_color_enabled(flag: bool) -> None:
    global _color_enabled
    _color_enabled = flag


def use_color() -> bool:
    if not _color_enabled:
        return False
    return sys.stdout.isatty()


def esc(*codes: Union[int, str]) -> str:
    """Produces an ANSI escape code from a list of integers"""
    return '\x1b[{}m'.format(';'.join(str(c) for c in codes))


def make_color(start: str, end: str) -> Callable[[str], str]:
    def color_func(s: str) -> str:
        if not use_color():
            return s
        return start + s + end

    return color_func


# 39 resets the foreground only, so colors nest inside bold/underline
END = esc(0)
FG_END = esc(39)

red = make_color(esc(31), FG_END)
green = make_color(esc(32), FG_END)
yellow = make_color(esc(33), FG_END)
blue = make_color(esc(34), FG_END)
magenta = make_color(esc(35), FG_END)
cyan = make_color(esc(36), FG_END)
white = make_color(esc(37), FG_END)
grey = make_color(esc(90), FG_END)
gray = grey

bold = make_color(esc(1), esc(22))
underline = make_color(esc(4), esc(24))

COLORS = {
    'red': red,
    'green': green,
    'yellow': yellow,
    'blue': blue,
    'magenta': magenta,
    'cyan': cyan,
    'white': white,
    'grey': grey,
    'gray': gray,
    'bold': bold,
    'underline': underline,
}


def colorize(txt: str, color: Optional[str] = None) -> str:
    """Apply a named color from COLORS, or return txt unchanged."""
    if color is None:
        return txt
    try:
        return COLORS[color](txt)
    except KeyError:
        raise ValueError(f"Unknown color: {color!r}") from None
