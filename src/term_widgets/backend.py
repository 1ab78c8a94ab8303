"""
Terminal backend for the widget layer.

Regions are rectangular cell buffers allocated on the screen of a Blessed
Terminal. Widgets write characters and attributes into their regions and
flush them with refresh(); nothing reaches the physical display before that.
"""

import logging
from contextlib import ExitStack, contextmanager
from enum import IntFlag
from typing import List, Optional, Tuple

from blessed import Terminal
from blessed.keyboard import Keystroke

from .errors import LayoutError

log = logging.getLogger(__name__)


class Attr(IntFlag):
    """Display attributes that can be toggled on and off for a region."""
    NORMAL = 0
    REVERSE = 1
    BOLD = 2
    UNDERLINE = 4


class Glyph:
    """Line-drawing glyphs."""
    HLINE = '─'
    VLINE = '│'
    ULCORNER = '┌'
    URCORNER = '┐'
    LLCORNER = '└'
    LRCORNER = '┘'
    LTEE = '├'
    RTEE = '┤'
    TTEE = '┬'
    BTEE = '┴'
    PLUS = '┼'


BLANK = (' ', Attr.NORMAL)


class RegionHandle:
    """A rectangle of the screen owned by exactly one surface.

    Attributes:
        height, width, y, x: Bounds on the screen
        cells: Rows of (character, attribute) pairs
        attr: Attribute applied to subsequent writes
        cursor: (y, x) cursor position relative to the region
        keypad: Whether read_key() decodes special keys by default
        dirty: Rows to repaint on the next refresh
        released: Whether the region has been handed back to the backend
    """

    def __init__(self, height: int, width: int, y: int, x: int):
        self.height = height
        self.width = width
        self.y = y
        self.x = x
        self.cells = [[BLANK] * width for _ in range(height)]
        self.attr = Attr.NORMAL
        self.cursor = (0, 0)
        self.keypad = False
        self.dirty = set(range(height))
        self.released = False

    def __repr__(self):
        return f'RegionHandle({self.height}, {self.width}, {self.y}, {self.x})'


class TerminalBackend:
    """Screen regions, key input and terminal modes on top of Blessed.

    Attributes:
        term: Blessed Terminal instance
        cursor_visible: Whether the hardware cursor is currently shown
    """

    def __init__(self, term: Optional[Terminal] = None):
        self.term = term or Terminal()
        self.cursor_visible = True
        self._regions: List[RegionHandle] = []
        self._cbreak: Optional[ExitStack] = None

    def screen_limits(self) -> Tuple[int, int]:
        """Return (max_height, max_width) of the screen."""
        return self.term.height, self.term.width

    def check_region(self, height, width, y, x):
        """Raise LayoutError unless the region fits on the screen."""
        max_height, max_width = self.screen_limits()
        if min(height, width, y, x) < 0:
            raise LayoutError(
                f'negative region bounds: {height}x{width} at ({y}, {x})'
            )
        if y + height > max_height or x + width > max_width:
            raise LayoutError(
                f'region {height}x{width} at ({y}, {x}) exceeds the '
                f'{max_height}x{max_width} screen'
            )

    @staticmethod
    def _check_live(handle: RegionHandle):
        if handle.released:
            raise RuntimeError(f'{handle!r} has been released')

    def allocate_region(self, height: int, width: int, y: int, x: int) -> RegionHandle:
        """Allocate a region of the screen."""
        self.check_region(height, width, y, x)
        handle = RegionHandle(height, width, y, x)
        self._regions.append(handle)
        log.debug('allocated %r', handle)
        return handle

    def release(self, handle: RegionHandle):
        """Hand a region back. Its cells are not erased from the display."""
        self._check_live(handle)
        handle.released = True
        self._regions.remove(handle)
        log.debug('released %r', handle)

    def write_text(self, handle: RegionHandle, y: int, x: int, text: str):
        """Write text starting at (y, x), clipped at the region's edge."""
        self._check_live(handle)
        if not 0 <= y < handle.height:
            return
        row = handle.cells[y]
        for offset, char in enumerate(text):
            col = x + offset
            if 0 <= col < handle.width:
                row[col] = (char, handle.attr)
        handle.dirty.add(y)
        handle.cursor = (y, max(0, min(x + len(text), handle.width - 1)))

    def write_char(self, handle: RegionHandle, y: int, x: int, glyph: str):
        """Write a single character or line-drawing glyph at (y, x)."""
        self._check_live(handle)
        if 0 <= y < handle.height and 0 <= x < handle.width:
            handle.cells[y][x] = (glyph, handle.attr)
            handle.dirty.add(y)

    def draw_border(self, handle: RegionHandle):
        """Draw a box around the full extent of the region."""
        self._check_live(handle)
        bottom, right = handle.height - 1, handle.width - 1
        for col in range(1, right):
            handle.cells[0][col] = (Glyph.HLINE, Attr.NORMAL)
            handle.cells[bottom][col] = (Glyph.HLINE, Attr.NORMAL)
        for row in range(1, bottom):
            handle.cells[row][0] = (Glyph.VLINE, Attr.NORMAL)
            handle.cells[row][right] = (Glyph.VLINE, Attr.NORMAL)
        handle.cells[0][0] = (Glyph.ULCORNER, Attr.NORMAL)
        handle.cells[0][right] = (Glyph.URCORNER, Attr.NORMAL)
        handle.cells[bottom][0] = (Glyph.LLCORNER, Attr.NORMAL)
        handle.cells[bottom][right] = (Glyph.LRCORNER, Attr.NORMAL)
        handle.dirty.update(range(handle.height))

    def erase(self, handle: RegionHandle):
        """Blank every cell, repainting only rows that had content."""
        self._check_live(handle)
        for row, cells in enumerate(handle.cells):
            if any(cell != BLANK for cell in cells):
                handle.cells[row] = [BLANK] * handle.width
                handle.dirty.add(row)
        handle.cursor = (0, 0)

    def clear(self, handle: RegionHandle):
        """Blank every cell and repaint the whole region on the next refresh."""
        self._check_live(handle)
        handle.cells = [[BLANK] * handle.width for _ in range(handle.height)]
        handle.dirty.update(range(handle.height))
        handle.cursor = (0, 0)

    def clear_to_eol(self, handle: RegionHandle, y: int, x: int):
        """Blank a row from column x to the right edge."""
        self._check_live(handle)
        if not 0 <= y < handle.height:
            return
        start = max(0, x)
        handle.cells[y][start:] = [BLANK] * (handle.width - start)
        handle.dirty.add(y)
        handle.cursor = (y, min(start, handle.width - 1))

    def resize(self, handle: RegionHandle, height: int, width: int):
        """Resize a region in place, keeping the overlapping cells."""
        self._check_live(handle)
        self.check_region(height, width, handle.y, handle.x)
        cells = [[BLANK] * width for _ in range(height)]
        for row in range(min(height, handle.height)):
            cols = min(width, handle.width)
            cells[row][:cols] = handle.cells[row][:cols]
        handle.cells = cells
        handle.height = height
        handle.width = width
        handle.dirty = set(range(height))
        cy, cx = handle.cursor
        handle.cursor = (min(cy, max(0, height - 1)), min(cx, max(0, width - 1)))
        log.debug('resized %r', handle)

    def move_cursor(self, handle: RegionHandle, y: int, x: int):
        """Move the region's cursor; it is shown at the next refresh."""
        self._check_live(handle)
        handle.cursor = (y, x)

    def attribute_on(self, handle: RegionHandle, attr: Attr):
        handle.attr |= attr

    def attribute_off(self, handle: RegionHandle, attr: Attr):
        handle.attr &= ~attr

    def attribute_set(self, handle: RegionHandle, attr: Attr):
        handle.attr = Attr(attr)

    def _styled(self, text: str, attr: Attr) -> str:
        if not attr:
            return text
        prefix = ''
        if attr & Attr.REVERSE:
            prefix += self.term.reverse
        if attr & Attr.BOLD:
            prefix += self.term.bold
        if attr & Attr.UNDERLINE:
            prefix += self.term.underline
        return prefix + text + self.term.normal

    def _render_row(self, cells) -> str:
        out = ''
        run, run_attr = '', Attr.NORMAL
        for char, attr in cells:
            if attr != run_attr and run:
                out += self._styled(run, run_attr)
                run = ''
            run_attr = attr
            run += char
        return out + self._styled(run, run_attr)

    def refresh(self, handle: RegionHandle):
        """Flush the region's changed rows to the display."""
        self._check_live(handle)
        out = ''
        for row in sorted(handle.dirty):
            out += (
                self.term.move(handle.y + row, handle.x) +
                self._render_row(handle.cells[row])
            )
        handle.dirty.clear()
        if self.cursor_visible:
            cy, cx = handle.cursor
            out += self.term.move(handle.y + cy, handle.x + cx)
        print(out, end='', flush=True)

    def set_keypad(self, handle: RegionHandle, flag: bool):
        """Set whether read_key() decodes special keys for this region."""
        handle.keypad = flag

    def read_key(self, handle: RegionHandle, keypad: Optional[bool] = None) -> Keystroke:
        """Block until a key is available and return it.

        With keypad mode off, escape sequences are returned undecoded.
        """
        self._check_live(handle)
        if keypad is None:
            keypad = handle.keypad
        key = self.term.inkey()
        if not keypad and key.is_sequence:
            return Keystroke(str(key))
        return key

    def set_echo(self, flag: bool):
        """Turn echo (and line buffering) of typed keys on or off."""
        if not flag and self._cbreak is None:
            self._cbreak = ExitStack()
            self._cbreak.enter_context(self.term.cbreak())
        elif flag and self._cbreak is not None:
            self._cbreak.close()
            self._cbreak = None

    def set_cursor_visible(self, flag: bool):
        """Show or hide the hardware cursor."""
        if flag != self.cursor_visible:
            self.cursor_visible = flag
            print(self.term.normal_cursor if flag else self.term.hide_cursor,
                  end='', flush=True)

    def snapshot(self, handle: RegionHandle) -> List[str]:
        """Return the characters of the region, one string per row."""
        return [''.join(char for char, _ in row) for row in handle.cells]

    def attr_at(self, handle: RegionHandle, y: int, x: int) -> Attr:
        return handle.cells[y][x][1]

    @contextmanager
    def session(self):
        """Run widgets on the full screen, restoring terminal modes on exit."""
        with self.term.fullscreen():
            print(self.term.clear, end='', flush=True)
            try:
                yield self
            finally:
                self.set_echo(True)
                self.set_cursor_visible(True)
