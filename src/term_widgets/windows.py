"""
Surfaces for terminal widgets.

This module provides the rectangle arithmetic and the three layers of
drawing surfaces widgets are built from: a plain Surface, a Surface framed
by a border, and a bordered Surface with a title bar. Each layer owns the
layer below it and releases what it allocated, innermost first.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from blessed.keyboard import Keystroke

from .backend import Attr, TerminalBackend
from .errors import LayoutError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A rectangle on the screen (size first, then position)."""
    height: int
    width: int
    y: int = 0
    x: int = 0

    def __post_init__(self):
        if min(self.height, self.width, self.y, self.x) < 0:
            raise LayoutError(f'negative bounds in {self}')

    def inset(self, top=0, left=0, bottom=0, right=0) -> 'Region':
        """Return the region shrunk by the given number of cells per side."""
        return Region(
            self.height - top - bottom,
            self.width - left - right,
            self.y + top,
            self.x + left,
        )

    def contains(self, other: 'Region') -> bool:
        """Whether other lies entirely within this region."""
        return (
            other.y >= self.y and other.x >= self.x and
            other.y + other.height <= self.y + self.height and
            other.x + other.width <= self.x + self.width
        )

    @classmethod
    def centered(cls, height: int, width: int, limits: Tuple[int, int]) -> 'Region':
        """A region of the given size centered within (max_height, max_width)."""
        max_height, max_width = limits
        return cls(height, width, (max_height - height) // 2, (max_width - width) // 2)


def child_region(parent: Region, child: Region) -> Region:
    """Return child, raising LayoutError unless it lies within parent."""
    if not parent.contains(child):
        raise LayoutError(f'{child} does not fit within {parent}')
    return child


class Surface:
    """An owned region of the screen with drawing and input primitives.

    Attributes:
        backend: TerminalBackend the region was allocated from
        region: Bounds of the surface
        handle: Backend handle, None once closed
    """

    def __init__(self, backend: TerminalBackend, region: Region):
        self.backend = backend
        self.region = region
        self.handle = backend.allocate_region(
            region.height, region.width, region.y, region.x
        )

    @property
    def height(self):
        return self.region.height

    @property
    def width(self):
        return self.region.width

    @property
    def closed(self):
        return self.handle is None

    def write(self, y: int, x: int, text: str):
        self.backend.write_text(self.handle, y, x, text)

    def add_char(self, y: int, x: int, glyph: str):
        self.backend.write_char(self.handle, y, x, glyph)

    def draw_border(self):
        self.backend.draw_border(self.handle)

    def clear(self):
        self.backend.clear(self.handle)

    def erase(self):
        self.backend.erase(self.handle)

    def clear_to_eol(self, y: int, x: int = 0):
        self.backend.clear_to_eol(self.handle, y, x)

    def refresh(self):
        self.backend.refresh(self.handle)

    def touch(self):
        """Mark the whole surface for repainting on the next refresh."""
        self.handle.dirty.update(range(self.handle.height))

    def resize(self, height: int, width: int):
        self.backend.resize(self.handle, height, width)
        self.region = replace(self.region, height=height, width=width)

    def move_cursor(self, y: int, x: int):
        self.backend.move_cursor(self.handle, y, x)

    def set_keypad(self, flag: bool):
        self.backend.set_keypad(self.handle, flag)

    def read_key(self, keypad: Optional[bool] = None) -> Keystroke:
        """Refresh the surface, then block until a key is pressed."""
        self.refresh()
        return self.backend.read_key(self.handle, keypad)

    def attribute_on(self, attr: Attr):
        self.backend.attribute_on(self.handle, attr)

    def attribute_off(self, attr: Attr):
        self.backend.attribute_off(self.handle, attr)

    def attribute_set(self, attr: Attr):
        self.backend.attribute_set(self.handle, attr)

    def snapshot(self):
        return self.backend.snapshot(self.handle)

    def close(self):
        """Erase the surface from the display and release its region."""
        if self.handle is None:
            return
        self.backend.erase(self.handle)
        self.backend.refresh(self.handle)
        self.backend.release(self.handle)
        self.handle = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class BorderedSurface:
    """A content Surface inset by one cell inside a border frame.

    Attributes:
        region: Outer bounds, including the border
        frame: Surface the border is drawn on
        content: Surface inside the border
    """

    def __init__(self, backend: TerminalBackend, region: Region):
        self.backend = backend
        self.region = region
        self.frame = Surface(backend, region)
        self.content = Surface(backend, child_region(region, region.inset(1, 1, 1, 1)))

        self.frame.draw_border()
        self.frame.refresh()

    def set_content_inset(self, top=1, left=1, bottom=1, right=1):
        """Release the content surface and allocate it again at a new inset."""
        inner = child_region(self.region, self.region.inset(top, left, bottom, right))
        self.content.close()
        self.content = Surface(self.backend, inner)
        log.debug('content of %s re-derived as %s', self.region, self.content.region)

    def refresh(self):
        repainted = bool(self.frame.handle.dirty)
        self.frame.refresh()
        if repainted:
            self.content.touch()
        self.content.refresh()

    def close(self):
        self.content.close()
        self.frame.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class TitledSurface:
    """A bordered surface with a boxed, centered title bar above its content.

    The title bar is TITLE_HEIGHT rows directly under the top border, and the
    content starts below it. Border and title together consume
    DECORATION_HEIGHT rows and two columns, so a usable TitledSurface needs
    height > 5 and width > 2.

    Attributes:
        title: Title text
        bordered: The BorderedSurface holding frame and content
        title_bar: Surface the title is drawn on
    """

    TITLE_HEIGHT = 3
    DECORATION_HEIGHT = 5
    CONFIRM_LABEL = '[ OK ]'

    def __init__(self, backend: TerminalBackend, title: str, region: Region):
        self.backend = backend
        self.title = title
        self.region = region

        self.bordered = BorderedSurface(backend, region)
        self.title_bar = Surface(
            backend,
            child_region(
                region,
                Region(self.TITLE_HEIGHT, region.width - 2, region.y + 1, region.x + 1),
            ),
        )
        self.bordered.set_content_inset(
            top=self.DECORATION_HEIGHT - 1, left=1, bottom=1, right=1
        )

        self.title_bar.draw_border()
        self._write_title()
        self.title_bar.refresh()

    @property
    def content(self) -> Surface:
        return self.bordered.content

    @property
    def title_offset(self) -> int:
        """Column of the title text inside the title bar."""
        return max(0, (self.region.width - 2 - len(self.title)) // 2)

    @property
    def visible_title(self) -> str:
        """Title text as drawn; anything wider than the title bar is cut off."""
        return self.title[:self.region.width - 2]

    def _write_title(self):
        self.title_bar.write(1, self.title_offset, self.visible_title)

    def highlight_title(self, attr: Attr):
        """Redraw the title text with the given attribute."""
        self.title_bar.attribute_on(attr)
        self._write_title()
        self.title_bar.attribute_off(attr)
        self.title_bar.refresh()

    def write_confirm(self, highlight: bool = False):
        """Draw the confirm control centered on the last content row."""
        content = self.content
        if highlight:
            content.attribute_set(Attr.REVERSE)
        content.write(content.height - 1, self.region.width // 2 - 4, self.CONFIRM_LABEL)
        if highlight:
            content.attribute_set(Attr.NORMAL)

    def refresh(self):
        """Refresh border, content and title, in that order."""
        repainted = bool(self.bordered.frame.handle.dirty)
        self.bordered.refresh()
        if repainted:
            self.title_bar.touch()
        self.title_bar.refresh()

    def close(self):
        self.bordered.content.close()
        self.title_bar.close()
        self.bordered.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
