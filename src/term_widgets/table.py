"""
Box-drawn tables.

A TableWidget renders a header row and one line per data row, deriving each
cell's text from a generator function. It never reads input; it redraws when
constructed and whenever its data, lengths, generator or highlight change.
"""

import logging
from typing import Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from .backend import Attr, Glyph, TerminalBackend
from .errors import LayoutError
from .windows import Region, Surface

log = logging.getLogger(__name__)

T = TypeVar('T')

Generator = Callable[[T, int], str]

# Rows taken by the top border, header, separator and bottom border
FRAME_ROWS = 4


def column_lengths(headers: Sequence[str], rows: Sequence[T], generator: Generator) -> List[int]:
    """Width of each column: its widest header or generated cell."""
    lengths = []
    for i, header in enumerate(headers):
        length = len(header)
        for row in rows:
            length = max(length, len(generator(row, i)))
        lengths.append(length)
    return lengths


def table_size(lengths: Sequence[int], row_count: int) -> Tuple[int, int]:
    """(height, width) of a rendered table."""
    return row_count + FRAME_ROWS, 1 + sum(length + 3 for length in lengths)


def fit_cell(text: str, length: int) -> str:
    """Cut text off at length, or pad it with spaces up to length."""
    return text[:length].ljust(length)


class TableWidget(Generic[T]):
    """A table of rows rendered with line-drawing glyphs.

    Attributes:
        surface: Surface the table is drawn on
        headers: Column headers; their count is the column count
        rows: Row values passed to the generator
        generator: Function mapping (row, column index) to cell text
        lengths: Width of each column, excluding the padding spaces
        highlighted: Index of the row drawn in reverse video, if any
    """

    def __init__(
        self,
        backend: TerminalBackend,
        headers: Sequence[str],
        rows: Sequence[T],
        generator: Generator,
        region: Region,
        lengths: Optional[Sequence[int]] = None,
        auto_resize: bool = False,
    ):
        self.surface = Surface(backend, region)
        self.headers = list(headers)
        self.rows = list(rows)
        self.generator = generator
        self.highlighted = None

        self._pinned = lengths is not None
        if self._pinned:
            self.lengths = self._checked(lengths)
        else:
            self._derive_lengths()

        if auto_resize:
            self._fit()

        self._write_table()
        self.surface.refresh()

    def _checked(self, lengths):
        lengths = list(lengths)
        if len(lengths) != len(self.headers):
            raise LayoutError(
                f'{len(lengths)} column lengths given for {len(self.headers)} headers'
            )
        return lengths

    def _derive_lengths(self):
        self.lengths = column_lengths(self.headers, self.rows, self.generator)
        log.debug('column lengths derived as %s', self.lengths)

    @property
    def size(self) -> Tuple[int, int]:
        """(height, width) the table needs to be drawn in full."""
        return table_size(self.lengths, len(self.rows))

    @property
    def highlighted_row(self) -> Optional[int]:
        """The highlighted index if it is within the current rows, else None."""
        if self.highlighted is not None and 0 <= self.highlighted < len(self.rows):
            return self.highlighted
        return None

    def _fit(self):
        height, width = self.size
        if height < self.surface.height or width < self.surface.width:
            # Push the erased cells out before the region shrinks past them
            self.surface.refresh()
        self.surface.resize(height, width)

    def _write_bar(self, line, left, junction, right):
        self.surface.add_char(line, 0, left)
        x = 0
        last = len(self.lengths) - 1
        for i, length in enumerate(self.lengths):
            for j in range(length + 2):
                self.surface.add_char(line, x + j + 1, Glyph.HLINE)
            x += length + 3
            self.surface.add_char(line, x, junction if i != last else right)

    def _write_cells(self, line, texts, highlight=False):
        x = 1
        for text, length in zip(texts, self.lengths):
            if highlight:
                self.surface.attribute_set(Attr.REVERSE)
            self.surface.write(line, x, f' {fit_cell(text, length)} ')
            if highlight:
                self.surface.attribute_set(Attr.NORMAL)
            x += length + 3
            self.surface.add_char(line, x - 1, Glyph.VLINE)
        self.surface.add_char(line, 0, Glyph.VLINE)

    def _write_table(self):
        self._write_bar(0, Glyph.ULCORNER, Glyph.TTEE, Glyph.URCORNER)
        self._write_cells(1, self.headers)
        self._write_bar(2, Glyph.LTEE, Glyph.PLUS, Glyph.RTEE)

        highlighted = self.highlighted_row
        line = 3
        for n, row in enumerate(self.rows):
            texts = [self.generator(row, i) for i in range(len(self.headers))]
            self._write_cells(line, texts, highlight=n == highlighted)
            line += 1

        self._write_bar(line, Glyph.LLCORNER, Glyph.BTEE, Glyph.LRCORNER)

    def _redraw(self):
        self._write_table()
        self.surface.refresh()

    def set_data(self, rows: Sequence[T], auto_resize: bool = False):
        """Replace the rows, optionally resizing the surface to fit them.

        Raises LayoutError, leaving the table as it was, when the resized
        surface would not fit on the screen.
        """
        rows = list(rows)
        lengths = self.lengths if self._pinned else column_lengths(self.headers, rows, self.generator)
        if auto_resize:
            region = self.surface.region
            height, width = table_size(lengths, len(rows))
            self.surface.backend.check_region(height, width, region.y, region.x)

        self.surface.erase()
        self.rows = rows
        self.lengths = lengths
        if auto_resize:
            self._fit()
        self._redraw()

    def set_lengths(self, lengths: Optional[Sequence[int]]):
        """Pin the column lengths, or derive them from the data again if None."""
        if lengths is not None:
            lengths = self._checked(lengths)
        self.surface.erase()
        if lengths is None:
            self._pinned = False
            self._derive_lengths()
        else:
            self.lengths = lengths
            self._pinned = True
        self._redraw()

    def set_generator(self, generator: Generator):
        self.surface.erase()
        self.generator = generator
        if not self._pinned:
            self._derive_lengths()
        self._redraw()

    def highlight_row(self, index: Optional[int]):
        """Draw row index in reverse video; out-of-range indices highlight nothing."""
        self.surface.erase()
        self.highlighted = index
        self._redraw()

    def close(self):
        self.surface.close()
