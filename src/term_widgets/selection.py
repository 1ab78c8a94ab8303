"""
Option lists the user picks one or several entries from.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Set

from blessed.keyboard import Keystroke

from .backend import Attr, TerminalBackend
from .windows import Region, TitledSurface

log = logging.getLogger(__name__)


def pad_center(text: str, width: int) -> str:
    """Pad text with spaces to width, the odd space going to the right."""
    if len(text) >= width:
        return text
    left = (width - len(text)) // 2
    return ' ' * left + text + ' ' * (width - len(text) - left)


@dataclass
class SelectionMode:
    """How a SelectionWidget presents and accepts its options.

    Attributes:
        centered: Center each option within the content width
        multi: Allow several options; an [ OK ] control confirms the choice
    """
    centered: bool = False
    multi: bool = False


class SelectionWidget:
    """A titled list of options navigated with the arrow keys.

    Up and Down move the cursor line. In single mode Enter picks the line
    under the cursor and finishes; with no options it does nothing. In multi
    mode Enter toggles the line, and the line after the last option is the
    [ OK ] control that finishes.
    Escape finishes and restores the selection the caller passed in.

    Attributes:
        window: TitledSurface the options are drawn in
        mode: SelectionMode
        options: Option labels, padded when centered
        line: Cursor line; len(options) is the [ OK ] control
        selected: Set of selected indices, owned by the caller of select()
        done: Whether the interaction has finished
        cancelled: Whether it finished with Escape
    """

    def __init__(
        self,
        backend: TerminalBackend,
        title: str,
        region: Region,
        options: Sequence[str],
        mode: Optional[SelectionMode] = None,
    ):
        self.backend = backend
        self.window = TitledSurface(backend, title, region)
        self.mode = mode or SelectionMode()
        self.options = list(options)
        self.line = 0
        self.selected: Set[int] = set()
        self.done = False
        self.cancelled = False
        self._initial: Set[int] = set()

        if self.mode.centered:
            self.options = [pad_center(option, region.width - 4) for option in self.options]

    @property
    def last_line(self) -> int:
        """Highest cursor line: the [ OK ] control in multi mode."""
        return len(self.options) if self.mode.multi else len(self.options) - 1

    @property
    def on_confirm(self) -> bool:
        return self.mode.multi and self.line == len(self.options)

    def draw(self):
        """Draw every option, reversing the selected ones and the cursor line."""
        content = self.window.content
        for i, option in enumerate(self.options):
            if i in self.selected or i == self.line:
                content.attribute_on(Attr.REVERSE)
            content.write(i, 1, option)
            content.attribute_set(Attr.NORMAL)

        if self.mode.multi:
            self.window.write_confirm(self.on_confirm)

    def handle_input(self, key: Keystroke):
        """Apply one key to the cursor and the selection."""
        match key.name:
            case 'KEY_UP':
                self.line = max(0, self.line - 1)
            case 'KEY_DOWN':
                self.line = max(0, min(self.last_line, self.line + 1))
            case 'KEY_ENTER':
                self._enter()
            case 'KEY_ESCAPE':
                self.selected.clear()
                self.selected.update(self._initial)
                self.cancelled = True
                self.done = True

    def _enter(self):
        if not self.mode.multi:
            if self.options:
                self.selected.add(self.line)
                self.done = True
        elif self.on_confirm:
            self.done = True
        elif self.line in self.selected:
            self.selected.remove(self.line)
        else:
            self.selected.add(self.line)

    def select(self, selected: Set[int]) -> bool:
        """Run the interaction until it finishes.

        Args:
            selected: Set of option indices, updated in place

        Returns:
            Whether any option is selected when the interaction ends.
        """
        self.selected = selected
        self._initial = set(selected)
        self.done = False
        self.cancelled = False

        self.backend.set_echo(False)
        self.backend.set_cursor_visible(False)
        self.window.content.set_keypad(True)

        while not self.done:
            self.draw()
            self.handle_input(self.window.content.read_key())
            self.window.refresh()

        log.debug('selection finished with %s (cancelled=%s)', sorted(selected), self.cancelled)
        return len(selected) > 0

    def close(self):
        self.window.close()
