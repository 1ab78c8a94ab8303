"""
Forms of labeled fields edited in place.
"""

import logging
from typing import List, Sequence

from blessed.keyboard import Keystroke

from .backend import TerminalBackend
from .editables import Edit, EditableValue
from .windows import Region, TitledSurface

log = logging.getLogger(__name__)


class FieldEditorWidget:
    """A titled form with one line per field and an [ OK ] control below.

    Up and Down move between fields and stop at the [ OK ] control, Tab
    cycles through them and wraps back to the first field. Enter on [ OK ]
    finishes, Escape cancels. Any other key goes to the EditableValue of the
    current field.

    Attributes:
        window: TitledSurface the form is drawn in
        labels: Field labels, padded to a common width
        field: Current field; len(labels) is the [ OK ] control
        editables: One EditableValue per field, supplied to edit()
        quit: Whether the interaction has finished
        cancelled: Whether it finished with Escape
    """

    SEPARATOR = '  '

    def __init__(self, backend: TerminalBackend, title: str, region: Region,
                 fields: Sequence[str]):
        self.backend = backend
        self.window = TitledSurface(backend, title, region)

        width = max((len(f) for f in fields), default=0)
        self.labels = [f.ljust(width + 2) for f in fields]
        self.field = 0
        self.editables: List[EditableValue] = []
        self.quit = False
        self.cancelled = False

        content = self.window.content
        for line, label in enumerate(self.labels):
            content.write(line, 0, label + ' ')
        self.window.write_confirm(False)
        content.refresh()

    @property
    def on_confirm(self) -> bool:
        return self.field == len(self.labels)

    def visible_content(self, index: int) -> str:
        """The trailing part of a field's content that fits beside its label.

        The last column is kept free for the cursor.
        """
        text = self.editables[index].content()
        start = len(self.labels[index]) + len(self.SEPARATOR)
        offset = max(0, start + len(text) - (self.window.content.width - 1))
        return text[offset:]

    def cursor_column(self, index: int) -> int:
        """Column just past the rendered text of a field, kept inside the content."""
        column = len(self.labels[index]) + len(self.SEPARATOR) + len(self.visible_content(index))
        return min(column, self.window.content.width - 1)

    def update_field(self, index: int):
        """Erase a field's line and draw it again."""
        content = self.window.content
        content.clear_to_eol(index, 0)
        content.write(index, 0, self.labels[index] + self.SEPARATOR + self.visible_content(index))

    def draw(self):
        """Draw the [ OK ] control and place the cursor for the current field."""
        if self.on_confirm:
            self.backend.set_cursor_visible(False)
            self.window.write_confirm(True)
        else:
            self.backend.set_cursor_visible(True)
            self.window.write_confirm(False)
            self.window.content.move_cursor(self.field, self.cursor_column(self.field))

    def handle_input(self, key: Keystroke):
        """Apply one key to the cursor, or to the current field's value."""
        count = len(self.labels)
        match key.name:
            case 'KEY_UP':
                self.field = max(0, self.field - 1)
            case 'KEY_DOWN':
                self.field = min(count, self.field + 1)
            case 'KEY_TAB':
                self.field = 0 if self.field >= count else self.field + 1
            case 'KEY_ENTER':
                if self.on_confirm:
                    self.quit = True
            case 'KEY_ESCAPE':
                self.cancelled = True
                self.quit = True
            case _:
                if not self.on_confirm:
                    if self.editables[self.field].process(key) is not Edit.NOP:
                        self.update_field(self.field)

    def edit(self, editables: Sequence[EditableValue]) -> bool:
        """Run the interaction until it finishes.

        Args:
            editables: One adapter per field, in field order

        Returns:
            True if the form was confirmed, False if it was cancelled.
        """
        if len(editables) != len(self.labels):
            raise ValueError(
                f'{len(editables)} editables given for {len(self.labels)} fields'
            )
        self.editables = list(editables)
        self.field = 0
        self.quit = False
        self.cancelled = False

        self.window.content.set_keypad(True)
        self.backend.set_echo(False)

        for i in range(len(self.labels)):
            self.update_field(i)

        while not self.quit:
            self.draw()
            self.handle_input(self.window.content.read_key())

        self.backend.set_cursor_visible(False)
        log.debug('field editor finished (cancelled=%s)', self.cancelled)
        return not self.cancelled

    def close(self):
        self.window.close()
