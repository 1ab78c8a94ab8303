"""
Adapters that let the field editor edit values of different types.

An EditableValue is bound to one attribute of a caller-owned object. The
field editor feeds it keys through process() and displays content(); the
adapter mutates the attribute in place, so the caller reads the edited
values straight from its own objects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from blessed.keyboard import Keystroke


class Edit(Enum):
    """How a key changed an editable value's content."""
    NOP = 0
    APPEND = 1
    DELETE = 2


@dataclass
class Value:
    """A mutable box for values that are not an attribute of anything else."""
    value: Any


def is_printable(key: Keystroke) -> bool:
    return not key.is_sequence and len(key) == 1 and key.isprintable()


def is_backspace(key: Keystroke) -> bool:
    return key.name == 'KEY_BACKSPACE'


class EditableValue:
    """Base adapter; ignores every key.

    Subclasses override process() and content().
    """

    def __init__(self, target: Any, attribute: str = 'value'):
        self.target = target
        self.attribute = attribute

    @property
    def value(self):
        return getattr(self.target, self.attribute)

    @value.setter
    def value(self, value):
        setattr(self.target, self.attribute, value)

    def process(self, key: Keystroke) -> Edit:
        return Edit.NOP

    def content(self) -> str:
        return str(self.value)


class TextEditable(EditableValue):
    """Edits a string: printable keys append, backspace removes the last character."""

    def process(self, key: Keystroke) -> Edit:
        if is_backspace(key):
            if self.value:
                self.value = self.value[:-1]
                return Edit.DELETE
            return Edit.NOP
        if is_printable(key):
            self.value += str(key)
            return Edit.APPEND
        return Edit.NOP

    def content(self) -> str:
        return self.value


class IntegerEditable(EditableValue):
    """Edits an int digit by digit; '-' flips the sign of a non-zero value."""

    def _set_magnitude(self, magnitude):
        self.value = -magnitude if self.value < 0 else magnitude

    def process(self, key: Keystroke) -> Edit:
        if is_backspace(key):
            if self.value == 0:
                return Edit.NOP
            self._set_magnitude(abs(self.value) // 10)
            return Edit.DELETE
        if key == '-' and not key.is_sequence:
            if self.value == 0:
                return Edit.NOP
            self.value = -self.value
            return Edit.APPEND if self.value < 0 else Edit.DELETE
        if is_printable(key) and key in '0123456789':
            self._set_magnitude(abs(self.value) * 10 + int(key))
            return Edit.APPEND
        return Edit.NOP


def editable(target: Any, attribute: str = 'value') -> EditableValue:
    """Return the adapter matching the type of target.<attribute>."""
    value = getattr(target, attribute)
    if isinstance(value, str):
        return TextEditable(target, attribute)
    if isinstance(value, int) and not isinstance(value, bool):
        return IntegerEditable(target, attribute)
    raise TypeError(f'no editable adapter for {type(value).__name__} values')
