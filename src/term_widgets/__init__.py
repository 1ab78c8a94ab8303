"""
Terminal Widgets Library

Bordered and titled terminal surfaces, built on the Blessed library, with three
widgets on top of them: a box-drawn table, an option selector and a form of
editable fields.
"""

import logging

from .backend import Attr, Glyph, TerminalBackend
from .editables import Edit, EditableValue, IntegerEditable, TextEditable, Value, editable
from .errors import LayoutError
from .field_editor import FieldEditorWidget
from .selection import SelectionMode, SelectionWidget
from .table import TableWidget
from .windows import BorderedSurface, Region, Surface, TitledSurface

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Attr',
    'Glyph',
    'TerminalBackend',
    'LayoutError',
    'Region',
    'Surface',
    'BorderedSurface',
    'TitledSurface',
    'TableWidget',
    'SelectionMode',
    'SelectionWidget',
    'Edit',
    'EditableValue',
    'TextEditable',
    'IntegerEditable',
    'Value',
    'editable',
    'FieldEditorWidget',
]

__version__ = '0.1.0'
