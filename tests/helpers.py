"""Mock terminal and keystroke builders shared by the tests."""

import curses
from unittest.mock import MagicMock, Mock

from blessed import Terminal
from blessed.keyboard import Keystroke

SPECIAL_KEYS = {
    'KEY_UP': ('\x1b[A', curses.KEY_UP),
    'KEY_DOWN': ('\x1b[B', curses.KEY_DOWN),
    'KEY_ENTER': ('\n', curses.KEY_ENTER),
    'KEY_TAB': ('\t', 512),
    'KEY_ESCAPE': ('\x1b', curses.KEY_EXIT),
    'KEY_BACKSPACE': ('\x7f', curses.KEY_BACKSPACE),
}


def create_mock_terminal(width=80, height=24):
    """Create a mock Terminal with specified dimensions."""
    term = Mock(spec=Terminal)
    term.width = width
    term.height = height
    term.move = Mock(return_value='')
    term.inkey = Mock()
    term.cbreak = MagicMock()
    term.fullscreen = MagicMock()
    for name in ('normal', 'reverse', 'bold', 'underline', 'clear',
                 'hide_cursor', 'normal_cursor'):
        setattr(term, name, '')
    return term


def special(name):
    """A decoded special key, as Terminal.inkey() returns it."""
    ucs, code = SPECIAL_KEYS[name]
    return Keystroke(ucs, code=code, name=name)


def typed(text):
    """One keystroke per character of text."""
    return [Keystroke(char) for char in text]


def feed(term, keys):
    """Make term.inkey() return keys one by one."""
    term.inkey.side_effect = list(keys)
