"""Tests for TerminalBackend."""

import pytest
from unittest.mock import Mock, patch
from term_widgets import Attr, Glyph, LayoutError, TerminalBackend

from helpers import create_mock_terminal, special


class TestAllocation:
    """Tests for allocating and releasing regions."""

    def test_screen_limits(self, backend):
        """Test that limits come from the terminal size."""
        assert backend.screen_limits() == (24, 80)

    def test_allocate_within_screen(self, backend):
        handle = backend.allocate_region(10, 20, 2, 3)
        assert (handle.height, handle.width, handle.y, handle.x) == (10, 20, 2, 3)
        assert backend.snapshot(handle) == [' ' * 20] * 10

    def test_allocate_full_screen(self, backend):
        """Test that a region exactly the screen size fits."""
        handle = backend.allocate_region(24, 80, 0, 0)
        assert handle.height == 24

    def test_allocate_beyond_screen(self, backend):
        """Test that a region past the screen edge raises LayoutError."""
        with pytest.raises(LayoutError):
            backend.allocate_region(10, 20, 20, 0)
        with pytest.raises(LayoutError):
            backend.allocate_region(10, 81, 0, 0)

    def test_allocate_negative(self, backend):
        with pytest.raises(LayoutError):
            backend.allocate_region(10, 20, -1, 0)

    def test_release(self, backend):
        """Test that released handles cannot be drawn on."""
        handle = backend.allocate_region(5, 5, 0, 0)
        backend.release(handle)
        assert handle.released is True
        with pytest.raises(RuntimeError):
            backend.write_text(handle, 0, 0, 'x')


class TestDrawing:
    """Tests for writing into region buffers."""

    def test_write_text(self, backend):
        handle = backend.allocate_region(2, 10, 0, 0)
        backend.write_text(handle, 1, 2, 'abc')
        assert backend.snapshot(handle) == [' ' * 10, '  abc     ']

    def test_write_text_clipped(self, backend):
        """Test that text past the right edge is clipped."""
        handle = backend.allocate_region(1, 5, 0, 0)
        backend.write_text(handle, 0, 2, 'abcdefg')
        assert backend.snapshot(handle) == ['  abc']

    def test_write_outside_rows_ignored(self, backend):
        handle = backend.allocate_region(1, 5, 0, 0)
        backend.write_text(handle, 3, 0, 'abc')
        backend.write_char(handle, -1, 0, 'x')
        assert backend.snapshot(handle) == ['     ']

    def test_write_uses_current_attribute(self, backend):
        handle = backend.allocate_region(1, 5, 0, 0)
        backend.attribute_on(handle, Attr.REVERSE)
        backend.write_text(handle, 0, 0, 'ab')
        backend.attribute_off(handle, Attr.REVERSE)
        backend.write_text(handle, 0, 2, 'c')
        assert backend.attr_at(handle, 0, 0) == Attr.REVERSE
        assert backend.attr_at(handle, 0, 1) == Attr.REVERSE
        assert backend.attr_at(handle, 0, 2) == Attr.NORMAL

    def test_attribute_set(self, backend):
        handle = backend.allocate_region(1, 5, 0, 0)
        backend.attribute_on(handle, Attr.BOLD)
        backend.attribute_set(handle, Attr.REVERSE)
        assert handle.attr == Attr.REVERSE

    def test_draw_border(self, backend):
        handle = backend.allocate_region(3, 4, 0, 0)
        backend.draw_border(handle)
        assert backend.snapshot(handle) == ['┌──┐', '│  │', '└──┘']

    def test_write_char_glyph(self, backend):
        handle = backend.allocate_region(1, 3, 0, 0)
        backend.write_char(handle, 0, 1, Glyph.PLUS)
        assert backend.snapshot(handle) == [' ┼ ']

    def test_clear_to_eol(self, backend):
        handle = backend.allocate_region(1, 6, 0, 0)
        backend.write_text(handle, 0, 0, 'abcdef')
        backend.clear_to_eol(handle, 0, 2)
        assert backend.snapshot(handle) == ['ab    ']

    def test_erase_marks_only_changed_rows(self, backend):
        """Test that erase repaints only rows that had content."""
        handle = backend.allocate_region(3, 5, 0, 0)
        backend.write_text(handle, 1, 0, 'abc')
        with patch('builtins.print'):
            backend.refresh(handle)
        backend.erase(handle)
        assert handle.dirty == {1}
        assert backend.snapshot(handle) == [' ' * 5] * 3

    def test_clear_marks_all_rows(self, backend):
        """Test that clear repaints the whole region."""
        handle = backend.allocate_region(3, 5, 0, 0)
        with patch('builtins.print'):
            backend.refresh(handle)
        backend.clear(handle)
        assert handle.dirty == {0, 1, 2}

    def test_resize_keeps_overlap(self, backend):
        handle = backend.allocate_region(2, 4, 0, 0)
        backend.write_text(handle, 0, 0, 'abcd')
        backend.resize(handle, 3, 2)
        assert backend.snapshot(handle) == ['ab', '  ', '  ']

    def test_resize_beyond_screen(self, backend):
        handle = backend.allocate_region(2, 4, 20, 0)
        with pytest.raises(LayoutError):
            backend.resize(handle, 5, 4)


class TestRefresh:
    """Tests for flushing regions to the terminal."""

    @patch('builtins.print')
    def test_refresh_paints_dirty_rows(self, mock_print):
        term = create_mock_terminal()
        term.move = Mock(side_effect=lambda y, x: f'[{y},{x}]')
        backend = TerminalBackend(term=term)
        handle = backend.allocate_region(2, 3, 5, 7)
        backend.write_text(handle, 0, 0, 'abc')

        backend.refresh(handle)

        output = mock_print.call_args[0][0]
        assert output.startswith('[5,7]abc[6,7]   ')
        assert handle.dirty == set()

    @patch('builtins.print')
    def test_refresh_styles_attribute_runs(self, mock_print):
        term = create_mock_terminal()
        term.reverse = '<r>'
        term.normal = '</>'
        backend = TerminalBackend(term=term)
        handle = backend.allocate_region(1, 4, 0, 0)
        backend.attribute_set(handle, Attr.REVERSE)
        backend.write_text(handle, 0, 1, 'ab')

        backend.refresh(handle)

        assert mock_print.call_args[0][0].startswith(' <r>ab</> ')

    @patch('builtins.print')
    def test_refresh_parks_visible_cursor(self, mock_print, backend, term):
        handle = backend.allocate_region(2, 10, 3, 4)
        backend.move_cursor(handle, 1, 6)
        backend.refresh(handle)
        term.move.assert_called_with(4, 10)

    @patch('builtins.print')
    def test_nothing_dirty_prints_no_rows(self, mock_print, backend, term):
        handle = backend.allocate_region(2, 10, 0, 0)
        backend.refresh(handle)
        term.move.reset_mock()
        backend.set_cursor_visible(False)
        backend.refresh(handle)
        term.move.assert_not_called()


class TestInputAndModes:
    """Tests for key input and terminal mode toggles."""

    def test_read_key_keypad(self, backend, term):
        """Test that special keys are decoded in keypad mode."""
        handle = backend.allocate_region(1, 1, 0, 0)
        term.inkey.return_value = special('KEY_UP')
        key = backend.read_key(handle, keypad=True)
        assert key.name == 'KEY_UP'
        assert key.is_sequence

    def test_read_key_without_keypad(self, backend, term):
        """Test that sequences come back undecoded without keypad mode."""
        handle = backend.allocate_region(1, 1, 0, 0)
        term.inkey.return_value = special('KEY_UP')
        key = backend.read_key(handle)
        assert key.name is None and key.code is None
        assert key == '\x1b[A'

    def test_read_key_uses_region_keypad(self, backend, term):
        handle = backend.allocate_region(1, 1, 0, 0)
        backend.set_keypad(handle, True)
        term.inkey.return_value = special('KEY_DOWN')
        assert backend.read_key(handle).name == 'KEY_DOWN'

    def test_echo_toggles_cbreak(self, backend, term):
        """Test that turning echo off enters cbreak mode until echo is back on."""
        context = term.cbreak.return_value
        backend.set_echo(False)
        backend.set_echo(False)
        term.cbreak.assert_called_once()
        context.__enter__.assert_called_once()

        backend.set_echo(True)
        context.__exit__.assert_called_once()

    @patch('builtins.print')
    def test_cursor_visibility(self, mock_print, backend, term):
        term.hide_cursor = '<hide>'
        term.normal_cursor = '<show>'
        backend.set_cursor_visible(False)
        assert backend.cursor_visible is False
        mock_print.assert_called_with('<hide>', end='', flush=True)

        backend.set_cursor_visible(True)
        mock_print.assert_called_with('<show>', end='', flush=True)

    @patch('builtins.print')
    def test_session_restores_modes(self, mock_print, backend, term):
        with backend.session():
            backend.set_echo(False)
            backend.set_cursor_visible(False)
        term.fullscreen.assert_called_once()
        assert backend.cursor_visible is True
        term.cbreak.return_value.__exit__.assert_called_once()

    def test_default_terminal(self):
        """Test that a Terminal is created when none is given."""
        with patch('term_widgets.backend.Terminal') as terminal_class:
            backend = TerminalBackend()
        assert backend.term is terminal_class.return_value
