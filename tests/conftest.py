import pytest

from helpers import create_mock_terminal
from term_widgets import TerminalBackend


@pytest.fixture
def term():
    return create_mock_terminal()


@pytest.fixture
def backend(term):
    return TerminalBackend(term=term)
