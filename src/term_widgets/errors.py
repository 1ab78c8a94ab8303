"""Exceptions raised by term_widgets."""


class LayoutError(ValueError):
    """A region does not fit where it was asked to go.

    Raised instead of silently clipping, so a widget never renders into a
    surface smaller than the one it computed its layout for.
    """
