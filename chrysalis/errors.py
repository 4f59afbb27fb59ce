"""Exceptions for programming errors.

Rule violations caused by user input never raise; they come back as a
state carrying a ``message``. These exceptions signal a broken caller or
a corrupted board.
"""


class ChrysalisError(Exception):
    pass


class BoardInvariantError(ChrysalisError):
    """A square reference outside the fixed 64-square topology."""


class SearchError(ChrysalisError):
    """The AI was asked to move where no move can exist."""
