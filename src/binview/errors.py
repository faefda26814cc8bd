"""Exceptions raised by binview.

Every fatal condition derives from :class:`BinviewError`; the command line
entry point catches it, prints ``str(exc)`` to stderr and exits non-zero.
"""

from __future__ import annotations


class BinviewError(Exception):
    """Base class for fatal viewer errors."""


class InputReadError(BinviewError):
    """An input file could not be opened or read."""


class EmptyInputError(BinviewError):
    """The input ended before a single record was loaded."""

    def __init__(self, message: str = "no input data") -> None:
        super().__init__(message)


class TerminalError(BinviewError):
    """The controlling terminal could not be opened, measured or read."""
