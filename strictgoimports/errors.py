"""
Error kinds raised while checking a file's import block.

All of them are per-file: the command-line runner reports them and moves on
to the next file.
"""


from typing import NamedTuple, Optional


class Position(NamedTuple):
    """A 1-based (line, column) location inside a named file."""
    filename: str
    line: int
    column: int

    def __str__(self):
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class ImportOrderError(Exception):
    """Base class for every error this package raises."""

    def __init__(self, message: str, position: Optional[Position] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self):
        if self.position is None:
            return self.message
        return f"{self.message}. Position: {self.position}"


class ParseError(ImportOrderError):
    """The file is not a parseable Go source file."""


class MalformedImportBlockError(ImportOrderError):
    """The import block holds something the line model cannot represent."""


class OracleUnavailableError(ImportOrderError):
    """The canonical-order oracle could not be run or failed."""
