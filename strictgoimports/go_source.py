"""
Imports-only reader for Go source files.

Reads the package clause and the import declarations that follow it (the
same part of a file that go/parser reads in ImportsOnly mode) and stops at the
first declaration that is not an import. Every offset it hands out is a
0-based character offset into the text it was given.
"""


import bisect
import re
from typing import List, NamedTuple, Optional

from .errors import ParseError, Position


IDENT_RE = re.compile(r'[^\W\d]\w*')


class LineTable:
    """Start offset of every line in a text."""

    def __init__(self, text: str):
        self.starts = [0]
        self.starts.extend(m.end() for m in re.finditer('\n', text))
        self.size = len(text)

    def __len__(self):
        return len(self.starts)

    def line_of(self, offset: int) -> int:
        """1-based line number holding `offset`."""
        return bisect.bisect_right(self.starts, offset)

    def line_start(self, line: int) -> int:
        return self.starts[line - 1]

    def line_end(self, line: int) -> int:
        """Offset just past the last character of `line`, newline excluded."""
        if line < len(self.starts):
            return self.starts[line] - 1
        return self.size

    def line_text(self, text: str, line: int) -> str:
        return text[self.line_start(line):self.line_end(line)].rstrip('\r')

    def position(self, offset: int, filename: str = '') -> Position:
        line = self.line_of(offset)
        return Position(filename, line, offset - self.line_start(line) + 1)


class ImportSpec(NamedTuple):
    """One `[name] "path"` entry of an import declaration."""
    name: Optional[str]
    path: str      # literal as written, quotes included
    offset: int    # first character of the spec (name, or path if unnamed)
    end: int       # just past the closing quote of the path
    line: int


class ImportDecl:
    """An `import` declaration, grouped or not."""

    def __init__(self, offset: int):
        self.offset = offset
        self.lparen: Optional[int] = None
        self.rparen: Optional[int] = None
        self.specs: List[ImportSpec] = []

    @property
    def grouped(self) -> bool:
        return self.lparen is not None

    @property
    def is_cgo(self) -> bool:
        """True for the `import "C"` pseudo-import."""
        return len(self.specs) == 1 and self.specs[0].path == '"C"'


class GoFile:
    """Package clause and import declarations of one file."""

    def __init__(self, filename: str, package: str, decls: List[ImportDecl], lines: LineTable):
        self.filename = filename
        self.package = package
        self.decls = decls
        self.lines = lines

    @property
    def imports(self) -> List[ImportSpec]:
        return [spec for decl in self.decls for spec in decl.specs]


class _HeaderParser:

    def __init__(self, text: str, filename: str):
        self.text = text
        self.filename = filename
        self.pos = 0
        self.lines = LineTable(text)

    def error(self, message, offset=None):
        if offset is None:
            offset = self.pos
        return ParseError(message, self.lines.position(offset, self.filename))

    def skip_space(self, semicolons=False):
        """Skip whitespace, comments and, inside declarations, semicolons."""
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch in ' \t\r\n' or (semicolons and ch == ';'):
                self.pos += 1
            elif text.startswith('//', self.pos):
                end = text.find('\n', self.pos)
                self.pos = len(text) if end < 0 else end
            elif text.startswith('/*', self.pos):
                end = text.find('*/', self.pos + 2)
                if end < 0:
                    raise self.error("comment not terminated")
                self.pos = end + 2
            else:
                break

    def at_keyword(self, word):
        match = IDENT_RE.match(self.text, self.pos)
        return match is not None and match.group() == word

    def ident(self):
        match = IDENT_RE.match(self.text, self.pos)
        if match is None:
            return None
        self.pos = match.end()
        return match.group()

    def string_literal(self):
        text = self.text
        start = self.pos
        if text[start] == '`':
            end = text.find('`', start + 1)
            if end < 0:
                raise self.error("raw string literal not terminated", start)
            self.pos = end + 1
            return text[start:self.pos]

        i = start + 1
        while True:
            if i >= len(text) or text[i] == '\n':
                raise self.error("string literal not terminated", start)
            if text[i] == '\\':
                i += 2
                continue
            if text[i] == '"':
                break
            i += 1
        self.pos = i + 1
        return text[start:self.pos]

    def import_spec(self):
        start = self.pos
        if self.text.startswith('.', self.pos):
            name = '.'
            self.pos += 1
        else:
            name = self.ident()
        if name is not None:
            before = self.pos
            self.skip_space()
            if '\n' in self.text[before:self.pos]:
                raise self.error("missing import path", before)
        if self.pos >= len(self.text) or self.text[self.pos] not in '"`':
            raise self.error("missing import path")
        path = self.string_literal()
        return ImportSpec(name, path, start, self.pos, self.lines.line_of(start))

    def import_decl(self):
        decl = ImportDecl(self.pos)
        self.pos += len('import')
        self.skip_space()
        if not self.text.startswith('(', self.pos):
            decl.specs.append(self.import_spec())
            return decl

        decl.lparen = self.pos
        self.pos += 1
        while True:
            self.skip_space(semicolons=True)
            if self.pos >= len(self.text):
                raise self.error("expected ')' to close import group", decl.lparen)
            if self.text[self.pos] == ')':
                decl.rparen = self.pos
                self.pos += 1
                return decl
            decl.specs.append(self.import_spec())

    def parse(self):
        if self.text.startswith('\ufeff'):
            self.pos = 1
        self.skip_space()
        if not self.at_keyword('package'):
            raise self.error("expected 'package' clause")
        self.pos += len('package')
        self.skip_space()
        package = self.ident()
        if package is None:
            raise self.error("expected package name")

        decls = []
        while True:
            self.skip_space(semicolons=True)
            if not self.at_keyword('import'):
                break
            decls.append(self.import_decl())
        return GoFile(self.filename, package, decls, self.lines)


def parse_imports(text: str, filename: str = '') -> GoFile:
    """
    Parse the package clause and import declarations of a Go file.

    Args:
        text: Full source text
        filename: Name used in error positions

    Returns:
        GoFile with every import declaration in source order

    Raises:
        ParseError: the header is not valid Go
    """
    return _HeaderParser(text, filename).parse()


def read_source(file_path) -> str:
    """
    Read a Go file as UTF-8, line endings untouched.

    Raises:
        ParseError: the file is not valid UTF-8
        OSError: the file could not be read
    """
    with open(file_path, 'rb') as f:
        data = f.read()
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        line_start = data.rfind(b'\n', 0, e.start) + 1
        position = Position(str(file_path), data.count(b'\n', 0, e.start) + 1, e.start - line_start + 1)
        raise ParseError("illegal UTF-8 encoding", position) from e
