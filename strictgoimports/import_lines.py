"""
Line model of a grouped import block.

Every physical line between `import (` and `)` becomes one ImportLine: an
entry, a blank separator, or a comment-only line. The order of the resulting
list is exactly what gets checked, so blank lines and comments are kept.
"""


import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import MalformedImportBlockError
from .go_source import GoFile, ImportDecl


STAR_COMMENT_MSG = "there's star comment (/* */) in import lines"

# A second `//` marker inside a trailing comment; `https://` does not count.
SECOND_COMMENT_RE = re.compile(r'\s//')


@dataclass(frozen=True)
class ImportLine:
    name: str = ''       # mp of `import ( mp "github.com/user/package" )`
    path: str = ''       # "github.com/user/package" above, quotes included
    comment: str = ''    # text after `//` on the line
    line: int = 0        # 1-based line number in the file
    offset: int = 0      # first significant character of the line

    @property
    def is_blank(self) -> bool:
        return not self.name and not self.path and not self.comment

    @property
    def is_comment_line(self) -> bool:
        return not self.name and not self.path and bool(self.comment)


class ImportBlock(list):
    """
    Ordered ImportLines of a file's grouped import declaration.

    `end_offset` is where the block stops in the file (the closing paren),
    reported when another block runs past the end of this one.
    """

    def __init__(self, lines: Iterable[ImportLine] = (), end_offset: int = 0):
        super().__init__(lines)
        self.end_offset = end_offset


def find_import_decl(go_file: GoFile) -> Optional[ImportDecl]:
    """
    Return the file's single import declaration, ignoring `import "C"`.

    Raises:
        MalformedImportBlockError: more than one non-cgo import declaration
    """
    found = None
    for decl in go_file.decls:
        if decl.is_cgo:
            continue
        if found is not None:
            raise MalformedImportBlockError(
                "there's more than one `import` declaration",
                go_file.lines.position(decl.offset, go_file.filename),
            )
        found = decl
    return found


def build_import_lines(text: str, go_file: GoFile) -> ImportBlock:
    """
    Build the line model of the grouped import block in `text`.

    Returns an empty block when the file has no imports or only a single
    unparenthesized `import "path"`.

    Args:
        text: Full source text that `go_file` was parsed from
        go_file: Parsed header of `text`

    Raises:
        MalformedImportBlockError: block comments, several import declarations,
            or entries that are not one per line
    """
    table = go_file.lines

    def malformed(message, offset):
        return MalformedImportBlockError(message, table.position(offset, go_file.filename))

    decl = find_import_decl(go_file)
    if decl is None:
        return ImportBlock()
    if not decl.grouped:
        return ImportBlock(end_offset=decl.offset)

    open_line = table.line_of(decl.lparen)
    close_line = table.line_of(decl.rparen)

    for line_num in range(table.line_of(decl.offset), open_line + 1):
        header = table.line_text(text, line_num)
        if '/*' in header or '*/' in header:
            raise malformed(STAR_COMMENT_MSG, decl.offset)

    for spec in decl.specs:
        if spec.line <= open_line or spec.line >= close_line:
            raise malformed("import entry shares a line with the import parens", spec.offset)

    block = ImportBlock(end_offset=decl.rparen)
    specs = iter(decl.specs)
    next_spec = next(specs, None)

    for line_num in range(open_line + 1, close_line):
        start = table.line_start(line_num)
        line_text = table.line_text(text, line_num)
        stripped = line_text.strip()
        first = start + len(line_text) - len(line_text.lstrip())

        if '/*' in line_text or '*/' in line_text:
            raise malformed(STAR_COMMENT_MSG, first if stripped else start)

        if not stripped:
            block.append(ImportLine(line=line_num, offset=start))
            continue

        if stripped.startswith('//'):
            block.append(ImportLine(comment=line_text.split('//', 1)[1], line=line_num, offset=first))
            continue

        spec = next_spec
        if spec is None or spec.line != line_num or spec.offset != first:
            raise malformed("import entry does not start its own line", first)
        next_spec = next(specs, None)
        if next_spec is not None and next_spec.line == line_num:
            raise malformed("more than one import entry on a line", next_spec.offset)

        comment = ''
        rest = text[spec.end:table.line_end(line_num)].rstrip('\r')
        if rest.strip():
            if not rest.lstrip().startswith('//'):
                raise malformed("unexpected text after import path", spec.end)
            comment = rest.split('//', 1)[1]
            if SECOND_COMMENT_RE.search(comment):
                raise malformed("more than one comment on an import line", first)

        block.append(ImportLine(spec.name or '', spec.path, comment, line_num, spec.offset))

    return block
