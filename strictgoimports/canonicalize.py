"""
Ideal import block of a file, as produced by the canonical-order oracle.

The oracle is any callable `(source_text, local_prefix) -> ideal_text`. The
default one runs goimports on a scratch copy of the source. The grouping
rules are entirely the oracle's: this module only prepares its input and
reads its output back into the line model.

goimports only reorders runs of entries on consecutive lines, so a comment
line between two entries would pin both in place. Comment lines are lifted
out of the block before the oracle runs and put back above their entries
afterwards.
"""


import os
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from .errors import OracleUnavailableError, ParseError
from .go_source import GoFile, parse_imports, read_source
from .import_lines import ImportBlock, build_import_lines, find_import_decl


Oracle = Callable[[str, str], str]


@contextmanager
def scratch_file(data: str, prefix: str = 'strict', suffix: str = '.go') -> Iterator[str]:
    """Write `data` to a temporary file that is removed on exit."""
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(data)
        yield name
    finally:
        os.remove(name)


class GoimportsOracle:
    """Canonical order from the `goimports` executable."""

    def __init__(self, executable: str = 'goimports'):
        self.executable = executable

    def command(self, file_name: str, local_prefix: str) -> list:
        cmd = [self.executable]
        if local_prefix:
            cmd.extend(['-local', local_prefix])
        cmd.append(file_name)
        return cmd

    def __call__(self, source: str, local_prefix: str = '') -> str:
        try:
            with scratch_file(source) as file_name:
                result = subprocess.run(
                    self.command(file_name, local_prefix),
                    capture_output=True,
                    text=True,
                    encoding='utf-8',
                )
        except OSError as e:
            raise OracleUnavailableError(f"cannot run {self.executable}: {e}") from e

        if result.returncode != 0:
            raise OracleUnavailableError(
                f"{self.executable} exited with status {result.returncode}: {result.stderr.strip()}"
            )
        return result.stdout


class DetachedComments:
    """
    Comment-only lines taken out of an import block, keyed by the entry they
    sit above. Runs with no entry below them (at the end of the block) are
    kept in `trailing`.
    """

    def __init__(self):
        self.attached: Dict[Tuple[str, str], List[List[str]]] = {}
        self.trailing: List[str] = []

    def __bool__(self):
        return bool(self.attached or self.trailing)

    def attach(self, name: str, path: str, run: List[str]):
        self.attached.setdefault((name, path), []).append(run)

    def reattach(self, text: str, go_file: GoFile) -> str:
        """
        Put every run back directly above its entry in `text`.

        Runs whose entry is gone from `text` go to the end of the block,
        ahead of the trailing ones.
        """
        decl = find_import_decl(go_file)
        if not self or decl is None or not decl.grouped:
            return text

        pending = {key: list(runs) for key, runs in self.attached.items()}
        above = {}
        for spec in decl.specs:
            runs = pending.get((spec.name or '', spec.path))
            if runs:
                above[spec.line] = runs.pop(0)
        leftover = [line for runs in pending.values() for run in runs for line in run]
        close_line = go_file.lines.line_of(decl.rparen)

        out = []
        for line_num, line in enumerate(text.split('\n'), start=1):
            out.extend(above.get(line_num, ()))
            if line_num == close_line:
                out.extend(leftover)
                out.extend(self.trailing)
            out.append(line)
        return '\n'.join(out)


def normalize_source(text: str, go_file: GoFile) -> Tuple[str, DetachedComments]:
    """
    Strip the grouped import block down to its entries.

    Blank lines strictly inside the block are dropped. Comment-only lines are
    removed as well and returned, attached to the entry that follows them,
    so they can be put back once the oracle has sorted the entries.
    """
    detached = DetachedComments()
    block = build_import_lines(text, go_file)
    if not block:
        return text, detached

    dropped = set()
    run = []
    for import_line in block:
        if import_line.is_blank:
            dropped.add(import_line.line)
        elif import_line.is_comment_line:
            dropped.add(import_line.line)
            run.append('\t//' + import_line.comment)
        elif run:
            detached.attach(import_line.name, import_line.path, run)
            run = []
    detached.trailing = run

    kept = [
        line for line_num, line in enumerate(text.split('\n'), start=1)
        if line_num not in dropped
    ]
    return '\n'.join(kept), detached


def canonicalize_source(
    text: str,
    filename: str = '',
    local_prefix: str = '',
    oracle: Optional[Oracle] = None,
) -> Tuple[ImportBlock, str]:
    """
    Build the ideal import block of already-read source text.

    Returns:
        (ideal ImportBlock, full ideal source text with comments restored)

    Raises:
        ParseError: `text` itself is not parseable Go
        MalformedImportBlockError: the import block of `text` is not supported
        OracleUnavailableError: the oracle failed or returned unparseable text
    """
    if oracle is None:
        oracle = GoimportsOracle()

    normalized, detached = normalize_source(text, parse_imports(text, filename))
    oracle_text = oracle(normalized, local_prefix)

    try:
        ideal_text = detached.reattach(oracle_text, parse_imports(oracle_text, filename))
        ideal_file = parse_imports(ideal_text, filename)
    except ParseError as e:
        raise OracleUnavailableError(f"oracle returned unparseable source: {e.message}", e.position) from e
    return build_import_lines(ideal_text, ideal_file), ideal_text


def canonicalize(
    file_path: Union[str, Path],
    local_prefix: str = '',
    oracle: Optional[Oracle] = None,
) -> Tuple[ImportBlock, str]:
    """
    Build the ideal import block of a file.

    Args:
        file_path: Go file to read
        local_prefix: Import path prefix(es, comma-separated) that form their
            own group after third-party packages; empty for two groups
        oracle: Canonical-order oracle, goimports when omitted

    Returns:
        (ideal ImportBlock, full ideal source text)

    Raises:
        OracleUnavailableError: the oracle failed or returned unparseable text
        ParseError: the file is not valid UTF-8 or not parseable Go
        OSError: the file could not be read
    """
    return canonicalize_source(read_source(file_path), str(file_path), local_prefix, oracle)
