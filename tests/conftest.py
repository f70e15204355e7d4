"""
Shared fixtures: Go test files and an in-process stand-in for goimports.

The stand-in sorts the import block the way goimports does, so the tests run
without a Go toolchain. Entries are ordered by group (standard library, third
party, local prefix) and then by path, but only within runs of entries on
consecutive lines; blank and comment lines stay where they are. Neighbouring
entries of different groups get a blank line between them.
"""

import shutil
from pathlib import Path

import pytest

from strictgoimports.errors import OracleUnavailableError
from strictgoimports.go_source import parse_imports
from strictgoimports.import_lines import find_import_decl


TESTDATA = Path(__file__).resolve().parent / "testdata" / "src"
LOCAL_PATH = "github.com/momotaro98"


def import_group(path_literal: str, local_prefix: str) -> int:
    path = path_literal.strip('"`')
    if any(path.startswith(p) for p in local_prefix.split(',') if p):
        return 2
    if '.' in path.split('/', 1)[0]:
        return 1
    return 0


def fake_goimports(source: str, local_prefix: str = '') -> str:
    go_file = parse_imports(source)
    decl = find_import_decl(go_file)
    if decl is None or not decl.grouped:
        return source

    lines = source.split('\n')
    open_line = go_file.lines.line_of(decl.lparen)
    close_line = go_file.lines.line_of(decl.rparen)
    specs = {spec.line: spec for spec in decl.specs}

    def by_group(spec):
        return import_group(spec.path, local_prefix), spec.path

    # Only entries on consecutive lines are sorted together; a blank or
    # comment line ends the run.
    items = []
    run = []
    for line_num in range(open_line + 1, close_line):
        if line_num in specs:
            run.append(specs[line_num])
            continue
        items.extend(sorted(run, key=by_group))
        run = []
        items.append(lines[line_num - 1])
    items.extend(sorted(run, key=by_group))

    # A blank line goes between neighbouring entries of different groups
    # within a paragraph.
    body = []
    previous = None
    for item in items:
        if isinstance(item, str):
            if not item.strip():
                previous = None
            body.append(item)
            continue
        group = import_group(item.path, local_prefix)
        if previous is not None and group != previous:
            body.append('')
        previous = group
        body.append('\t' + lines[item.line - 1].strip())

    return '\n'.join(lines[:open_line] + body + lines[close_line - 1:])


class RecordingOracle:
    """fake_goimports that remembers what it was asked."""

    def __init__(self):
        self.calls = []

    def __call__(self, source, local_prefix=''):
        self.calls.append((source, local_prefix))
        return fake_goimports(source, local_prefix)


def broken_oracle(source, local_prefix=''):
    raise OracleUnavailableError("goimports not reachable")


@pytest.fixture
def oracle():
    return RecordingOracle()


@pytest.fixture
def testdata_copy(tmp_path):
    """Writable copy of tests/testdata/src."""
    dest = tmp_path / "src"
    shutil.copytree(TESTDATA, dest)
    return dest


@pytest.fixture
def write_go(tmp_path):
    """Write a Go source file into tmp_path and return its path."""
    def _write(text, name="main.go"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path
    return _write
