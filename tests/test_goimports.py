"""
End-to-end checks against the real Go tools.

TestWithGoimports is skipped when goimports is not on PATH. The run-sorting
checks fall back to gofmt, which sorts runs of entries the same way.
"""

import shutil

import pytest

from strictgoimports.canonicalize import GoimportsOracle
from strictgoimports.fix_import_order import fix_file
from strictgoimports.review_import_order import check_file

from conftest import LOCAL_PATH, TESTDATA


GO_SORTER = shutil.which("goimports") or shutil.which("gofmt")


@pytest.mark.skipif(shutil.which("goimports") is None, reason="goimports not installed")
class TestWithGoimports:

    def test_fail_with_local_path(self, testdata_copy):
        finding = check_file(testdata_copy / "standard01.go", LOCAL_PATH, GoimportsOracle())
        assert (finding.position.line, finding.position.column) == (7, 2)

    def test_pass_without_local_path(self, testdata_copy):
        assert check_file(testdata_copy / "standard01.go", "", GoimportsOracle()) is None

    def test_inner_comment_lines(self):
        finding = check_file(TESTDATA / "inner_comment_line.go", "", GoimportsOracle())
        assert (finding.position.line, finding.position.column) == (4, 2)

    def test_three_groups(self, write_go):
        path = write_go(
            'package p\n\nimport (\n'
            '\t_ "fmt"\n'
            '\t_ "github.com/acme/lib"\n'
            '\t_ "github.com/other/lib"\n'
            ')\n'
        )
        finding = check_file(path, "github.com/acme", GoimportsOracle())
        assert finding.correct_import == (
            'import (\n'
            '\t_ "fmt"\n'
            '\n'
            '\t_ "github.com/other/lib"\n'
            '\n'
            '\t_ "github.com/acme/lib"\n'
            ')'
        )

    def test_fix_converges(self, testdata_copy):
        target = testdata_copy / "cgo02.go"
        assert fix_file(target, "", GoimportsOracle()) is True
        assert check_file(target, "", GoimportsOracle()) is None


@pytest.mark.skipif(GO_SORTER is None, reason="neither goimports nor gofmt installed")
class TestCommentLinesWithGoTools:

    SOURCE = 'package p\n\nimport (\n\t_ "os"\n\t// doc for fmt\n\t_ "fmt"\n)\n'

    def test_comment_between_entries_is_reported(self, write_go):
        finding = check_file(write_go(self.SOURCE), "", GoimportsOracle(GO_SORTER))
        assert (finding.position.line, finding.position.column) == (4, 2)
        assert finding.correct_import == 'import (\n\t// doc for fmt\n\t_ "fmt"\n\t_ "os"\n)'

    def test_fix_keeps_comment_above_its_entry(self, write_go):
        path = write_go(self.SOURCE)
        assert fix_file(path, "", GoimportsOracle(GO_SORTER)) is True
        assert '\t// doc for fmt\n\t_ "fmt"\n\t_ "os"\n' in path.read_text(encoding="utf-8")
        assert check_file(path, "", GoimportsOracle(GO_SORTER)) is None
