#!/usr/bin/env python3
"""
Review: Go import order.

The grouped `import ( ... )` block of every Go file must be in the order
goimports produces: standard library, then third-party packages, then (with
--local) the local packages. Each group is sorted and the groups are
separated by exactly one blank line.

Reports the position of the first line that breaks the order together with
the import block it should be replaced with. Use -w to rewrite the files
instead.
"""


import sys
from pathlib import Path
from typing import NamedTuple, Optional, Union

from . import __version__
from .canonicalize import Oracle, canonicalize_source
from .compare import compare, render, report
from .errors import ImportOrderError, ParseError, Position
from .go_source import parse_imports, read_source
from .import_lines import build_import_lines
from .review_utils import (
    ERROR_EXIT_CODE,
    INVALID_ARGUMENT_EXIT_CODE,
    ReviewContext,
    create_review_parser,
)


class Finding(NamedTuple):
    """A file whose import block is out of order, and how to fix it."""
    filename: str
    position: Position
    correct_import: str   # rendered ideal import block
    fixed_source: str     # whole file in canonical order


def check_file(
    file_path: Union[str, Path],
    local_prefix: str = '',
    oracle: Optional[Oracle] = None,
) -> Optional[Finding]:
    """
    Check the import order of a single file.

    Returns None when the block is canonical, when the file has no grouped
    import block, and when the file is not parseable Go at all (invalid
    UTF-8 included).
    """
    filename = str(file_path)
    try:
        text = read_source(file_path)
        go_file = parse_imports(text, filename)
    except ParseError:
        return None

    real = build_import_lines(text, go_file)
    ideal, ideal_text = canonicalize_source(text, filename, local_prefix, oracle)

    divergence = compare(real, ideal)
    if divergence is None:
        return None

    position = go_file.lines.position(report(real, divergence), filename)
    return Finding(filename, position, render(ideal), ideal_text)


def format_finding(finding: Finding) -> str:
    return (
        f"{finding.position}: import not sorted correctly. should be replaced with\n"
        f"{finding.correct_import}"
    )


def review_files(context: ReviewContext) -> int:
    files = context.find_files()

    if context.dry_run:
        print(f"Would check {len(files)} file(s) for import order")
        return 0

    findings = []
    errors = 0
    for go_file in files:
        try:
            finding = check_file(go_file, context.local_prefix, context.oracle)
        except (ImportOrderError, OSError) as e:
            context.report_error(go_file, e)
            errors += 1
            continue
        if finding is not None:
            print(format_finding(finding))
            findings.append(finding)

    if findings:
        print(f"\n✗ Import order violations in {len(findings)} of {len(files)} file(s)")
    elif not errors:
        print(f"✓ Import order correct in {len(files)} file(s)")
    if errors:
        print(f"✗ {errors} file(s) could not be checked", file=sys.stderr)
        return ERROR_EXIT_CODE
    return 1 if findings else 0


def main(argv=None):
    parser = create_review_parser(__doc__)
    parser.add_argument(
        '-w',
        dest='write',
        action='store_true',
        help='write result to (source) file instead of reporting'
    )
    args = parser.parse_args(argv)

    if args.version:
        print(f"version: {__version__}")
        return 0
    if not args.paths:
        print("missing argument: filepath")
        return INVALID_ARGUMENT_EXIT_CODE

    context = ReviewContext(args)
    if args.write:
        from .fix_import_order import fix_files
        return fix_files(context)
    return review_files(context)


if __name__ == "__main__":
    sys.exit(main())
