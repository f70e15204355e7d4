#!/usr/bin/env python3
"""
Fix: Go import order.

Rewrites every Go file whose import block is out of canonical order with the
goimports output for it. Files already in canonical order are not touched,
and a successful run prints nothing.
"""


import os
import stat
import sys
from pathlib import Path
from typing import Optional, Union

from .canonicalize import Oracle
from .errors import ImportOrderError
from .review_utils import ERROR_EXIT_CODE, INVALID_ARGUMENT_EXIT_CODE, ReviewContext, create_review_parser
from .review_import_order import check_file


def fix_file(
    file_path: Union[str, Path],
    local_prefix: str = '',
    oracle: Optional[Oracle] = None,
    dry_run: bool = False,
) -> bool:
    """Fix import order in a single file. Returns True if it was (or would be) rewritten."""
    finding = check_file(file_path, local_prefix, oracle)
    if finding is None:
        return False
    if dry_run:
        return True

    # Keep the permission bits: the whole file is replaced.
    perms = stat.S_IMODE(os.stat(file_path).st_mode)
    with open(file_path, 'w', encoding='utf-8', newline='') as f:
        f.write(finding.fixed_source)
    os.chmod(file_path, perms)
    return True


def fix_files(context: ReviewContext) -> int:
    errors = 0
    for go_file in context.find_files():
        try:
            fixed = fix_file(go_file, context.local_prefix, context.oracle, context.dry_run)
        except (ImportOrderError, OSError) as e:
            context.report_error(go_file, e)
            errors += 1
            continue
        if fixed and context.dry_run:
            print(f"Would fix: {context.relative_path(go_file)}")

    return ERROR_EXIT_CODE if errors else 0


def main(argv=None):
    parser = create_review_parser(__doc__)
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"version: {__version__}")
        return 0
    if not args.paths:
        print("missing argument: filepath")
        return INVALID_ARGUMENT_EXIT_CODE

    return fix_files(ReviewContext(args))


if __name__ == "__main__":
    sys.exit(main())
