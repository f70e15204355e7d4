"""
Common utilities for the import-order scripts.

Provides standardized argument parsing, Go file discovery, and the run
context shared by the review and fix entry points.
"""


import argparse
import os
import sys
from fnmatch import fnmatch
from pathlib import Path
from typing import List, Optional

from .canonicalize import GoimportsOracle


INVALID_ARGUMENT_EXIT_CODE = 3
ERROR_EXIT_CODE = 2

# Directories below a search root that are never checked.
SKIPPED_DIRS = ('testdata', 'vendor')


def create_review_parser(description: str) -> argparse.ArgumentParser:
    """
    Create standardized argument parser for the import-order scripts.

    Args:
        description: Description of what the script checks or fixes

    Returns:
        ArgumentParser with the path, filter and oracle options
    """
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        help='Go files or directories to check'
    )
    parser.add_argument(
        '--local',
        default='',
        help='put imports beginning with this string after 3rd-party packages; comma-separated list'
    )
    parser.add_argument(
        '--exclude',
        default='',
        help='file names to exclude; wildcards allowed; comma-separated list'
    )
    parser.add_argument(
        '--exclude-dir',
        default='',
        help='directory names to exclude; wildcards allowed; comma-separated list'
    )
    parser.add_argument(
        '-n',
        dest='no_recurse',
        action='store_true',
        help="don't recursively check paths"
    )
    parser.add_argument(
        '--goimports',
        default='goimports',
        help='goimports executable used as the canonical order (default: goimports on PATH)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be done without actually doing it'
    )
    parser.add_argument(
        '--version',
        action='store_true',
        help='show version'
    )
    return parser


def split_patterns(value: str) -> List[str]:
    return [p for p in value.split(',') if p]


def matches_any(name: str, patterns: List[str]) -> bool:
    return any(fnmatch(name, pattern) for pattern in patterns)


def find_go_files(
    roots: List[Path],
    excludes: Optional[List[str]] = None,
    exclude_dirs: Optional[List[str]] = None,
    recurse: bool = True
) -> List[Path]:
    """
    Find Go files to check.

    Args:
        roots: Files or directories; directories are searched recursively
        excludes: Wildcard patterns matched against file names
        exclude_dirs: Wildcard patterns matched against directory names
        recurse: If False, only look at files directly inside each root

    Returns:
        Sorted list of Path objects for Go files to check
    """
    excludes = excludes or []
    exclude_dirs = exclude_dirs or []
    go_files = []

    def wanted(file_path: Path) -> bool:
        return file_path.suffix == '.go' and not matches_any(file_path.name, excludes)

    for root in roots:
        if not root.is_dir():
            if wanted(root):
                go_files.append(root)
            continue
        if matches_any(root.name, exclude_dirs):
            continue

        for dirpath, dirnames, filenames in os.walk(root):
            if recurse:
                dirnames[:] = sorted(
                    d for d in dirnames
                    if d not in SKIPPED_DIRS and not matches_any(d, exclude_dirs)
                )
            else:
                dirnames[:] = []
            go_files.extend(p for p in (Path(dirpath) / f for f in filenames) if wanted(p))

    return sorted(go_files)


class ReviewContext:
    """Context object for import-order runs."""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.cwd = Path.cwd()
        self.roots = [Path(p).resolve() for p in args.paths]
        self.dry_run = args.dry_run
        self.local_prefix = args.local
        self.oracle = GoimportsOracle(args.goimports)

    def find_files(self) -> List[Path]:
        """Find files to check based on context."""
        return find_go_files(
            self.roots,
            excludes=split_patterns(self.args.exclude),
            exclude_dirs=split_patterns(self.args.exclude_dir),
            recurse=not self.args.no_recurse
        )

    def relative_path(self, file_path: Path) -> Path:
        """Get path relative to the working directory when possible."""
        try:
            return file_path.relative_to(self.cwd)
        except ValueError:
            return file_path

    def report_error(self, file_path: Path, error: Exception):
        print(f"Error: {self.relative_path(file_path)}: {error}", file=sys.stderr)
