"""Strict import-order checker and fixer for Go source files."""

__version__ = "1.2.0"

from .canonicalize import GoimportsOracle, canonicalize, canonicalize_source
from .compare import Divergence, compare, render, report
from .errors import (
    ImportOrderError,
    MalformedImportBlockError,
    OracleUnavailableError,
    ParseError,
    Position,
)
from .fix_import_order import fix_file
from .import_lines import ImportBlock, ImportLine, build_import_lines
from .review_import_order import Finding, check_file
