"""
Real-vs-ideal comparison of import blocks, and rendering of the ideal block.
"""


from typing import NamedTuple, Optional

from .import_lines import ImportBlock, ImportLine


class Divergence(NamedTuple):
    """First index where two blocks disagree; `line` is None past the real end."""
    index: int
    line: Optional[ImportLine]


def compare(real: ImportBlock, ideal: ImportBlock) -> Optional[Divergence]:
    """
    Find the first line where `real` departs from `ideal`.

    Lines match when they sit on the same file line and import the same path;
    names and comments do not take part. Only the first mismatch is returned.

    Returns:
        Divergence, or None when the blocks are identical
    """
    for i, (have, want) in enumerate(zip(real, ideal)):
        if have.line != want.line or have.path != want.path:
            return Divergence(i, have)

    if len(real) == len(ideal):
        return None
    i = min(len(real), len(ideal))
    return Divergence(i, real[i] if i < len(real) else None)


def report(real: ImportBlock, divergence: Divergence) -> int:
    """Source offset to blame for `divergence`."""
    if divergence.line is not None:
        return divergence.line.offset
    return real.end_offset


def render(block: ImportBlock) -> str:
    """Write `block` back out as a grouped import declaration."""
    out = ["import (\n"]
    for line in block:
        if not line.is_blank:
            out.append("\t")
        if line.name:
            out.append(line.name + " ")
        out.append(line.path)
        if line.comment:
            if not line.is_comment_line:
                out.append(" ")
            out.append("//" + line.comment)
        out.append("\n")
    out.append(")")
    return ''.join(out)
