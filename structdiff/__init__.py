"""
Structural Diff (structdiff)
============================

An order-aware diff of JSON-like documents that aligns the TREE, not the
text.

    diff_values({"a": 1}, {"a": 1, "b": 2})
        → [COMMON 'a' 1, ADD 'b' 2]

    diff_values([1, 2], [2, 1])
        → [REMOVE 1, COMMON 2, ADD 1]

Objects are aligned by sorted key and their members diffed in place.
Arrays are aligned by an LCS over whole elements, which match only when
they are structurally identical.  The result is a nested list of
DiffEntry values that `render` prints as an annotated listing:

    {
      "a": 1,
    + "b": 2
    }
"""

from structdiff.core import (
    # Values
    UNDEFINED,
    ValueKind,
    classify,
    diff_kind,
    equal,
    # Alignment
    Action,
    AlignStep,
    align,
    lcs_table,
    # Diff
    DiffEntry,
    DiffResult,
    diff_values,
    MAX_DEPTH,
    # Errors
    DiffError,
    TypeMismatch,
    DepthLimitExceeded,
)
from structdiff.formats import from_json, load_file, InputError
from structdiff.render import render, render_lines

__version__ = "0.1.0"
__all__ = [
    "UNDEFINED", "ValueKind", "classify", "diff_kind", "equal",
    "Action", "AlignStep", "align", "lcs_table",
    "DiffEntry", "DiffResult", "diff_values", "MAX_DEPTH",
    "DiffError", "TypeMismatch", "DepthLimitExceeded",
    "from_json", "load_file", "InputError",
    "render", "render_lines",
]
