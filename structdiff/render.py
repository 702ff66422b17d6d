"""
structdiff.render — Print a diff as an annotated, JSON-like listing.

    {
      "name": "svc",
    - "port": 80,
    + "port": 8080,
    + "tags": [
    +   "a"
    + ]
    }

The first column marks the action: "+" added, "-" removed, " " unchanged.
Members are indented two spaces per nesting level; every sibling but the
last ends in a comma.

Object members are labelled with their JSON-quoted key.  Array elements
carry no label: an element's index differs between the two sides once
anything before it is added or removed, so no position is printed.
"""

import json
from typing import Any, Iterator

from .core import UNDEFINED, Action, DiffEntry, ValueKind

INDENT = "  "

MARKS = {
    Action.ADD: "+",
    Action.REMOVE: "-",
    Action.COMMON: " ",
}

_BRACKETS = {
    ValueKind.OBJECT: ("{", "}"),
    ValueKind.ARRAY: ("[", "]"),
}


def format_scalar(value: Any) -> str:
    """JSON text of a leaf value; UNDEFINED prints as `undefined`."""
    if value is UNDEFINED:
        return "undefined"
    return json.dumps(value, ensure_ascii=False, default=str)


def render_lines(result: list[DiffEntry], root_kind: ValueKind) -> Iterator[str]:
    """Lazily yield the lines of the listing for a root-level diff."""
    try:
        open_, close = _BRACKETS[root_kind]
    except KeyError:
        raise ValueError(f"root kind must be object or array, not {root_kind}") from None

    yield open_
    yield from _entry_lines(result, 1)
    yield close


def render(result: list[DiffEntry], root_kind: ValueKind) -> str:
    """The whole listing as one string (no trailing newline)."""
    return "\n".join(render_lines(result, root_kind))


def _entry_lines(entries: list[DiffEntry], depth: int) -> Iterator[str]:
    pad = INDENT * depth
    last = len(entries) - 1

    for pos, entry in enumerate(entries):
        mark = MARKS[entry.action]
        comma = "," if pos < last else ""
        label = "" if entry.key is None else f"{json.dumps(str(entry.key), ensure_ascii=False)}: "

        if entry.children is None:
            yield f"{mark}{pad}{label}{format_scalar(entry.value)}{comma}"
            continue

        open_, close = _BRACKETS[entry.kind]
        yield f"{mark}{pad}{label}{open_}"
        yield from _entry_lines(entry.children, depth + 1)
        yield f"{mark}{pad}{close}{comma}"
