"""
structdiff.core — Order-Aware Structural Diff
=============================================

FRAMEWORK
═════════

§1  THE PROBLEM
───────────────

Line-based diff tools treat a JSON document as text.  Reformatting,
re-indenting or reordering the keys of an object all show up as changes,
and a moved array element looks like an unrelated block of edits.

structdiff compares the TREE instead.  It walks both documents level by
level and aligns the children of each pair of corresponding nodes:

    • Objects are aligned by KEY (keys sorted, matched by equality).
    • Arrays are aligned by ELEMENT (order-preserving, matched by full
      structural equality).

Every aligned child becomes a DiffEntry marked COMMON, ADD or REMOVE.
Composite children carry their own nested diff, so the result mirrors the
shape of the documents.


§2  VALUES
──────────

A value is one of:

    None                   → NULL
    UNDEFINED              → UNDEFINED  (an absent value, e.g. missing key)
    str/int/float/bool     → SCALAR
    list/tuple             → ARRAY
    Mapping                → OBJECT

For diff purposes NULL and UNDEFINED collapse into SCALAR: they are
leaves that carry a `value`, never `children`.


§3  ALIGNMENT
─────────────

Both strategies share one LCS engine, parameterised by a match predicate:

    C[0][j] = C[i][0] = 0
    C[i][j] = C[i-1][j-1] + 1             if match(x[i-1], y[j-1])
            = max(C[i-1][j], C[i][j-1])   otherwise

The backtrace starts at (|x|, |y|) and walks back to (0, 0):

    match(x[i-1], y[j-1])              → COMMON, step to (i-1, j-1)
    j > 0 and (i == 0 or
               C[i][j-1] >= C[i-1][j]) → ADD,    step to (i, j-1)
    otherwise                          → REMOVE, step to (i-1, j)

Ties prefer ADD over REMOVE.  This fixes one alignment among the optimal
ones and makes the output reproducible:

    [1, 2] vs [2, 1]  →  REMOVE 1, COMMON 2, ADD 1


§4  WHOLESALE REPLACEMENT
─────────────────────────

Array elements match only when they are structurally IDENTICAL.  A single
changed field inside an array element therefore shows up as REMOVE of the
old element followed by ADD of the new one, never as an in-place nested
diff.  Object fields, on the other hand, are matched by key and diffed in
place.

When the value behind a key changes kind (scalar → object, array →
object, ...) the key is likewise reported as REMOVE + ADD.

A subtree that is added or removed as a whole is diffed against the empty
value of its own kind, so every descendant is marked ADD/REMOVE too.


§5  COMPLEXITY
──────────────

Each alignment costs O(|x|·|y|) time and space.  Tables are per level and
are released as soon as their backtrace is done.  Recursion depth equals
document depth and is bounded by MAX_DEPTH; equality checks use an
explicit stack and do not recurse.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Optional, Sequence, Union

logger = logging.getLogger(__name__)

# Nesting depth at which diff_values gives up.
MAX_DEPTH = 200


# ═══════════════════════════════════════════════════════════════════
#  VALUE CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════

class _Undefined:
    """Marker for an absent value.  Use the UNDEFINED singleton."""
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


class ValueKind(Enum):
    """Classification of a value."""
    NULL = "null"
    UNDEFINED = "undefined"
    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"

    def __str__(self) -> str:
        return self.value


def classify(v: Any) -> ValueKind:
    """
    Classify a value.  Total: anything unrecognised is a SCALAR.

    The bool check comes before the number check, since bool is a
    subclass of int.
    """
    if v is None:
        return ValueKind.NULL
    if v is UNDEFINED:
        return ValueKind.UNDEFINED
    if isinstance(v, bool):
        return ValueKind.SCALAR
    if isinstance(v, (int, float, str, bytes)):
        return ValueKind.SCALAR
    if isinstance(v, Mapping):
        return ValueKind.OBJECT
    if isinstance(v, (list, tuple)):
        return ValueKind.ARRAY
    return ValueKind.SCALAR


def diff_kind(v: Any) -> ValueKind:
    """Kind as stored on a DiffEntry: NULL and UNDEFINED become SCALAR."""
    kind = classify(v)
    if kind in (ValueKind.NULL, ValueKind.UNDEFINED):
        return ValueKind.SCALAR
    return kind


def is_composite(kind: ValueKind) -> bool:
    return kind is ValueKind.ARRAY or kind is ValueKind.OBJECT


def empty_of(kind: ValueKind) -> Union[dict, list]:
    """The empty composite of `kind`: {} for objects, [] for arrays."""
    if kind is ValueKind.OBJECT:
        return {}
    if kind is ValueKind.ARRAY:
        return []
    raise ValueError(f"no empty value for kind {kind}")


# ═══════════════════════════════════════════════════════════════════
#  STRUCTURAL EQUALITY
# ═══════════════════════════════════════════════════════════════════

def _scalar_equal(a: Any, b: Any) -> bool:
    # bool vs non-bool is always unequal (True == 1 in Python).
    if (type(a) is bool) != (type(b) is bool):
        return False
    return a is b or a == b


def equal(a: Any, b: Any) -> bool:
    """
    Full structural equality.

    Objects are equal when every key of either side maps to equal values
    on both sides; a missing key reads as UNDEFINED.  Arrays are equal
    when they have the same length and are equal position by position.
    Scalars compare by value.  Values of different kinds are never equal.
    """
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        kind = classify(x)
        if kind is not classify(y):
            return False

        if kind is ValueKind.OBJECT:
            for k in set(x) | set(y):
                stack.append((x.get(k, UNDEFINED), y.get(k, UNDEFINED)))
        elif kind is ValueKind.ARRAY:
            if len(x) != len(y):
                return False
            stack.extend(zip(x, y))
        elif not _scalar_equal(x, y):
            return False

    return True


# ═══════════════════════════════════════════════════════════════════
#  SEQUENCE ALIGNMENT (LCS)
# ═══════════════════════════════════════════════════════════════════

class Action(Enum):
    """What happened to an aligned element."""
    ADD = auto()
    REMOVE = auto()
    COMMON = auto()


@dataclass(frozen=True, slots=True)
class AlignStep:
    """
    One step of an alignment.

    COMMON steps carry both indices, ADD only `right_index`, REMOVE only
    `left_index`.
    """
    action: Action
    left_index: Optional[int] = None
    right_index: Optional[int] = None

    def __repr__(self) -> str:
        if self.action is Action.COMMON:
            return f"COMMON({self.left_index}, {self.right_index})"
        if self.action is Action.ADD:
            return f"ADD(_, {self.right_index})"
        return f"REMOVE({self.left_index}, _)"


def _fill_table(x: Sequence, y: Sequence,
                matches: Callable[[Any, Any], bool]):
    m, n = len(x), len(y)
    c = [[0] * (n + 1) for _ in range(m + 1)]
    hit = [[False] * n for _ in range(m)]

    for i in range(1, m + 1):
        row, prev = c[i], c[i - 1]
        xi = x[i - 1]
        for j in range(1, n + 1):
            if matches(xi, y[j - 1]):
                hit[i - 1][j - 1] = True
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])

    return c, hit


def lcs_table(x: Sequence, y: Sequence,
              matches: Callable[[Any, Any], bool]) -> list[list[int]]:
    """
    The (|x|+1) × (|y|+1) LCS table: C[i][j] is the length of the longest
    common subsequence of x[:i] and y[:j] under `matches`.
    """
    return _fill_table(x, y, matches)[0]


def align(x: Sequence, y: Sequence,
          matches: Callable[[Any, Any], bool]) -> list[AlignStep]:
    """
    Align two sequences and return the steps in left-to-right order.

    On ties between skipping an element of x and skipping an element of
    y, the ADD (skip in y) is taken first during the backtrace.
    """
    c, hit = _fill_table(x, y, matches)

    steps: list[AlignStep] = []
    i, j = len(x), len(y)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and hit[i - 1][j - 1]:
            steps.append(AlignStep(Action.COMMON, i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or c[i][j - 1] >= c[i - 1][j]):
            steps.append(AlignStep(Action.ADD, right_index=j - 1))
            j -= 1
        else:
            steps.append(AlignStep(Action.REMOVE, left_index=i - 1))
            i -= 1

    steps.reverse()
    logger.debug("aligned %d x %d elements, lcs=%d",
                 len(x), len(y), c[len(x)][len(y)])
    return steps


# ═══════════════════════════════════════════════════════════════════
#  DIFF RESULT
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class DiffEntry:
    """
    One aligned element of a diff.

    `kind` is SCALAR, ARRAY or OBJECT.  Scalars carry `value` (which may
    legitimately be None); composites carry `children`, the nested diff.
    `key` is set for object members and None for array elements.
    """
    action: Action
    kind: ValueKind
    key: Optional[str] = None
    value: Any = None
    children: Optional[list["DiffEntry"]] = None

    def __repr__(self) -> str:
        where = f" {self.key!r}" if self.key is not None else ""
        if self.children is not None:
            return f"{self.action.name}{where} {self.kind}[{len(self.children)}]"
        return f"{self.action.name}{where} {self.value!r}"


# DiffResult: the entries of one composite level, in alignment order.
DiffResult = list[DiffEntry]


# ═══════════════════════════════════════════════════════════════════
#  ERRORS
# ═══════════════════════════════════════════════════════════════════

def _format_path(path: tuple) -> str:
    return "/".join(str(p) for p in path) or "(root)"


class DiffError(Exception):
    """Base class for failures of the diff engine."""


class TypeMismatch(DiffError):
    """The two values compared at `path` cannot be diffed against each other."""

    def __init__(self, path: tuple, left_kind: ValueKind, right_kind: ValueKind):
        self.path = path
        self.left_kind = left_kind
        self.right_kind = right_kind
        if left_kind is right_kind:
            msg = (f"cannot diff {left_kind} values at {_format_path(path)}: "
                   f"expected objects or arrays")
        else:
            msg = (f"type mismatch at {_format_path(path)}: "
                   f"had {left_kind} and {right_kind}")
        super().__init__(msg)


class DepthLimitExceeded(DiffError):
    """Documents nest deeper than the configured limit."""

    def __init__(self, path: tuple, limit: int):
        self.path = path
        self.limit = limit
        super().__init__(
            f"nesting deeper than {limit} levels at {_format_path(path)}")


# ═══════════════════════════════════════════════════════════════════
#  TREE DIFF
# ═══════════════════════════════════════════════════════════════════

def diff_values(a: Any, b: Any, *, max_depth: int = MAX_DEPTH) -> DiffResult:
    """
    Diff two composite values of the same kind.

    Both `a` and `b` must be objects or both arrays; anything else raises
    TypeMismatch.  Returns the entries of the root level; nested
    composites carry their own diffs in `children`.  Raises
    DepthLimitExceeded when the documents nest deeper than `max_depth`,
    or deeper than the interpreter stack allows.
    """
    differ = _Differ(max_depth)
    try:
        return differ.diff(a, b, ())
    except RecursionError:
        reached = differ.deepest
        raise DepthLimitExceeded(reached, max(len(reached) - 1, 0)) from None


class _Differ:

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        # Longest path entered so far; reported when the stack runs out.
        self.deepest: tuple = ()

    def diff(self, a: Any, b: Any, path: tuple) -> DiffResult:
        if len(path) > len(self.deepest):
            self.deepest = path
        kind_a, kind_b = classify(a), classify(b)
        if kind_a is not kind_b or not is_composite(kind_a):
            raise TypeMismatch(path, kind_a, kind_b)
        if len(path) > self.max_depth:
            raise DepthLimitExceeded(path, self.max_depth)

        if kind_a is ValueKind.OBJECT:
            return self._diff_objects(a, b, path)
        return self._diff_arrays(a, b, path)

    def _diff_objects(self, a: Mapping, b: Mapping, path: tuple) -> DiffResult:
        keys_a = sorted(a, key=str)
        keys_b = sorted(b, key=str)
        entries: DiffResult = []

        for step in align(keys_a, keys_b, _same_key):
            if step.action is Action.ADD:
                key = keys_b[step.right_index]
                entries.append(self._whole(Action.ADD, b[key], key, path + (key,)))
            elif step.action is Action.REMOVE:
                key = keys_a[step.left_index]
                entries.append(self._whole(Action.REMOVE, a[key], key, path + (key,)))
            else:
                key = keys_a[step.left_index]
                entries.extend(self._common_member(a[key], b[key], key, path + (key,)))

        return entries

    def _common_member(self, va: Any, vb: Any, key: str,
                       path: tuple) -> DiffResult:
        kind_a, kind_b = diff_kind(va), diff_kind(vb)
        if kind_a is kind_b and is_composite(kind_a):
            return [DiffEntry(Action.COMMON, kind_a, key,
                              children=self.diff(va, vb, path))]
        if equal(va, vb):
            return [DiffEntry(Action.COMMON, kind_a, key, value=va)]
        # Changed value or changed kind: replace wholesale.
        return [
            self._whole(Action.REMOVE, va, key, path),
            self._whole(Action.ADD, vb, key, path),
        ]

    def _diff_arrays(self, a: Sequence, b: Sequence, path: tuple) -> DiffResult:
        entries: DiffResult = []

        for step in align(a, b, equal):
            if step.action is Action.ADD:
                entries.append(self._whole(Action.ADD, b[step.right_index],
                                           None, path + (step.right_index,)))
            elif step.action is Action.REMOVE:
                entries.append(self._whole(Action.REMOVE, a[step.left_index],
                                           None, path + (step.left_index,)))
            else:
                entries.append(self._whole(Action.COMMON, b[step.right_index],
                                           None, path + (step.right_index,)))

        return entries

    def _whole(self, action: Action, v: Any, key: Optional[str],
               path: tuple) -> DiffEntry:
        """
        Entry for a value taken as a whole.  Composites are diffed against
        the empty value of their kind (or against themselves for COMMON),
        so all descendants share `action`.
        """
        kind = diff_kind(v)
        if not is_composite(kind):
            return DiffEntry(action, kind, key, value=v)

        if action is Action.ADD:
            children = self.diff(empty_of(kind), v, path)
        elif action is Action.REMOVE:
            children = self.diff(v, empty_of(kind), path)
        else:
            children = self.diff(v, v, path)
        return DiffEntry(action, kind, key, children=children)


def _same_key(ka: Any, kb: Any) -> bool:
    return ka == kb
