"""
Property checks for diff_values over seeded random documents.

    §1  Identity: d(v, v) is COMMON everywhere
    §2  Projection: the left side of a diff rebuilds `a`, the right `b`
    §3  Symmetry: swapping the inputs swaps ADD and REMOVE
"""

import random
import sys
import os

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from structdiff.core import Action, DiffEntry, ValueKind, diff_values
from structdiff.render import render

# No 1.0 alongside 1: equal() treats them as the same number.
SCALARS = [None, True, False, 0, 1, 2, "x", "y", "", 2.5]
KEYS = "abcde"

SEEDS = range(40)


def _random_value(rng, depth, arrays=True):
    if depth == 0 or rng.random() < 0.3:
        return rng.choice(SCALARS)
    if arrays and rng.random() < 0.5:
        return [_random_value(rng, depth - 1, arrays) for _ in range(rng.randint(0, 4))]
    keys = rng.sample(KEYS, rng.randint(0, len(KEYS)))
    return {k: _random_value(rng, depth - 1, arrays) for k in keys}


def _random_doc(rng, arrays=True):
    keys = rng.sample(KEYS, rng.randint(0, len(KEYS)))
    return {k: _random_value(rng, 3, arrays) for k in keys}


def _actions(entries):
    for e in entries:
        yield e.action
        if e.children is not None:
            yield from _actions(e.children)


def _project(entries, kind, side):
    keep = {Action.COMMON, Action.REMOVE if side == "left" else Action.ADD}
    kept = [e for e in entries if e.action in keep]

    def value(e):
        if e.children is None:
            return e.value
        return _project(e.children, e.kind, side)

    if kind is ValueKind.OBJECT:
        return {e.key: value(e) for e in kept}
    return [value(e) for e in kept]


_SWAP = {Action.ADD: Action.REMOVE, Action.REMOVE: Action.ADD, Action.COMMON: Action.COMMON}


def _swapped(entries):
    return [
        DiffEntry(_SWAP[e.action], e.kind, e.key, e.value,
                  None if e.children is None else _swapped(e.children))
        for e in entries
    ]


def _canonical(entries):
    """Order-insensitive form of a diff level, recursively."""
    return sorted(
        ((e.action.name, e.kind.value, repr(e.key), repr(e.value),
          () if e.children is None else tuple(_canonical(e.children)))
         for e in entries),
        key=repr,
    )


# ═══════════════════════════════════════════════════════════════════
#  §1  IDENTITY
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("seed", SEEDS)
def test_identity(seed):
    rng = random.Random(seed)
    v = _random_doc(rng)
    assert set(_actions(diff_values(v, v))) <= {Action.COMMON}


# ═══════════════════════════════════════════════════════════════════
#  §2  PROJECTION
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("seed", SEEDS)
def test_projection_rebuilds_both_sides(seed):
    rng = random.Random(seed)
    a, b = _random_doc(rng), _random_doc(rng)
    result = diff_values(a, b)
    assert _project(result, ValueKind.OBJECT, "left") == a
    assert _project(result, ValueKind.OBJECT, "right") == b
    # Every diff renders.
    render(result, ValueKind.OBJECT)


@pytest.mark.parametrize("seed", SEEDS)
def test_array_accounting(seed):
    rng = random.Random(seed)
    a = [rng.choice(SCALARS) for _ in range(rng.randint(0, 8))]
    b = [rng.choice(SCALARS) for _ in range(rng.randint(0, 8))]
    result = diff_values(a, b)
    counts = {action: sum(e.action is action for e in result) for action in Action}
    assert counts[Action.COMMON] + counts[Action.REMOVE] == len(a)
    assert counts[Action.COMMON] + counts[Action.ADD] == len(b)


# ═══════════════════════════════════════════════════════════════════
#  §3  SYMMETRY
# ═══════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("seed", SEEDS)
def test_symmetry_for_objects(seed):
    """Keys align uniquely, so the swapped diff mirrors the original."""
    rng = random.Random(seed)
    a, b = _random_doc(rng, arrays=False), _random_doc(rng, arrays=False)
    forward = diff_values(a, b)
    backward = diff_values(b, a)
    assert _canonical(_swapped(backward)) == _canonical(forward)


@pytest.mark.parametrize("seed", SEEDS)
def test_symmetry_for_arrays(seed):
    """
    Swapping may pick a different optimal alignment, but the number of
    matches and the added/removed counts mirror each other.
    """
    rng = random.Random(seed)
    a = [rng.choice(SCALARS) for _ in range(rng.randint(0, 8))]
    b = [rng.choice(SCALARS) for _ in range(rng.randint(0, 8))]
    forward = [e.action for e in diff_values(a, b)]
    backward = [e.action for e in diff_values(b, a)]
    assert forward.count(Action.COMMON) == backward.count(Action.COMMON)
    assert forward.count(Action.ADD) == backward.count(Action.REMOVE)
    assert forward.count(Action.REMOVE) == backward.count(Action.ADD)
