"""Segmented main card ids and the fractional id allocator.

A card id is a dash-joined sequence of non-negative integers (``10``,
``10-20``, ``10-20-5``). The number of segments is the depth of the card in
the tree. New ids are allocated between existing ones so that inserting a
card never renumbers the rest of the tree.
"""

from __future__ import annotations

import re
from typing import Union

from .errors import LevelMismatchError, MalformedIdError, NoRoomForInsertionError

SEPARATOR = "-"

# Gap left after the last sibling / before the first child
ID_STEP = 10

_SEGMENT_PATTERN = re.compile(r"[0-9]+")

SegmentedId = tuple[int, ...]
IdLike = Union[str, int, SegmentedId]


def parse_id(raw: str | int) -> SegmentedId:
    """Parse a card id into its integer segments.

    A bare ``int`` is a single-segment id. Strings are split on ``-`` and
    every part must be a plain decimal number.

    Raises:
        MalformedIdError: On empty segments, signs, non-digits or negative ints
    """
    if isinstance(raw, bool):
        raise MalformedIdError(raw, "booleans are not ids")
    if isinstance(raw, int):
        if raw < 0:
            raise MalformedIdError(raw, "segments must be non-negative")
        return (raw,)
    if not isinstance(raw, str):
        raise MalformedIdError(raw, f"unsupported type {type(raw).__name__}")

    text = raw.strip()
    if not text:
        raise MalformedIdError(raw, "empty id")

    segments = []
    for part in text.split(SEPARATOR):
        if not _SEGMENT_PATTERN.fullmatch(part):
            raise MalformedIdError(raw, f"segment {part!r} is not a non-negative integer")
        segments.append(int(part))
    return tuple(segments)


def _coerce(value: IdLike) -> SegmentedId:
    if isinstance(value, tuple):
        if not value:
            raise MalformedIdError(value, "empty id")
        for segment in value:
            if isinstance(segment, bool) or not isinstance(segment, int) or segment < 0:
                raise MalformedIdError(value, f"segment {segment!r} is not a non-negative integer")
        return value
    return parse_id(value)


def render_id(segments: IdLike) -> str:
    """Render segments in canonical ``a-b-c`` form."""
    return SEPARATOR.join(str(s) for s in _coerce(segments))


def id_sort_key(value: IdLike) -> SegmentedId:
    """Sort key giving the canonical sibling order (numeric, not string)."""
    return _coerce(value)


def compare_ids(a: IdLike, b: IdLike) -> int:
    """Compare two ids segment by segment.

    Returns -1, 0 or 1. A shorter id sorts before a longer id sharing its
    prefix, and ``9`` sorts before ``10``.
    """
    left, right = _coerce(a), _coerce(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def parent_of(value: IdLike) -> SegmentedId | None:
    """Parent segments, or None for a top-level id."""
    segments = _coerce(value)
    if len(segments) == 1:
        return None
    return segments[:-1]


def is_child_of(child: IdLike, parent: IdLike) -> bool:
    """True if ``child`` is exactly one level below ``parent``."""
    c, p = _coerce(child), _coerce(parent)
    return len(c) == len(p) + 1 and c[: len(p)] == p


def is_descendant_of(node: IdLike, ancestor: IdLike) -> bool:
    """True if ``ancestor`` is a proper segment prefix of ``node``."""
    n, a = _coerce(node), _coerce(ancestor)
    return len(n) > len(a) and n[: len(a)] == a


def is_sibling_of(a: IdLike, b: IdLike) -> bool:
    """True if both ids share depth and parent prefix (top level always does)."""
    left, right = _coerce(a), _coerce(b)
    return len(left) == len(right) and left[:-1] == right[:-1]


def generate_sibling_id(current_id: IdLike, next_id: IdLike | None) -> str:
    """Allocate an id for a card inserted right after ``current_id``.

    Without a next sibling the last segment grows by ``ID_STEP``. Otherwise the
    new last segment is the floor midpoint of the two neighbours.

    Raises:
        LevelMismatchError: If the two ids are not siblings (depth or parent differs)
        NoRoomForInsertionError: If no integer lies strictly between them
    """
    current = list(_coerce(current_id))
    if next_id is None:
        current[-1] += ID_STEP
        return render_id(tuple(current))

    following = _coerce(next_id)
    if not is_sibling_of(tuple(current), following):
        raise LevelMismatchError(
            f"'{render_id(tuple(current))}' and '{render_id(following)}' are not siblings"
        )

    midpoint = (current[-1] + following[-1]) // 2
    if midpoint <= current[-1]:
        raise NoRoomForInsertionError(
            f"No free id between '{render_id(tuple(current))}' and '{render_id(following)}'"
        )
    current[-1] = midpoint
    return render_id(tuple(current))


def generate_child_id(parent_id: IdLike, first_child_id: IdLike | None) -> str:
    """Allocate an id for a new first child of ``parent_id``.

    Without children the new id is ``parent-10``. Otherwise the new segment is
    half of the current first child's segment (midpoint with an implicit 0).

    Raises:
        LevelMismatchError: If ``first_child_id`` is not a direct child of the parent
        NoRoomForInsertionError: If the first child already uses segment 0
    """
    parent = _coerce(parent_id)
    if first_child_id is None:
        return render_id(parent + (ID_STEP,))

    child = _coerce(first_child_id)
    if not is_child_of(child, parent):
        raise LevelMismatchError(
            f"'{render_id(child)}' is not a direct child of '{render_id(parent)}'"
        )

    segment = child[-1] // 2
    if segment == child[-1]:
        raise NoRoomForInsertionError(f"No free id before first child '{render_id(child)}'")
    return render_id(parent + (segment,))
