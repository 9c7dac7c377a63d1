"""Rebuild a card tree from a flat card collection."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from ..errors import MalformedIdError, RootNotFoundError
from ..ids import SegmentedId, parse_id, render_id
from ..models import Card, TreeNode

logger = logging.getLogger(__name__)


def _index_cards(cards: Iterable[Card]) -> dict[SegmentedId, Card]:
    """Parse every card id once. First card wins on duplicate ids."""
    by_id: dict[SegmentedId, Card] = {}
    for card in cards:
        try:
            segments = parse_id(card.id)
        except MalformedIdError:
            logger.debug("Skipping card with non-numeric id: %s (%s)", card.id, card.file)
            continue
        if segments in by_id:
            logger.warning(
                "Duplicate card id %s: keeping %s, ignoring %s",
                render_id(segments),
                by_id[segments].file,
                card.file,
            )
            continue
        by_id[segments] = card
    return by_id


def build_forest(cards: Iterable[Card], root_id: str | int) -> TreeNode:
    """Build the tree rooted at ``root_id``.

    Only the root and cards reachable from it one level at a time are kept;
    a card whose parent id has no card is dropped with its whole subtree.

    Raises:
        MalformedIdError: If ``root_id`` is not a valid id
        RootNotFoundError: If no card has id ``root_id``
    """
    root_segments = parse_id(root_id)
    by_id = _index_cards(cards)
    if root_segments not in by_id:
        raise RootNotFoundError(render_id(root_segments))

    depth = len(root_segments)
    children_of: dict[SegmentedId, list[SegmentedId]] = defaultdict(list)
    for segments in by_id:
        if len(segments) > depth and segments[:depth] == root_segments:
            children_of[segments[:-1]].append(segments)

    def build(segments: SegmentedId, level: int) -> TreeNode:
        node = TreeNode(card=by_id[segments], segments=segments, level=level)
        node.children = [build(child, level + 1) for child in sorted(children_of.get(segments, []))]
        return node

    return build(root_segments, 0)
