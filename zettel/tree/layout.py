"""Compact tree layout.

Nodes on the same level are stacked without overlap. A parent is centered on
its children and pushed down (with its subtree) only when it would collide
with a node already placed on its own level. Different branches may share
vertical space at different levels, which keeps the canvas short.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import TreeNode


@dataclass(frozen=True)
class LayoutParams:
    """Canvas geometry used by the layout."""

    level_width: float = 720
    node_width: float = 480
    node_height: float = 300
    min_vertical_gap: float = 55

    @property
    def step(self) -> float:
        """Vertical distance between consecutive slots on one level."""
        return self.node_height + self.min_vertical_gap


def _shift_subtree(node: TreeNode, offset: float, depths: set[int]) -> None:
    for child in node.children:
        child.y += offset
        depths.add(child.level)
        _shift_subtree(child, offset, depths)


def _place(node: TreeNode, next_y: dict[int, float], params: LayoutParams) -> None:
    level = node.level
    next_y.setdefault(level, 0)
    node.x = level * params.level_width

    if not node.children:
        node.y = next_y[level]
        next_y[level] += params.step
        return

    for child in node.children:
        _place(child, next_y, params)

    ys = [child.y for child in node.children]
    node.y = (min(ys) + max(ys)) / 2

    if node.y < next_y[level]:
        offset = next_y[level] - node.y
        depths: set[int] = set()
        _shift_subtree(node, offset, depths)
        # The subtree holds the last placed node of every depth it touches
        for depth in depths:
            next_y[depth] += offset
        node.y = next_y[level]

    next_y[level] = max(next_y[level], node.y + params.step)


def layout(root: TreeNode, params: LayoutParams | None = None) -> TreeNode:
    """Assign ``x``/``y`` to every node of the tree in place and return the root."""
    _place(root, {}, params or LayoutParams())
    return root
