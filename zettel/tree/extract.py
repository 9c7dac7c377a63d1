"""Flatten a laid-out tree into canvas nodes and edges."""

from __future__ import annotations

from ..ids import render_id
from ..models import DiagramEdge, DiagramNode, TreeNode
from .layout import LayoutParams


def _number(value: float) -> float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def edge_id(parent_id: str, child_id: str) -> str:
    """Stable edge identity for a parent/child pair."""
    return f"edge-{parent_id}-{child_id}"


def extract(
    root: TreeNode, params: LayoutParams | None = None
) -> tuple[list[DiagramNode], list[DiagramEdge]]:
    """Return one node per card and one edge per parent/child pair, in pre-order."""
    params = params or LayoutParams()
    nodes: list[DiagramNode] = []
    edges: list[DiagramEdge] = []

    for node in root.walk():
        node_id = render_id(node.segments)
        nodes.append(
            DiagramNode(
                id=node_id,
                file=node.card.file,
                x=_number(node.x),
                y=_number(node.y),
                width=_number(params.node_width),
                height=_number(params.node_height),
            )
        )
        for child in node.children:
            child_id = render_id(child.segments)
            edges.append(DiagramEdge(id=edge_id(node_id, child_id), from_node=node_id, to_node=child_id))

    return nodes, edges
