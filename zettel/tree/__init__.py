"""Knowledge tree layout: cards in, canvas nodes and edges out."""

from __future__ import annotations

from typing import Iterable

from ..ids import parse_id, render_id
from ..models import Card, Diagram
from .extract import edge_id, extract
from .forest import build_forest
from .layout import LayoutParams, layout


def compute_diagram(
    cards: Iterable[Card], root_id: str | int, params: LayoutParams | None = None
) -> Diagram:
    """Build, lay out and flatten the tree under ``root_id``.

    Pure: the same cards and root always give the same diagram.
    """
    params = params or LayoutParams()
    root = layout(build_forest(cards, root_id), params)
    nodes, edges = extract(root, params)
    return Diagram(root_id=render_id(parse_id(root_id)), nodes=nodes, edges=edges)


__all__ = [
    "LayoutParams",
    "build_forest",
    "compute_diagram",
    "edge_id",
    "extract",
    "layout",
]
