"""Data models for main cards, layout trees and canvas diagrams."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import VaultError
from .ids import SegmentedId, parse_id


@dataclass(frozen=True)
class Card:
    """A main card note with its id already resolved."""

    id: str  # value from the id property, or the filename stem
    path: Path
    file: str  # vault-relative posix path, written into canvases

    @property
    def segments(self) -> SegmentedId:
        """Parsed id. Raises MalformedIdError for non-numeric ids."""
        return parse_id(self.id)

    @property
    def name(self) -> str:
        return self.path.stem


@dataclass
class TreeNode:
    """One card inside a layout tree. Built per layout call, never persisted."""

    card: Card
    segments: SegmentedId
    level: int = 0
    children: list["TreeNode"] = field(default_factory=list)
    x: float = 0
    y: float = 0

    def walk(self):
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


_NODE_KEYS = {"id", "type", "file", "x", "y", "width", "height"}
_EDGE_KEYS = {"id", "fromNode", "toNode", "fromSide", "toSide"}


def _require(data: Any, keys: tuple[str, ...], what: str) -> dict:
    if not isinstance(data, dict):
        raise VaultError(f"Canvas {what} is not a JSON object: {data!r}")
    missing = [k for k in keys if data.get(k) is None]
    if missing:
        raise VaultError(f"Canvas {what} is missing {', '.join(missing)}: {data!r}")
    return data


@dataclass
class DiagramNode:
    """A canvas node. Tree canvases only write file nodes; other kinds are carried through."""

    id: str
    file: str | None
    x: float
    y: float
    width: float
    height: float
    type: str = "file"
    extra: dict[str, Any] = field(default_factory=dict)  # text, color, url, ...

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["id"] = self.id
        d["type"] = self.type
        if self.file is not None:
            d["file"] = self.file
        d.update(x=self.x, y=self.y, width=self.width, height=self.height)
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "DiagramNode":
        data = _require(data, ("id",), "node")
        file = data.get("file")
        return cls(
            id=str(data["id"]),
            type=data.get("type", "file"),
            file=str(file) if file is not None else None,
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
            extra={k: v for k, v in data.items() if k not in _NODE_KEYS},
        )


@dataclass
class DiagramEdge:
    """A connector between two nodes. Tree edges run from the parent's right side to the child's left."""

    id: str
    from_node: str
    to_node: str
    from_side: str | None = "right"
    to_side: str | None = "left"
    extra: dict[str, Any] = field(default_factory=dict)  # label, color, ends, ...

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = dict(self.extra)
        d["id"] = self.id
        d["fromNode"] = self.from_node
        d["toNode"] = self.to_node
        if self.from_side is not None:
            d["fromSide"] = self.from_side
        if self.to_side is not None:
            d["toSide"] = self.to_side
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "DiagramEdge":
        data = _require(data, ("id", "fromNode", "toNode"), "edge")
        return cls(
            id=str(data["id"]),
            from_node=str(data["fromNode"]),
            to_node=str(data["toNode"]),
            from_side=data.get("fromSide"),
            to_side=data.get("toSide"),
            extra={k: v for k, v in data.items() if k not in _EDGE_KEYS},
        )


@dataclass
class Diagram:
    """Node/edge visualization of the subtree under ``root_id``."""

    root_id: str | None
    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[DiagramEdge] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)  # other meta keys, kept as-is
    extra: dict[str, Any] = field(default_factory=dict)  # unknown top-level keys

    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def remove_node(self, node_id: str) -> bool:
        """Drop a node and every edge touching it. Returns True if it existed."""
        before = len(self.nodes)
        self.nodes = [n for n in self.nodes if n.id != node_id]
        self.edges = [e for e in self.edges if e.from_node != node_id and e.to_node != node_id]
        return len(self.nodes) != before

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON Canvas document shape."""
        meta = dict(self.meta)
        if self.root_id is not None:
            meta["rootCardId"] = self.root_id
        d: dict[str, Any] = dict(self.extra)
        d["nodes"] = [n.to_dict() for n in self.nodes]
        d["edges"] = [e.to_dict() for e in self.edges]
        d["meta"] = meta
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Diagram":
        """Parse a canvas document.

        Raises:
            VaultError: If the document, a node or an edge has the wrong shape
        """
        if not isinstance(data, dict):
            raise VaultError("Canvas is not a JSON object")
        meta = data.get("meta") or {}
        nodes = data.get("nodes") or []
        edges = data.get("edges") or []
        if not isinstance(meta, dict) or not isinstance(nodes, list) or not isinstance(edges, list):
            raise VaultError("Canvas meta must be an object and nodes/edges must be lists")
        meta = dict(meta)
        root = meta.pop("rootCardId", None)
        extra = {k: v for k, v in data.items() if k not in {"nodes", "edges", "meta"}}
        return cls(
            root_id=str(root) if root is not None else None,
            nodes=[DiagramNode.from_dict(n) for n in nodes],
            edges=[DiagramEdge.from_dict(e) for e in edges],
            meta=meta,
            extra=extra,
        )
