"""Knowledge tree canvases: persistence and upkeep as cards come and go.

A tree canvas is a JSON Canvas file whose ``meta.rootCardId`` names the card
at the top of the tree. Its nodes and edges are always recomputed from the
full card set; the compact layout is not stable under local edits, so there
is no incremental patching.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .errors import CanvasExistsError, MalformedIdError, RootNotFoundError
from .ids import is_descendant_of, parse_id, render_id
from .models import Card, Diagram
from .tree import compute_diagram
from .tree.layout import LayoutParams
from .vault import Vault

logger = logging.getLogger(__name__)

CANVAS_SUFFIX = ".canvas"


@dataclass
class MaintenanceReport:
    """Canvases touched by a card deletion."""

    updated: list[Path] = field(default_factory=list)
    orphaned: list[Path] = field(default_factory=list)  # root card was deleted


def read_canvas(path: Path) -> Diagram:
    return Diagram.from_dict(json.loads(path.read_text(encoding="utf-8")))


def write_canvas(path: Path, diagram: Diagram) -> None:
    path.write_text(json.dumps(diagram.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")


def get_root_card_id(path: Path) -> str | None:
    """Read ``meta.rootCardId`` without parsing the nodes and edges."""
    data = json.loads(path.read_text(encoding="utf-8"))
    meta = data.get("meta") if isinstance(data, dict) else None
    if not isinstance(meta, dict):
        return None
    root = meta.get("rootCardId")
    return str(root) if root is not None else None


def set_root_card_id(path: Path, root_card_id: str) -> None:
    diagram = read_canvas(path)
    diagram.root_id = root_card_id
    write_canvas(path, diagram)


def list_canvases(vault: Vault) -> list[Path]:
    """Canvas files directly inside the vault's canvas folder."""
    if not vault.canvas_dir.is_dir():
        return []
    return sorted(p for p in vault.canvas_dir.iterdir() if p.is_file() and p.suffix == CANVAS_SUFFIX)


def tree_canvas_path(vault: Vault, card: Card) -> Path:
    return vault.canvas_dir / f"{card.name} tree{CANVAS_SUFFIX}"


def _params(vault: Vault, params: LayoutParams | None) -> LayoutParams:
    return params or vault.settings.layout


def create_tree_canvas(vault: Vault, card: Card, params: LayoutParams | None = None) -> Path:
    """Create a canvas showing the tree under ``card``.

    The diagram is computed before anything is written, so a failure leaves
    no file behind.

    Raises:
        CanvasExistsError: If the tree canvas for this card already exists
        MalformedIdError: If the card id is not numeric
    """
    path = tree_canvas_path(vault, card)
    if path.exists():
        raise CanvasExistsError(f"Tree canvas already exists: {vault.relative(path)}")

    diagram = compute_diagram(vault.list_cards(), card.id, _params(vault, params))
    diagram.root_id = card.id

    vault.canvas_dir.mkdir(parents=True, exist_ok=True)
    with open(path, "x", encoding="utf-8") as f:
        f.write(json.dumps(diagram.to_dict(), indent=2, ensure_ascii=False))

    logger.info("Created tree canvas %s with %d nodes", path.name, len(diagram.nodes))
    return path


def update_tree_canvas(
    vault: Vault, canvas_path: Path, params: LayoutParams | None = None
) -> Diagram | None:
    """Recompute a canvas from the current cards.

    Returns None (and leaves the file alone) when the canvas has no root id.

    Raises:
        RootNotFoundError: If the root card no longer exists
    """
    current = read_canvas(canvas_path)
    if not current.root_id:
        return None

    diagram = compute_diagram(vault.list_cards(), current.root_id, _params(vault, params))
    diagram.root_id = current.root_id
    diagram.meta = current.meta
    diagram.extra = current.extra
    write_canvas(canvas_path, diagram)

    logger.debug("Updated %s: %d nodes, %d edges", canvas_path.name, len(diagram.nodes), len(diagram.edges))
    return diagram


def remove_node(canvas_path: Path, node_id: str) -> bool:
    """Remove a node and its edges from a canvas. Returns True if it was there."""
    diagram = read_canvas(canvas_path)
    removed = diagram.remove_node(node_id)
    if removed:
        write_canvas(canvas_path, diagram)
    return removed


def _tree_roots(vault: Vault):
    """Yield (canvas path, parsed root id) for every tree canvas."""
    for canvas_path in list_canvases(vault):
        try:
            root_id = get_root_card_id(canvas_path)
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable canvas %s: %s", canvas_path.name, e)
            continue
        if not root_id:
            continue
        try:
            yield canvas_path, parse_id(root_id)
        except MalformedIdError:
            logger.warning("Canvas %s has a non-numeric root id %r", canvas_path.name, root_id)


def on_card_created(vault: Vault, card: Card, params: LayoutParams | None = None) -> list[Path]:
    """Recompute every canvas whose tree contains the new card.

    A canvas that cannot be read or recomputed is logged and skipped.
    """
    try:
        segments = card.segments
    except MalformedIdError:
        return []

    updated = []
    for canvas_path, root in _tree_roots(vault):
        if segments == root or is_descendant_of(segments, root):
            try:
                update_tree_canvas(vault, canvas_path, params)
            except (OSError, ValueError) as e:
                logger.warning("Cannot update %s: %s", canvas_path.name, e)
                continue
            updated.append(canvas_path)
    return updated


def on_card_deleted(vault: Vault, card_id: str, params: LayoutParams | None = None) -> MaintenanceReport:
    """Bring canvases up to date after the card ``card_id`` was deleted.

    A canvas whose root was deleted is reported as orphaned and not modified.
    """
    report = MaintenanceReport()
    try:
        segments = parse_id(card_id)
    except MalformedIdError:
        return report

    for canvas_path, root in _tree_roots(vault):
        if segments == root:
            logger.warning("Root card %s of %s was deleted", card_id, canvas_path.name)
            report.orphaned.append(canvas_path)
            continue
        if is_descendant_of(segments, root):
            try:
                remove_node(canvas_path, render_id(segments))
                update_tree_canvas(vault, canvas_path, params)
            except RootNotFoundError:
                report.orphaned.append(canvas_path)
                continue
            except (OSError, ValueError) as e:
                logger.warning("Cannot update %s: %s", canvas_path.name, e)
                continue
            report.updated.append(canvas_path)
    return report
