"""Canvas commands - create, update and preview knowledge tree canvases."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..canvas import create_tree_canvas, list_canvases, update_tree_canvas
from ..errors import VaultError, ZettelError
from ..tree import compute_diagram
from ..vault import Vault


def run_create(vault_path: Path, note_path: Path) -> int:
    """Create a tree canvas rooted at the given card.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    console = Console(stderr=True)
    try:
        vault = Vault.open(vault_path)
        if not note_path.is_file() or not vault.in_main_box(note_path):
            raise VaultError(f"{note_path} is not a card in the main box")
        card = vault.card_for_path(note_path)
        canvas_path = create_tree_canvas(vault, card)
    except ZettelError as e:
        console.print(f"Error: failed to create tree canvas: {e}", style="bold red")
        return 1

    console.print(f"[green]Created[/green] {vault.relative(canvas_path)} (root {card.id})")
    return 0


def run_update(vault_path: Path, canvas_path: Path) -> int:
    """Recompute one tree canvas.

    Returns:
        Exit code (0 = success, 1 = failure or no root id)
    """
    console = Console(stderr=True)
    try:
        vault = Vault.open(vault_path)
        diagram = update_tree_canvas(vault, canvas_path)
    except (ZettelError, OSError) as e:
        console.print(f"Error: failed to update {canvas_path.name}: {e}", style="bold red")
        return 1

    if diagram is None:
        console.print(f"[yellow]{canvas_path.name} has no meta.rootCardId; nothing to do[/yellow]")
        return 1

    console.print(f"[green]Updated[/green] {canvas_path.name}: {len(diagram.nodes)} nodes, {len(diagram.edges)} edges")
    return 0


def run_refresh(vault_path: Path) -> int:
    """Recompute every tree canvas in the canvas folder.

    Canvases whose root card is gone are reported as orphaned, not deleted.

    Returns:
        Exit code (0 = all updated, 1 = at least one orphaned or failed)
    """
    console = Console(stderr=True)
    try:
        vault = Vault.open(vault_path)
        canvases = list_canvases(vault)
    except ZettelError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    failures = 0
    updated = 0
    for canvas_path in canvases:
        try:
            diagram = update_tree_canvas(vault, canvas_path)
        except (ZettelError, OSError) as e:
            failures += 1
            console.print(f"[red]x[/red] {canvas_path.name}: {e}")
            continue
        if diagram is not None:
            updated += 1
            console.print(f"[green]+[/green] {canvas_path.name}: {len(diagram.nodes)} nodes")

    console.print(f"[bold]Refreshed[/bold] {updated} canvases, {failures} failed")
    return 1 if failures else 0


def run_show(vault_path: Path, root_id: str, output_json: bool = False) -> int:
    """Compute a tree diagram and print it without writing anything."""
    console = Console()
    try:
        vault = Vault.open(vault_path)
        diagram = compute_diagram(vault.list_cards(), root_id, vault.settings.layout)
    except ZettelError as e:
        Console(stderr=True).print(f"Error: {e}", style="bold red")
        return 1

    if output_json:
        print(json.dumps(diagram.to_dict(), indent=2, ensure_ascii=False))
        return 0

    table = Table(title=f"Tree under {diagram.root_id}")
    table.add_column("Node", style="bold")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("File")
    for node in diagram.nodes:
        table.add_row(node.id, str(node.x), str(node.y), node.file)
    console.print(table)
    console.print(f"[dim]{len(diagram.edges)} edges[/dim]")
    return 0
