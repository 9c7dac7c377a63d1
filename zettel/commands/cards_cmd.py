"""Card commands - list main cards and insert new siblings and children."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..errors import MalformedIdError, NoRoomForInsertionError, VaultError, ZettelError
from ..ids import (
    generate_child_id,
    generate_sibling_id,
    id_sort_key,
    is_child_of,
    is_sibling_of,
    parse_id,
)
from ..models import Card
from ..vault import Vault


def _numeric_cards(cards: list[Card]) -> list[tuple[tuple[int, ...], Card]]:
    result = []
    for card in cards:
        try:
            result.append((card.segments, card))
        except MalformedIdError:
            continue
    return result


def _resolve_note(vault: Vault, note_path: Path) -> Card:
    if not vault.settings.enable_generation_assist:
        raise VaultError("Card generation is disabled (enable_generation_assist = false)")
    if not note_path.is_file():
        raise VaultError(f"Note not found: {note_path}")
    if not vault.in_main_box(note_path):
        raise VaultError(f"{note_path.name} is not in the main box ({vault.settings.main_box_path})")
    return vault.card_for_path(note_path)


def _create(vault: Vault, new_id: str, cards: list[Card], folder: Path) -> Card:
    taken = {segments for segments, _ in _numeric_cards(cards)}
    if parse_id(new_id) in taken:
        raise NoRoomForInsertionError(f"Card id '{new_id}' is already in use")
    return vault.create_card(new_id, folder)


def new_sibling(vault: Vault, note_path: Path) -> Card:
    """Create a card right after ``note_path`` among its siblings.

    Raises:
        ZettelError: If the note is not a numeric main card or no id is free
    """
    current = _resolve_note(vault, note_path)
    current_segments = current.segments
    cards = vault.list_cards()

    siblings = sorted(
        (pair for pair in _numeric_cards(cards) if is_sibling_of(pair[0], current_segments)),
        key=lambda pair: pair[0],
    )
    index = next((i for i, (_, card) in enumerate(siblings) if card.path == current.path), None)
    if index is None:
        raise VaultError(f"Card {current.id} not found among main box cards")

    following = siblings[index + 1][0] if index + 1 < len(siblings) else None
    new_id = generate_sibling_id(current_segments, following)
    return _create(vault, new_id, cards, current.path.parent)


def new_child(vault: Vault, note_path: Path) -> Card:
    """Create a card before the first existing child of ``note_path``.

    Raises:
        ZettelError: If the note is not a numeric main card or no id is free
    """
    parent = _resolve_note(vault, note_path)
    parent_segments = parent.segments
    cards = vault.list_cards()

    children = [segments for segments, _ in _numeric_cards(cards) if is_child_of(segments, parent_segments)]
    first_child = min(children) if children else None

    new_id = generate_child_id(parent_segments, first_child)
    return _create(vault, new_id, cards, parent.path.parent)


def _run_insert(vault_path: Path, note_path: Path, kind: str) -> int:
    console = Console(stderr=True)
    try:
        vault = Vault.open(vault_path)
        create = new_sibling if kind == "sibling" else new_child
        card = create(vault, note_path)
    except ZettelError as e:
        console.print(f"Error: failed to create {kind} card: {e}", style="bold red")
        return 1

    console.print(f"[green]Created {kind} card[/green] [bold]{card.id}[/bold] ({card.file})")
    return 0


def run_sibling(vault_path: Path, note_path: Path) -> int:
    """Create a sibling card. Returns exit code."""
    return _run_insert(vault_path, note_path, "sibling")


def run_child(vault_path: Path, note_path: Path) -> int:
    """Create a child card. Returns exit code."""
    return _run_insert(vault_path, note_path, "child")


def run_list(vault_path: Path, output_json: bool = False) -> int:
    """List main cards in id order with their display titles.

    Returns:
        Exit code (0 = success, 1 = vault error)
    """
    console = Console()
    try:
        vault = Vault.open(vault_path)
        cards = vault.list_cards()
    except ZettelError as e:
        Console(stderr=True).print(f"Error: {e}", style="bold red")
        return 1

    if output_json:
        payload = [
            {"id": card.id, "file": card.file, "title": vault.display_title(card)}
            for card in cards
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    table = Table(title=f"Main cards ({len(cards)})")
    table.add_column("Id", style="bold")
    table.add_column("Depth", justify="right")
    table.add_column("Title")
    for card in cards:
        try:
            depth = str(len(id_sort_key(card.id)))
        except MalformedIdError:
            depth = "[yellow]?[/yellow]"
        table.add_row(card.id, depth, vault.display_title(card))
    console.print(table)
    return 0
