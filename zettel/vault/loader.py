"""Main card loading: id resolution and the on-disk card store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter

from ..config import Settings, load_settings
from ..errors import CardExistsError, MalformedIdError, VaultError
from ..ids import id_sort_key
from ..models import Card

logger = logging.getLogger(__name__)


def resolve_card_id(path: Path, metadata: dict[str, Any], id_property: str) -> str:
    """Return the card id from frontmatter, falling back to the filename stem.

    Blank values count as missing. Non-string values (``alias: 10``) are
    converted with ``str``.
    """
    value = metadata.get(id_property)
    if value is not None and not isinstance(value, (list, dict)):
        text = str(value).strip()
        if text:
            return text
    return path.stem


def read_metadata(path: Path) -> dict[str, Any]:
    """Read a note's frontmatter; empty dict if it cannot be parsed."""
    try:
        post = frontmatter.load(path)
    except Exception as e:
        logger.warning("Failed to read frontmatter of %s: %s", path, e)
        return {}
    return post.metadata


def _card_order(card: Card) -> tuple:
    try:
        return (0, id_sort_key(card.id), "")
    except MalformedIdError:
        return (1, (), card.id)


@dataclass
class Vault:
    """The note vault: a main box of cards and a folder of canvases."""

    root: Path
    settings: Settings = field(default_factory=Settings)

    def __post_init__(self) -> None:
        self.root = Path(self.root).resolve()

    @classmethod
    def open(cls, root: Path) -> "Vault":
        """Open a vault, reading its zettel.toml."""
        root = root.resolve()
        return cls(root=root, settings=load_settings(root))

    @property
    def main_box(self) -> Path:
        return self.root / self.settings.main_box_path

    @property
    def canvas_dir(self) -> Path:
        return self.root / self.settings.canvas_path

    def relative(self, path: Path) -> str:
        """Vault-relative posix path, the form canvases use to reference files."""
        return path.resolve().relative_to(self.root).as_posix()

    def in_main_box(self, path: Path) -> bool:
        try:
            path.resolve().relative_to(self.main_box.resolve())
        except ValueError:
            return False
        return True

    def card_for_path(self, path: Path, metadata: dict[str, Any] | None = None) -> Card:
        """Resolve one note into a Card."""
        path = path.resolve()
        if metadata is None:
            metadata = read_metadata(path) if path.exists() else {}
        card_id = resolve_card_id(path, metadata, self.settings.id_property)
        return Card(id=card_id, path=path, file=self.relative(path))

    def list_cards(self) -> list[Card]:
        """All cards directly inside the main box, in canonical id order.

        Notes whose id is not numeric are listed after the numeric ones.

        Raises:
            VaultError: If the main box folder does not exist
        """
        if not self.main_box.is_dir():
            raise VaultError(f"Main box folder not found: {self.main_box}")

        cards = []
        for md_file in self.main_box.glob("*.md"):
            if md_file.name.startswith(".") or not md_file.is_file():
                continue
            cards.append(self.card_for_path(md_file))
        return sorted(cards, key=_card_order)

    def create_card(self, card_id: str, folder: Path | None = None) -> Card:
        """Create an empty ``{card_id}.md``; the filename stem carries the id.

        Raises:
            CardExistsError: If the file already exists (nothing is written)
        """
        folder = folder or self.main_box
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / f"{card_id}.md"
        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except FileExistsError as e:
            raise CardExistsError(f"Card file already exists: {self.relative(path)}") from e
        logger.info("Created main card %s", card_id)
        return self.card_for_path(path, metadata={})

    def display_title(self, card: Card) -> str:
        """Title shown for a card in listings: ``{id}:{filename}``."""
        return f"{card.id}:{card.name}"
