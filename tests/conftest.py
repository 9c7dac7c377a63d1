"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from zettel.vault import Vault


def write_card(folder: Path, name: str, *, card_id: str | None = None, body: str = "") -> Path:
    """Write a main card note, optionally with an ``alias`` id in frontmatter."""
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{name}.md"
    lines = []
    if card_id is not None:
        lines += ["---", f"alias: {card_id}", "---", ""]
    lines.append(body or f"# {name}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """An empty vault with a main box folder."""
    root = tmp_path / "vault"
    (root / "MainBox").mkdir(parents=True)
    return root


@pytest.fixture
def tree_vault(vault_path: Path) -> Vault:
    """Vault holding the cards 10, 10-10, 10-20, 10-20-10 and 20."""
    box = vault_path / "MainBox"
    for name in ["10", "10-10", "10-20", "10-20-10", "20"]:
        write_card(box, name)
    return Vault.open(vault_path)
