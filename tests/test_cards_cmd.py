import json
from pathlib import Path

import pytest

from zettel.commands.cards_cmd import new_child, new_sibling, run_child, run_list, run_sibling
from zettel.errors import NoRoomForInsertionError, VaultError
from zettel.vault import Vault


def _write_card(folder: Path, name: str, *, card_id: str | None = None) -> Path:
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{name}.md"
    lines = ["---", f"alias: {card_id}", "---", ""] if card_id is not None else []
    lines.append(f"# {name}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _ids(vault: Vault) -> list[str]:
    return [c.id for c in vault.list_cards()]


def test_new_sibling_after_last(tree_vault: Vault) -> None:
    card = new_sibling(tree_vault, tree_vault.main_box / "10-20.md")

    assert card.id == "10-30"
    assert (tree_vault.main_box / "10-30.md").exists()


def test_new_sibling_between_two(tree_vault: Vault) -> None:
    card = new_sibling(tree_vault, tree_vault.main_box / "10-10.md")
    assert card.id == "10-15"


def test_new_sibling_top_level_uses_numeric_order(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    for name in ["9", "20", "100"]:
        _write_card(box, name)
    vault = Vault.open(vault_path)

    assert new_sibling(vault, box / "20.md").id == "60"
    assert new_sibling(vault, box / "9.md").id == "14"


def test_new_sibling_no_room_writes_nothing(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    _write_card(box, "10")
    _write_card(box, "11")
    vault = Vault.open(vault_path)

    with pytest.raises(NoRoomForInsertionError):
        new_sibling(vault, box / "10.md")
    assert _ids(vault) == ["10", "11"]


def test_new_sibling_with_alias_ids(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    current = _write_card(box, "first thought", card_id="10")
    _write_card(box, "second thought", card_id="30")
    vault = Vault.open(vault_path)

    card = new_sibling(vault, current)
    assert card.id == "20"
    assert card.file == "MainBox/20.md"


def test_new_child_without_children(tree_vault: Vault) -> None:
    assert new_child(tree_vault, tree_vault.main_box / "10-10.md").id == "10-10-10"


def test_new_child_before_first_child(tree_vault: Vault) -> None:
    card = new_child(tree_vault, tree_vault.main_box / "10.md")
    assert card.id == "10-5"


def test_new_child_ignores_grandchildren(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    for name in ["10", "10-2-4", "10-40"]:
        _write_card(box, name)
    vault = Vault.open(vault_path)

    assert new_child(vault, box / "10.md").id == "10-20"


def test_generation_disabled(vault_path: Path) -> None:
    (vault_path / "zettel.toml").write_text("enable_generation_assist = false\n", encoding="utf-8")
    _write_card(vault_path / "MainBox", "10")
    vault = Vault.open(vault_path)

    with pytest.raises(VaultError):
        new_child(vault, vault.main_box / "10.md")


def test_note_outside_main_box(vault_path: Path) -> None:
    note = _write_card(vault_path / "Inbox", "10")
    vault = Vault.open(vault_path)

    with pytest.raises(VaultError):
        new_sibling(vault, note)


def test_run_sibling_reports_success(tree_vault: Vault, capsys) -> None:
    exit_code = run_sibling(tree_vault.root, tree_vault.main_box / "20.md")

    captured = capsys.readouterr()
    assert exit_code == 0
    assert "30" in captured.err
    assert (tree_vault.main_box / "30.md").exists()


def test_run_child_reports_failure(vault_path: Path, capsys) -> None:
    box = vault_path / "MainBox"
    _write_card(box, "10")
    _write_card(box, "10-0")

    exit_code = run_child(vault_path, box / "10.md")

    captured = capsys.readouterr()
    assert exit_code == 1
    assert "failed to create child card" in captured.err
    assert sorted(p.name for p in box.iterdir()) == ["10-0.md", "10.md"]


def test_run_list_json(tree_vault: Vault, capsys) -> None:
    exit_code = run_list(tree_vault.root, output_json=True)

    captured = capsys.readouterr()
    assert exit_code == 0
    payload = json.loads(captured.out)
    assert [row["id"] for row in payload] == ["10", "10-10", "10-20", "10-20-10", "20"]
    assert payload[1]["title"] == "10-10:10-10"
