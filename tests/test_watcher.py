import threading
import time
from pathlib import Path

from watchdog.events import FileCreatedEvent, FileDeletedEvent, FileModifiedEvent, FileMovedEvent

from zettel.vault import Vault
from zettel.watcher import CardEventHandler, CardEventKind, PendingEvent


def _handler(vault: Vault) -> tuple[CardEventHandler, list]:
    calls: list = []
    handler = CardEventHandler(
        vault,
        on_card_created=lambda card: calls.append(("created", card.id)),
        on_card_deleted=lambda card_id, path: calls.append(("deleted", card_id)),
    )
    handler.DEBOUNCE_SECONDS = 0
    return handler, calls


def test_created_card_is_dispatched(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    path = tree_vault.main_box / "10-15.md"
    path.write_text("# new\n", encoding="utf-8")

    handler.on_created(FileCreatedEvent(str(path)))
    handler.on_modified(FileModifiedEvent(str(path)))
    handler.flush_pending()

    assert calls == [("created", "10-15")]


def test_irrelevant_files_are_ignored(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    other = tree_vault.root / "Inbox"
    other.mkdir()
    (other / "10-15.md").write_text("x", encoding="utf-8")
    (tree_vault.main_box / "image.png").write_bytes(b"")

    handler.on_created(FileCreatedEvent(str(other / "10-15.md")))
    handler.on_created(FileCreatedEvent(str(tree_vault.main_box / "image.png")))
    handler.flush_pending()

    assert calls == []


def test_deleted_card_resolves_id_from_index(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    path = box / "thought.md"
    path.write_text("---\nalias: 10-20\n---\nbody\n", encoding="utf-8")
    vault = Vault.open(vault_path)
    handler, calls = _handler(vault)

    path.unlink()
    handler.on_deleted(FileDeletedEvent(str(path)))
    handler.flush_pending()

    assert calls == [("deleted", "10-20")]


def test_create_then_delete_emits_nothing(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    path = tree_vault.main_box / "10-15.md"

    handler.on_created(FileCreatedEvent(str(path)))
    handler.on_deleted(FileDeletedEvent(str(path)))
    handler.flush_pending()

    assert calls == []


def test_id_change_is_delete_then_create(vault_path: Path) -> None:
    box = vault_path / "MainBox"
    path = box / "thought.md"
    path.write_text("---\nalias: 10-20\n---\nbody\n", encoding="utf-8")
    vault = Vault.open(vault_path)
    handler, calls = _handler(vault)

    path.write_text("---\nalias: 10-30\n---\nbody\n", encoding="utf-8")
    handler.on_modified(FileModifiedEvent(str(path)))
    handler.flush_pending()

    assert calls == [("deleted", "10-20"), ("created", "10-30")]


def test_rename_is_delete_then_create(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    src = tree_vault.main_box / "20.md"
    dest = tree_vault.main_box / "30.md"
    src.rename(dest)

    handler.on_moved(FileMovedEvent(str(src), str(dest)))
    handler.flush_pending()

    assert sorted(calls) == [("created", "30"), ("deleted", "20")]


def test_pending_events_wait_for_debounce(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    handler.DEBOUNCE_SECONDS = 60
    path = tree_vault.main_box / "10-15.md"
    path.write_text("# new\n", encoding="utf-8")

    handler.on_created(FileCreatedEvent(str(path)))
    handler.flush_pending()

    assert calls == []
    assert len(handler.pending) == 1


class _RacingEvent(PendingEvent):
    """A pending event that lets another thread queue a newer one while it is being flushed."""

    def __init__(self, handler: CardEventHandler, path: Path):
        super().__init__(CardEventKind.CREATED, path, time.time() - 10)
        self.handler = handler
        self.thread: threading.Thread | None = None

    @property
    def timestamp(self) -> float:
        if self.thread is None:
            self.thread = threading.Thread(
                target=self.handler.on_deleted, args=(FileDeletedEvent(str(self.path)),)
            )
            self.thread.start()
            self.thread.join(0.2)
        return self._timestamp

    @timestamp.setter
    def timestamp(self, value: float) -> None:
        self._timestamp = value


def test_event_queued_during_flush_is_kept(tree_vault: Vault) -> None:
    handler, calls = _handler(tree_vault)
    path = (tree_vault.main_box / "10-15.md").resolve()
    path.write_text("# new\n", encoding="utf-8")

    racing = _RacingEvent(handler, path)
    handler.pending[str(path)] = racing
    handler.flush_pending()
    racing.thread.join()

    assert calls == [("created", "10-15")]
    assert handler.pending[str(path)].event_kind == CardEventKind.DELETED
