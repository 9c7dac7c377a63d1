"""
File system watcher that keeps tree canvases in step with the main box.

This module provides:
- Watchdog-based monitoring of markdown cards in the main box
- Debounced dispatch of card created / deleted / id-changed events
- A path -> card id index, so deleted files can still be resolved to ids
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .errors import VaultError
from .models import Card
from .vault import Vault

logger = logging.getLogger(__name__)


class CardEventKind(str, Enum):
    """Card changes the watcher reports."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


class PendingEvent:
    """Tracks a pending event for debouncing."""

    def __init__(self, event_kind: CardEventKind, path: Path, timestamp: float):
        self.event_kind = event_kind
        self.path = path
        self.timestamp = timestamp


class CardEventHandler(FileSystemEventHandler):
    """
    Turns file system events in the main box into card events.

    Key behaviors:
    - Only ``*.md`` files directly inside the main box are tracked
    - Rapid event bursts for one path collapse into one event
    - A file created then deleted within the debounce window emits nothing
    - A modification that changes the card id is reported as delete + create
    """

    RELEVANT_EXTENSIONS = {".md"}
    DEBOUNCE_SECONDS = 1.0

    def __init__(
        self,
        vault: Vault,
        on_card_created: Callable[[Card], None] | None = None,
        on_card_deleted: Callable[[str, Path], None] | None = None,
    ):
        """
        Initialize the event handler.

        Args:
            vault: Vault whose main box is watched
            on_card_created: Called with the new card
            on_card_deleted: Called with the deleted card's id and its former path
        """
        super().__init__()
        self.vault = vault
        self.on_card_created = on_card_created
        self.on_card_deleted = on_card_deleted

        self.pending: dict[str, PendingEvent] = {}  # guarded by _lock
        self._lock = threading.Lock()
        self.card_ids: dict[str, str] = {}  # resolved path -> card id

        try:
            for card in vault.list_cards():
                self.card_ids[str(card.path)] = card.id
        except VaultError:
            logger.warning("Main box %s does not exist yet", vault.main_box)

    def _is_relevant(self, path: str) -> bool:
        """Check if the file is a card in the main box."""
        p = Path(path)
        if p.name.startswith("."):
            return False
        if p.suffix.lower() not in self.RELEVANT_EXTENSIONS:
            return False
        return p.resolve().parent == self.vault.main_box.resolve()

    def _queue(self, event_kind: CardEventKind, path_str: str) -> None:
        key = str(Path(path_str).resolve())
        with self._lock:
            self.pending[key] = PendingEvent(event_kind=event_kind, path=Path(key), timestamp=time.time())

    def _emit_created(self, path: Path) -> None:
        card = self.vault.card_for_path(path)
        self.card_ids[str(path)] = card.id
        logger.debug("Card created: %s (%s)", card.id, card.file)
        if self.on_card_created:
            self.on_card_created(card)

    def _emit_deleted(self, path: Path) -> None:
        card_id = self.card_ids.pop(str(path), path.stem)
        logger.debug("Card deleted: %s (%s)", card_id, path.name)
        if self.on_card_deleted:
            self.on_card_deleted(card_id, path)

    def flush_pending(self) -> None:
        """Dispatch pending events that have passed the debounce window."""
        now = time.time()
        to_emit = []

        # Events queued by the observer thread after this point stay pending
        with self._lock:
            for path_str, pending in list(self.pending.items()):
                if now - pending.timestamp >= self.DEBOUNCE_SECONDS:
                    to_emit.append(pending)
                    del self.pending[path_str]

        for pending in to_emit:
            path = pending.path

            if pending.event_kind == CardEventKind.CREATED:
                if path.exists():
                    self._emit_created(path)

            elif pending.event_kind == CardEventKind.MODIFIED:
                if not path.exists():
                    continue
                old_id = self.card_ids.get(str(path))
                new_id = self.vault.card_for_path(path).id
                if old_id is None:
                    self._emit_created(path)
                elif new_id != old_id:
                    self._emit_deleted(path)
                    self._emit_created(path)

            elif pending.event_kind == CardEventKind.DELETED:
                self._emit_deleted(path)

    def on_created(self, event: FileCreatedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        self._queue(CardEventKind.CREATED, event.src_path)

    def on_modified(self, event: FileModifiedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        key = str(Path(event.src_path).resolve())
        with self._lock:
            # Don't override pending creation with modification
            if key in self.pending and self.pending[key].event_kind == CardEventKind.CREATED:
                return
            self.pending[key] = PendingEvent(CardEventKind.MODIFIED, Path(key), time.time())

    def on_deleted(self, event: FileDeletedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        key = str(Path(event.src_path).resolve())
        with self._lock:
            if key in self.pending and self.pending[key].event_kind == CardEventKind.CREATED:
                # Created then deleted before flush - no event
                del self.pending[key]
                return
            self.pending[key] = PendingEvent(CardEventKind.DELETED, Path(key), time.time())

    def on_moved(self, event: FileMovedEvent) -> None:
        """A rename is a delete of the old card and a create of the new one."""
        if event.is_directory:
            return
        if self._is_relevant(event.src_path):
            self._queue(CardEventKind.DELETED, event.src_path)
        if self._is_relevant(event.dest_path):
            self._queue(CardEventKind.CREATED, event.dest_path)


def watch_vault(
    vault: Vault,
    on_card_created: Callable[[Card], None] | None = None,
    on_card_deleted: Callable[[str, Path], None] | None = None,
) -> tuple[Observer, CardEventHandler]:
    """
    Start watching the vault's main box.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = CardEventHandler(vault, on_card_created=on_card_created, on_card_deleted=on_card_deleted)

    observer = Observer()
    observer.schedule(handler, str(vault.main_box), recursive=False)
    observer.start()

    return observer, handler


def run_watch_loop(
    vault: Vault,
    on_card_created: Callable[[Card], None] | None = None,
    on_card_deleted: Callable[[str, Path], None] | None = None,
) -> None:
    """
    Run the watch loop until interrupted.

    Callbacks run on this thread, one event at a time, so each canvas update
    reads the cards, lays them out and writes the file without interleaving.
    """
    observer, handler = watch_vault(vault, on_card_created=on_card_created, on_card_deleted=on_card_deleted)

    try:
        while True:
            time.sleep(0.5)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
