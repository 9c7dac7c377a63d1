"""Error types raised by zettel.

Every error here is a deterministic validation failure. Nothing is retried;
callers surface the message to the user and abort the workflow.
"""


class ZettelError(ValueError):
    """Base class for all zettel failures."""


class MalformedIdError(ZettelError):
    """A card id segment is not a non-negative integer."""

    def __init__(self, raw: object, reason: str = "") -> None:
        self.raw = raw
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed card id {raw!r}{detail}")


class LevelMismatchError(ZettelError):
    """Two ids passed to the allocator sit at incompatible depths."""


class NoRoomForInsertionError(ZettelError):
    """No free integer exists between two neighbouring ids."""


class RootNotFoundError(ZettelError):
    """No card carries the requested diagram root id."""

    def __init__(self, root_id: str) -> None:
        self.root_id = root_id
        super().__init__(f"No card with id '{root_id}' (root was deleted or never existed)")


class VaultError(ZettelError):
    """The vault layout does not allow the requested operation."""


class CardExistsError(VaultError):
    """A card file with the target name already exists."""


class CanvasExistsError(VaultError):
    """A tree canvas for this card already exists."""


class ConfigError(ZettelError):
    """zettel.toml contains an invalid value."""
