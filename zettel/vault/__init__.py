"""Vault access: card id resolution and the main box card store."""

from .loader import Vault, read_metadata, resolve_card_id

__all__ = [
    "Vault",
    "read_metadata",
    "resolve_card_id",
]
