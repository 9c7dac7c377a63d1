"""Watch command - keep tree canvases current while cards change."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from rich.console import Console

from ..canvas import on_card_created, on_card_deleted
from ..errors import ZettelError
from ..models import Card
from ..vault import Vault
from ..watcher import run_watch_loop


def run_watch(vault_path: Path) -> int:
    """
    Watch the main box and update tree canvases on card creation and deletion.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    try:
        vault = Vault.open(vault_path)
    except ZettelError as e:
        console.print(f"Error: {e}", style="bold red")
        return 1

    console.print(f"[bold]Watching[/bold] {vault.main_box}")
    console.print(f"  Canvases: {vault.canvas_dir}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    def stamp() -> str:
        return f"[dim]{datetime.now().strftime('%H:%M:%S')}[/dim]"

    def handle_created(card: Card) -> None:
        try:
            updated = on_card_created(vault, card)
        except (ZettelError, OSError) as e:
            console.print(f"{stamp()} [red]x[/red] {card.id}: {e}")
            return
        console.print(f"{stamp()} [green]+[/green] {card.id} ({len(updated)} canvases updated)")

    def handle_deleted(card_id: str, path: Path) -> None:
        try:
            report = on_card_deleted(vault, card_id)
        except (ZettelError, OSError) as e:
            console.print(f"{stamp()} [red]x[/red] {card_id}: {e}")
            return
        console.print(f"{stamp()} [red]-[/red] {card_id} ({len(report.updated)} canvases updated)")
        for canvas_path in report.orphaned:
            console.print(
                f"{stamp()} [yellow]Warning:[/yellow] root card of {canvas_path.name} was deleted; "
                "the canvas is orphaned"
            )

    try:
        run_watch_loop(vault, on_card_created=handle_created, on_card_deleted=handle_deleted)
    except KeyboardInterrupt:
        pass

    console.print()
    console.print("[bold]Stopped.[/bold]")
    return 0
