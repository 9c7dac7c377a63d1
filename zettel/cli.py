"""CLI entrypoint for zettel."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import find_vault_root


@click.group()
@click.version_option(__version__, prog_name="zettel")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the vault root (defaults to the nearest folder with zettel.toml or .obsidian)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """zettel - Main card ids and knowledge tree canvases.

    Insert cards between existing ids without renumbering, and lay out any
    card's subtree as a canvas.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)
    if vault is None:
        detected = find_vault_root(Path.cwd())
        if detected is None:
            raise click.ClickException("Vault not found. Pass --vault /path/to/vault or run from inside it.")
        vault = detected

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()


# -----------------------------------------------------------------------------
# Card commands
# -----------------------------------------------------------------------------


@cli.group()
def cards() -> None:
    """List main cards and insert new ones."""
    pass


@cards.command("list")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def cards_list(ctx: click.Context, output_json: bool) -> None:
    """List main cards in numeric id order."""
    from .commands.cards_cmd import run_list

    sys.exit(run_list(ctx.obj["vault"], output_json=output_json))


@cards.command("sibling")
@click.argument("note", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def cards_sibling(ctx: click.Context, note: Path) -> None:
    """Create a card right after NOTE among its siblings.

    Examples:

        zettel cards sibling MainBox/10.md      # creates 20, or 15 if 20 exists
    """
    from .commands.cards_cmd import run_sibling

    sys.exit(run_sibling(ctx.obj["vault"], note))


@cards.command("child")
@click.argument("note", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def cards_child(ctx: click.Context, note: Path) -> None:
    """Create a card before the first child of NOTE.

    Examples:

        zettel cards child MainBox/10.md        # creates 10-10, or 10-5 if 10-10 exists
    """
    from .commands.cards_cmd import run_child

    sys.exit(run_child(ctx.obj["vault"], note))


# -----------------------------------------------------------------------------
# Canvas commands
# -----------------------------------------------------------------------------


@cli.group()
def canvas() -> None:
    """Create and maintain knowledge tree canvases."""
    pass


@canvas.command("create")
@click.argument("note", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def canvas_create(ctx: click.Context, note: Path) -> None:
    """Create a tree canvas rooted at NOTE."""
    from .commands.canvas_cmd import run_create

    sys.exit(run_create(ctx.obj["vault"], note))


@canvas.command("update")
@click.argument("canvas_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def canvas_update(ctx: click.Context, canvas_file: Path) -> None:
    """Recompute CANVAS_FILE from the current cards."""
    from .commands.canvas_cmd import run_update

    sys.exit(run_update(ctx.obj["vault"], canvas_file))


@canvas.command("refresh")
@click.pass_context
def canvas_refresh(ctx: click.Context) -> None:
    """Recompute every tree canvas in the canvas folder."""
    from .commands.canvas_cmd import run_refresh

    sys.exit(run_refresh(ctx.obj["vault"]))


@canvas.command("show")
@click.argument("root_id")
@click.option("--json", "output_json", is_flag=True, help="Print the canvas JSON instead of a table")
@click.pass_context
def canvas_show(ctx: click.Context, root_id: str, output_json: bool) -> None:
    """Compute the tree under ROOT_ID without writing a canvas."""
    from .commands.canvas_cmd import run_show

    sys.exit(run_show(ctx.obj["vault"], root_id, output_json=output_json))


# -----------------------------------------------------------------------------
# Watch
# -----------------------------------------------------------------------------


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Keep tree canvases current while cards are created and deleted.

    Runs until interrupted (Ctrl+C).
    """
    from .commands.watch_cmd import run_watch

    sys.exit(run_watch(ctx.obj["vault"]))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
