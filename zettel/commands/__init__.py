"""Command implementations behind the zettel CLI."""
