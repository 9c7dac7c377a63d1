"""zettel - main card addressing and knowledge tree canvases for a note vault."""

__version__ = "0.1.0"
