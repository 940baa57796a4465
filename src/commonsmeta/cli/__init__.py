"""Command-line interface for commonsmeta."""
