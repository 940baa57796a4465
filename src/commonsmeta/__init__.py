"""Extract machine-readable metadata from Wikimedia Commons file description pages."""

__version__ = "0.1.0"
