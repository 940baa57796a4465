"""Collaborator interfaces for commonsmeta."""

from .protocols import (
    ContentProviderProtocol,
    LanguageFallbackProviderProtocol,
    MediaFileProtocol,
    RenderedPageProtocol,
)

__all__ = [
    "ContentProviderProtocol",
    "LanguageFallbackProviderProtocol",
    "MediaFileProtocol",
    "RenderedPageProtocol",
]
