"""Protocol definitions for collaborators of commonsmeta.

The metadata pipeline does not fetch pages or resolve languages itself;
the host platform injects implementations of these protocols.

Protocols are organized by role:
- Files: the media file whose metadata is collected
- Content: rendered description HTML and category names
- Localization: language fallback chains
- Rendering: the rendered page used for attribution checks

Example:
    collector = DataCollector(
        template_parser=TemplateParser(["de", "en"]),
        license_parser=LicenseParser(),
        content_provider=my_wiki_content_provider,
    )
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class MediaFileProtocol(Protocol):
    """A media file with a description page."""

    name: str
    """File name, used in log messages."""

    mime_type: str
    """MIME type, e.g. image/jpeg or application/sla."""

    media_type: str
    """Media type class, e.g. BITMAP, DRAWING, AUDIO."""

    url: str
    """Fully-qualified URL of the original file."""

    description_touched: datetime | None
    """Last change of the description page, when the backend knows it."""


@runtime_checkable
class ContentProviderProtocol(Protocol):
    """Protocol for fetching description page data of a file."""

    def get_description_html(self, file: MediaFileProtocol, language: str | None) -> str:
        """Get the rendered description page, ideally with absolute URLs.

        Raises:
            ContentProviderError: If the page cannot be retrieved.
        """
        ...

    def get_categories(self, file: MediaFileProtocol) -> list[str]:
        """Get human-readable category names, in page order.

        Raises:
            CategoriesUnavailableError: If the storage backend of this file
                does not support reading categories.
        """
        ...


@runtime_checkable
class LanguageFallbackProviderProtocol(Protocol):
    """Protocol for language fallback resolution."""

    def get_fallback_chain(self, language_code: str) -> list[str]:
        """Get fallback languages for a code, most preferred first.

        The code itself is not included.
        """
        ...


@runtime_checkable
class RenderedPageProtocol(Protocol):
    """A rendered file description page."""

    @property
    def text(self) -> str:
        """Rendered HTML."""
        ...

    @property
    def templates(self) -> Sequence[str]:
        """Titles of transcluded templates, without namespace."""
        ...
