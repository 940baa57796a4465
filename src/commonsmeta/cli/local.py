"""Collaborators backed by local files, for running the pipeline offline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..core.exceptions import ContentProviderError


@dataclass
class LocalFile:
    """A media file described by a saved description page."""

    name: str
    mime_type: str = "image/jpeg"
    media_type: str = "BITMAP"
    url: str = ""
    description_touched: datetime | None = None


@dataclass
class LocalContentProvider:
    """Serves a description page from disk and categories given on the command line."""

    page_path: Path
    categories: list[str] = field(default_factory=list)

    def get_description_html(self, file: LocalFile, language: str | None) -> str:
        try:
            return self.page_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ContentProviderError(f"Cannot read {self.page_path}: {e}") from e

    def get_categories(self, file: LocalFile) -> list[str]:
        return list(self.categories)


@dataclass
class LocalRenderedPage:
    """A saved rendered page plus the templates it is known to transclude."""

    text: str
    templates: list[str] = field(default_factory=list)


def read_page(path: Path) -> str:
    """Read a saved page, raising ContentProviderError when unreadable."""
    return LocalContentProvider(path).get_description_html(LocalFile(path.name), None)
