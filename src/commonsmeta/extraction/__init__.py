"""HTML navigation and template extraction for description pages."""

from .navigator import DomNavigator, ElementQuery
from .template_parser import (
    COORDINATES_KEY,
    DELETION_KEY,
    INFORMATION_FIELDS_KEY,
    LICENSES_KEY,
    RESTRICTIONS_KEY,
    TemplateParser,
    clean_html,
)

__all__ = [
    "DomNavigator",
    "ElementQuery",
    "TemplateParser",
    "clean_html",
    "COORDINATES_KEY",
    "INFORMATION_FIELDS_KEY",
    "LICENSES_KEY",
    "DELETION_KEY",
    "RESTRICTIONS_KEY",
]
