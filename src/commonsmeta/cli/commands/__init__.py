"""Command implementations for commonsmeta CLI."""

from .extract import add_page_arguments, handle_collect, handle_parse
from .license import handle_license
from .verify import handle_verify

__all__ = [
    "add_page_arguments",
    "handle_parse",
    "handle_collect",
    "handle_license",
    "handle_verify",
]
