"""JSON output shared by CLI commands."""

import json
from typing import Any

from ...core.types import LanguageMap


def _default(value: Any) -> Any:
    if isinstance(value, LanguageMap):
        return value.to_dict()
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def print_json(data: Any) -> None:
    """Print data as indented JSON."""
    print(json.dumps(data, default=_default, ensure_ascii=False, indent=2))
