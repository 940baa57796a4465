"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from commonsmeta.extraction.template_parser import TemplateParser
from commonsmeta.licenses.parser import LicenseParser


@pytest.fixture
def fixtures_dir() -> Path:
    """Provide path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_html(fixtures_dir: Path) -> Callable[[str], str]:
    """Provide a loader for HTML fixtures by base name."""

    def load(name: str) -> str:
        return (fixtures_dir / "html" / f"{name}.html").read_text(encoding="utf-8")

    return load


@pytest.fixture
def template_parser() -> TemplateParser:
    """Provide a single-language English TemplateParser."""
    return TemplateParser(["en"])


@pytest.fixture
def license_parser() -> LicenseParser:
    """Provide a LicenseParser instance."""
    return LicenseParser()
