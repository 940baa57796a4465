"""Test fakes for running the pipeline without a wiki.

This module provides in-memory implementations of the collaborator
protocols in commonsmeta.app.protocols.

Example:
    from tests.fakes import FakeMediaFile, InMemoryContentProvider

    provider = InMemoryContentProvider(
        pages={"File:Example.jpg": html},
        categories={"File:Example.jpg": ["Sunsets"]},
    )
    collector = DataCollector(TemplateParser(), LicenseParser(), provider)
"""

from .providers import (
    FakeMediaFile,
    FakeRenderedPage,
    InMemoryContentProvider,
    StaticFallbackProvider,
)

__all__ = [
    "FakeMediaFile",
    "FakeRenderedPage",
    "InMemoryContentProvider",
    "StaticFallbackProvider",
]
