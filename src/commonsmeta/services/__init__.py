"""Metadata collection and host integration services."""

from .collector import (
    ASSESSMENT_CATEGORIES,
    NO_AUTHOR,
    NO_DESCRIPTION,
    NO_LICENSE,
    NO_PATENT,
    NO_SOURCE,
    DataCollector,
)
from .hooks import TRACKING_CATEGORY_PREFIX, VERSION, ExtendedMetadataHook
from .schema import build_image_schema, render_schema_script

__all__ = [
    "DataCollector",
    "ASSESSMENT_CATEGORIES",
    "NO_LICENSE",
    "NO_DESCRIPTION",
    "NO_AUTHOR",
    "NO_SOURCE",
    "NO_PATENT",
    "ExtendedMetadataHook",
    "VERSION",
    "TRACKING_CATEGORY_PREFIX",
    "build_image_schema",
    "render_schema_script",
]
