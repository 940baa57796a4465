"""schema.org structured data for file pages."""

from __future__ import annotations

import json
from typing import Any, Mapping

from ..app.protocols import MediaFileProtocol

SCHEMA_MEDIA_TYPES = frozenset({"BITMAP", "DRAWING"})


def _field_value(metadata: Mapping[str, Any], name: str) -> Any:
    field = metadata.get(name)
    if isinstance(field, Mapping):
        return field.get("value")
    return getattr(field, "value", None)


def build_image_schema(
    metadata: Mapping[str, Any],
    file: MediaFileProtocol,
    page_url: str,
    public_domain_page_url: str,
) -> dict[str, Any] | None:
    """Build an ImageObject JSON-LD mapping for an image file.

    Args:
        metadata: Extended metadata, either a CollectedMetadata or an API
            format bag.
        file: The described file.
        page_url: URL of the file description page.
        public_domain_page_url: Page explaining public domain reuse.

    Returns:
        The mapping, or None when the file is not an image or no license
        URL is known.
    """
    if file.media_type not in SCHEMA_MEDIA_TYPES:
        return None

    license_url = _field_value(metadata, "LicenseUrl")
    if not license_url and _field_value(metadata, "License") == "pd":
        license_url = public_domain_page_url
    if not license_url:
        return None

    schema: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "ImageObject",
        "contentUrl": file.url,
        "license": license_url,
        "acquireLicensePage": page_url,
    }
    if upload_date := _field_value(metadata, "DateTime"):
        schema["uploadDate"] = upload_date
    return schema


def render_schema_script(
    metadata: Mapping[str, Any],
    file: MediaFileProtocol,
    page_url: str,
    public_domain_page_url: str,
) -> str:
    """Render build_image_schema() output as a JSON-LD script element."""
    schema = build_image_schema(metadata, file, page_url, public_domain_page_url)
    if schema is None:
        return ""
    # "</" would end the script element early
    payload = json.dumps(schema, ensure_ascii=False).replace("</", "<\\/")
    return f'<script type="application/ld+json">{payload}</script>'
