"""Type definitions for commonsmeta."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, Union


class MetadataSource(Enum):
    """Where a collected metadata field came from."""

    EXTENSION = "extension"
    CATEGORIES = "commons-categories"
    TEMPLATES = "commons-templates"
    DESC_PAGE = "commons-desc-page"
    MEDIAWIKI = "mediawiki-metadata"


class LanguageMap(Mapping[str, str]):
    """Same-meaning HTML fragments keyed by language code.

    Produced by the template parser in multi-language mode. Keys are the
    language codes found in the page, in document order.
    """

    type = "lang"

    def __init__(self, variants: Mapping[str, str] | None = None):
        self._variants: dict[str, str] = dict(variants or {})

    def __getitem__(self, language: str) -> str:
        return self._variants[language]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variants)

    def __len__(self) -> int:
        return len(self._variants)

    def __repr__(self) -> str:
        return f"LanguageMap({self._variants!r})"

    def to_dict(self) -> dict[str, str]:
        """Render in API format, with the ``_type`` marker."""
        data = dict(self._variants)
        data["_type"] = self.type
        return data


# A field value is either plain HTML text or a set of language variants
FieldValue = Union[str, LanguageMap]

# All fields found within one template instance on a page
TemplateRecord = dict[str, FieldValue]

# Template parser output: record lists keyed by template kind
TemplateData = dict[str, list[TemplateRecord]]


def render_value(value: Any) -> Any:
    """Convert a field value to its API representation."""
    if isinstance(value, LanguageMap):
        return value.to_dict()
    return value


@dataclass(frozen=True)
class LicenseDescriptor:
    """Structured form of a recognized license name.

    Attributes:
        family: License family, ``cc`` or ``pd``.
        type: License type, e.g. ``cc-by-sa`` (None for public domain).
        version: License version, e.g. ``2.5``.
        region: Port/region code, e.g. ``nl``.
        name: Canonical identifier, e.g. ``cc-by-sa-2.5-nl``.
    """

    family: str
    name: str
    type: str | None = None
    version: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class MetadataField:
    """One field of the collected metadata bag."""

    value: Any
    source: MetadataSource

    def to_dict(self) -> dict[str, Any]:
        """Render in API format."""
        return {"value": render_value(self.value), "source": self.source.value}


class CollectedMetadata(Mapping[str, MetadataField]):
    """Flat field name -> MetadataField mapping produced by the collector.

    Each field name appears at most once; setting a field again replaces it.
    """

    def __init__(self, fields: Mapping[str, MetadataField] | None = None):
        self._fields: dict[str, MetadataField] = dict(fields or {})

    def __getitem__(self, name: str) -> MetadataField:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"CollectedMetadata({self._fields!r})"

    def set(self, name: str, value: Any, source: MetadataSource) -> None:
        """Add or replace a field."""
        self._fields[name] = MetadataField(value=value, source=source)

    def update(self, other: Mapping[str, MetadataField]) -> None:
        """Add or replace all fields from another mapping."""
        self._fields.update(other)

    def value(self, name: str, default: Any = None) -> Any:
        """Get a field's value, or a default when the field is absent."""
        field = self._fields.get(name)
        return field.value if field is not None else default

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Render the whole bag in API format."""
        return {name: field.to_dict() for name, field in self._fields.items()}

    def merge_into(self, bag: dict[str, Any]) -> dict[str, Any]:
        """Write fields into a caller-owned API bag, leaving other keys alone.

        Args:
            bag: Metadata bag in API format (name -> {"value", "source"}).

        Returns:
            The same bag, for chaining.
        """
        bag.update(self.to_dict())
        return bag
