"""Core types, configuration and errors for commonsmeta."""

from .config import (
    Config,
    HookConfig,
    ParserConfig,
    validate_language_code,
)
from .exceptions import (
    CategoriesUnavailableError,
    CommonsMetadataError,
    ConfigurationError,
    ContentProviderError,
)
from .types import (
    CollectedMetadata,
    FieldValue,
    LanguageMap,
    LicenseDescriptor,
    MetadataField,
    MetadataSource,
    TemplateData,
    TemplateRecord,
    render_value,
)

__all__ = [
    "Config",
    "ParserConfig",
    "HookConfig",
    "validate_language_code",
    "CommonsMetadataError",
    "ConfigurationError",
    "ContentProviderError",
    "CategoriesUnavailableError",
    "MetadataSource",
    "LanguageMap",
    "FieldValue",
    "TemplateRecord",
    "TemplateData",
    "LicenseDescriptor",
    "MetadataField",
    "CollectedMetadata",
    "render_value",
]
