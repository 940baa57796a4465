"""Host platform integration: extended metadata, cache checks, tracking categories, schema.org."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from loguru import logger

from ..app.protocols import (
    ContentProviderProtocol,
    LanguageFallbackProviderProtocol,
    MediaFileProtocol,
    RenderedPageProtocol,
)
from ..core.config import Config
from ..core.exceptions import CommonsMetadataError
from ..core.types import MetadataSource
from ..extraction.template_parser import TemplateParser
from ..licenses.parser import LicenseParser
from .collector import DataCollector
from .schema import render_schema_script

VERSION = 1.2

# Marks a metadata bag as produced by this package, at VERSION
VERSION_FIELD = "CommonsMetadataExtension"

TRACKING_CATEGORY_PREFIX = "commonsmetadata-trackingcategory-"


class ExtendedMetadataHook:
    """Adapter between the metadata pipeline and the host's file page hooks.

    Example:
        hook = ExtendedMetadataHook(provider, fallbacks, Config.from_env())
        max_age = hook.get_extended_metadata(bag, file, "de", single_language=True)
    """

    def __init__(
        self,
        content_provider: ContentProviderProtocol,
        fallback_provider: LanguageFallbackProviderProtocol,
        config: Config | None = None,
        license_parser: LicenseParser | None = None,
    ):
        self._content_provider = content_provider
        self._fallback_provider = fallback_provider
        self.config = config or Config()
        self._license_parser = license_parser or LicenseParser()

    def _create_collector(self, language: str, single_language: bool = True) -> DataCollector:
        priority_languages = [language]
        for code in self._fallback_provider.get_fallback_chain(language):
            if code not in priority_languages:
                priority_languages.append(code)

        template_parser = TemplateParser(
            priority_languages=priority_languages,
            multi_language=not single_language,
        )
        return DataCollector(
            template_parser=template_parser,
            license_parser=self._license_parser,
            content_provider=self._content_provider,
            language=language,
            max_html_bytes=self.config.parser.max_html_bytes,
        )

    def get_extended_metadata(
        self,
        combined: dict[str, Any],
        file: MediaFileProtocol,
        language: str,
        single_language: bool = True,
    ) -> int | None:
        """Add description page metadata to a file's metadata bag.

        Args:
            combined: The file's metadata bag in API format; updated in place.
            file: The file being described.
            language: Requested output language.
            single_language: Pick one language variant per field instead of
                returning all of them.

        Returns:
            A shortened cache lifetime in seconds when the file cannot report
            when its description changed, else None.
        """
        marker = combined.get(VERSION_FIELD)
        if (
            isinstance(marker, dict)
            and marker.get("value") == VERSION
            and not self.config.hook.force_recalculate
        ):
            logger.info(f"Metadata of {file.name} already collected at version {VERSION}")
            return None

        combined[VERSION_FIELD] = {"value": VERSION, "source": MetadataSource.EXTENSION.value}

        try:
            collector = self._create_collector(language, single_language)
            metadata = collector.collect(file, combined)
        except CommonsMetadataError as e:
            logger.warning(f"Cannot collect metadata of {file.name}: {e}")
        except Exception:
            # The host request must not fail because of a description page
            logger.exception(f"Unexpected error collecting metadata of {file.name}")
        else:
            metadata.merge_into(combined)

        return self._max_age(file)

    def _max_age(self, file: MediaFileProtocol) -> int | None:
        if file.description_touched is None:
            return self.config.hook.uncached_max_age
        return None

    def validate_cache(self, timestamp: datetime, file: MediaFileProtocol) -> bool:
        """Check whether metadata cached at timestamp is still current."""
        if self.config.hook.force_recalculate:
            return False
        touched = file.description_touched
        return touched is None or touched <= timestamp

    def get_tracking_categories(
        self, rendered_page: RenderedPageProtocol, file: MediaFileProtocol, language: str
    ) -> list[str]:
        """Get tracking category keys for attribution problems of a file page.

        Returns:
            Keys like ``commonsmetadata-trackingcategory-no-license``, sorted.
        """
        if not self.config.hook.set_tracking_categories:
            return []

        try:
            problems = self._create_collector(language).verify_attribution_metadata(
                rendered_page, file
            )
        except CommonsMetadataError as e:
            logger.warning(f"Cannot verify attribution metadata of {file.name}: {e}")
            return []
        except Exception:
            logger.exception(f"Unexpected error verifying attribution metadata of {file.name}")
            return []

        return [TRACKING_CATEGORY_PREFIX + problem for problem in sorted(problems)]

    def get_schema_element(
        self, metadata: Mapping[str, Any], file: MediaFileProtocol, page_url: str
    ) -> str:
        """Render the schema.org JSON-LD script element for a file page.

        Args:
            metadata: Extended metadata of the file, in API format or as
                CollectedMetadata.
            file: The described file.
            page_url: URL of the file description page.

        Returns:
            The script element, or "" when the file gets no structured data.
        """
        return render_schema_script(
            metadata, file, page_url, self.config.hook.public_domain_page_url
        )
