"""Metadata collection and reconciliation for one file.

Runs the template parser over a file's description page, reads its
categories, and collapses competing templates, languages and licenses into
a single flat CollectedMetadata record.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping

from loguru import logger

from ..app.protocols import (
    ContentProviderProtocol,
    MediaFileProtocol,
    RenderedPageProtocol,
)
from ..core.exceptions import CategoriesUnavailableError, ContentProviderError
from ..core.types import (
    CollectedMetadata,
    MetadataSource,
    TemplateData,
    TemplateRecord,
)
from ..extraction.template_parser import (
    COORDINATES_KEY,
    DELETION_KEY,
    INFORMATION_FIELDS_KEY,
    LICENSES_KEY,
    RESTRICTIONS_KEY,
    TemplateParser,
)
from ..licenses.parser import LicenseParser

# Category name patterns of assessment levels, matched case-insensitively
ASSESSMENT_CATEGORIES: Mapping[str, re.Pattern[str]] = MappingProxyType(
    {
        "poty": re.compile(r"^pictures of the year \(.*\)", re.IGNORECASE),
        "potd": re.compile(r"^pictures of the day \(.*\)", re.IGNORECASE),
        "featured": re.compile(
            r"^featured (pictures|sounds) on wikimedia commons", re.IGNORECASE
        ),
        "quality": re.compile(r"^quality images", re.IGNORECASE),
        "valued": re.compile(r"^valued images", re.IGNORECASE),
    }
)

# Attribution problem codes
NO_LICENSE = "no-license"
NO_DESCRIPTION = "no-description"
NO_AUTHOR = "no-author"
NO_SOURCE = "no-source"
NO_PATENT = "no-patent"

# 3D-printable models need a patent notice
PATENT_MIME_TYPES = frozenset({"application/sla"})
PATENT_TEMPLATE = "3dpatent"

TIMESTAMP_FIELDS = ("DateTime", "DateTimeOriginal")
_EXIF_TIMESTAMP = re.compile(r"^(\d{4}):(\d{2}):(\d{2}) (\d{2}:\d{2}:\d{2})$")


def normalize_template_title(title: str) -> str:
    """Normalize a template title for comparison ("Template:3D_patent" -> "3d patent")."""
    title = title.replace("_", " ").strip()
    if title.lower().startswith("template:"):
        title = title[len("template:") :].strip()
    return title.casefold()


class DataCollector:
    """Collects and reconciles metadata of a file.

    Example:
        collector = DataCollector(
            template_parser=TemplateParser(["en"]),
            license_parser=LicenseParser(),
            content_provider=provider,
            language="en",
        )
        metadata = collector.collect(file)
        metadata.value("License")  # 'cc-by-sa-3.0'
    """

    def __init__(
        self,
        template_parser: TemplateParser,
        license_parser: LicenseParser,
        content_provider: ContentProviderProtocol,
        language: str | None = None,
        max_html_bytes: int = 0,
    ):
        """Initialize DataCollector.

        Args:
            template_parser: Parser for description page HTML.
            license_parser: Parser and ranker for license names.
            content_provider: Source of description HTML and categories.
            language: Language to render the description page in; None for
                the provider's default.
            max_html_bytes: Pages larger than this are treated as empty
                (0 disables the limit).
        """
        self._template_parser = template_parser
        self._license_parser = license_parser
        self._content_provider = content_provider
        self.language = language
        self.max_html_bytes = max_html_bytes

    def collect(
        self,
        file: MediaFileProtocol,
        previous_metadata: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> CollectedMetadata:
        """Collect metadata of a file.

        Args:
            file: The file whose description page is read.
            previous_metadata: Metadata collected so far by the caller, in
                API format. Only read, never changed.

        Returns:
            Fields produced by this collector; merge them into the caller's
            metadata with CollectedMetadata.merge_into().
        """
        previous_metadata = previous_metadata or {}

        try:
            description = self._content_provider.get_description_html(file, self.language)
        except ContentProviderError as e:
            logger.warning(f"Cannot read description page of {file.name}: {e}")
            description = ""

        template_data = self._parse_page(description, file)
        categories = self._get_categories(file, previous_metadata)

        metadata = self._normalize_timestamps(previous_metadata)
        category_metadata, category_licenses = self.get_category_metadata(categories)
        metadata.update(category_metadata)
        metadata.update(self.get_template_metadata(template_data))

        # Category-derived licenses are less reliable than explicit template markup
        if "License" not in metadata and category_licenses:
            metadata.set("License", category_licenses[0], MetadataSource.CATEGORIES)

        logger.debug(f"Collected {len(metadata)} metadata fields for {file.name}")
        return metadata

    def _parse_page(self, html: str | None, file: MediaFileProtocol) -> TemplateData:
        if html and self.max_html_bytes and len(html.encode("utf-8")) > self.max_html_bytes:
            logger.warning(
                f"Description page of {file.name} exceeds {self.max_html_bytes} bytes, "
                "not parsing"
            )
            return {}
        return self._template_parser.parse_page(html) or {}

    def _get_categories(
        self, file: MediaFileProtocol, previous_metadata: Mapping[str, Mapping[str, Any]]
    ) -> list[str]:
        try:
            return list(self._content_provider.get_categories(file))
        except CategoriesUnavailableError as e:
            # A remote installation may already have sent its category data
            previous = previous_metadata.get("Categories")
            value = previous.get("value") if isinstance(previous, Mapping) else None
            if isinstance(value, str):
                return value.split("|") if value else []
            logger.warning(f"{e}; continuing without categories")
        except ContentProviderError as e:
            logger.warning(f"Cannot read categories of {file.name}: {e}")
        return []

    def _normalize_timestamps(
        self, previous_metadata: Mapping[str, Mapping[str, Any]]
    ) -> CollectedMetadata:
        metadata = CollectedMetadata()
        for name in TIMESTAMP_FIELDS:
            field = previous_metadata.get(name)
            value = field.get("value") if isinstance(field, Mapping) else None
            if not isinstance(value, str):
                continue
            match = _EXIF_TIMESTAMP.match(value.strip())
            if match:
                year, month, day, time = match.groups()
                metadata.set(name, f"{year}-{month}-{day} {time}", MetadataSource.MEDIAWIKI)
        return metadata

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def get_category_metadata(self, categories: list[str]) -> tuple[CollectedMetadata, list[str]]:
        """Split category names into assessments, licenses and the rest.

        Args:
            categories: Human-readable category names, in page order.

        Returns:
            Tuple of (Categories and Assessments fields, license names
            recognized in categories in category order).
        """
        assessments, categories = self._extract_assessments(categories)
        licenses, categories = self._extract_licenses(categories)

        metadata = CollectedMetadata()
        metadata.set("Categories", "|".join(categories), MetadataSource.CATEGORIES)
        metadata.set("Assessments", "|".join(assessments), MetadataSource.CATEGORIES)
        return metadata, licenses

    def _extract_assessments(self, categories: list[str]) -> tuple[list[str], list[str]]:
        assessments: list[str] = []
        remaining: list[str] = []
        for category in categories:
            matched = [
                assessment
                for assessment, pattern in ASSESSMENT_CATEGORIES.items()
                if pattern.search(category)
            ]
            if not matched:
                remaining.append(category)
            for assessment in matched:
                # potd/poty can appear once per year
                if assessment not in assessments:
                    assessments.append(assessment)
        return assessments, remaining

    def _extract_licenses(self, categories: list[str]) -> tuple[list[str], list[str]]:
        licenses: list[str] = []
        remaining: list[str] = []
        for category in categories:
            descriptor = self._license_parser.parse_license_string(category)
            if descriptor is not None:
                licenses.append(descriptor.name)
            else:
                remaining.append(category)
        return licenses, remaining

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    def get_template_metadata(self, template_data: TemplateData | None) -> CollectedMetadata:
        """Select one template of each kind and flatten it into fields.

        Args:
            template_data: Output of TemplateParser.parse_page().

        Returns:
            Template fields (source commons-desc-page) plus the resolved
            License (source commons-templates).
        """
        template_data = template_data or {}
        metadata = CollectedMetadata()

        # Multiple geocodes for a single image are not meaningful
        coordinates = template_data.get(COORDINATES_KEY) or []
        self._copy_fields(metadata, next((record for record in coordinates if record), {}))

        information_groups = template_data.get(INFORMATION_FIELDS_KEY) or []
        if information_groups:
            self._copy_fields(metadata, information_groups[0])
            if len(information_groups) > 1:
                author_count = sum(1 for group in information_groups if "Artist" in group)
                metadata.set("AuthorCount", author_count, MetadataSource.DESC_PAGE)

        licenses = template_data.get(LICENSES_KEY) or []
        if licenses:
            license_record = self._select_license(licenses)
            self._copy_fields(metadata, license_record)
            if len(licenses) > 1:
                non_free = next(
                    (record["NonFree"] for record in licenses if record.get("NonFree")), None
                )
                if non_free:
                    metadata.set("NonFree", non_free, MetadataSource.DESC_PAGE)

            short_name = license_record.get("LicenseShortName")
            if isinstance(short_name, str):
                descriptor = self._license_parser.parse_license_string(short_name)
                if descriptor is not None:
                    metadata.set("License", descriptor.name, MetadataSource.TEMPLATES)

        for key in (DELETION_KEY, RESTRICTIONS_KEY):
            records = template_data.get(key) or []
            if records:
                self._copy_fields(metadata, records[0])

        return metadata

    def _select_license(self, licenses: list[TemplateRecord]) -> TemplateRecord:
        if len(licenses) == 1:
            return licenses[0]

        def get_license_string(record: TemplateRecord, _key: int) -> str | None:
            short_name = record.get("LicenseShortName")
            return short_name if isinstance(short_name, str) else None

        ordered = self._license_parser.sort_data_by_license_priority(licenses, get_license_string)
        winner = next(iter(ordered.values()))
        logger.debug(f"Selected license {winner.get('LicenseShortName')!r} of {len(licenses)}")
        return winner

    def _copy_fields(self, metadata: CollectedMetadata, record: TemplateRecord) -> None:
        for name, value in record.items():
            metadata.set(name, value, MetadataSource.DESC_PAGE)

    # -------------------------------------------------------------------------
    # Attribution checks
    # -------------------------------------------------------------------------

    def verify_attribution_metadata(
        self, rendered_page: RenderedPageProtocol, file: MediaFileProtocol
    ) -> set[str]:
        """Check a rendered file page for missing attribution basics.

        Args:
            rendered_page: The rendered description page.
            file: The file the page describes.

        Returns:
            Problem codes (NO_LICENSE etc); empty when nothing is missing.
        """
        template_data = self._parse_page(rendered_page.text, file)
        licenses = template_data.get(LICENSES_KEY) or []
        groups = template_data.get(INFORMATION_FIELDS_KEY) or []

        def any_group_has(*field_names: str) -> bool:
            return any(group.get(name) for group in groups for name in field_names)

        problems: set[str] = set()
        if not any(record.get("LicenseShortName") for record in licenses):
            problems.add(NO_LICENSE)
        if not any_group_has("ImageDescription"):
            problems.add(NO_DESCRIPTION)
        if not any_group_has("Artist", "Attribution"):
            problems.add(NO_AUTHOR)
        if not any_group_has("Credit", "Attribution"):
            problems.add(NO_SOURCE)
        if file.mime_type in PATENT_MIME_TYPES and not self._has_patent_template(rendered_page):
            problems.add(NO_PATENT)

        if problems:
            logger.debug(f"Attribution problems for {file.name}: {sorted(problems)}")
        return problems

    def _has_patent_template(self, rendered_page: RenderedPageProtocol) -> bool:
        return any(
            normalize_template_title(title) == PATENT_TEMPLATE
            for title in rendered_page.templates or ()
        )
