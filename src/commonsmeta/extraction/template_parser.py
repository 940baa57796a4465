"""Metadata extraction from rendered Commons file description pages.

Relies on the attributes set by {{Information}} and similar templates, see
https://commons.wikimedia.org/wiki/Commons:Machine-readable_data

The parser returns raw, per-template data: every template instance found on
the page becomes one record, grouped by template kind. Choosing between
competing templates is left to the data collector.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field
from typing import Callable, Sequence
from urllib.parse import parse_qs, urlparse

from bs4 import NavigableString, Tag
from bs4.builder import ParserRejectedMarkup
from loguru import logger

from ..core.config import validate_language_code
from ..core.exceptions import ConfigurationError
from ..core.types import FieldValue, LanguageMap, TemplateData, TemplateRecord
from . import fields
from .navigator import DomNavigator, get_classes, inner_html, node_path

COORDINATES_KEY = "coordinates"
INFORMATION_FIELDS_KEY = "informationFields"
LICENSES_KEY = "licenses"
DELETION_KEY = "deletion"
RESTRICTIONS_KEY = "restrictions"

# Group name for legacy fields that are not inside a table
NO_GROUP = "-"

_WRAPPING_PARAGRAPH = re.compile(r"^<p>(.*)</p>$", re.DOTALL)
_PARAGRAPH_TAG = re.compile(r"</?p[\s>]", re.IGNORECASE)
_NUMERIC_PATTERN = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

FieldExtractor = Callable[[DomNavigator, Tag], FieldValue]


def is_numeric(value: str) -> bool:
    """Check whether a string is a number, optionally signed or with an exponent."""
    return bool(_NUMERIC_PATTERN.match(value))


def clean_html(html: str) -> str:
    """Trim whitespace and a redundant wrapping <p> until nothing changes."""
    while True:
        previous = html
        html = html.strip()
        match = _WRAPPING_PARAGRAPH.match(html)
        if match and not _PARAGRAPH_TAG.search(match.group(1)):
            html = match.group(1)
        if html == previous:
            return html


@dataclass
class _InformationGroup:
    """Fields of one information template, plus its type class."""

    template_type: str | None
    fields: TemplateRecord = field(default_factory=dict)


class TemplateParser:
    """Parses metadata from Commons-formatted description page HTML.

    Example:
        parser = TemplateParser(priority_languages=["de", "en"])
        data = parser.parse_page(html)
        description = data[INFORMATION_FIELDS_KEY][0]["ImageDescription"]
    """

    def __init__(
        self,
        priority_languages: Sequence[str] = ("en",),
        multi_language: bool = False,
    ):
        """Initialize the parser.

        Args:
            priority_languages: When parsing multi-language text in
                single-language mode, the first available language from this
                list is used; when none is available, the first in the page.
            multi_language: Return all languages as a LanguageMap instead.

        Raises:
            ConfigurationError: If a language code is invalid.
        """
        self.priority_languages: list[str] = []
        self.set_priority_languages(priority_languages)
        self.multi_language = multi_language
        self._field_extractors: dict[str, FieldExtractor] = {
            "Artist": self._parse_artist,
        }

    def set_priority_languages(self, priority_languages: Sequence[str]) -> None:
        """Set the language preference order (most preferred first)."""
        if isinstance(priority_languages, str) or not priority_languages:
            raise ConfigurationError(
                f"Priority languages must be a non-empty list, got {priority_languages!r}"
            )
        self.priority_languages = [validate_language_code(code) for code in priority_languages]

    def set_multi_language(self, multi_language: bool) -> None:
        """Switch between single-language and multi-language output."""
        self.multi_language = multi_language

    def parse_page(self, html: str | None) -> TemplateData:
        """Parse an HTML string for metadata.

        Args:
            html: Rendered description page.

        Returns:
            Template records keyed by kind (COORDINATES_KEY etc). Kinds with
            no records are left out; empty input gives an empty dict.
        """
        if not html:
            return {}

        try:
            navigator = DomNavigator(html)
        except ParserRejectedMarkup as e:
            logger.warning(f"Unparseable description page HTML: {e}")
            return {}

        data: TemplateData = {}
        for key, records in (
            (COORDINATES_KEY, self._parse_coordinates(navigator)),
            (INFORMATION_FIELDS_KEY, self._parse_information_fields(navigator)),
            (LICENSES_KEY, self._parse_licenses(navigator)),
            (DELETION_KEY, self._parse_deletion(navigator)),
            (RESTRICTIONS_KEY, self._parse_restrictions(navigator)),
        ):
            if records:
                data[key] = records

        logger.debug(
            "Parsed description page: "
            + ", ".join(f"{key}={len(records)}" for key, records in data.items())
        )
        return data

    # -------------------------------------------------------------------------
    # Template kinds
    # -------------------------------------------------------------------------

    def _parse_coordinates(self, navigator: DomNavigator) -> list[TemplateRecord]:
        records: list[TemplateRecord] = []
        for geo_node in navigator.find_elements_with_class("*", fields.COORDINATES_CLASS):
            record: TemplateRecord = {}
            coordinates = geo_node.get_text().strip().split(";")
            if len(coordinates) == 2 and all(is_numeric(part) for part in coordinates):
                record["GPSLatitude"] = coordinates[0].strip()
                record["GPSLongitude"] = coordinates[1].strip()
                record["GPSMapDatum"] = fields.MAP_DATUM
            records.append(record)
        return records

    def _parse_information_fields(self, navigator: DomNavigator) -> list[TemplateRecord]:
        groups: dict[str, _InformationGroup] = {}

        # Legacy markup: <td id="fileinfotpl_desc">label</td><td>value</td>
        for label_node in navigator.find_elements_with_id_prefix(
            ("td", "th"), fields.INFORMATION_FIELD_PREFIX
        ):
            field_name = fields.INFORMATION_FIELD_CLASSES.get(label_node.get("id"))
            if field_name is None:
                continue
            value_node = navigator.next_element_sibling(label_node)
            if value_node is None:
                continue
            group_node = navigator.closest(label_node, "table")
            self._add_information_field(navigator, groups, group_node, field_name, value_node)

        # Current markup: value element classed fileinfotpl_* inside a .fileinfotpl
        for value_node in navigator.find_elements_with_class_prefix(
            "*", fields.INFORMATION_FIELD_PREFIX
        ):
            field_name = self._information_field_name(value_node)
            if field_name is None:
                continue
            group_node = navigator.closest(
                value_node, "*", class_name=fields.INFORMATION_TEMPLATE_CLASS
            )
            if group_node is None:
                continue
            self._add_information_field(navigator, groups, group_node, field_name, value_node)

        usable = []
        for group_name, group in groups.items():
            if group.template_type in fields.TEMPLATE_TYPE_BLACKLIST:
                logger.debug(f"Skipping {group.template_type} template at {group_name}")
                continue
            usable.append(group)

        # sorted() is stable, so equal types keep their encounter order
        usable.sort(
            key=lambda group: -fields.TEMPLATE_TYPE_PRIORITIES.get(group.template_type, 0)
        )
        return [group.fields for group in usable]

    def _information_field_name(self, node: Tag) -> str | None:
        for class_name in get_classes(node):
            if field_name := fields.INFORMATION_FIELD_CLASSES.get(class_name):
                return field_name
        return None

    def _add_information_field(
        self,
        navigator: DomNavigator,
        groups: dict[str, _InformationGroup],
        group_node: Tag | None,
        field_name: str,
        value_node: Tag,
    ) -> None:
        group_name = node_path(group_node) if group_node is not None else NO_GROUP
        group = groups.get(group_name)
        if group is None:
            template_type = None
            if group_node is not None:
                template_type = navigator.get_first_class_with_prefix(
                    group_node, fields.TEMPLATE_TYPE_PREFIX
                )
            group = groups[group_name] = _InformationGroup(template_type=template_type)

        # Do not overwrite: duplicate markup repeats a field further down
        if field_name in group.fields:
            return

        extractor = self._field_extractors.get(field_name, self.parse_contents)
        group.fields[field_name] = extractor(navigator, value_node)

    def _parse_licenses(self, navigator: DomNavigator) -> list[TemplateRecord]:
        records: list[TemplateRecord] = []
        for license_node in navigator.find_elements_with_class(
            "*", fields.LICENSE_TEMPLATE_CLASS
        ):
            record: TemplateRecord = {}
            for class_name, field_name in fields.LICENSE_FIELD_CLASSES.items():
                node = navigator.find_elements_with_class("*", class_name, license_node).first()
                if node is not None:
                    record[field_name] = self.cleaned_inner_html(node)

            if "UsageTerms" in record:
                is_public_domain = record["UsageTerms"] == fields.PUBLIC_DOMAIN_USAGE_TERMS
                record["Copyrighted"] = "False" if is_public_domain else "True"
            records.append(record)
        return records

    def _parse_deletion(self, navigator: DomNavigator) -> list[TemplateRecord]:
        records: list[TemplateRecord] = []
        for nuke_node in navigator.find_elements_with_class("*", fields.DELETION_CLASS):
            link = self._first_child(nuke_node)
            if link is None or link.name != "a":
                continue
            href = link.get("href")
            if not isinstance(href, str):
                continue
            params = parse_qs(urlparse(href).query, keep_blank_values=True)
            if params.get("action", [None])[0] == "delete" and "wpReason" in params:
                records.append({"DeletionReason": params["wpReason"][0]})
        return records

    def _first_child(self, node: Tag) -> Tag | None:
        for child in node.children:
            if isinstance(child, Tag):
                return child
            if isinstance(child, NavigableString) and child.strip():
                return None
        return None

    def _parse_restrictions(self, navigator: DomNavigator) -> list[TemplateRecord]:
        restrictions: list[str] = []
        for node in navigator.find_elements_with_class_prefix("*", fields.RESTRICTION_PREFIX):
            class_name = navigator.get_first_class_with_prefix(node, fields.RESTRICTION_PREFIX)
            restriction = class_name[len(fields.RESTRICTION_PREFIX) :]
            if restriction and restriction not in restrictions:
                restrictions.append(restriction)
        if not restrictions:
            return []
        return [{"Restrictions": "|".join(restrictions)}]

    # -------------------------------------------------------------------------
    # Field extractors
    # -------------------------------------------------------------------------

    def _parse_artist(self, navigator: DomNavigator, node: Tag) -> FieldValue:
        """Use the hCard name when the author field holds a creator template."""
        for vcard in navigator.find_elements_with_class("*", fields.HCARD_CLASS, node):
            name = navigator.find_elements_with_class(
                "*", fields.HCARD_NAME_PROPERTY, vcard
            ).first()
            if name is not None:
                return self.cleaned_inner_html(name)
        return self.parse_contents(navigator, node)

    def parse_contents(self, navigator: DomNavigator, node: Tag) -> FieldValue:
        """Get the text of a field, resolving language templates ({{en}} etc).

        Returns:
            Cleaned HTML of the field, of the preferred language variant in
            single-language mode, or a LanguageMap of all variants in
            multi-language mode.
        """
        language_nodes = navigator.find_elements_with_class_and_lang(
            "div", fields.DESCRIPTION_CLASS, node
        )
        languages: dict[str, Tag] = {}
        for language_node in language_nodes:
            language_code = language_node.get("lang")
            if language_code not in languages:
                languages[language_code] = self._remove_language_name(navigator, language_node)

        if not languages:
            return self.cleaned_inner_html(node)

        if not self.multi_language:
            return self.cleaned_inner_html(self._select_language(languages))

        return LanguageMap(
            {code: self.cleaned_inner_html(language_node) for code, language_node in languages.items()}
        )

    def _remove_language_name(self, navigator: DomNavigator, node: Tag) -> Tag:
        """Strip the "English:" label that language templates prepend.

        Returns:
            A detached copy of the node; the document is not changed.
        """
        clone = copy.copy(node)
        labels = list(navigator.find_elements_with_class("*", fields.LANGUAGE_NAME_CLASS, clone))
        for label in labels:
            # language names are direct children
            if label.parent is clone:
                label.decompose()
        return clone

    def _select_language(self, languages: dict[str, Tag]) -> Tag:
        for language_code in self.priority_languages:
            if language_code in languages:
                return languages[language_code]
        return next(iter(languages.values()))

    def cleaned_inner_html(self, node: Tag) -> str:
        """Serialize a node's children, trimming wrapper markup."""
        return clean_html(inner_html(node))
