"""License name grammar.

Splits a license name (typically a category name, template name or license
shortname, see https://commons.wikimedia.org/wiki/Commons:Machine-readable_data)
into family, type, version and region, and ranks licenses by how preferable
they are to show.

Only free Creative Commons licenses and public domain are recognized.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Callable, Hashable, Mapping, Sequence, TypeVar

from loguru import logger

from ..core.types import LicenseDescriptor

# Nonstandard license name patterns used in categories/templates/shortnames
LICENSE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "cc-by-sa-3.0-migrated": "cc-by-sa-3.0",
        "cc-by-sa-3.0-migrated-with-disclaimers": "cc-by-sa-3.0",
        "cc-by-sa-3.0-2.5-2.0-1.0": "cc-by-sa-3.0",
        "cc-by-sa-2.5-2.0-1.0": "cc-by-sa-2.5",
        "cc-by-2.0-stma": "cc-by-2.0",
        "cc-by-sa-1.0+": "cc-by-sa-3.0",
    }
)

# Names that are complete licenses on their own
SPECIAL_CC_LICENSES = frozenset({"cc0", "cc-pd"})

CC_ELEMENTS = frozenset({"by", "sa", "nc", "nd"})
NON_FREE_ELEMENTS = frozenset({"nc", "nd"})
PUBLIC_DOMAIN_NAMES = frozenset({"public domain", "pd"})

PD_PRIORITY = 2000
CC_PRIORITY = 1000
CC_BY_BONUS = 100

_SEPARATOR_PATTERN = re.compile(r"[- ]")
_REGION_PATTERN = re.compile(r"^\w\w$", re.ASCII)
_VERSION_PATTERN = re.compile(r"\d+(\.\d+)?", re.ASCII)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def is_license_version(value: str) -> bool:
    """Check whether a string is a simple decimal version like "2.5"."""
    return bool(_VERSION_PATTERN.fullmatch(value))


class LicenseParser:
    """Parses license name strings into LicenseDescriptor records.

    Example:
        >>> parser = LicenseParser()
        >>> parser.parse_license_string("CC BY-SA 2.5 NL").name
        'cc-by-sa-2.5-nl'
        >>> parser.parse_license_string("cc-by-nc-2.0") is None
        True
    """

    def parse_license_string(self, license_string: str | None) -> LicenseDescriptor | None:
        """Parse a license name.

        Args:
            license_string: Category name, template name, shortname etc.
                Case and surrounding whitespace are ignored, for CC and
                public domain names alike.

        Returns:
            LicenseDescriptor, or None when the license is not recognized
            (including all non-free CC variants).
        """
        if not license_string:
            return None

        return self._parse_creative_commons(license_string) or self._parse_public_domain(
            license_string
        )

    def _parse_creative_commons(self, license_string: str) -> LicenseDescriptor | None:
        normalized = license_string.strip().lower()
        normalized = LICENSE_ALIASES.get(normalized, normalized)

        if normalized in SPECIAL_CC_LICENSES:
            return LicenseDescriptor(family="cc", type=normalized, name=normalized)

        parts = _SEPARATOR_PATTERN.split(normalized)
        if parts[0] != "cc":
            return None

        i = 1
        while i < len(parts) and parts[i] in CC_ELEMENTS:
            if parts[i] in NON_FREE_ELEMENTS:
                return None
            i += 1
        license_type = "-".join(parts[:i])

        if i < len(parts) and is_license_version(parts[i]):
            version = parts[i]
            i += 1
        else:
            return None

        region = None
        if i < len(parts) and (_REGION_PATTERN.match(parts[i]) or parts[i] == "scotland"):
            region = parts[i]
            i += 1

        if i != len(parts):
            return None

        name = "-".join(part for part in (license_type, version, region) if part)
        return LicenseDescriptor(
            family="cc",
            type=license_type,
            version=version,
            region=region,
            name=name,
        )

    def _parse_public_domain(self, license_string: str) -> LicenseDescriptor | None:
        if license_string.strip().lower() in PUBLIC_DOMAIN_NAMES:
            return LicenseDescriptor(family="pd", name="pd")
        return None

    def get_license_priority(self, descriptor: LicenseDescriptor | None) -> int:
        """Score a license; the highest-scoring license is the one shown.

        Public domain beats any CC license. Among CC licenses, CC-BY beats
        the more restrictive types and newer versions beat older ones.
        Versions are assumed to be simple decimals ("2.5", "3.0").
        """
        if descriptor is None:
            return 0
        if descriptor.family == "pd":
            return PD_PRIORITY
        if descriptor.family != "cc":
            return 0

        priority = CC_PRIORITY
        if descriptor.type == "cc-by":
            priority += CC_BY_BONUS
        if descriptor.version and is_license_version(descriptor.version):
            priority += int(10 * float(descriptor.version))
        return priority

    def sort_data_by_license_priority(
        self,
        data: Mapping[K, T] | Sequence[T],
        get_license_string: Callable[[T, Any], str | None],
    ) -> dict[Any, T]:
        """Sort items by the priority of their license, highest first.

        The sort is stable and the input is not changed. Sequences are
        treated as mappings keyed by position, so the result always keeps
        the original key of each item.

        Args:
            data: Items to sort.
            get_license_string: Called as ``get_license_string(item, key)``;
                returns the item's license name (or None).

        Returns:
            Dict of original key -> item, in priority order.
        """
        items = list(data.items()) if isinstance(data, Mapping) else list(enumerate(data))

        priorities = {}
        for key, value in items:
            descriptor = self.parse_license_string(get_license_string(value, key))
            priorities[key] = self.get_license_priority(descriptor)

        ordered = sorted(items, key=lambda item: -priorities[item[0]])
        logger.debug(f"License priorities: {[priorities[key] for key, _ in ordered]}")
        return dict(ordered)
