"""Commons machine-readable markup conventions.

Class and id names set by {{Information}}-like templates and license
templates, and the metadata field names they map to. See
https://commons.wikimedia.org/wiki/Commons:Machine-readable_data
"""

from types import MappingProxyType
from typing import Mapping

# Prefix of ids (legacy tables) and classes (current markup) of information fields
INFORMATION_FIELD_PREFIX = "fileinfotpl_"

# Class of the element wrapping one information template in current markup
INFORMATION_TEMPLATE_CLASS = "fileinfotpl"

INFORMATION_FIELD_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "fileinfotpl_desc": "ImageDescription",
        "fileinfotpl_date": "DateTimeOriginal",
        "fileinfotpl_aut": "Artist",
        # Credit (IPTC 2:110) names the provider of the media, which matches
        # the Commons notion of "source" better than IPTC Source does
        "fileinfotpl_src": "Credit",
        "fileinfotpl_art_title": "ObjectName",
        "fileinfotpl_book_title": "ObjectName",
        "fileinfotpl_perm": "Permission",
        "fileinfotpl_credit": "Attribution",
    }
)

TEMPLATE_TYPE_PREFIX = "fileinfotpl-type-"

# Higher wins when a page has several information templates
TEMPLATE_TYPE_PRIORITIES: Mapping[str, int] = MappingProxyType(
    {
        "fileinfotpl-type-photograph": 3,
        "fileinfotpl-type-information": 2,
        "fileinfotpl-type-artwork": 1,
    }
)

# Book metadata uses a different schema (author of the book, not the scan)
TEMPLATE_TYPE_BLACKLIST = frozenset({"fileinfotpl-type-book"})

LICENSE_TEMPLATE_CLASS = "licensetpl"

LICENSE_FIELD_CLASSES: Mapping[str, str] = MappingProxyType(
    {
        "licensetpl_short": "LicenseShortName",
        "licensetpl_long": "UsageTerms",
        "licensetpl_attr_req": "AttributionRequired",
        "licensetpl_attr": "Attribution",
        "licensetpl_link": "LicenseUrl",
        "licensetpl_nonfree": "NonFree",
    }
)

PUBLIC_DOMAIN_USAGE_TERMS = "Public domain"

COORDINATES_CLASS = "geo"
MAP_DATUM = "WGS-84"

DELETION_CLASS = "nuke"

RESTRICTION_PREFIX = "restriction-"

# Multi-language text markup ({{en}}, {{fr}}, ...)
DESCRIPTION_CLASS = "description"
LANGUAGE_NAME_CLASS = "language"

# hCard markup produced by {{Creator}} and similar templates
HCARD_CLASS = "vcard"
HCARD_NAME_PROPERTY = "fn"
