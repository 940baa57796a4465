"""License name parsing and ranking."""

from .parser import (
    LICENSE_ALIASES,
    LicenseParser,
    is_license_version,
)

__all__ = [
    "LICENSE_ALIASES",
    "LicenseParser",
    "is_license_version",
]
