"""Configuration management for commonsmeta."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .exceptions import ConfigurationError

ENV_PREFIX = "COMMONSMETA_"

# BCP 47-ish codes as used by MediaWiki: "en", "pt-br", "zh-hant", "be-tarask"
LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(-[a-z0-9]{2,8})*$", re.IGNORECASE)

DEFAULT_PUBLIC_DOMAIN_PAGE_URL = (
    "https://commons.wikimedia.org/wiki/Commons:Reusing_content_outside_Wikimedia"
    "/licenses#Public_domain"
)


def validate_language_code(code: object) -> str:
    """Check a language code, raising ConfigurationError when invalid.

    Args:
        code: Candidate language code.

    Returns:
        The code, unchanged.
    """
    if not isinstance(code, str) or not LANGUAGE_CODE_PATTERN.match(code):
        raise ConfigurationError(f"Invalid language code: {code!r}")
    return code


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _apply_settings(target: object, values: dict, prefix: str = "") -> None:
    for key, value in values.items():
        if not hasattr(target, key):
            raise ConfigurationError(f"Unknown config key: {prefix}{key}")
        expected = type(getattr(target, key))
        # bool is an int subclass, but not a valid size or age
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ConfigurationError(
                f"{prefix}{key} must be of type {expected.__name__}, got {value!r}"
            )
        setattr(target, key, value)


@dataclass
class ParserConfig:
    """Template parser configuration."""

    language: str = "en"
    multi_language: bool = False
    # Pages larger than this are not parsed (0 disables the limit)
    max_html_bytes: int = 5 * 1024 * 1024


@dataclass
class HookConfig:
    """Extended-metadata hook configuration."""

    force_recalculate: bool = False
    set_tracking_categories: bool = True
    # Cache lifetime for files that do not report a description timestamp
    uncached_max_age: int = 60 * 60 * 12
    public_domain_page_url: str = DEFAULT_PUBLIC_DOMAIN_PAGE_URL


@dataclass
class Config:
    """Main application configuration."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    hook: HookConfig = field(default_factory=HookConfig)

    def validate(self) -> "Config":
        """Validate values, raising ConfigurationError on the first problem."""
        validate_language_code(self.parser.language)
        if self.parser.max_html_bytes < 0:
            raise ConfigurationError("max_html_bytes must not be negative")
        if self.hook.uncached_max_age < 0:
            raise ConfigurationError("uncached_max_age must not be negative")
        return self

    @classmethod
    def from_env(cls, config: "Config | None" = None) -> "Config":
        """Load configuration from environment variables."""
        config = config or cls()

        if language := os.environ.get(f"{ENV_PREFIX}LANGUAGE"):
            config.parser.language = language

        if (value := os.environ.get(f"{ENV_PREFIX}MULTI_LANGUAGE")) is not None:
            config.parser.multi_language = _parse_bool("MULTI_LANGUAGE", value)

        if (value := os.environ.get(f"{ENV_PREFIX}MAX_HTML_BYTES")) is not None:
            config.parser.max_html_bytes = _parse_int("MAX_HTML_BYTES", value)

        if (value := os.environ.get(f"{ENV_PREFIX}FORCE_RECALCULATE")) is not None:
            config.hook.force_recalculate = _parse_bool("FORCE_RECALCULATE", value)

        if (value := os.environ.get(f"{ENV_PREFIX}SET_TRACKING_CATEGORIES")) is not None:
            config.hook.set_tracking_categories = _parse_bool(
                "SET_TRACKING_CATEGORIES", value
            )

        if (value := os.environ.get(f"{ENV_PREFIX}UNCACHED_MAX_AGE")) is not None:
            config.hook.uncached_max_age = _parse_int("UNCACHED_MAX_AGE", value)

        if url := os.environ.get(f"{ENV_PREFIX}PUBLIC_DOMAIN_PAGE_URL"):
            config.hook.public_domain_page_url = url

        return config.validate()

    @classmethod
    def from_file(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file, then apply env overrides.

        Top-level keys configure the parser; a ``hook`` mapping configures
        the extended-metadata hook.
        """
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

        if data is None:
            data = {}
        elif not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

        config = cls()
        hook_data = data.pop("hook", None) or {}
        if not isinstance(hook_data, dict):
            raise ConfigurationError("hook must be a mapping")
        _apply_settings(config.parser, data)
        _apply_settings(config.hook, hook_data, prefix="hook.")

        return cls.from_env(config)

    @classmethod
    def from_env_or_file(cls, path: Path | str | None = None) -> "Config":
        """Load from an explicit file, COMMONSMETA_CONFIG, or env only."""
        path = path or os.environ.get(f"{ENV_PREFIX}CONFIG")
        if path:
            return cls.from_file(path)
        return cls.from_env()
