"""Tests for ExtendedMetadataHook."""

from datetime import datetime, timedelta

import pytest

from commonsmeta.core.config import Config
from commonsmeta.core.types import CollectedMetadata, LanguageMap, MetadataSource
from commonsmeta.extraction.template_parser import TemplateParser
from commonsmeta.services.hooks import (
    TRACKING_CATEGORY_PREFIX,
    VERSION,
    VERSION_FIELD,
    ExtendedMetadataHook,
)
from tests.fakes import (
    FakeMediaFile,
    FakeRenderedPage,
    InMemoryContentProvider,
    StaticFallbackProvider,
)

FILE_NAME = "File:Example.jpg"


@pytest.fixture
def provider(load_html) -> InMemoryContentProvider:
    """Provide a content provider serving the multi-language fixture."""
    return InMemoryContentProvider(
        pages={FILE_NAME: load_html("multilang")},
        categories={FILE_NAME: ["Cats", "CC-BY-SA-3.0"]},
    )


@pytest.fixture
def hook(provider: InMemoryContentProvider) -> ExtendedMetadataHook:
    """Provide a hook with German falling back to French."""
    fallbacks = StaticFallbackProvider(chains={"de": ["fr", "en"]})
    return ExtendedMetadataHook(provider, fallbacks, Config())


class TestGetExtendedMetadata:
    """Tests for ExtendedMetadataHook.get_extended_metadata()."""

    def test_adds_fields_and_version(self, hook: ExtendedMetadataHook):
        """Collected fields and the version marker should be added to the bag."""
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert combined[VERSION_FIELD] == {"value": VERSION, "source": "extension"}
        assert combined["ImageDescription"] == {
            "value": "A cat on a roof",
            "source": "commons-desc-page",
        }
        assert combined["License"] == {"value": "cc-by-sa-3.0", "source": "commons-categories"}

    def test_other_fields_untouched(self, hook: ExtendedMetadataHook):
        """Fields the collector does not produce should be left alone."""
        combined = {"ImageWidth": {"value": 800, "source": "mediawiki-metadata"}}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert combined["ImageWidth"] == {"value": 800, "source": "mediawiki-metadata"}

    def test_language_with_fallback_chain(self, hook: ExtendedMetadataHook, provider):
        """The requested language is preferred, then its fallbacks."""
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "sv")

        assert combined["ImageDescription"]["value"] == "A cat on a roof"
        assert provider.requested_languages == ["sv"]

    def test_fallback_order(self, provider):
        """Fallback languages should be tried in chain order."""
        fallbacks = StaticFallbackProvider(chains={"nds": ["de", "en"]})
        hook = ExtendedMetadataHook(provider, fallbacks, Config())
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "nds")

        assert combined["ImageDescription"]["value"] == "Eine Katze auf dem Dach"

    def test_multi_language(self, hook: ExtendedMetadataHook):
        """Disabling single-language mode should give all variants."""
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en", single_language=False)

        assert combined["ImageDescription"]["value"] == LanguageMap(
            {
                "en": "A cat on a roof",
                "de": "Eine Katze auf dem Dach",
                "fr": "Un chat sur un toit",
            }
        ).to_dict()

    def test_current_version_skipped(self, hook: ExtendedMetadataHook):
        """Bags already at the current version should not be recalculated."""
        combined = {VERSION_FIELD: {"value": VERSION, "source": "extension"}}

        result = hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert result is None
        assert list(combined) == [VERSION_FIELD]

    def test_force_recalculate(self, provider):
        """force_recalculate should ignore the version marker."""
        config = Config()
        config.hook.force_recalculate = True
        hook = ExtendedMetadataHook(provider, StaticFallbackProvider(), config)
        combined = {VERSION_FIELD: {"value": VERSION, "source": "extension"}}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert "ImageDescription" in combined

    def test_older_version_recalculated(self, hook: ExtendedMetadataHook):
        """Bags from an older version should be recalculated."""
        combined = {VERSION_FIELD: {"value": 1.0, "source": "extension"}}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert combined[VERSION_FIELD]["value"] == VERSION
        assert "ImageDescription" in combined

    def test_shorter_cache_without_timestamp(self, hook: ExtendedMetadataHook):
        """Files without a description timestamp should get a short cache lifetime."""
        assert hook.get_extended_metadata({}, FakeMediaFile(), "en") == 43200

    def test_default_cache_with_timestamp(self, hook: ExtendedMetadataHook):
        """Files with a description timestamp use the caller's cache lifetime."""
        file = FakeMediaFile(description_touched=datetime(2024, 1, 1))

        assert hook.get_extended_metadata({}, file, "en") is None

    def test_errors_do_not_propagate(self, hook: ExtendedMetadataHook):
        """Pipeline errors should leave the bag with only the version marker."""
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "not a language")

        assert list(combined) == [VERSION_FIELD]

    def test_exponent_license_version_does_not_fail(self, provider):
        """License names with exponent versions should rank as unrecognized."""
        provider.pages[FILE_NAME] = (
            "<span class='licensetpl'><span class='licensetpl_short'>CC-BY-1e400</span></span>"
            "<span class='licensetpl'><span class='licensetpl_short'>CC-BY-SA-3.0</span></span>"
        )
        hook = ExtendedMetadataHook(provider, StaticFallbackProvider(), Config())
        combined = {}

        hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert combined["LicenseShortName"]["value"] == "CC-BY-SA-3.0"
        assert combined["License"] == {"value": "cc-by-sa-3.0", "source": "commons-templates"}

    def test_unexpected_errors_do_not_propagate(self, hook: ExtendedMetadataHook, monkeypatch):
        """Errors outside the package's own hierarchy are logged, not raised."""

        def fail(self, html):
            raise ValueError("broken page")

        monkeypatch.setattr(TemplateParser, "parse_page", fail)
        combined = {"ImageWidth": {"value": 800, "source": "mediawiki-metadata"}}

        result = hook.get_extended_metadata(combined, FakeMediaFile(), "en")

        assert result == 43200
        assert list(combined) == ["ImageWidth", VERSION_FIELD]


class TestValidateCache:
    """Tests for ExtendedMetadataHook.validate_cache()."""

    def test_no_timestamp_is_valid(self, hook: ExtendedMetadataHook):
        """Without a description timestamp cached data stays valid."""
        assert hook.validate_cache(datetime(2024, 1, 1), FakeMediaFile())

    def test_newer_description_invalidates(self, hook: ExtendedMetadataHook):
        """A description changed after caching invalidates the cache."""
        cached_at = datetime(2024, 1, 1)
        file = FakeMediaFile(description_touched=cached_at + timedelta(seconds=1))

        assert not hook.validate_cache(cached_at, file)

    def test_older_description_is_valid(self, hook: ExtendedMetadataHook):
        """A description unchanged since caching keeps the cache."""
        cached_at = datetime(2024, 1, 1)
        file = FakeMediaFile(description_touched=cached_at)

        assert hook.validate_cache(cached_at, file)

    def test_force_recalculate_invalidates(self, provider):
        """force_recalculate should invalidate every cache entry."""
        config = Config()
        config.hook.force_recalculate = True
        hook = ExtendedMetadataHook(provider, StaticFallbackProvider(), config)

        assert not hook.validate_cache(datetime(2024, 1, 1), FakeMediaFile())


class TestTrackingCategories:
    """Tests for ExtendedMetadataHook.get_tracking_categories()."""

    def test_problem_categories(self, hook: ExtendedMetadataHook, load_html):
        """Each attribution problem should map to a tracking category."""
        page = FakeRenderedPage(text=load_html("multilang"))

        categories = hook.get_tracking_categories(page, FakeMediaFile(), "en")

        assert categories == [
            f"{TRACKING_CATEGORY_PREFIX}no-license",
            f"{TRACKING_CATEGORY_PREFIX}no-source",
        ]

    def test_complete_page(self, hook: ExtendedMetadataHook, load_html):
        """A complete page should not be tracked."""
        page = FakeRenderedPage(text=load_html("simple"))

        assert hook.get_tracking_categories(page, FakeMediaFile(), "en") == []

    def test_disabled(self, provider):
        """Tracking categories can be switched off."""
        config = Config()
        config.hook.set_tracking_categories = False
        hook = ExtendedMetadataHook(provider, StaticFallbackProvider(), config)

        assert hook.get_tracking_categories(FakeRenderedPage(), FakeMediaFile(), "en") == []

    def test_unexpected_errors_give_no_categories(
        self, hook: ExtendedMetadataHook, load_html, monkeypatch
    ):
        """Errors outside the package's own hierarchy should give no categories."""

        def fail(self, html):
            raise RuntimeError("broken page")

        monkeypatch.setattr(TemplateParser, "parse_page", fail)
        page = FakeRenderedPage(text=load_html("multilang"))

        assert hook.get_tracking_categories(page, FakeMediaFile(), "en") == []


class TestSchemaElement:
    """Tests for ExtendedMetadataHook.get_schema_element()."""

    def test_public_domain_uses_configured_page(self, provider):
        """Public domain files should link the configured reuse page."""
        config = Config()
        config.hook.public_domain_page_url = "https://example.org/wiki/Public_domain"
        hook = ExtendedMetadataHook(provider, StaticFallbackProvider(), config)
        metadata = CollectedMetadata()
        metadata.set("License", "pd", MetadataSource.TEMPLATES)

        element = hook.get_schema_element(
            metadata, FakeMediaFile(), "https://commons.wikimedia.org/wiki/File:Example.jpg"
        )

        assert element.startswith('<script type="application/ld+json">')
        assert '"license": "https://example.org/wiki/Public_domain"' in element

    def test_collected_bag(self, hook: ExtendedMetadataHook):
        """A bag filled by get_extended_metadata should render its license URL."""
        combined = {}
        hook.get_extended_metadata(combined, FakeMediaFile(), "en")
        combined["LicenseUrl"] = {"value": "https://creativecommons.org/licenses/by-sa/3.0"}

        element = hook.get_schema_element(combined, FakeMediaFile(), "https://example.org/p")

        assert '"license": "https://creativecommons.org/licenses/by-sa/3.0"' in element

    def test_non_image_gets_nothing(self, hook: ExtendedMetadataHook):
        """Files that are not images should get no element."""
        metadata = {"LicenseUrl": {"value": "https://example.org/license"}}

        assert hook.get_schema_element(metadata, FakeMediaFile(media_type="AUDIO"), "u") == ""
