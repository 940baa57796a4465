"""Tests for DomNavigator and node helpers."""

from commonsmeta.extraction.navigator import (
    DomNavigator,
    get_classes,
    has_class,
    inner_html,
    node_path,
)

HTML = """
<div id="content">
  <table class="fileinfotpl-type-information vevent">
    <tr>
      <td id="fileinfotpl_desc">Description</td>
      text between
      <td class="description"><div class="description en" lang="en">Cat</div><div class="description" lang="">No language</div></td>
    </tr>
  </table>
  <span class="geo extra">1; 2</span>
  <p class="geo">3; 4</p>
</div>
"""


class TestNodeHelpers:
    """Tests for module-level node helpers."""

    def test_get_classes_splits_tokens(self):
        """get_classes should return each class token."""
        navigator = DomNavigator(HTML)
        span = navigator.document.find("span")

        assert get_classes(span) == ["geo", "extra"]

    def test_get_classes_without_class_attribute(self):
        """Elements without a class attribute have no tokens."""
        navigator = DomNavigator(HTML)

        assert get_classes(navigator.document.find("tr")) == []

    def test_has_class_matches_whole_tokens(self):
        """has_class should not match a substring of a token."""
        navigator = DomNavigator(HTML)
        span = navigator.document.find("span")

        assert has_class(span, "geo")
        assert not has_class(span, "ge")

    def test_inner_html_excludes_enclosing_tag(self):
        """inner_html should serialize only the children."""
        navigator = DomNavigator('<div><b>bold</b> text</div>')

        assert inner_html(navigator.document.find("div")) == "<b>bold</b> text"

    def test_node_path_distinguishes_siblings(self):
        """Same-named siblings should get different positions."""
        navigator = DomNavigator("<div><table></table><table></table></div>")
        first, second = navigator.document.find_all("table")

        assert node_path(first) == "/div[1]/table[1]"
        assert node_path(second) == "/div[1]/table[2]"


class TestDomNavigatorQueries:
    """Tests for DomNavigator element lookups."""

    def test_find_elements_with_class_any_tag(self):
        """'*' should match elements of any tag."""
        navigator = DomNavigator(HTML)

        found = list(navigator.find_elements_with_class("*", "geo"))

        assert [node.name for node in found] == ["span", "p"]

    def test_find_elements_with_class_tag_filter(self):
        """A tag name should restrict matches to that tag."""
        navigator = DomNavigator(HTML)

        found = list(navigator.find_elements_with_class("p", "geo"))

        assert len(found) == 1
        assert found[0].get_text() == "3; 4"

    def test_find_elements_with_class_missing(self):
        """Missing markup should yield an empty query, not an error."""
        navigator = DomNavigator(HTML)

        query = navigator.find_elements_with_class("*", "licensetpl")

        assert list(query) == []
        assert not query
        assert query.first() is None

    def test_find_elements_with_class_under_root(self):
        """Lookups should be limited to descendants of the root."""
        navigator = DomNavigator(HTML)
        table = navigator.document.find("table")

        assert navigator.find_elements_with_class("*", "geo", table).count() == 0
        assert navigator.find_elements_with_class("div", "description", table).count() == 2

    def test_query_is_restartable(self):
        """A query can be iterated more than once."""
        navigator = DomNavigator(HTML)
        query = navigator.find_elements_with_class("*", "geo")

        assert len(list(query)) == 2
        assert len(list(query)) == 2

    def test_find_elements_with_class_prefix(self):
        """Prefix lookup should match any class token starting with the prefix."""
        navigator = DomNavigator(HTML)

        found = navigator.find_elements_with_class_prefix("*", "fileinfotpl-type-").first()

        assert found.name == "table"
        assert navigator.get_first_class_with_prefix(found, "fileinfotpl-type-") == (
            "fileinfotpl-type-information"
        )

    def test_get_first_class_with_prefix_missing(self):
        """No matching class token should give None."""
        navigator = DomNavigator(HTML)
        table = navigator.document.find("table")

        assert navigator.get_first_class_with_prefix(table, "licensetpl") is None

    def test_find_elements_with_id_prefix(self):
        """Id prefix lookup should honor the tag list."""
        navigator = DomNavigator(HTML)

        assert navigator.find_elements_with_id_prefix(("td", "th"), "fileinfotpl_").count() == 1
        assert navigator.find_elements_with_id_prefix("div", "fileinfotpl_").count() == 0

    def test_find_elements_with_class_and_lang_skips_empty_lang(self):
        """Elements with an empty lang attribute should not match."""
        navigator = DomNavigator(HTML)

        found = list(navigator.find_elements_with_class_and_lang("div", "description"))

        assert [node.get("lang") for node in found] == ["en"]


class TestDomNavigatorNavigation:
    """Tests for sibling and ancestor navigation."""

    def test_next_element_sibling_skips_text(self):
        """Text nodes between elements should be skipped."""
        navigator = DomNavigator(HTML)
        label = navigator.document.find(id="fileinfotpl_desc")

        sibling = navigator.next_element_sibling(label)

        assert sibling.name == "td"
        assert has_class(sibling, "description")

    def test_next_element_sibling_last_child(self):
        """The last element has no next sibling."""
        navigator = DomNavigator("<div><span>only</span></div>")

        assert navigator.next_element_sibling(navigator.document.find("span")) is None

    def test_closest_finds_ancestor(self):
        """closest should return the nearest matching ancestor."""
        navigator = DomNavigator(HTML)
        label = navigator.document.find(id="fileinfotpl_desc")

        assert navigator.closest(label, "table") is navigator.document.find("table")

    def test_closest_excludes_node_itself(self):
        """The starting node never matches itself."""
        navigator = DomNavigator("<table><tr><td><table id='inner'></table></td></tr></table>")
        inner = navigator.document.find(id="inner")

        outer = navigator.closest(inner, "table")

        assert outer is not inner
        assert outer.get("id") is None

    def test_closest_with_class(self):
        """A class filter should skip ancestors without the class."""
        navigator = DomNavigator(
            '<div class="fileinfotpl"><div><span id="x">v</span></div></div>'
        )
        span = navigator.document.find(id="x")

        found = navigator.closest(span, "*", class_name="fileinfotpl")

        assert has_class(found, "fileinfotpl")

    def test_closest_missing(self):
        """No matching ancestor should give None."""
        navigator = DomNavigator(HTML)
        span = navigator.document.find("span")

        assert navigator.closest(span, "table") is None


class TestDomNavigatorParsing:
    """Tests for input handling."""

    def test_malformed_html_is_repaired(self):
        """Unclosed tags should not prevent lookups."""
        navigator = DomNavigator('<div class="geo">1; 2<div class="geo">3; 4')

        assert navigator.find_elements_with_class("div", "geo").count() == 2

    def test_empty_document(self):
        """An empty document should give empty results."""
        navigator = DomNavigator("")

        assert navigator.find_elements_with_class("*", "geo").count() == 0
