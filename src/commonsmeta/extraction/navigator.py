"""Generic query helpers over a parsed HTML tree.

Wraps a BeautifulSoup document and offers the handful of lookups the
template parser needs: elements by class token, by class or id prefix,
by class plus language attribute, and sibling/ancestor navigation.

All lookups are tolerant: missing markup yields an empty sequence or
None, never an exception. Queries return ElementQuery objects, which are
lazy and can be iterated any number of times.
"""

from __future__ import annotations

from typing import Callable, Collection, Iterator

from bs4 import BeautifulSoup, Tag

# Tag pattern: "*" for any tag, a tag name, or a collection of tag names
TagPattern = str | Collection[str]

ElementPredicate = Callable[[Tag], bool]

ANY_TAG = "*"


def _tag_matches(node: Tag, pattern: TagPattern) -> bool:
    if isinstance(pattern, str):
        return pattern == ANY_TAG or node.name == pattern.lower()
    return node.name in {name.lower() for name in pattern}


def get_classes(node: Tag) -> list[str]:
    """Get the class tokens of an element."""
    classes = node.get("class")
    if not classes:
        return []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def has_class(node: Tag, class_name: str) -> bool:
    """Check whether class_name is one of the element's class tokens."""
    return class_name in get_classes(node)


def get_first_class_with_prefix(node: Tag, prefix: str) -> str | None:
    """Get the first class token of an element starting with prefix."""
    for class_name in get_classes(node):
        if class_name.startswith(prefix):
            return class_name
    return None


def inner_html(node: Tag) -> str:
    """Serialize the children of an element, without the enclosing tag."""
    return node.decode_contents()


def node_path(node: Tag) -> str:
    """Build an XPath-like structural path for an element.

    Example:
        >>> node_path(table)
        '/html[1]/body[1]/div[2]/table[1]'
    """
    parts: list[str] = []
    current: Tag | None = node
    while current is not None and not isinstance(current, BeautifulSoup):
        parent = current.parent
        position = 1
        if parent is not None:
            for sibling in parent.find_all(current.name, recursive=False):
                if sibling is current:
                    break
                position += 1
        parts.append(f"{current.name}[{position}]")
        current = parent
    return "/" + "/".join(reversed(parts))


class ElementQuery:
    """Lazy, restartable sequence of elements below a root.

    Each iteration walks the tree again, so the query reflects the
    current state of the document.
    """

    def __init__(self, root: Tag, predicate: ElementPredicate):
        self._root = root
        self._predicate = predicate

    def __iter__(self) -> Iterator[Tag]:
        for node in self._root.descendants:
            if isinstance(node, Tag) and self._predicate(node):
                yield node

    def __bool__(self) -> bool:
        return self.first() is not None

    def first(self) -> Tag | None:
        """Get the first matching element, or None."""
        return next(iter(self), None)

    def count(self) -> int:
        """Count matching elements."""
        return sum(1 for _ in self)


class DomNavigator:
    """Query helper bound to one parsed HTML document.

    Example:
        navigator = DomNavigator(html)
        for geo in navigator.find_elements_with_class("*", "geo"):
            print(geo.get_text())
    """

    def __init__(self, html: str):
        """Parse an HTML string.

        Args:
            html: HTML document or fragment; malformed markup is repaired
                by the parser rather than rejected.
        """
        self.document = BeautifulSoup(html, "html.parser")

    def _query(self, root: Tag | None, predicate: ElementPredicate) -> ElementQuery:
        return ElementQuery(root if root is not None else self.document, predicate)

    def find_elements_with_class(
        self, tag_pattern: TagPattern, class_name: str, root: Tag | None = None
    ) -> ElementQuery:
        """Find elements having class_name as one of their class tokens."""
        return self._query(
            root,
            lambda node: _tag_matches(node, tag_pattern) and has_class(node, class_name),
        )

    def find_elements_with_class_prefix(
        self, tag_pattern: TagPattern, prefix: str, root: Tag | None = None
    ) -> ElementQuery:
        """Find elements having a class token that starts with prefix."""
        return self._query(
            root,
            lambda node: _tag_matches(node, tag_pattern)
            and get_first_class_with_prefix(node, prefix) is not None,
        )

    def get_first_class_with_prefix(self, node: Tag, prefix: str) -> str | None:
        """Get the first class token of node starting with prefix."""
        return get_first_class_with_prefix(node, prefix)

    def find_elements_with_id_prefix(
        self, tag_patterns: TagPattern, prefix: str, root: Tag | None = None
    ) -> ElementQuery:
        """Find elements whose id attribute starts with prefix."""

        def predicate(node: Tag) -> bool:
            element_id = node.get("id")
            return (
                isinstance(element_id, str)
                and element_id.startswith(prefix)
                and _tag_matches(node, tag_patterns)
            )

        return self._query(root, predicate)

    def find_elements_with_class_and_lang(
        self, tag_pattern: TagPattern, class_name: str, root: Tag | None = None
    ) -> ElementQuery:
        """Find elements with the class token and a non-empty lang attribute."""
        return self._query(
            root,
            lambda node: _tag_matches(node, tag_pattern)
            and has_class(node, class_name)
            and bool(node.get("lang")),
        )

    def next_element_sibling(self, node: Tag) -> Tag | None:
        """Get the first following sibling that is an element."""
        return node.find_next_sibling()

    def closest(
        self, node: Tag, tag_pattern: TagPattern, class_name: str | None = None
    ) -> Tag | None:
        """Get the nearest ancestor (excluding node) matching the tag.

        Args:
            node: Starting element.
            tag_pattern: Tag name(s) the ancestor must have.
            class_name: Optional class token the ancestor must also carry.
        """
        for ancestor in node.parents:
            if isinstance(ancestor, BeautifulSoup):
                return None
            if not _tag_matches(ancestor, tag_pattern):
                continue
            if class_name is None or has_class(ancestor, class_name):
                return ancestor
        return None
