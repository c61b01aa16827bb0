"""Adapters between the engine and BeautifulSoup trees."""

from __future__ import annotations

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString

DEFAULT_PARSER = "html5lib"


def parse_html(html: str, parser: str = DEFAULT_PARSER) -> BeautifulSoup:
    """Parse ``html`` into a BeautifulSoup tree.

    With the default html5lib tree builder the result has the shape the
    HTML5 parsing algorithm produces: ``html``, ``head`` and ``body`` always
    exist. Multi-valued attributes such as ``class`` are kept as plain
    strings.
    """

    return BeautifulSoup(html, parser, multi_valued_attributes=None)


def conversion_root(soup: BeautifulSoup, *, whole_document: bool = False) -> Tag:
    if whole_document:
        root = soup.html
    else:
        root = soup.body
    return root if root is not None else soup


def is_element(node: PageElement) -> bool:
    return isinstance(node, Tag)


def is_text(node: PageElement) -> bool:
    # Comments, doctypes, CDATA and processing instructions are all
    # PreformattedString subclasses.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def element_dataset(node: Tag) -> dict[str, str]:
    dataset: dict[str, str] = {}
    for name, value in node.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        dataset[name] = "" if value is None else str(value)
    return dataset


def parent_tag_name(node: PageElement) -> str | None:
    """Tag name of the nearest element ancestor, or None for detached nodes."""

    parent = node.parent
    return parent.name if parent is not None else None
