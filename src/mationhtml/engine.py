"""Public conversion entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import InvalidInputError
from .matcher import as_matcher
from .reducer import DEFAULT_PRESERVE_WHITESPACE_TAGS, TreeReducer
from .registry import RuleRegistry
from .tree import DEFAULT_PARSER, conversion_root, parse_html

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping

    from bs4 import Tag

    from .matcher import Matcher
    from .rules import Formatter, PlaceholderRule, Rule

logger = logging.getLogger(__name__)


class MationHTML:
    """Convert HTML into text using registered rules.

    Example::

        converter = MationHTML()
        converter.register([
            Rule("strong", to="**{content}**"),
            Rule("a", to="[{content}]({dataset.href})"),
        ])
        converter.convert('<p>Read <a href="/docs"><strong>this</strong></a></p>')
        # 'Read [**this**](/docs)'

    Keyword arguments set the defaults for every ``convert()`` call:

    - ``matcher``: decides whether an element matches a selector. Defaults to
      a ``SoupsieveMatcher``; any ``(node, selector) -> bool`` function works.
    - ``parser``: BeautifulSoup tree builder used by ``convert()``.
    - ``normalize_whitespace``: collapse whitespace runs in text nodes.
    - ``whole_document``: convert the children of ``<html>`` instead of
      ``<body>``.
    - ``strip``: trim leading/trailing whitespace from the final result.
    - ``preserve_whitespace_tags``: text below these tags is never collapsed.
    """

    __slots__ = (
        "matcher",
        "normalize_whitespace",
        "parser",
        "preserve_whitespace_tags",
        "registry",
        "strip",
        "whole_document",
    )

    def __init__(
        self,
        *,
        matcher: Matcher | Callable[[Tag, str], bool] | None = None,
        parser: str = DEFAULT_PARSER,
        normalize_whitespace: bool = True,
        whole_document: bool = False,
        strip: bool = False,
        preserve_whitespace_tags: Collection[str] = DEFAULT_PRESERVE_WHITESPACE_TAGS,
    ) -> None:
        self.matcher = as_matcher(matcher)
        self.parser = parser
        self.normalize_whitespace = bool(normalize_whitespace)
        self.whole_document = bool(whole_document)
        self.strip = bool(strip)
        self.preserve_whitespace_tags = frozenset(str(t).lower() for t in preserve_whitespace_tags)
        self.registry = RuleRegistry()

    # -----------------
    # Configuration
    # -----------------

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self.registry.rules

    @property
    def placeholders(self) -> tuple[PlaceholderRule, ...]:
        return self.registry.placeholders

    def register(self, rules: Rule | Mapping[str, object] | Iterable[Rule | Mapping[str, object]]) -> None:
        self.registry.register(rules)

    def register_placeholder(
        self,
        placeholders: PlaceholderRule | Mapping[str, str] | Iterable[PlaceholderRule | Mapping[str, str]],
    ) -> None:
        self.registry.register_placeholder(placeholders)

    def set_fallback(self, callback: Formatter) -> None:
        self.registry.set_fallback(callback)

    def clear_fallback(self) -> None:
        self.registry.clear_fallback()

    def set_ignore_selectors(self, selectors: Iterable[str]) -> None:
        self.registry.set_ignore_selectors(selectors)

    @property
    def no_rule_fallback(self) -> Formatter | None:
        return self.registry.fallback

    @no_rule_fallback.setter
    def no_rule_fallback(self, callback: Formatter) -> None:
        self.registry.set_fallback(callback)

    @property
    def ignore_selectors(self) -> tuple[str, ...]:
        return self.registry.ignore_selectors

    @ignore_selectors.setter
    def ignore_selectors(self, selectors: Iterable[str]) -> None:
        # Adds to the existing selectors, like set_ignore_selectors().
        self.registry.set_ignore_selectors(selectors)

    # -----------------
    # Conversion
    # -----------------

    def convert(
        self,
        html: str,
        *,
        whole_document: bool | None = None,
        normalize_whitespace: bool | None = None,
        strip: bool | None = None,
    ) -> str:
        """Parse ``html`` and convert the body (or the whole document)."""

        if not isinstance(html, str):
            raise InvalidInputError("Input must be a string.")
        if whole_document is None:
            whole_document = self.whole_document

        logger.debug("Parsing %d characters with %s", len(html), self.parser)
        soup = parse_html(html, self.parser)
        root = conversion_root(soup, whole_document=whole_document)
        return self.convert_tree(root, normalize_whitespace=normalize_whitespace, strip=strip)

    def convert_tree(
        self,
        root: Tag,
        *,
        normalize_whitespace: bool | None = None,
        strip: bool | None = None,
    ) -> str:
        """Convert the children of an already parsed node.

        ``root`` itself is not matched against any rule.
        """

        if normalize_whitespace is None:
            normalize_whitespace = self.normalize_whitespace
        if strip is None:
            strip = self.strip

        registry = self.registry
        placeholders = registry.placeholders
        reducer = TreeReducer(
            rules=registry.rules,
            matcher=self.matcher,
            ignore_selectors=registry.ignore_selectors,
            fallback=registry.fallback,
            normalize_whitespace=normalize_whitespace,
            preserve_whitespace_tags=self.preserve_whitespace_tags,
        )

        logger.debug(
            "Converting <%s> with %d rules, normalize_whitespace=%s",
            root.name,
            len(reducer.resolver.rules),
            normalize_whitespace,
        )
        result = reducer.reduce_children(root, 0)

        for placeholder in placeholders:
            result = placeholder.apply(result)

        if strip:
            result = result.strip()

        logger.debug("Converted <%s> into %d characters", root.name, len(result))
        return result
