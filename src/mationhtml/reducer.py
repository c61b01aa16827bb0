"""Depth-first reduction of a tree into text.

The walk keeps its own stack of open elements, so nesting depth is not
bounded by the interpreter's recursion limit. The only Python recursion left
is a ``format`` rule or the fallback reading ``content``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .resolver import RuleResolver
from .tree import is_element, is_text, parent_tag_name

if TYPE_CHECKING:
    from collections.abc import Collection

    from bs4 import Tag
    from bs4.element import PageElement

    from .matcher import Matcher
    from .resolver import Resolution
    from .rules import Formatter, Rule


DEFAULT_PRESERVE_WHITESPACE_TAGS = frozenset({"pre"})

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")
_COLLAPSIBLE = re.compile(r"[\t\n\r\f]| [ \t\n\r\f]")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of HTML whitespace characters to a single space.

    Leading and trailing whitespace is collapsed, not trimmed.
    """

    if _COLLAPSIBLE.search(text) is None:
        return text
    return _WHITESPACE_RUN.sub(" ", text)


class _Frame:
    """An element whose children are being reduced."""

    __slots__ = ("children", "depth", "index", "parts", "resolution")

    def __init__(self, node: Tag, depth: int, resolution: Resolution | None) -> None:
        # Snapshot first: format callbacks may mutate the live tree.
        self.children = tuple(node.children)
        self.depth = depth
        self.index = 0
        self.parts: list[str] = []
        self.resolution = resolution


class TreeReducer:
    """Reduce nodes to strings for one ``convert`` call.

    The reducer holds its own copies of the registry state so a conversion
    is unaffected by registrations made while it runs.
    """

    __slots__ = (
        "ignore_selectors",
        "matcher",
        "normalize_whitespace",
        "preserve_whitespace_tags",
        "resolver",
    )

    def __init__(
        self,
        *,
        rules: tuple[Rule, ...],
        matcher: Matcher,
        ignore_selectors: tuple[str, ...] = (),
        fallback: Formatter | None = None,
        normalize_whitespace: bool = True,
        preserve_whitespace_tags: Collection[str] = DEFAULT_PRESERVE_WHITESPACE_TAGS,
    ) -> None:
        self.matcher = matcher
        self.ignore_selectors = ignore_selectors
        self.normalize_whitespace = bool(normalize_whitespace)
        self.preserve_whitespace_tags = frozenset(str(t).lower() for t in preserve_whitespace_tags)
        self.resolver = RuleResolver(self, rules=rules, fallback=fallback)

    def reduce(self, node: PageElement, depth: int) -> str:
        """Return the contribution of ``node``, a child of an element at ``depth``."""

        if is_text(node):
            return self.reduce_text(node)
        if is_element(node):
            if self.is_ignored(node):
                return ""
            return self.resolver.resolve(node, depth + 1)
        return ""

    def reduce_children(self, node: Tag, depth: int) -> str:
        """Return the reduced children of ``node``, an element at ``depth``.

        Elements that need their children before producing output are pushed
        on the stack and finished after their last child. Elements whose
        first rule is a ``format`` rule (or that go to the fallback) are
        finished on the spot, and their children are reduced only if the
        callable reads ``content``.
        """

        resolver = self.resolver
        stack = [_Frame(node, depth, None)]

        while True:
            frame = stack[-1]
            if frame.index < len(frame.children):
                child = frame.children[frame.index]
                frame.index += 1
                if is_text(child):
                    frame.parts.append(self.reduce_text(child))
                elif is_element(child) and not self.is_ignored(child):
                    resolution = resolver.plan(child, frame.depth + 1)
                    if resolution.needs_children:
                        stack.append(_Frame(child, resolution.depth, resolution))
                    else:
                        frame.parts.append(resolver.finish(resolution))
                continue

            stack.pop()
            text = "".join(frame.parts)
            if frame.resolution is None:
                return text
            stack[-1].parts.append(resolver.finish(frame.resolution, text))

    def reduce_text(self, node: PageElement) -> str:
        text = str(node)
        if not self.normalize_whitespace or parent_tag_name(node) in self.preserve_whitespace_tags:
            return text
        return collapse_whitespace(text)

    def is_ignored(self, node: Tag) -> bool:
        matches = self.matcher.matches
        return any(matches(node, selector) for selector in self.ignore_selectors)
