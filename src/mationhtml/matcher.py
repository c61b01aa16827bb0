"""Selector matching.

The engine never interprets selectors itself. It asks a ``Matcher`` whether a
single element matches a single selector string. ``SoupsieveMatcher`` is the
default and uses the same CSS engine as BeautifulSoup's ``select()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import soupsieve

if TYPE_CHECKING:
    from collections.abc import Callable

    from bs4 import Tag


@runtime_checkable
class Matcher(Protocol):
    def matches(self, node: Tag, selector: str) -> bool: ...


class SoupsieveMatcher:
    """Match bs4 elements against CSS selectors.

    Selectors are compiled on first use and cached per matcher instance.
    Invalid selectors raise ``soupsieve.SelectorSyntaxError`` the first time
    they are matched.
    """

    __slots__ = ("_compiled", "flags", "namespaces")

    def __init__(self, *, namespaces: dict[str, str] | None = None, flags: int = 0) -> None:
        self.namespaces = namespaces
        self.flags = flags
        self._compiled: dict[str, Any] = {}

    def compile(self, selector: str) -> Any:
        compiled = self._compiled.get(selector)
        if compiled is None:
            compiled = soupsieve.compile(selector, namespaces=self.namespaces, flags=self.flags)
            self._compiled[selector] = compiled
        return compiled

    def matches(self, node: Tag, selector: str) -> bool:
        return bool(self.compile(selector).match(node))


class _FunctionMatcher:
    __slots__ = ("func",)

    def __init__(self, func: Callable[[Tag, str], bool]) -> None:
        self.func = func

    def matches(self, node: Tag, selector: str) -> bool:
        return bool(self.func(node, selector))


def as_matcher(matcher: Matcher | Callable[[Tag, str], bool] | None) -> Matcher:
    """Normalize a matcher argument.

    Accepts None (the default ``SoupsieveMatcher``), an object with a
    ``matches(node, selector)`` method, or a plain ``(node, selector) -> bool``
    function.
    """

    if matcher is None:
        return SoupsieveMatcher()
    if isinstance(matcher, Matcher):
        return matcher
    if callable(matcher):
        return _FunctionMatcher(matcher)
    raise TypeError(f"Unsupported matcher: {type(matcher).__name__}")
