from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from bs4 import Tag
    from bs4.element import PageElement

    from .reducer import TreeReducer


class ConversionContext:
    """What a ``format`` rule or the fallback sees for one element.

    ``content`` is computed on first access. When an earlier rule in the same
    chain already produced output, ``content`` is that output instead of the
    reduced children.
    """

    __slots__ = ("_content", "_load_content", "_reducer", "dataset", "depth", "node")

    def __init__(
        self,
        node: Tag,
        dataset: dict[str, str],
        depth: int,
        *,
        reducer: TreeReducer,
        load_content: Callable[[], str],
        content: str | None = None,
    ) -> None:
        self.node = node
        self.dataset = dataset
        self.depth = depth
        self._reducer = reducer
        self._load_content = load_content
        self._content = content

    @property
    def content(self) -> str:
        if self._content is None:
            self._content = self._load_content()
        return self._content

    def convert(self, node: PageElement | None = None) -> str:
        """Reduce ``node`` as if it were a child of this element.

        Without an argument, returns this element's reduced children, ignoring
        any output of earlier rules in the chain.
        """

        if node is None:
            return self._load_content()
        return self._reducer.reduce(node, self.depth)

    def __repr__(self) -> str:
        return f"ConversionContext(<{self.node.name}>, depth={self.depth})"
