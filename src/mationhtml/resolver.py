"""Rule resolution for a single element.

Every enabled rule whose selector matches the element runs, in registration
order. Each rule sees the previous rule's output as its ``content``, so
rules compose into a pipeline. When nothing matches, the fallback decides
the output, or the reduced children pass through unchanged.

Resolution happens in two steps. ``plan()`` looks up the matching rules when
the element is first visited. ``finish()`` produces the text, either from
children the reducer already reduced or by reducing them on demand.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .context import ConversionContext
from .errors import FallbackMustReturnContentError, FormatMustReturnContentError
from .template import render_template
from .tree import element_dataset

if TYPE_CHECKING:
    from bs4 import Tag

    from .reducer import TreeReducer
    from .rules import Formatter, Rule

logger = logging.getLogger(__name__)


class Resolution:
    """Matching rules for one element visit.

    ``needs_children`` is true when the output cannot be produced without the
    reduced children: passthrough, or a chain starting with a ``to`` rule.
    """

    __slots__ = ("children_text", "dataset", "depth", "matching", "needs_children", "node", "reducer")

    def __init__(
        self,
        node: Tag,
        depth: int,
        dataset: dict[str, str],
        matching: list[Rule],
        *,
        reducer: TreeReducer,
        needs_children: bool,
    ) -> None:
        self.node = node
        self.depth = depth
        self.dataset = dataset
        self.matching = matching
        self.reducer = reducer
        self.needs_children = needs_children
        self.children_text: str | None = None

    def children(self) -> str:
        if self.children_text is None:
            self.children_text = self.reducer.reduce_children(self.node, self.depth)
        return self.children_text


class RuleResolver:
    __slots__ = ("fallback", "reducer", "rules")

    def __init__(
        self,
        reducer: TreeReducer,
        *,
        rules: tuple[Rule, ...],
        fallback: Formatter | None = None,
    ) -> None:
        self.reducer = reducer
        self.rules = tuple(rule for rule in rules if rule.enabled)
        self.fallback = fallback

    def matching_rules(self, node: Tag) -> list[Rule]:
        matches = self.reducer.matcher.matches
        return [rule for rule in self.rules if matches(node, rule.selector)]

    def plan(self, node: Tag, depth: int) -> Resolution:
        matching = self.matching_rules(node)
        if matching:
            needs_children = matching[0].format is None
        else:
            needs_children = self.fallback is None
        return Resolution(
            node,
            depth,
            element_dataset(node),
            matching,
            reducer=self.reducer,
            needs_children=needs_children,
        )

    def resolve(self, node: Tag, depth: int) -> str:
        """Return the text for ``node``, an element at ``depth``."""

        return self.finish(self.plan(node, depth))

    def finish(self, resolution: Resolution, children_text: str | None = None) -> str:
        if children_text is not None:
            resolution.children_text = children_text
        node = resolution.node

        if resolution.matching:
            return self._apply_chain(resolution)

        if self.fallback is not None:
            logger.debug("No rule for <%s> at depth %d, using fallback", node.name, resolution.depth)
            context = ConversionContext(
                node,
                resolution.dataset,
                resolution.depth,
                reducer=self.reducer,
                load_content=resolution.children,
            )
            result = self.fallback(context)
            if result is None:
                raise FallbackMustReturnContentError(node=node)
            return result if isinstance(result, str) else str(result)

        logger.debug("No rule for <%s> at depth %d, passing content through", node.name, resolution.depth)
        return resolution.children()

    def _apply_chain(self, resolution: Resolution) -> str:
        accumulated: str | None = None

        for rule in resolution.matching:
            if rule.format is not None:
                context = ConversionContext(
                    resolution.node,
                    resolution.dataset,
                    resolution.depth,
                    reducer=self.reducer,
                    load_content=resolution.children,
                    content=accumulated,
                )
                result = rule.format(context)
                if result is None:
                    raise FormatMustReturnContentError(rule.selector, node=resolution.node)
                accumulated = result if isinstance(result, str) else str(result)
                continue

            content = accumulated if accumulated is not None else resolution.children()
            accumulated = render_template(rule.to, resolution.dataset, content)

        return accumulated
