"""Registration-time state: rules, placeholders, ignore selectors, fallback.

Every registration call validates its whole argument before mutating
anything, so a batch containing one bad item leaves the registry untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from .errors import InvalidCallbackError, InvalidSelectorListError
from .rules import PlaceholderRule, Rule, coerce_placeholder, coerce_rule

if TYPE_CHECKING:
    from .rules import Formatter


def _as_batch(items: object) -> list[object]:
    # A single rule may be a mapping, which is itself iterable.
    if isinstance(items, (Rule, PlaceholderRule, Mapping)):
        return [items]
    if isinstance(items, Iterable) and not isinstance(items, (str, bytes)):
        return list(items)
    return [items]


class RuleRegistry:
    __slots__ = ("_fallback", "_ignore_selectors", "_placeholders", "_rules")

    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._placeholders: dict[str, PlaceholderRule] = {}
        self._ignore_selectors: dict[str, None] = {}
        self._fallback: Formatter | None = None

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def placeholders(self) -> tuple[PlaceholderRule, ...]:
        return tuple(self._placeholders.values())

    @property
    def ignore_selectors(self) -> tuple[str, ...]:
        return tuple(self._ignore_selectors)

    @property
    def fallback(self) -> Formatter | None:
        return self._fallback

    def register(self, rules: Rule | Mapping[str, object] | Iterable[Rule | Mapping[str, object]]) -> None:
        validated = [coerce_rule(item) for item in _as_batch(rules)]
        self._rules.extend(validated)

    def register_placeholder(
        self,
        placeholders: PlaceholderRule | Mapping[str, str] | Iterable[PlaceholderRule | Mapping[str, str]],
    ) -> None:
        """Register literal replacements for the final output.

        Registering a source text that is already known replaces its target
        in place: the placeholder keeps its original position in the order.
        """

        validated = [coerce_placeholder(item) for item in _as_batch(placeholders)]
        for placeholder in validated:
            self._placeholders[placeholder.source] = placeholder

    def set_fallback(self, callback: Formatter) -> None:
        if not callable(callback):
            raise InvalidCallbackError("Given callback should be a function.")
        self._fallback = callback

    def clear_fallback(self) -> None:
        self._fallback = None

    def set_ignore_selectors(self, selectors: Iterable[str]) -> None:
        if isinstance(selectors, (str, bytes)) or not isinstance(selectors, Iterable):
            raise InvalidSelectorListError("Given selectors should be a list of strings.")
        selectors = list(selectors)
        for item in selectors:
            if not isinstance(item, str):
                raise InvalidSelectorListError("Each selector should be a string.")
        for item in selectors:
            self._ignore_selectors.setdefault(item, None)
