"""Conversion and placeholder rules.

A conversion rule pairs a selector with either a ``to`` template or a
``format`` callable. Rules are immutable; the registry keeps them in the
order they were registered and that order decides how matching rules chain.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import InvalidPlaceholderError, InvalidRuleError

if TYPE_CHECKING:
    from typing import Protocol

    from .context import ConversionContext

    class Formatter(Protocol):
        """Produce the text for one element.

        Returning None signals "no content" and aborts the conversion.
        """

        def __call__(self, context: ConversionContext) -> str | None: ...


@dataclass(frozen=True, slots=True)
class Rule:
    """Convert elements matching ``selector``.

    Exactly one of ``to`` (a template using ``{content}``, ``{dataset.KEY}``
    and ``{spacing}``) or ``format`` (a callable receiving a
    ``ConversionContext``) must be given.
    """

    selector: str
    to: str | None
    format: Formatter | None
    enabled: bool

    def __init__(
        self,
        selector: str,
        to: str | None = None,
        *,
        format: Formatter | None = None,  # noqa: A002
        enabled: bool = True,
    ) -> None:
        if not isinstance(selector, str) or not selector:
            raise InvalidRuleError('Invalid rule: Must have a non-empty "selector".')

        has_to = to is not None
        has_format = format is not None
        if has_to == has_format:
            raise InvalidRuleError(
                f'Invalid rule for "{selector}": Must have exactly one of "format" or "to".'
            )
        if has_to and (not isinstance(to, str) or not to):
            raise InvalidRuleError(f'Invalid rule for "{selector}": "to" must be a non-empty string.')
        if has_format and not callable(format):
            raise InvalidRuleError(f'Invalid rule for "{selector}": "format" must be callable.')

        object.__setattr__(self, "selector", selector)
        object.__setattr__(self, "to", to)
        object.__setattr__(self, "format", format)
        object.__setattr__(self, "enabled", bool(enabled))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Rule:
        unknown = set(data) - {"selector", "to", "format", "enabled"}
        if unknown:
            raise InvalidRuleError(f"Invalid rule: unknown keys {sorted(unknown)!r}.")
        # Falsy values count as absent, like the object-literal form.
        return cls(
            data.get("selector"),  # type: ignore[arg-type]
            data.get("to") or None,
            format=data.get("format") or None,
            enabled=data.get("enabled", True),
        )


@dataclass(frozen=True, slots=True)
class PlaceholderRule:
    """Literal find/replace applied once to the final converted string."""

    source: str
    target: str

    def __init__(self, source: str, target: str) -> None:
        if not isinstance(source, str) or not isinstance(target, str):
            raise InvalidPlaceholderError('Invalid placeholder: "from" and "to" must both be strings.')
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "target", target)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PlaceholderRule:
        if "from" not in data or "to" not in data:
            raise InvalidPlaceholderError('Invalid placeholder: Must have "from" and "to".')
        return cls(data["from"], data["to"])

    def apply(self, text: str) -> str:
        if not self.source:
            return text
        return text.replace(self.source, self.target)


def coerce_rule(item: object) -> Rule:
    if isinstance(item, Rule):
        return item
    if isinstance(item, Mapping):
        return Rule.from_mapping(item)
    raise InvalidRuleError(f"Invalid rule: expected a Rule or a mapping, got {type(item).__name__}.")


def coerce_placeholder(item: object) -> PlaceholderRule:
    if isinstance(item, PlaceholderRule):
        return item
    if isinstance(item, Mapping):
        return PlaceholderRule.from_mapping(item)
    raise InvalidPlaceholderError(
        f"Invalid placeholder: expected a PlaceholderRule or a mapping, got {type(item).__name__}."
    )
