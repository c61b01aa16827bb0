"""Exceptions raised by MationHTML.

Registration errors are raised synchronously by the ``register*`` / ``set_*``
calls. Content errors are raised from inside ``convert()`` when a caller
supplied callable misbehaves; they abort the whole conversion.
"""

from __future__ import annotations

from typing import Any


class MationHTMLError(Exception):
    """Base class for every error raised by this package."""


class InvalidInputError(MationHTMLError, TypeError):
    """``convert()`` was called with something other than a string."""


class RegistrationError(MationHTMLError, ValueError):
    """A configuration call received a malformed argument."""


class InvalidRuleError(RegistrationError):
    pass


class InvalidPlaceholderError(RegistrationError):
    pass


class InvalidCallbackError(RegistrationError):
    pass


class InvalidSelectorListError(RegistrationError):
    pass


class RuleContentError(MationHTMLError):
    """A rule or fallback callable returned no content."""

    def __init__(self, message: str, *, node: Any | None = None) -> None:
        super().__init__(message)
        self.node = node


class FormatMustReturnContentError(RuleContentError):
    def __init__(self, selector: str, *, node: Any | None = None) -> None:
        super().__init__(f'The format handler for the selector "{selector}" must return content.', node=node)
        self.selector = selector


class FallbackMustReturnContentError(RuleContentError):
    def __init__(self, *, node: Any | None = None) -> None:
        super().__init__("The no-rule fallback must return content.", node=node)
