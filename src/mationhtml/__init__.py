from .context import ConversionContext
from .engine import MationHTML
from .errors import (
    FallbackMustReturnContentError,
    FormatMustReturnContentError,
    InvalidCallbackError,
    InvalidInputError,
    InvalidPlaceholderError,
    InvalidRuleError,
    InvalidSelectorListError,
    MationHTMLError,
    RegistrationError,
    RuleContentError,
)
from .matcher import Matcher, SoupsieveMatcher
from .reducer import TreeReducer, collapse_whitespace
from .registry import RuleRegistry
from .rules import PlaceholderRule, Rule
from .template import render_template
from .tree import parse_html

__all__ = [
    "ConversionContext",
    "FallbackMustReturnContentError",
    "FormatMustReturnContentError",
    "InvalidCallbackError",
    "InvalidInputError",
    "InvalidPlaceholderError",
    "InvalidRuleError",
    "InvalidSelectorListError",
    "Matcher",
    "MationHTML",
    "MationHTMLError",
    "PlaceholderRule",
    "RegistrationError",
    "Rule",
    "RuleContentError",
    "RuleRegistry",
    "SoupsieveMatcher",
    "TreeReducer",
    "collapse_whitespace",
    "parse_html",
    "render_template",
]
