"""``to`` template substitution."""

from __future__ import annotations

import re
from collections.abc import Mapping

_TOKEN_RE = re.compile(r"\{(?:dataset\.([\w-]+)|(content)|(spacing))\}")


def render_template(template: str, dataset: Mapping[str, str], content: str) -> str:
    """Substitute the template tokens of a ``to`` rule.

    - ``{dataset.KEY}`` becomes the element's ``KEY`` attribute, or "" when absent.
    - ``{content}`` becomes the effective content.
    - ``{spacing}`` is reserved and always becomes "".

    Substitution is a single left-to-right pass: text coming from the dataset
    or the content is never scanned for tokens again.
    """

    if "{" not in template:
        return template

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key is not None:
            return dataset.get(key, "")
        if match.group(2) is not None:
            return content
        return ""

    return _TOKEN_RE.sub(_replace, template)
