"""String helpers used by workflow steps."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")
_PLACEHOLDER_RE = re.compile(r"{{\s*([\w.]+)\s*}}")


def strip_html(html: str) -> str:
    """Extract the visible text of an HTML page.

    Script and style elements are dropped, character references are decoded and
    runs of whitespace collapse to a single space.
    """

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return _WHITESPACE_RE.sub(" ", soup.get_text(" ")).strip()


def render_template(template: str, context: Mapping[str, object]) -> str:
    """Substitute `{{field}}` placeholders from the context.

    Dotted names are looked up as literal keys, not nested paths. Missing and
    null values render as the empty string.
    """

    def _replace(match: re.Match[str]) -> str:
        value = context.get(match.group(1))
        return "" if value is None else _to_text(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def _to_text(value: object) -> str:
    # JSON spelling for non-string values: true/false, 2 rather than 2.0, {"a": 1}.
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (bool, dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


TRANSFORMS = {
    "uppercase": str.upper,
    "lowercase": str.lower,
    "trim": str.strip,
}
