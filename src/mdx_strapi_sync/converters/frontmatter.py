"""YAML frontmatter parsing for MDX files.

The frontmatter block is the YAML between two ``---`` lines at the very
top of a file.  It is loaded with ``yaml.BaseLoader`` so every scalar is
kept as the raw string the author wrote (``order: 01`` stays ``"01"``,
``date: 2025-01-15`` stays ``"2025-01-15"``); sequences and mappings keep
their shape.  Only the keys named in ``numeric_fields`` are coerced to
``int``, and only when the value is all digits.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import yaml

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$",
    re.DOTALL | re.MULTILINE,
)

_DIGITS = re.compile(r"^\d+$")


class FrontmatterParseError(ValueError):
    """The frontmatter block exists but is not a YAML mapping."""


@dataclass
class ParsedMDX:
    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def _coerce_numeric(
    frontmatter: dict[str, Any], numeric_fields: Iterable[str]
) -> dict[str, Any]:
    for key in numeric_fields:
        value = frontmatter.get(key)
        if isinstance(value, str) and _DIGITS.match(value):
            frontmatter[key] = int(value)
    return frontmatter


def parse_mdx(text: str, numeric_fields: Iterable[str] = ()) -> ParsedMDX:
    """Split MDX source into frontmatter and trimmed body.

    A file without a frontmatter block yields empty frontmatter and the
    whole text as body.

    Args:
        text: Full file content.
        numeric_fields: Frontmatter keys to coerce to ``int``.

    Returns:
        ``ParsedMDX`` with the frontmatter mapping and the body.

    Raises:
        FrontmatterParseError: If the block is not valid YAML or its root
            is not a mapping.
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return ParsedMDX(frontmatter={}, body=text.strip())

    try:
        data = yaml.load(match.group(1), Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterParseError(f"Invalid YAML syntax: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterParseError(
            f"Frontmatter must be a YAML mapping, got {type(data).__name__}"
        )

    return ParsedMDX(
        frontmatter=_coerce_numeric(data, numeric_fields),
        body=text[match.end() :].strip(),
    )
