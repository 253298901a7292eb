"""Conversion of MDX source text into sync-ready parts."""

from .frontmatter import FrontmatterParseError, ParsedMDX, parse_mdx
from .markdown_to_html import markdown_to_html

__all__ = [
    "FrontmatterParseError",
    "ParsedMDX",
    "markdown_to_html",
    "parse_mdx",
]
