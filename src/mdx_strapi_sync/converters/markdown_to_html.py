"""Markdown to HTML conversion using mistune."""

import mistune

# Raw HTML and JSX-style tags in MDX bodies pass through untouched.
_markdown = mistune.create_markdown(
    escape=False,
    plugins=["table", "strikethrough", "url"],
)


def markdown_to_html(markdown_text: str) -> str:
    """
    Convert Markdown text to HTML.

    Args:
        markdown_text: Markdown formatted text

    Returns:
        HTML string without a trailing newline
    """
    if not markdown_text.strip():
        return ""
    result: str = _markdown(markdown_text)  # type: ignore[assignment]
    return result.rstrip("\n")
