"""Build Strapi payloads from content files.

Every optional field follows one rule: a value supplied by the MDX file
overrides the CMS, and an absent value keeps what the existing document
already holds.  A blank body therefore never erases authored content.

Supported kinds:

- ``foundation-page``: title, slug, publishedAt, hero, markdown content block
- ``summit-page``: ``foundation-page`` plus ``gradient``
- ``blog``: title, description, slug, date, publishedAt, HTML content and
  optional image/taxonomy fields
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..converters.markdown_to_html import markdown_to_html
from .models import ContentFile
from .validator import (
    BlogFrontmatter,
    PageFrontmatter,
    SummitPageFrontmatter,
    parse_frontmatter,
)

Document = dict[str, Any]

PARAGRAPH_COMPONENT = "blocks.paragraph"

BLOG_OPTIONAL_FIELDS = (
    "pillar",
    "featureImage",
    "featureImageAlt",
    "thumbnailImage",
    "thumbnailImageAlt",
)


class UnsupportedContentTypeError(ValueError):
    """No payload builder exists for a content kind."""


def get_document_field(document: Document | None, key: str) -> Any:
    """Read *key* from a CMS document, falling back to ``attributes``."""
    if not document:
        return None
    value = document.get(key)
    if value is None:
        attributes = document.get("attributes")
        if isinstance(attributes, dict):
            value = attributes.get(key)
    return value


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def _preserve(
    data: dict[str, Any], key: str, existing: Document | None
) -> None:
    value = get_document_field(existing, key)
    if value is not None:
        data[key] = value


def _page_payload(
    parsed: PageFrontmatter,
    file: ContentFile,
    existing: Document | None,
    now: datetime | None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "title": parsed.title,
        "slug": parsed.slug,
        "publishedAt": _timestamp(now),
    }

    if parsed.heroTitle or parsed.heroDescription:
        data["hero"] = {
            "title": parsed.heroTitle or parsed.title,
            "description": parsed.heroDescription or "",
        }
    else:
        _preserve(data, "hero", existing)

    if file.body.strip():
        data["content"] = [
            {"__component": PARAGRAPH_COMPONENT, "content": file.body}
        ]
    else:
        _preserve(data, "content", existing)

    return data


def _summit_payload(
    parsed: SummitPageFrontmatter,
    file: ContentFile,
    existing: Document | None,
    now: datetime | None,
) -> dict[str, Any]:
    data = _page_payload(parsed, file, existing, now)
    if parsed.gradient:
        data["gradient"] = parsed.gradient
    else:
        _preserve(data, "gradient", existing)
    return data


def _blog_payload(
    parsed: BlogFrontmatter,
    file: ContentFile,
    existing: Document | None,
    now: datetime | None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "title": parsed.title,
        "description": parsed.description,
        "slug": parsed.slug,
        "date": parsed.date.isoformat(),
        "publishedAt": _timestamp(now),
    }

    for key in BLOG_OPTIONAL_FIELDS:
        value = getattr(parsed, key)
        if value:
            data[key] = value
        else:
            _preserve(data, key, existing)

    if "tags" in parsed.model_fields_set:
        data["tags"] = parsed.tags
    else:
        _preserve(data, "tags", existing)

    if file.body.strip():
        data["content"] = markdown_to_html(file.body)
    else:
        _preserve(data, "content", existing)

    return data


_BUILDERS = {
    "foundation-page": _page_payload,
    "summit-page": _summit_payload,
    "blog": _blog_payload,
}


def to_payload(
    kind: str,
    file: ContentFile,
    existing: Document | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Map a content file to the fields Strapi should store.

    Args:
        kind: Payload kind of the file's content type.
        file: The parsed file.
        existing: Current CMS document, if any, for preserve rules.
        now: Publish timestamp; defaults to the current UTC time.

    Raises:
        UnsupportedContentTypeError: If *kind* has no payload builder.
        FrontmatterValidationError: If the frontmatter fails its schema.
    """
    builder = _BUILDERS.get(kind)
    if builder is None:
        raise UnsupportedContentTypeError(f"Unsupported content type: {kind}")

    parsed = parse_frontmatter(kind, file)
    return builder(parsed, file, existing, now)
