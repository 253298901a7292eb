"""Frontmatter schemas and validation.

Each payload kind has a pydantic schema.  Validation runs against the
raw frontmatter with the resolved slug injected, so a slug derived from
the filename satisfies the ``slug`` requirement.  Kinds without a schema
pass every file through.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import Annotated, NamedTuple

from pydantic import BaseModel, StringConstraints, ValidationError

from .models import ContentFile, FileValidationError

logger = logging.getLogger(__name__)

NonEmptyStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1)
]


class FrontmatterValidationError(ValueError):
    """Frontmatter failed its schema.

    Attributes:
        errors: One ``<field>: <message>`` string per violation.
    """

    def __init__(self, slug: str, errors: list[str]) -> None:
        self.slug = slug
        self.errors = errors
        super().__init__(
            f"Invalid frontmatter for '{slug}': " + "; ".join(errors)
        )


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


class PageFrontmatter(BaseModel):
    slug: NonEmptyStr
    title: NonEmptyStr
    heroTitle: str | None = None
    heroDescription: str | None = None

    model_config = {"extra": "allow"}


class SummitPageFrontmatter(PageFrontmatter):
    gradient: str | None = None


class BlogFrontmatter(BaseModel):
    slug: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    date: datetime.date
    pillar: str | None = None
    featureImage: str | None = None
    featureImageAlt: str | None = None
    thumbnailImage: str | None = None
    thumbnailImageAlt: str | None = None
    tags: list[str] = []

    model_config = {"extra": "allow"}


SCHEMAS: dict[str, type[BaseModel]] = {
    "foundation-page": PageFrontmatter,
    "summit-page": SummitPageFrontmatter,
    "blog": BlogFrontmatter,
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationOutcome(NamedTuple):
    valid: list[ContentFile]
    invalid: list[FileValidationError]


def format_errors(exc: ValidationError) -> list[str]:
    """Render pydantic errors as ``dotted.path: message`` strings."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if location:
            messages.append(f"{location}: {error['msg']}")
        else:
            messages.append(error["msg"])
    return messages


def parse_frontmatter(kind: str, file: ContentFile) -> BaseModel | None:
    """Validate a file against its kind's schema.

    Returns:
        The validated model, or None when the kind has no schema.

    Raises:
        FrontmatterValidationError: If the frontmatter is unparseable or
            violates the schema.
    """
    if file.parse_error:
        raise FrontmatterValidationError(file.slug, [file.parse_error])

    schema = SCHEMAS.get(kind)
    if schema is None:
        return None

    try:
        return schema.model_validate({**file.frontmatter, "slug": file.slug})
    except ValidationError as exc:
        raise FrontmatterValidationError(file.slug, format_errors(exc)) from exc


def validate_file(kind: str, file: ContentFile) -> FileValidationError | None:
    try:
        parse_frontmatter(kind, file)
    except FrontmatterValidationError as exc:
        return FileValidationError(
            path=file.path,
            slug=file.slug,
            locale=file.locale,
            errors=exc.errors,
        )
    return None


def validate_files(
    kind: str, files: Iterable[ContentFile]
) -> ValidationOutcome:
    """Partition *files* into valid files and per-file diagnostics."""
    outcome = ValidationOutcome(valid=[], invalid=[])
    for file in files:
        error = validate_file(kind, file)
        if error is None:
            outcome.valid.append(file)
        else:
            outcome.invalid.append(error)
    return outcome
