"""Pydantic models for the MDX -> Strapi sync engine.

Defines the data contracts shared by the sync modules:

- ``ContentFile``: One parsed MDX file on disk.
- ``LocaleMatch``: A default-locale file paired with one of its translations.
- ``FileValidationError``: Frontmatter diagnostics for one invalid file.
- ``SyncResult``: Created/updated/deleted/error counters.
- ``SyncReport``: Aggregate results for a full sync run.

Everything except the ``SyncResult`` accumulator is frozen.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ContentFile(BaseModel):
    """One MDX file discovered by the scanner.

    Attributes:
        path: Absolute file path.
        slug: Frontmatter ``slug``, else the filename stem with any
            ``YYYY-MM-DD-`` prefix removed.
        locale: Frontmatter ``locale``, else the locale directory name,
            else the default locale.
        is_localization: True for files found under a locale directory.
        localizes: Slug of the default-locale file this one translates.
        frontmatter: Raw frontmatter mapping.
        body: Trimmed content after the frontmatter block.
        parse_error: Set when the frontmatter block could not be parsed.
    """

    path: Path
    slug: str
    locale: str
    is_localization: bool = False
    localizes: str | None = None
    frontmatter: dict[str, Any] = Field(default_factory=dict)
    body: str = ""
    parse_error: str | None = None

    model_config = {"frozen": True}


class LocaleMatch(BaseModel):
    """A default-locale file and the locale file that translates it.

    Attributes:
        default_file: The default-locale file.
        locale_file: The matched locale variant.
        reason: Why the match fired (logged only).
    """

    default_file: ContentFile
    locale_file: ContentFile
    reason: str

    model_config = {"frozen": True}


class FileValidationError(BaseModel):
    """Frontmatter diagnostics for one file.

    Attributes:
        path: File that failed validation.
        slug: Slug the file resolved to.
        locale: Locale the file resolved to.
        errors: One ``<field>: <message>`` string per violation.
    """

    path: Path
    slug: str
    locale: str
    errors: list[str]

    model_config = {"frozen": True}


class SyncResult(BaseModel):
    """Running counters for one content type (or a whole run)."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: int = 0

    def add(self, other: SyncResult) -> None:
        """Add *other*'s counters into this result in place."""
        self.created += other.created
        self.updated += other.updated
        self.deleted += other.deleted
        self.errors += other.errors


class SyncReport(BaseModel):
    """Aggregate report for a full sync run.

    Attributes:
        dry_run: Whether this was a dry-run (no changes applied).
        started_at: ISO 8601 timestamp when sync started.
        completed_at: ISO 8601 timestamp when sync completed.
        results: Counters per content-type key, in sync order.
        invalid_files: Every file rejected by frontmatter validation.
    """

    dry_run: bool = False
    started_at: str
    completed_at: str | None = None
    results: dict[str, SyncResult] = Field(default_factory=dict)
    invalid_files: list[FileValidationError] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def total(self) -> SyncResult:
        """Counters summed across every content type."""
        total = SyncResult()
        for result in self.results.values():
            total.add(result)
        return total
