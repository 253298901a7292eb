"""One-way MDX -> Strapi content sync engine.

Modules:

- ``scanner``      -- ``ContentScanner``: discover default-locale and locale
  files for a content type.
- ``validator``    -- Frontmatter schemas and ``validate_files``.
- ``locale_match`` -- ``ProcessedSlugs`` and ``find_matches``.
- ``transformer``  -- ``to_payload``: file -> Strapi fields with
  preserve-if-absent rules.
- ``orchestrator`` -- ``SyncOrchestrator``: create/update/delete per
  content type, with dry-run support.
- ``models``       -- ``ContentFile``, ``LocaleMatch``,
  ``FileValidationError``, ``SyncResult``, ``SyncReport``.
- ``reporter``     -- Human-readable and JSON report formatting.

Usage example
-------------
::

    import asyncio
    from pathlib import Path
    from mdx_strapi_sync.config_schema import default_content_types
    from mdx_strapi_sync.sync import SyncOrchestrator, format_sync_report

    orchestrator = SyncOrchestrator(
        client=strapi_client,        # StrapiClient instance
        content_types=default_content_types(),
        project_root=Path("."),
        dry_run=True,
    )
    report = asyncio.run(orchestrator.sync_all())
    print(format_sync_report(report))
"""

from .locale_match import ProcessedSlugs, base_locale, find_matches
from .models import (
    ContentFile,
    FileValidationError,
    LocaleMatch,
    SyncReport,
    SyncResult,
)
from .orchestrator import SyncOrchestrator
from .reporter import format_sync_report, report_to_json
from .scanner import ContentScanner
from .transformer import UnsupportedContentTypeError, to_payload
from .validator import FrontmatterValidationError, validate_files

__all__ = [
    "ContentFile",
    "ContentScanner",
    "FileValidationError",
    "FrontmatterValidationError",
    "LocaleMatch",
    "ProcessedSlugs",
    "SyncOrchestrator",
    "SyncReport",
    "SyncResult",
    "UnsupportedContentTypeError",
    "base_locale",
    "find_matches",
    "format_sync_report",
    "report_to_json",
    "to_payload",
    "validate_files",
]
