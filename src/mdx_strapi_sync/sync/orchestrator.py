"""Sync orchestrator: reconcile MDX files with Strapi documents.

For each content type the ``SyncOrchestrator``:

1. Scans and validates the files.  Every scanned file, valid or not,
   keeps its document from being deleted; invalid files count as errors.
2. Creates or updates each default-locale document, then creates or
   updates the localizations matched to it via ``localizes``.
3. Deletes documents in any locale in use that have no file on disk.
4. Retries locale files left unmatched against the default-locale
   documents already in Strapi.

Errors are isolated per file, per deleted document and per content type:
one failure is logged and counted, and the run continues.  Every mutating
client call is gated on ``dry_run``; reads still happen so the dry-run
log is a faithful preview.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config_schema import ContentTypeConfig
from ..core.async_utils import run_sync
from ..core.client import CMSClient
from .locale_match import ProcessedSlugs, base_locale, find_matches
from .models import ContentFile, FileValidationError, SyncReport, SyncResult
from .scanner import ContentScanner
from .transformer import to_payload
from .validator import validate_files

logger = logging.getLogger(__name__)

Document = dict[str, Any]

DRY_RUN_DOCUMENT_ID = "dry-run-id"


class SyncOrchestrator:
    """Drive MDX -> Strapi reconciliation for a set of content types.

    Args:
        client: CMS client; called through ``run_sync`` one call at a time.
        content_types: Registry of content-type key -> config, in sync order.
        project_root: Root that relative content directories resolve against.
        default_locale: Locale of the files in each base directory.
        extension: Content file extension.
        numeric_fields: Frontmatter keys coerced to ``int``.
        dry_run: Log intended mutations instead of performing them.
    """

    def __init__(
        self,
        client: CMSClient,
        content_types: Mapping[str, ContentTypeConfig],
        project_root: Path,
        default_locale: str = "en",
        extension: str = ".mdx",
        numeric_fields: Sequence[str] = ("order",),
        dry_run: bool = False,
    ) -> None:
        self.client = client
        self.content_types = dict(content_types)
        self.default_locale = default_locale
        self.dry_run = dry_run
        self.scanner = ContentScanner(
            project_root,
            default_locale=default_locale,
            extension=extension,
            numeric_fields=numeric_fields,
        )
        self.invalid_files: list[FileValidationError] = []

    # ------------------------------------------------------------------
    # Main entry points
    # ------------------------------------------------------------------

    async def sync_all(self, only: Iterable[str] | None = None) -> SyncReport:
        """Sync every registered content type (or the subset in *only*).

        A content type whose sync raises is logged and counted as one error;
        the remaining types still run.

        Raises:
            ValueError: If *only* names an unregistered content type.
        """
        names = list(self.content_types)
        if only is not None:
            selected = list(only)
            unknown = [name for name in selected if name not in self.content_types]
            if unknown:
                raise ValueError(
                    f"Unknown content type(s): {', '.join(unknown)}. "
                    f"Known: {', '.join(names)}"
                )
            names = [name for name in names if name in selected]

        started_at = datetime.now(timezone.utc).isoformat()
        self.invalid_files = []
        results: dict[str, SyncResult] = {}

        for name in names:
            result = SyncResult()
            results[name] = result
            try:
                await self.sync_content_type(name, result)
            except Exception as exc:
                logger.error("Failed to sync content type %s: %s", name, exc)
                result.errors += 1

        report = SyncReport(
            dry_run=self.dry_run,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
            results=results,
            invalid_files=list(self.invalid_files),
        )
        total = report.total
        logger.info(
            "%sSync complete: %d created, %d updated, %d deleted, %d errors",
            self._prefix,
            total.created,
            total.updated,
            total.deleted,
            total.errors,
        )
        return report

    async def sync_content_type(
        self, name: str, result: SyncResult | None = None
    ) -> SyncResult:
        """Reconcile one content type.

        Counters accumulate into *result* as work completes, so a caller
        holding it keeps the partial counts if this raises.
        """
        content_type = self.content_types[name]
        result = result if result is not None else SyncResult()
        processed = ProcessedSlugs()
        # (default slug, base locale) pairs already given a localization
        claimed: set[tuple[str, str]] = set()

        logger.info("%sSyncing %s -> %s", self._prefix, name, content_type.type_id)

        files = self.scanner.scan(content_type)
        # (base locale, slug) of every scanned file, valid or not
        on_disk = ProcessedSlugs()
        for file in files:
            on_disk.add(file.locale, file.slug)

        outcome = validate_files(content_type.kind, files)
        logger.info(
            "Found %d files for %s (%d invalid)",
            len(files),
            name,
            len(outcome.invalid),
        )

        for invalid in outcome.invalid:
            processed.add(invalid.locale, invalid.slug)
            result.errors += 1
            self.invalid_files.append(invalid)
            for message in invalid.errors:
                logger.error(
                    "Invalid frontmatter in %s (%s, %s): %s",
                    invalid.path,
                    invalid.slug,
                    invalid.locale,
                    message,
                )

        default_files = [f for f in outcome.valid if not f.is_localization]
        locale_files = [f for f in outcome.valid if f.is_localization]

        for file in default_files:
            await self._sync_default_file(
                content_type, file, locale_files, processed, claimed, result
            )

        removed = await self._delete_orphans(
            content_type, files, on_disk, result
        )
        await self._sync_unmatched_locales(
            content_type, locale_files, processed, claimed, removed, result
        )
        return result

    @property
    def _prefix(self) -> str:
        return "[DRY-RUN] " if self.dry_run else ""

    # ------------------------------------------------------------------
    # Default-locale documents
    # ------------------------------------------------------------------

    async def _sync_default_file(
        self,
        content_type: ContentTypeConfig,
        file: ContentFile,
        locale_files: list[ContentFile],
        processed: ProcessedSlugs,
        claimed: set[tuple[str, str]],
        result: SyncResult,
    ) -> None:
        processed.add(self.default_locale, file.slug)
        try:
            document = await self._upsert_default(content_type, file, result)
        except Exception as exc:
            logger.error(
                "Error processing %s (%s): %s", file.slug, file.locale, exc
            )
            result.errors += 1
            return

        if not document or not document.get("documentId"):
            logger.warning(
                "No document id for %s (%s); skipping its localizations",
                file.slug,
                file.locale,
            )
            return

        for match in find_matches(file, locale_files, processed):
            locale_file = match.locale_file
            processed.add(locale_file.locale, locale_file.slug)
            claimed.add((file.slug, base_locale(locale_file.locale)))
            logger.debug(
                "Matched %s (%s) -> %s (%s)",
                locale_file.slug,
                locale_file.locale,
                file.slug,
                match.reason,
            )
            try:
                await self._sync_localization(
                    content_type, locale_file, document, result
                )
            except Exception as exc:
                logger.error(
                    "Error processing localization %s (%s): %s",
                    locale_file.slug,
                    locale_file.locale,
                    exc,
                )
                result.errors += 1

    async def _upsert_default(
        self,
        content_type: ContentTypeConfig,
        file: ContentFile,
        result: SyncResult,
    ) -> Document | None:
        existing = await run_sync(
            self.client.find_by_slug,
            content_type.type_id,
            file.slug,
            self.default_locale,
        )
        fields = to_payload(content_type.kind, file, existing)

        if existing:
            document = await self._update_entry(
                content_type, existing, fields, file
            )
            result.updated += 1
            return document or existing

        document = await self._create_entry(content_type, fields, file)
        result.created += 1
        return document

    # ------------------------------------------------------------------
    # Localizations
    # ------------------------------------------------------------------

    async def _sync_localization(
        self,
        content_type: ContentTypeConfig,
        file: ContentFile,
        default_document: Document,
        result: SyncResult,
    ) -> None:
        existing = await run_sync(
            self.client.find_by_slug, content_type.type_id, file.slug, file.locale
        )
        fields = to_payload(content_type.kind, file, existing)
        document_id = default_document["documentId"]

        if existing:
            await self._update_localization(
                content_type, document_id, file, fields
            )
            result.updated += 1
        else:
            await self._create_localization(
                content_type, document_id, file, fields
            )
            result.created += 1

    async def _sync_unmatched_locales(
        self,
        content_type: ContentTypeConfig,
        locale_files: list[ContentFile],
        processed: ProcessedSlugs,
        claimed: set[tuple[str, str]],
        removed: set[str],
        result: SyncResult,
    ) -> None:
        """Link locale files the default pass left unmatched.

        Targets are looked up among the default-locale documents in Strapi,
        minus those the orphan pass deleted (or, in a dry run, would have
        deleted) by document id.
        """
        unmatched = [
            f for f in locale_files if not processed.is_processed(f.locale, f.slug)
        ]
        if not unmatched:
            return

        logger.info(
            "Trying to match %d unmatched locale file(s) against Strapi",
            len(unmatched),
        )
        documents = await run_sync(
            self.client.get_all_entries,
            content_type.type_id,
            self.default_locale,
        )
        by_slug: dict[str, Document] = {}
        for document in documents:
            slug = document.get("slug")
            if document.get("documentId") in removed:
                continue
            if slug and slug not in by_slug:
                by_slug[slug] = document

        for file in unmatched:
            document = by_slug.get(file.localizes) if file.localizes else None
            if document is None:
                self._warn_unmatched(file)
                continue

            claim = (file.localizes, base_locale(file.locale))
            if claim in claimed:
                logger.warning(
                    "Ignoring %s: '%s' already has a '%s' localization from this run",
                    file.path,
                    file.localizes,
                    claim[1],
                )
                continue
            claimed.add(claim)

            logger.info(
                "Found match in Strapi: %s (%s) -> %s",
                file.slug,
                file.locale,
                document.get("slug"),
            )
            processed.add(file.locale, file.slug)
            try:
                await self._sync_localization(
                    content_type, file, document, result
                )
            except Exception as exc:
                logger.error(
                    "Error processing localization %s (%s): %s",
                    file.slug,
                    file.locale,
                    exc,
                )
                result.errors += 1

    def _warn_unmatched(self, file: ContentFile) -> None:
        if file.localizes:
            logger.warning(
                "Could not match %s (%s): no %s document with slug '%s'. "
                "Create it first, then re-run the sync.",
                file.slug,
                file.locale,
                self.default_locale,
                file.localizes,
            )
        else:
            logger.warning(
                "Could not match %s (%s): add 'localizes: <%s slug>' to its "
                "frontmatter to link it.",
                file.slug,
                file.locale,
                self.default_locale,
            )

    # ------------------------------------------------------------------
    # Orphans
    # ------------------------------------------------------------------

    async def _delete_orphans(
        self,
        content_type: ContentTypeConfig,
        files: list[ContentFile],
        on_disk: ProcessedSlugs,
        result: SyncResult,
    ) -> set[str]:
        """Delete documents with no scanned file for their (locale, slug).

        Every locale in use is listed by its full code, so region locales
        such as ``es-419`` are reached.  Returns the ids of default-locale
        documents deleted (or that a dry run would delete).
        """
        locales = self.scanner.locales_present(self.content_types.values())
        locales.update(file.locale for file in files)
        removed: set[str] = set()

        for locale in sorted(locales):
            documents = await run_sync(
                self.client.get_all_entries, content_type.type_id, locale
            )
            for document in documents:
                slug = document.get("slug")
                doc_locale = document.get("locale") or locale
                if not slug or on_disk.is_processed(doc_locale, slug):
                    continue
                try:
                    await self._delete_document(
                        content_type, document, slug, doc_locale
                    )
                except Exception as exc:
                    logger.error(
                        "Error deleting %s (%s): %s", slug, doc_locale, exc
                    )
                    result.errors += 1
                    continue
                result.deleted += 1
                if doc_locale == self.default_locale:
                    removed.add(document["documentId"])
        return removed

    # ------------------------------------------------------------------
    # Mutations (each gated on dry_run)
    # ------------------------------------------------------------------

    async def _create_entry(
        self,
        content_type: ContentTypeConfig,
        fields: dict[str, Any],
        file: ContentFile,
    ) -> Document:
        if self.dry_run:
            logger.info(
                "[DRY-RUN] Would create: %s (%s)", file.slug, file.locale
            )
            return {"documentId": DRY_RUN_DOCUMENT_ID, "slug": file.slug}

        document = await run_sync(
            self.client.create_entry, content_type.type_id, fields
        )
        logger.info("Created: %s (%s)", file.slug, file.locale)
        return document

    async def _update_entry(
        self,
        content_type: ContentTypeConfig,
        existing: Document,
        fields: dict[str, Any],
        file: ContentFile,
    ) -> Document | None:
        if self.dry_run:
            logger.info(
                "[DRY-RUN] Would update: %s (%s)", file.slug, file.locale
            )
            return existing

        document = await run_sync(
            self.client.update_entry,
            content_type.type_id,
            existing["documentId"],
            fields,
        )
        logger.info("Updated: %s (%s)", file.slug, file.locale)
        return document

    async def _create_localization(
        self,
        content_type: ContentTypeConfig,
        document_id: str,
        file: ContentFile,
        fields: dict[str, Any],
    ) -> None:
        if self.dry_run:
            logger.info(
                "[DRY-RUN] Would create localization: %s (%s)",
                file.slug,
                file.locale,
            )
            return

        await run_sync(
            self.client.create_localization,
            content_type.type_id,
            document_id,
            file.locale,
            fields,
        )
        logger.info("Created localization: %s (%s)", file.slug, file.locale)

    async def _update_localization(
        self,
        content_type: ContentTypeConfig,
        document_id: str,
        file: ContentFile,
        fields: dict[str, Any],
    ) -> None:
        if self.dry_run:
            logger.info(
                "[DRY-RUN] Would update localization: %s (%s)",
                file.slug,
                file.locale,
            )
            return

        await run_sync(
            self.client.update_localization,
            content_type.type_id,
            document_id,
            file.locale,
            fields,
        )
        logger.info("Updated localization: %s (%s)", file.slug, file.locale)

    async def _delete_document(
        self,
        content_type: ContentTypeConfig,
        document: Document,
        slug: str,
        locale: str,
    ) -> None:
        if self.dry_run:
            logger.info("[DRY-RUN] Would delete: %s (%s)", slug, locale)
            return

        document_id = document["documentId"]
        if locale == self.default_locale:
            await run_sync(
                self.client.delete_entry, content_type.type_id, document_id
            )
        else:
            await run_sync(
                self.client.delete_localization,
                content_type.type_id,
                document_id,
                locale,
            )
        logger.info("Deleted: %s (%s)", slug, locale)
