"""On-disk content discovery.

Layout for a content type whose directory is ``src/content/blog``::

    src/content/blog/*.mdx          default-locale files
    src/content/es/blog/*.mdx       "es" localizations
    src/content/pt-BR/blog/*.mdx    "pt-BR" localizations

Every sibling of the base directory that contains a like-named
subdirectory is treated as a locale root, named after the sibling.

Field resolution is an explicit, ordered fallback per field:

- slug: frontmatter ``slug`` -> filename stem without ``YYYY-MM-DD-`` prefix
- locale: frontmatter ``locale`` -> locale directory name -> default locale
- link: frontmatter ``localizes`` -> none
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from ..config_schema import ContentTypeConfig
from ..converters.frontmatter import FrontmatterParseError, parse_mdx
from ..file_handler import (
    list_files,
    list_subdirectories,
    read_file_with_encoding,
)
from .models import ContentFile

logger = logging.getLogger(__name__)

DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}-")


def _text_field(frontmatter: dict[str, Any], key: str) -> str | None:
    value = frontmatter.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def resolve_slug(
    frontmatter: dict[str, Any], filename: str, extension: str = ".mdx"
) -> str:
    """Frontmatter ``slug``, else the filename minus extension and date prefix."""
    slug = _text_field(frontmatter, "slug")
    if slug:
        return slug
    stem = filename.removesuffix(extension)
    return DATE_PREFIX.sub("", stem)


def resolve_locale(frontmatter: dict[str, Any], directory_locale: str) -> str:
    """Frontmatter ``locale``, else the locale of the containing directory."""
    return _text_field(frontmatter, "locale") or directory_locale


def resolve_link(frontmatter: dict[str, Any]) -> str | None:
    """Slug of the default-locale content a locale file translates."""
    return _text_field(frontmatter, "localizes")


class ContentScanner:
    """Scan content-type directories into ``ContentFile`` records.

    Args:
        project_root: Root that relative content directories resolve against.
        default_locale: Locale assigned to files in each base directory.
        extension: File extension recognised as content.
        numeric_fields: Frontmatter keys coerced to ``int``.
    """

    def __init__(
        self,
        project_root: Path,
        default_locale: str = "en",
        extension: str = ".mdx",
        numeric_fields: Sequence[str] = ("order",),
    ) -> None:
        self.project_root = project_root
        self.default_locale = default_locale
        self.extension = extension
        self.numeric_fields = tuple(numeric_fields)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def scan(self, content_type: ContentTypeConfig) -> list[ContentFile]:
        """Return every default-locale and locale-variant file of a type.

        Missing directories yield an empty list.  Unreadable entries are
        logged and skipped.
        """
        base_dir = content_type.resolve_directory(self.project_root)
        files = self._scan_directory(
            base_dir, self.default_locale, is_localization=False
        )
        for locale, locale_dir in self._locale_directories(base_dir):
            files.extend(
                self._scan_directory(locale_dir, locale, is_localization=True)
            )
        return files

    def locales_present(
        self, content_types: Iterable[ContentTypeConfig]
    ) -> set[str]:
        """Locale codes with a directory under any content type.

        Codes are kept whole (``es-419``, not ``es``) because Strapi only
        lists a region locale when asked for it by name.  Always includes
        the default locale.  Used for orphan deletion, so a locale whose
        directory was removed for one content type is still cleaned up while
        another content type keeps it alive.
        """
        locales = {self.default_locale}
        for content_type in content_types:
            base_dir = content_type.resolve_directory(self.project_root)
            for locale, _ in self._locale_directories(base_dir):
                locales.add(locale)
        return locales

    def _locale_directories(self, base_dir: Path) -> list[tuple[str, Path]]:
        content_root = base_dir.parent
        if not content_root.is_dir():
            return []

        try:
            siblings = list_subdirectories(content_root)
        except OSError as exc:
            logger.error(
                "Failed to read content directory %s: %s", content_root, exc
            )
            return []

        found: list[tuple[str, Path]] = []
        for sibling in siblings:
            if sibling.name == base_dir.name:
                continue
            locale_dir = sibling / base_dir.name
            if locale_dir.is_dir():
                found.append((sibling.name, locale_dir))
        return found

    def _scan_directory(
        self, directory: Path, locale: str, is_localization: bool
    ) -> list[ContentFile]:
        if not directory.is_dir():
            return []

        try:
            paths = list_files(directory, self.extension)
        except OSError as exc:
            logger.error("Failed to read directory %s: %s", directory, exc)
            return []

        files: list[ContentFile] = []
        for path in paths:
            try:
                text, encoding = read_file_with_encoding(path)
            except OSError as exc:
                logger.error("Failed to read file %s: %s", path, exc)
                continue
            if encoding != "utf-8":
                logger.debug("Decoded %s as %s", path, encoding)
            files.append(self._build_file(path, text, locale, is_localization))
        return files

    def _build_file(
        self, path: Path, text: str, locale: str, is_localization: bool
    ) -> ContentFile:
        try:
            parsed = parse_mdx(text, self.numeric_fields)
        except FrontmatterParseError as exc:
            logger.warning("Unparseable frontmatter in %s: %s", path, exc)
            return ContentFile(
                path=path,
                slug=resolve_slug({}, path.name, self.extension),
                locale=locale,
                is_localization=is_localization,
                parse_error=str(exc),
            )

        frontmatter = parsed.frontmatter
        return ContentFile(
            path=path,
            slug=resolve_slug(frontmatter, path.name, self.extension),
            locale=resolve_locale(frontmatter, locale),
            is_localization=is_localization,
            localizes=resolve_link(frontmatter),
            frontmatter=frontmatter,
            body=parsed.body,
        )
