"""Pairing of default-locale files with their translations.

A locale file names the default-locale slug it translates in its
``localizes`` frontmatter field.  Locale codes are compared by base code,
so ``es`` and ``es-419`` count as the same locale.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from .models import ContentFile, LocaleMatch

logger = logging.getLogger(__name__)


def base_locale(locale: str) -> str:
    """``"es-419"`` -> ``"es"``."""
    return locale.split("-")[0]


class ProcessedSlugs:
    """(base locale, slug) pairs that have an on-disk file this run.

    Anything recorded here is protected from orphan deletion and is not
    offered to the matcher again.
    """

    def __init__(self) -> None:
        self._slugs: dict[str, set[str]] = defaultdict(set)

    def add(self, locale: str, slug: str) -> None:
        self._slugs[base_locale(locale)].add(slug)

    def is_processed(self, locale: str, slug: str) -> bool:
        return slug in self._slugs.get(base_locale(locale), ())

    def __len__(self) -> int:
        return sum(len(slugs) for slugs in self._slugs.values())


def find_matches(
    default_file: ContentFile,
    candidates: Iterable[ContentFile],
    processed: ProcessedSlugs,
) -> list[LocaleMatch]:
    """Return at most one locale file per base locale for *default_file*.

    A candidate matches when it is not yet processed and its ``localizes``
    equals the default file's current slug exactly.  When several files in
    one base locale claim the same slug, the first in discovery order wins
    and the rest are reported as warnings.

    *processed* is only read; the caller records the matches it acts on.
    """
    matches: dict[str, LocaleMatch] = {}
    for candidate in candidates:
        if processed.is_processed(candidate.locale, candidate.slug):
            continue
        if candidate.localizes != default_file.slug:
            continue

        locale = base_locale(candidate.locale)
        winner = matches.get(locale)
        if winner is not None:
            logger.warning(
                "Ignoring %s: %s already localizes '%s' for locale '%s'",
                candidate.path,
                winner.locale_file.path,
                default_file.slug,
                locale,
            )
            continue

        matches[locale] = LocaleMatch(
            default_file=default_file,
            locale_file=candidate,
            reason=f"localizes: {default_file.slug}",
        )
    return list(matches.values())
