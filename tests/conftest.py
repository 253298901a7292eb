"""Shared pytest fixtures for mdx-strapi-sync tests."""

from pathlib import Path

import pytest

from mdx_strapi_sync.config import Config
from mdx_strapi_sync.config_schema import ContentTypeConfig
from mdx_strapi_sync.core.client import CMSError


@pytest.fixture
def mock_config(tmp_path):
    """Create a Config instance for testing."""
    return Config(
        strapi_url="https://cms.example.com",
        api_token="test-token",
        project_root=tmp_path,
        default_locale="en",
        timeout=5.0,
        page_size=2,
    )


@pytest.fixture
def page_type():
    """A foundation-page content type living under src/content/pages."""
    return ContentTypeConfig(
        directory="src/content/pages",
        type_id="pages",
        kind="foundation-page",
    )


@pytest.fixture
def write_mdx(tmp_path):
    """Factory fixture writing an MDX file below ``tmp_path``.

    ``frontmatter`` is written verbatim between ``---`` lines; pass None to
    write a file without a frontmatter block.
    """

    def _write(
        rel_path: str, frontmatter: str | None = "", body: str = ""
    ) -> Path:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if frontmatter is None:
            text = body
        else:
            text = f"---\n{frontmatter.strip()}\n---\n{body}"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# In-memory fake Strapi client
# ---------------------------------------------------------------------------


class FakeStrapiClient:
    """In-memory Strapi document store for sync tests.

    Documents are plain dicts carrying ``documentId``, ``slug`` and
    ``locale``; localizations of one document share its ``documentId``.
    Every call is recorded in ``calls`` as ``(method, args)``.
    """

    MUTATING = frozenset(
        {
            "create_entry",
            "update_entry",
            "create_localization",
            "update_localization",
            "delete_entry",
            "delete_localization",
        }
    )

    def __init__(self, documents=None, default_locale: str = "en") -> None:
        self.default_locale = default_locale
        self.documents: list[dict] = [dict(d) for d in documents or []]
        self.calls: list[tuple[str, tuple]] = []
        self._failures: dict[str, object] = {}

    # -- test helpers ------------------------------------------------------

    def fail(self, method: str, when=lambda *args: True) -> None:
        """Make *method* raise ``CMSError`` whenever ``when(*args)`` holds."""
        self._failures[method] = when

    @property
    def mutations(self) -> list[tuple[str, tuple]]:
        return [call for call in self.calls if call[0] in self.MUTATING]

    def calls_to(self, method: str) -> list[tuple]:
        return [args for name, args in self.calls if name == method]

    def stored(self, type_id: str, locale: str | None = None) -> list[dict]:
        return [
            self._public(d)
            for d in self.documents
            if d["_type"] == type_id and (locale is None or d["locale"] == locale)
        ]

    def _record(self, method: str, *args) -> None:
        self.calls.append((method, args))
        when = self._failures.get(method)
        if when is not None and when(*args):
            raise CMSError(f"Strapi API error (500): {method} failed")

    @staticmethod
    def _public(document: dict) -> dict:
        return {k: v for k, v in document.items() if k != "_type"}

    def _find(self, type_id, slug=None, locale=None, document_id=None):
        for document in self.documents:
            if document["_type"] != type_id:
                continue
            if slug is not None and document.get("slug") != slug:
                continue
            if locale is not None and document["locale"] != locale:
                continue
            if document_id is not None and document["documentId"] != document_id:
                continue
            return document
        return None

    def _new_id(self, slug: str) -> str:
        taken = {d["documentId"] for d in self.documents}
        candidate = f"doc-{slug}"
        counter = 2
        while candidate in taken:
            candidate = f"doc-{slug}-{counter}"
            counter += 1
        return candidate

    def _add_localization(self, type_id, document_id, locale, fields) -> dict:
        if self._find(type_id, document_id=document_id) is None:
            raise CMSError(f"Base entry not found with documentId: {document_id}")
        document = {
            **fields,
            "_type": type_id,
            "documentId": document_id,
            "locale": locale,
        }
        self.documents.append(document)
        return self._public(document)

    # -- CMSClient ---------------------------------------------------------

    def get_all_entries(self, type_id, locale="all"):
        self._record("get_all_entries", type_id, locale)
        return self.stored(type_id, None if locale == "all" else locale)

    def find_by_slug(self, type_id, slug, locale=None):
        self._record("find_by_slug", type_id, slug, locale)
        document = self._find(type_id, slug=slug, locale=locale)
        return self._public(document) if document else None

    def create_entry(self, type_id, fields, locale=None):
        self._record("create_entry", type_id, fields)
        document = {
            **fields,
            "_type": type_id,
            "documentId": self._new_id(fields["slug"]),
            "locale": locale or self.default_locale,
        }
        self.documents.append(document)
        return self._public(document)

    def update_entry(self, type_id, document_id, fields, locale=None):
        self._record("update_entry", type_id, document_id, fields)
        document = self._find(
            type_id,
            locale=locale or self.default_locale,
            document_id=document_id,
        )
        if document is None:
            raise CMSError(f"Strapi API error (404): {document_id}")
        document.update(fields)
        return self._public(document)

    def create_localization(self, type_id, document_id, locale, fields):
        self._record("create_localization", type_id, document_id, locale, fields)
        return self._add_localization(type_id, document_id, locale, fields)

    def update_localization(self, type_id, document_id, locale, fields):
        self._record("update_localization", type_id, document_id, locale, fields)
        document = self._find(type_id, slug=fields["slug"], locale=locale)
        if document is None:
            return self._add_localization(type_id, document_id, locale, fields)
        document.update(fields)
        return self._public(document)

    def delete_entry(self, type_id, document_id):
        self._record("delete_entry", type_id, document_id)
        self.documents = [
            d
            for d in self.documents
            if not (d["_type"] == type_id and d["documentId"] == document_id)
        ]

    def delete_localization(self, type_id, document_id, locale):
        self._record("delete_localization", type_id, document_id, locale)
        self.documents = [
            d
            for d in self.documents
            if not (
                d["_type"] == type_id
                and d["documentId"] == document_id
                and d["locale"] == locale
            )
        ]


def strapi_doc(
    slug: str,
    locale: str = "en",
    document_id: str | None = None,
    type_id: str = "pages",
    **fields,
) -> dict:
    """Build a stored document for ``FakeStrapiClient``."""
    return {
        "title": slug.title(),
        **fields,
        "_type": type_id,
        "documentId": document_id or f"doc-{slug}",
        "slug": slug,
        "locale": locale,
    }


@pytest.fixture
def strapi():
    """Factory fixture: ``strapi(doc, ...)`` returns a seeded fake client."""

    def _make(*documents: dict) -> FakeStrapiClient:
        return FakeStrapiClient(documents)

    return _make


@pytest.fixture
def doc():
    """Expose ``strapi_doc`` to tests without importing conftest."""
    return strapi_doc
