"""Tests for sync.validator -- frontmatter schemas and partitioning."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from mdx_strapi_sync.sync.models import ContentFile
from mdx_strapi_sync.sync.validator import (
    FrontmatterValidationError,
    parse_frontmatter,
    validate_files,
)


def _file(
    slug: str = "about",
    frontmatter: dict[str, Any] | None = None,
    **overrides: Any,
) -> ContentFile:
    values: dict[str, Any] = {
        "path": Path(f"/content/{slug}.mdx"),
        "slug": slug,
        "locale": "en",
        "frontmatter": frontmatter if frontmatter is not None else {"title": "T"},
    }
    values.update(overrides)
    return ContentFile(**values)


class TestValidateFiles:
    def test_valid_page_passes(self):
        outcome = validate_files("foundation-page", [_file()])
        assert len(outcome.valid) == 1
        assert outcome.invalid == []

    def test_missing_title_reported_with_field_path(self):
        outcome = validate_files("foundation-page", [_file(frontmatter={})])

        assert outcome.valid == []
        [error] = outcome.invalid
        assert error.slug == "about"
        assert error.locale == "en"
        assert error.path == Path("/content/about.mdx")
        assert error.errors == ["title: Field required"]

    def test_empty_title_rejected(self):
        outcome = validate_files(
            "foundation-page", [_file(frontmatter={"title": "  "})]
        )
        [error] = outcome.invalid
        assert error.errors[0].startswith("title: ")

    def test_filename_slug_satisfies_schema(self):
        """The resolved slug is injected, so frontmatter needs no slug."""
        outcome = validate_files("foundation-page", [_file(frontmatter={"title": "T"})])
        assert outcome.invalid == []

    def test_partition_keeps_order(self):
        files = [
            _file("a"),
            _file("b", frontmatter={}),
            _file("c"),
        ]
        outcome = validate_files("foundation-page", files)
        assert [f.slug for f in outcome.valid] == ["a", "c"]
        assert [e.slug for e in outcome.invalid] == ["b"]

    def test_kind_without_schema_passes_everything(self):
        outcome = validate_files("custom", [_file(frontmatter={})])
        assert len(outcome.valid) == 1

    def test_parse_error_always_invalid(self):
        broken = _file(frontmatter={}, parse_error="Invalid YAML syntax: boom")
        outcome = validate_files("custom", [broken])
        assert outcome.valid == []
        assert outcome.invalid[0].errors == ["Invalid YAML syntax: boom"]

    def test_blog_requires_description_and_date(self):
        outcome = validate_files("blog", [_file(frontmatter={"title": "Post"})])
        [error] = outcome.invalid
        assert "description: Field required" in error.errors
        assert "date: Field required" in error.errors

    def test_blog_bad_date(self):
        outcome = validate_files(
            "blog",
            [
                _file(
                    frontmatter={
                        "title": "Post",
                        "description": "D",
                        "date": "not-a-date",
                    }
                )
            ],
        )
        [error] = outcome.invalid
        assert error.errors[0].startswith("date: ")

    def test_nested_error_path_dotted(self):
        outcome = validate_files(
            "blog",
            [
                _file(
                    frontmatter={
                        "title": "Post",
                        "description": "D",
                        "date": "2025-01-15",
                        "tags": ["ok", ["nested"]],
                    }
                )
            ],
        )
        [error] = outcome.invalid
        assert error.errors[0].startswith("tags.1: ")


class TestParseFrontmatter:
    def test_returns_model(self):
        parsed = parse_frontmatter(
            "summit-page", _file(frontmatter={"title": "T", "gradient": "blue"})
        )
        assert parsed.title == "T"
        assert parsed.slug == "about"
        assert parsed.gradient == "blue"

    def test_extra_fields_allowed(self):
        parsed = parse_frontmatter(
            "foundation-page", _file(frontmatter={"title": "T", "order": 3})
        )
        assert parsed.model_extra == {"order": 3}

    def test_raises_with_messages(self):
        with pytest.raises(FrontmatterValidationError) as exc_info:
            parse_frontmatter("foundation-page", _file(frontmatter={}))
        assert exc_info.value.errors == ["title: Field required"]
        assert "about" in str(exc_info.value)

    def test_is_value_error(self):
        assert issubclass(FrontmatterValidationError, ValueError)
