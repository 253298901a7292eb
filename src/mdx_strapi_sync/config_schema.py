"""Unified configuration schema for mdx_strapi_sync.

Defines Pydantic models for the YAML config structure with dedicated
sections for the Strapi connection, the sync run (content-type registry,
locales, parsing options) and logging.

Usage:
    from mdx_strapi_sync.config_schema import build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    for name, content_type in unified.sync.content_types.items():
        print(name, content_type.type_id)
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class StrapiConfig(BaseModel):
    """Strapi connection settings.

    All fields are optional to support zero-config: env vars and CLI args
    can supply them at runtime instead.
    """

    url: str | None = Field(default=None, description="Strapi base URL")
    api_token: str | None = Field(
        default=None, description="Strapi API token"
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Read timeout in seconds for a single request",
    )
    page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Entries requested per page when listing (1-1000)",
    )

    model_config = {"frozen": True}


class ContentTypeConfig(BaseModel):
    """One entry of the content-type registry.

    Attributes:
        directory: Default-locale directory, relative to the project root
            (or absolute).  Locale variants live in
            ``<parent>/<locale>/<basename>``.
        type_id: Strapi collection API id (e.g. ``"blog-posts"``).
        kind: Payload shape used by the transformer
            (``blog``, ``foundation-page`` or ``summit-page``).
    """

    directory: str
    type_id: str
    kind: str = "foundation-page"

    model_config = {"frozen": True}

    def resolve_directory(self, project_root: Path) -> Path:
        """Return the absolute default-locale directory."""
        path = Path(self.directory).expanduser()
        if path.is_absolute():
            return path
        return (project_root / path).resolve()


def default_content_types() -> dict[str, ContentTypeConfig]:
    """Built-in registry used when the config file does not supply one."""
    return {
        "blog": ContentTypeConfig(
            directory="src/content/blog",
            type_id="blog-posts",
            kind="blog",
        ),
        "foundation-pages": ContentTypeConfig(
            directory="src/content/foundation-pages",
            type_id="foundation-pages",
            kind="foundation-page",
        ),
        "summit-pages": ContentTypeConfig(
            directory="src/content/summit",
            type_id="summit-pages",
            kind="summit-page",
        ),
    }


class SyncConfig(BaseModel):
    """Settings for a sync run.

    Attributes:
        project_root: Root that relative content directories resolve against.
        default_locale: Locale of files in each content type's base directory.
        extension: File extension recognised as content.
        numeric_fields: Frontmatter keys coerced to ``int`` when all digits.
        content_types: Registry of content-type key -> directory/type id.
    """

    project_root: str | None = Field(
        default=None, description="Project root directory"
    )
    default_locale: str = Field(default="en", min_length=1)
    extension: str = Field(default=".mdx")
    numeric_fields: list[str] = Field(default_factory=lambda: ["order"])
    content_types: dict[str, ContentTypeConfig] = Field(
        default_factory=default_content_types
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _unique_type_ids(self) -> SyncConfig:
        # Orphan deletion lists every document of a type id; two content
        # types sharing one would delete each other's documents.
        seen: dict[str, str] = {}
        for name, content_type in self.content_types.items():
            other = seen.get(content_type.type_id)
            if other is not None:
                raise ValueError(
                    f"Content types '{other}' and '{name}' share Strapi "
                    f"type id '{content_type.type_id}'"
                )
            seen[content_type.type_id] = name
        return self


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json``.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: str = Field(default="text", description="text or json")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    strapi: StrapiConfig = Field(default_factory=StrapiConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.

    Raises:
        pydantic.ValidationError: If a section is malformed.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
