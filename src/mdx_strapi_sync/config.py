"""Runtime configuration for a sync run.

Reads Strapi connection settings and the project root from CLI args,
environment variables, .env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    STRAPI_URL: Strapi instance URL (required)
    STRAPI_API_TOKEN: Strapi API token (required)
    MDX_SYNC_PROJECT_ROOT: Root that content directories resolve against
        (optional, default: current directory)
    MDX_SYNC_DEFAULT_LOCALE: Default locale code (optional, default: en)
    MDX_SYNC_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

DEFAULT_STRAPI_URL = "http://localhost:1337"


@dataclass
class Config:
    strapi_url: str
    api_token: str
    project_root: Path
    default_locale: str = "en"
    debug: bool = False
    timeout: float = 60.0
    page_size: int = 100


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Raises:
        ValueError: If URL format is invalid or the token is empty.
    """
    config.strapi_url = config.strapi_url.strip()

    if not config.strapi_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid Strapi URL '{config.strapi_url}': must start with http:// or https://"
        )

    parsed = urlparse(config.strapi_url)
    if not parsed.hostname:
        raise ValueError(
            f"Invalid Strapi URL '{config.strapi_url}': URL must include a hostname"
        )

    config.strapi_url = config.strapi_url.removesuffix("/")

    if not config.api_token.strip():
        raise ValueError(
            "Strapi API token cannot be empty. Set STRAPI_API_TOKEN environment variable."
        )

    if not config.default_locale.strip():
        raise ValueError("Default locale cannot be empty.")


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_config(
    url: str | None = None,
    api_token: str | None = None,
    project_root: str | None = None,
    default_locale: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        url: Override Strapi URL.
        api_token: Override API token.
        project_root: Override project root directory.
        default_locale: Override default locale code.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flat dict of values from the YAML ``strapi`` and
            ``sync`` sections (url, api_token, timeout, page_size,
            project_root, default_locale, debug).

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the URL or token is missing after checking all
            sources, or a value is malformed.
    """
    fb = yaml_fallbacks or {}

    strapi_url = url or os.getenv("STRAPI_URL") or fb.get("url")
    if not strapi_url:
        raise ValueError(
            "Strapi URL not found. Set STRAPI_URL environment variable "
            f"(e.g. STRAPI_URL={DEFAULT_STRAPI_URL}), pass --url, "
            "or add 'url' to the strapi section of config.yml."
        )

    token = api_token or os.getenv("STRAPI_API_TOKEN") or fb.get("api_token")
    if not token:
        raise ValueError(
            "Strapi API token not found. Set STRAPI_API_TOKEN environment variable, "
            "pass --token, or add 'api_token' to the strapi section of config.yml."
        )

    root = (
        project_root
        or os.getenv("MDX_SYNC_PROJECT_ROOT")
        or fb.get("project_root")
        or "."
    )

    locale = (
        default_locale
        or os.getenv("MDX_SYNC_DEFAULT_LOCALE")
        or fb.get("default_locale")
        or "en"
    )

    if debug:
        final_debug = True
    else:
        env_debug = _get_bool_env("MDX_SYNC_DEBUG")
        if env_debug is not None:
            final_debug = env_debug
        else:
            final_debug = bool(fb.get("debug", False))

    config = Config(
        strapi_url=strapi_url,
        api_token=token.strip(),
        project_root=Path(root).expanduser().resolve(),
        default_locale=locale.strip(),
        debug=final_debug,
        timeout=float(fb.get("timeout", 60.0)),
        page_size=int(fb.get("page_size", 100)),
    )

    validate_config(config)

    return config
