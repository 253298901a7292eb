"""
YAML configuration loading for mdx_strapi_sync.

Finds config files by convention, supports a YAML ``!include`` tag and
``${VAR}`` env var interpolation, and merges several files with
"project wins" semantics.

Usage:
    from mdx_strapi_sync.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDX_SYNC_CONFIG"

# Matches ${VAR} and ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Replace ``${VAR}`` and ``${VAR:-default}`` patterns with env values.

    * ``${VAR}`` becomes the value of VAR, or ``""`` when unset.
    * ``${VAR:-default}`` uses *default* when VAR is unset or empty.
    * A ``${`` without a closing ``}`` is left untouched.
    """

    def _replace(match: re.Match) -> str:
        env_val = os.environ.get(match.group(1))
        if env_val:
            return env_val
        return match.group(2) or ""

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _interpolate_recursive(obj: Any) -> Any:
    """Walk a nested dict/list and interpolate env vars in all strings."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _interpolate_recursive(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_interpolate_recursive(item) for item in obj]
    return obj


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader subclass that understands ``!include other.yml``.

    A dedicated subclass keeps the global ``yaml.SafeLoader`` untouched.
    Each loader carries the chain of files being included so cycles are
    reported instead of recursing forever.
    """

    include_stack: list[Path]


def _include_constructor(loader: ConfigLoader, node: yaml.ScalarNode) -> Any:
    """Load the file named by an ``!include`` node, relative to the includer."""
    target = Path(loader.construct_scalar(node))
    if not target.is_absolute():
        target = Path(loader.name).resolve().parent / target
    target = target.resolve()

    if target in loader.include_stack:
        chain = " -> ".join(str(p) for p in [*loader.include_stack, target])
        raise ValueError(f"Circular include detected: {chain}")

    if not target.exists():
        raise FileNotFoundError(
            f"Include file not found: {target} "
            f"(referenced from {Path(loader.name).resolve()})"
        )

    return load_yaml_file(target, _include_stack=[*loader.include_stack, target])


ConfigLoader.add_constructor("!include", _include_constructor)


def load_yaml_file(
    path: Path, *, _include_stack: list[Path] | None = None
) -> Any:
    """Parse one YAML file with ``!include`` support."""
    path = path.resolve()
    with open(path, "r", encoding="utf-8") as fh:
        loader = ConfigLoader(fh)
        loader.include_stack = _include_stack or [path]
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()


def discover_config_files() -> list[Path]:
    """Return existing config file paths in precedence order (highest first).

    Search order:
        1. ``MDX_SYNC_CONFIG`` env var (explicit single path)
        2. ``.mdx_sync/config.yml`` in CWD (project-level)
        3. ``.mdx_sync/config.yaml`` in CWD
        4. ``~/.config/mdx_sync/config.yml`` (XDG global)

    Only paths that exist on disk are returned.
    """
    candidates: list[Path] = []

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())

    cwd = Path.cwd()
    candidates.append(cwd / ".mdx_sync" / "config.yml")
    candidates.append(cwd / ".mdx_sync" / "config.yaml")
    candidates.append(Path.home() / ".config" / "mdx_sync" / "config.yml")

    return [p for p in candidates if p.exists()]


def load_hierarchical_config(
    explicit_path: Path | None = None,
) -> dict[str, Any]:
    """Load and merge config files into one raw dict.

    With *explicit_path* only that file is read (it must exist).  Otherwise
    every discovered file is loaded from lowest precedence to highest, and
    each file's top-level keys **replace** those from earlier files.

    Env var interpolation is applied after merging.  Returns an empty dict
    when no config files exist (zero-config).

    Raises:
        FileNotFoundError: If *explicit_path* does not exist.
    """
    if explicit_path is not None:
        if not explicit_path.exists():
            raise FileNotFoundError(f"Config file not found: {explicit_path}")
        paths = [explicit_path]
    else:
        paths = discover_config_files()

    if not paths:
        logger.debug("No config files found, using zero-config defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        try:
            data = load_yaml_file(path)
        except Exception:
            logger.exception("Failed to load config file %s", path)
            raise

        if isinstance(data, dict):
            merged.update(data)
        elif data is not None:
            logger.warning(
                "Config file %s has non-dict root (%s), skipping",
                path,
                type(data).__name__,
            )

    return _interpolate_recursive(merged)
