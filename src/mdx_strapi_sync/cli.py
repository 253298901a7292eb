"""Command-line entry point: ``mdx-strapi-sync``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from . import __version__
from .config import Config, load_config
from .config_loader import load_hierarchical_config
from .config_schema import UnifiedConfig, build_config
from .core.client import StrapiClient
from .logger import setup_logging
from .sync.orchestrator import SyncOrchestrator
from .sync.reporter import format_sync_report, report_to_json

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdx-strapi-sync",
        description="Import locale-aware MDX content into Strapi",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Preview what would change
  mdx-strapi-sync --dry-run

  # Sync only blog posts against a staging instance
  mdx-strapi-sync --content-type blog --url https://cms.staging.example.com

  # Machine-readable summary
  mdx-strapi-sync --json > sync-report.json

Connection settings come from STRAPI_URL / STRAPI_API_TOKEN (or a .env
file), then .mdx_sync/config.yml. Logs go to stderr; the summary to stdout.
        """,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log intended creates, updates and deletes without performing them",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Load this YAML config file instead of discovering one",
    )
    parser.add_argument(
        "--url",
        help="Override Strapi URL (takes precedence over STRAPI_URL and config files)",
    )
    parser.add_argument(
        "--token",
        help="Override Strapi API token (visible in process list -- prefer STRAPI_API_TOKEN)",
    )
    parser.add_argument(
        "--project-root",
        help="Directory content paths resolve against (default: current directory)",
    )
    parser.add_argument(
        "--default-locale",
        help="Locale of files in each content type's base directory (default: en)",
    )
    parser.add_argument(
        "--content-type",
        action="append",
        dest="content_types",
        metavar="NAME",
        help="Sync only this content type (repeatable)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mdx-strapi-sync version {__version__}",
    )
    return parser


def load_settings(args: argparse.Namespace) -> tuple[Config, UnifiedConfig]:
    """Resolve configuration: CLI > env (.env loaded first) > YAML > defaults.

    Raises:
        ValueError: If required settings are missing or malformed.
        FileNotFoundError: If ``--config`` names a missing file.
    """
    load_dotenv()

    raw = load_hierarchical_config(explicit_path=args.config)
    unified = build_config(raw)

    fallbacks: dict[str, Any] = {
        k: v for k, v in unified.strapi.model_dump().items() if v is not None
    }
    if unified.sync.project_root:
        fallbacks["project_root"] = unified.sync.project_root
    fallbacks["default_locale"] = unified.sync.default_locale

    config = load_config(
        url=args.url,
        api_token=args.token,
        project_root=args.project_root,
        default_locale=args.default_locale,
        debug=args.debug,
        yaml_fallbacks=fallbacks,
    )
    return config, unified


async def main(args: argparse.Namespace) -> int:
    """Run one sync and print its report.

    Returns:
        Process exit status: 1 when any error was counted, else 0.
    """
    try:
        config, unified = load_settings(args)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"ERROR: Configuration error: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        debug=config.debug,
        log_file=args.log_file or unified.logging.file,
        log_format=unified.logging.format,
        level=unified.logging.level,
    )
    logger.info("Strapi URL: %s", config.strapi_url)
    logger.info("Project root: %s", config.project_root)

    orchestrator = SyncOrchestrator(
        client=StrapiClient(config),
        content_types=unified.sync.content_types,
        project_root=config.project_root,
        default_locale=config.default_locale,
        extension=unified.sync.extension,
        numeric_fields=unified.sync.numeric_fields,
        dry_run=args.dry_run,
    )

    try:
        report = await orchestrator.sync_all(only=args.content_types)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    else:
        print(format_sync_report(report))

    return 1 if report.total.errors > 0 else 0


def run(argv: list[str] | None = None) -> None:
    """Entry point that parses CLI arguments and exits with the sync status."""
    args = build_parser().parse_args(argv)
    try:
        code = asyncio.run(main(args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    sys.exit(code)


if __name__ == "__main__":
    run()
