"""Sync report formatting functions.

- ``format_sync_report`` -- human-readable post-sync summary.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncReport, SyncResult


def _counts(result: SyncResult) -> dict[str, int]:
    return {
        "created": result.created,
        "updated": result.updated,
        "deleted": result.deleted,
        "errors": result.errors,
    }


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    One line per content type, a total line, and the frontmatter
    diagnostics of every invalid file.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = "MDX -> Strapi sync report"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    width = max((len(name) for name in report.results), default=0)
    for name, result in report.results.items():
        lines.append(
            f"  {name.ljust(width)}  "
            f"{result.created} created, {result.updated} updated, "
            f"{result.deleted} deleted, {result.errors} errors"
        )
    if report.results:
        lines.append("")

    total = report.total
    lines.append(
        f"Total: {total.created} created, {total.updated} updated, "
        f"{total.deleted} deleted, {total.errors} errors"
    )

    if report.invalid_files:
        lines.append("")
        lines.append("Invalid files:")
        for invalid in report.invalid_files:
            lines.append(f"  {invalid.path} ({invalid.slug}, {invalid.locale})")
            for message in invalid.errors:
                lines.append(f"    - {message}")

    return "\n".join(lines).rstrip()


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with run info, per-content-type counts, totals, and invalid
        file diagnostics.
    """
    return {
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "content_types": {
            name: _counts(result) for name, result in report.results.items()
        },
        "total": _counts(report.total),
        "invalid_files": [
            {
                "path": str(invalid.path),
                "slug": invalid.slug,
                "locale": invalid.locale,
                "errors": list(invalid.errors),
            }
            for invalid in report.invalid_files
        ],
    }
