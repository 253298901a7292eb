"""Tests for sync reporter formatting functions.

Covers:
- format_sync_report with various result combinations
- Invalid-file diagnostics section
- report_to_json structure and completeness
- SyncResult / SyncReport totals
"""

from __future__ import annotations

import json
from pathlib import Path

from mdx_strapi_sync.sync.models import (
    FileValidationError,
    SyncReport,
    SyncResult,
)
from mdx_strapi_sync.sync.reporter import format_sync_report, report_to_json

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_report(
    results: dict[str, SyncResult] | None = None,
    dry_run: bool = False,
    invalid_files: list[FileValidationError] | None = None,
) -> SyncReport:
    return SyncReport(
        dry_run=dry_run,
        started_at="2026-01-01T00:00:00+00:00",
        completed_at="2026-01-01T00:00:05+00:00",
        results=results or {},
        invalid_files=invalid_files or [],
    )


def _invalid(slug: str = "broken") -> FileValidationError:
    return FileValidationError(
        path=Path(f"/site/src/content/blog/{slug}.mdx"),
        slug=slug,
        locale="en",
        errors=["description: Field required", "date: Field required"],
    )


# ---------------------------------------------------------------------------
# format_sync_report
# ---------------------------------------------------------------------------


class TestFormatSyncReport:
    def test_header_and_timestamps(self):
        output = format_sync_report(_make_report())
        lines = output.splitlines()
        assert lines[0] == "MDX -> Strapi sync report"
        assert "Started: 2026-01-01T00:00:00+00:00" in output
        assert "Completed: 2026-01-01T00:00:05+00:00" in output

    def test_dry_run_header(self):
        output = format_sync_report(_make_report(dry_run=True))
        assert output.splitlines()[0] == "MDX -> Strapi sync report (DRY RUN)"

    def test_one_line_per_content_type(self):
        report = _make_report(
            {
                "blog": SyncResult(created=2, updated=1),
                "foundation-pages": SyncResult(deleted=3, errors=1),
            }
        )
        output = format_sync_report(report)
        assert "  blog              2 created, 1 updated, 0 deleted, 0 errors" in output
        assert (
            "  foundation-pages  0 created, 0 updated, 3 deleted, 1 errors"
            in output
        )

    def test_total_line(self):
        report = _make_report(
            {
                "blog": SyncResult(created=2, updated=1),
                "summit-pages": SyncResult(created=1, errors=2),
            }
        )
        output = format_sync_report(report)
        assert "Total: 3 created, 1 updated, 0 deleted, 2 errors" in output

    def test_empty_report_is_concise(self):
        output = format_sync_report(_make_report())
        assert "Total: 0 created, 0 updated, 0 deleted, 0 errors" in output
        assert "Invalid files" not in output
        assert not output.endswith("\n")

    def test_invalid_files_listed_with_messages(self):
        output = format_sync_report(
            _make_report({"blog": SyncResult(errors=1)}, invalid_files=[_invalid()])
        )
        assert "Invalid files:" in output
        assert "/site/src/content/blog/broken.mdx (broken, en)" in output
        assert "    - description: Field required" in output
        assert "    - date: Field required" in output


# ---------------------------------------------------------------------------
# report_to_json
# ---------------------------------------------------------------------------


class TestReportToJson:
    def test_structure(self):
        report = _make_report(
            {"blog": SyncResult(created=1, deleted=2)},
            dry_run=True,
            invalid_files=[_invalid()],
        )
        data = report_to_json(report)

        assert data["dry_run"] is True
        assert data["started_at"] == "2026-01-01T00:00:00+00:00"
        assert data["completed_at"] == "2026-01-01T00:00:05+00:00"
        assert data["content_types"] == {
            "blog": {"created": 1, "updated": 0, "deleted": 2, "errors": 0}
        }
        assert data["total"] == {
            "created": 1,
            "updated": 0,
            "deleted": 2,
            "errors": 0,
        }
        [invalid] = data["invalid_files"]
        assert invalid["path"] == "/site/src/content/blog/broken.mdx"
        assert invalid["errors"] == [
            "description: Field required",
            "date: Field required",
        ]

    def test_json_serialisable(self):
        report = _make_report(
            {"blog": SyncResult(updated=4)}, invalid_files=[_invalid()]
        )
        round_tripped = json.loads(json.dumps(report_to_json(report)))
        assert round_tripped["total"]["updated"] == 4


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def test_total_sums_content_types():
    report = _make_report(
        {
            "a": SyncResult(created=1, updated=2, deleted=3, errors=4),
            "b": SyncResult(created=10, updated=20, deleted=30, errors=40),
        }
    )
    total = report.total
    assert (total.created, total.updated, total.deleted, total.errors) == (
        11,
        22,
        33,
        44,
    )


def test_total_does_not_mutate_results():
    blog = SyncResult(created=1)
    report = _make_report({"blog": blog, "pages": SyncResult(created=2)})
    assert report.total.created == 3
    assert report.results["blog"].created == 1
