"""Format harvest reports for display and JSON output."""

from __future__ import annotations

from collections import defaultdict

from .models import HarvestAction, HarvestReport, HarvestResult


def _file_counts(result: HarvestResult) -> str:
    parts = []
    if result.files_created:
        parts.append(f"+{result.files_created}")
    if result.files_reused:
        parts.append(f".{result.files_reused}")
    if result.files_deleted:
        parts.append(f"-{result.files_deleted}")
    if result.files_failed:
        parts.append(f"?{result.files_failed}")
    return f" files[{' '.join(parts)}]" if parts else ""


def format_harvest_report(report: HarvestReport) -> str:
    """Format a harvest report grouped by action.

    Each result is shown as ``query -> object guid`` followed by its file
    counts and, for failures, the error message.

    Args:
        report: The harvest report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    if report.dry_run:
        lines.append("DRY RUN -- No changes were made")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    groups: dict[HarvestAction, list[HarvestResult]] = defaultdict(list)
    for r in report.results:
        groups[r.action].append(r)

    for action in HarvestAction:
        if action not in groups:
            continue
        lines.append(f"[{action.value.upper()}]")
        for r in groups[action]:
            line = f"  {r.query} -> {r.object_guid or '(none)'}"
            line += _file_counts(r)
            if r.duplicates:
                line += f" duplicates={r.duplicates}"
            if r.metadata_rejected:
                line += f" metadata_rejected={r.metadata_rejected}"
            if r.error:
                line += f" ({r.error})"
            lines.append(line)
        lines.append("")

    if not report.results:
        lines.append("No external objects were harvested.")
        lines.append("")

    lines.append(report.summary())
    return "\n".join(lines).rstrip()


def report_to_json(report: HarvestReport) -> dict:
    """Convert a harvest report to a dict for JSON serialisation.

    Args:
        report: The harvest report.

    Returns:
        Dict with run info, counts and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "query": r.query,
            "object_guid": r.object_guid,
            "action": r.action.value,
            "success": r.success,
            "files": {
                "created": r.files_created,
                "reused": r.files_reused,
                "deleted": r.files_deleted,
                "failed": r.files_failed,
            },
            "duplicates": r.duplicates,
            "metadata_rejected": r.metadata_rejected,
        }
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "created": len(report.created),
            "reused": len(report.reused),
            "unpublished": len(report.unpublished),
            "skipped": len(report.skipped),
            "preview": len(report.by_action(HarvestAction.PREVIEW)),
            "errors": len(report.errors),
        },
        "results": results_list,
    }
