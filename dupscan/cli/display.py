from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..scanner.models import DuplicateGroup, ScanResult

SEPARATOR_LINE = "*---------------*"
NO_DUPLICATES_MESSAGE = "Not found any duplicate files"


def format_group_header(index: int, group: DuplicateGroup) -> str:
    return f"{index}. Found {group.count} files duplicated."


def format_report(groups: Iterable[DuplicateGroup]) -> str:
    """Render groups as numbered blocks, original path first in each."""
    lines: List[str] = []
    for idx, group in enumerate(groups, 1):
        lines.append(SEPARATOR_LINE)
        lines.append(format_group_header(idx, group))
        lines.extend(group.paths)
    if not lines:
        return NO_DUPLICATES_MESSAGE
    return "\n".join(lines)


def render_summary(result: ScanResult) -> List[str]:
    """Render human-readable lines describing the scan counters and issues."""
    summary = result.summary
    parts = [
        f"roots={summary.get('roots', 0)}",
        f"files_scanned={summary.get('files_scanned', 0)}",
        f"duplicate_groups={summary.get('duplicate_groups', len(result.groups))}",
        f"duplicate_files={summary.get('duplicate_files', result.duplicate_files)}",
    ]
    skipped = summary.get("files_skipped")
    if skipped:
        parts.append(f"files_skipped={skipped}")
    walk_errors = summary.get("walk_errors")
    if walk_errors:
        parts.append(f"walk_errors={walk_errors}")
    lines = ["Summary: " + ", ".join(parts)]
    if result.issues:
        lines.append(f"Issues: {len(result.issues)}")
        for issue in result.issues:
            lines.append(f"{issue.code} {issue.path} {issue.message}")
    return lines


def export_json(result: ScanResult) -> Dict[str, Any]:
    """Export the scan result as a JSON-serializable dict."""
    return {
        "summary": dict(result.summary),
        "duplicate_groups": [
            {
                "index": idx,
                "hash": group.hex_digest,
                "file_count": group.count,
                "original": group.original,
                "files": list(group.paths),
            }
            for idx, group in enumerate(result.groups, 1)
        ],
        "issues": [
            {"path": issue.path, "code": issue.code, "message": issue.message}
            for issue in result.issues
        ],
    }
