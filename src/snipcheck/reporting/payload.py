from __future__ import annotations

from pathlib import Path
from typing import Literal

from ..contracts.schema.validate import REPORT_SCHEMA, validate
from ..markers.aggregate import TreeReport
from ..markers.ambiguity import AmbiguityGroup
from ..markers.model import FileReport, StructuralError
from ..markers.nesting import MismatchPolicy

ReportKind = Literal["scan", "nesting", "substrings"]


def relative_file(file: str, root: Path | None) -> str:
    if root is None:
        return file
    try:
        return Path(file).resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return file


def _error_row(error: StructuralError) -> dict[str, object]:
    return {**error.to_dict(), "message": error.message}


def _file_row(report: FileReport, root: Path | None) -> dict[str, object]:
    return {
        "file": relative_file(report.file, root),
        "events": len(report.events),
        "max_depth": report.max_depth,
        "nested_pairs": [pair.to_dict() for pair in report.nested_pairs],
        "errors": [_error_row(error) for error in report.errors],
    }


def _group_row(group: AmbiguityGroup, root: Path | None) -> dict[str, object]:
    files = group.locations.files if group.locations else ()
    return {
        "substring": group.substring,
        "superstrings": list(group.superstrings),
        "collisions": group.collisions,
        "files": [relative_file(file, root) for file in files],
        "occurrences": group.locations.occurrences if group.locations else 0,
    }


def report_failed(report: TreeReport, kind: ReportKind, strict: bool = False) -> bool:
    nesting_failed = kind != "substrings" and report.has_errors
    ambiguity_failed = strict and kind != "nesting" and bool(report.substring_pairs)
    return nesting_failed or ambiguity_failed


def tree_payload(
    report: TreeReport,
    *,
    run_id: str,
    root: Path | None = None,
    kind: ReportKind = "scan",
    policy: MismatchPolicy | str = MismatchPolicy.POP,
    strict: bool = False,
) -> dict[str, object]:
    """Build the JSON-ready report and check it against the report schema."""
    payload: dict[str, object] = {
        "schema_name": REPORT_SCHEMA,
        "schema_version": 1,
        "tool": "snipcheck",
        "kind": kind,
        "status": "fail" if report_failed(report, kind, strict) else "ok",
        "run_id": run_id,
        "root": str(root) if root is not None else "",
        "mismatch_policy": MismatchPolicy(policy).value,
        "summary": report.summary().to_dict(),
    }
    if kind != "substrings":
        payload["files"] = [_file_row(file_report, root) for file_report in report.files]
    if kind != "nesting":
        payload["ambiguity"] = [_group_row(group, root) for group in report.ambiguity_groups]
    validate(REPORT_SCHEMA, payload)
    return payload
