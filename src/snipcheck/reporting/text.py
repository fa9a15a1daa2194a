from __future__ import annotations

from pathlib import Path

from ..markers.aggregate import TreeReport
from ..markers.ambiguity import most_ambiguous
from .payload import ReportKind, relative_file

RULE = "=" * 80


def _header(title: str) -> list[str]:
    return [RULE, title, RULE, ""]


def _more(hidden: int, noun: str = "more") -> list[str]:
    return [f"    ... and {hidden} {noun}"] if hidden > 0 else []


def render_nesting(report: TreeReport, root: Path | None = None, max_examples: int = 3) -> list[str]:
    summary = report.summary()
    lines = _header("NESTED TAGS FOUND")
    lines.append(f"Found {summary.nested_pairs} nested tag pairs in {summary.files_with_tags} files with tags")
    lines.append("")
    if summary.nested_pairs:
        lines.append(f"Maximum nesting depth: {summary.max_depth}")
        lines.append("")
        lines.append("Files with nested tags (sorted by count):")
        lines.append("")
        for file_report in report.files_by_nesting():
            pairs = file_report.nested_pairs
            lines.append(f"  {relative_file(file_report.file, root)}")
            lines.append(f"    Nested pairs: {len(pairs)}, Max depth: {max(pair.depth for pair in pairs)}")
            for pair in pairs[:max_examples]:
                lines.append(
                    f"    - [START {pair.outer.tag}] (line {pair.outer.line}) "
                    f"contains [START {pair.inner.tag}] (line {pair.inner.line})"
                )
            lines.extend(_more(len(pairs) - max_examples))
            lines.append("")
        deep = report.deep_nesting()
        if deep:
            lines.extend(_header("DEEPLY NESTED TAGS (depth >= 3)"))
            for file, pair in deep:
                lines.append(f"  {relative_file(file, root)}:{pair.inner.line}")
                lines.append(f"    Depth {pair.depth}: [START {pair.inner.tag}] nested inside [START {pair.outer.tag}]")
            lines.append("")
    errors = report.errors
    if errors:
        lines.extend(_header("TAG ERRORS FOUND"))
        lines.append(f"Found {len(errors)} potential issues:")
        lines.append("")
        for file, error in errors:
            lines.append(f"  {relative_file(file, root)}:{error.line}")
            lines.append(f"    {error.message}")
            lines.append("")
    return lines


def render_substrings(report: TreeReport, root: Path | None = None, max_examples: int = 3) -> list[str]:
    groups = report.ambiguity_groups
    lines = _header("TAGS THAT ARE SUBSTRINGS OF OTHER TAGS")
    lines.append(f"Found {len(groups)} tags that are substrings of other tags")
    lines.append("")
    for group in groups:
        files = group.locations.files if group.locations else ()
        lines.append(f"[START {group.substring}]")
        lines.append(f"  Found in {len(files)} file(s):")
        for file in files[:max_examples]:
            lines.append(f"    - {relative_file(file, root)}")
        lines.extend(_more(len(files) - max_examples))
        lines.append(f"  Is a substring of {group.collisions} other tag(s):")
        for sup in group.superstrings[:max_examples]:
            lines.append(f"    - [START {sup}]")
        lines.extend(_more(group.collisions - max_examples))
        lines.append("")
    return lines


def render_summary(report: TreeReport, kind: ReportKind = "scan") -> list[str]:
    summary = report.summary()
    lines = _header("SUMMARY")
    lines.append(f"Files scanned: {summary.files_scanned}")
    if summary.files_skipped:
        lines.append(f"Files skipped (unreadable): {summary.files_skipped}")
    lines.append(f"Files with tags: {summary.files_with_tags}")
    if kind != "substrings":
        lines.append(f"Nested tag pairs: {summary.nested_pairs}")
        lines.append(f"Files with nesting: {summary.files_with_nesting}")
        lines.append(f"Tag errors found: {summary.errors}")
        if summary.nested_pairs:
            lines.append(f"Maximum nesting depth: {summary.max_depth}")
    if kind != "nesting":
        lines.append(f"Total unique tags: {summary.unique_tags}")
        lines.append(f"Tags that are substrings of others: {summary.ambiguous_tags}")
        lines.append(f"Total substring relationships: {summary.substring_relationships}")
        top = most_ambiguous(report.ambiguity_groups)
        if top is not None:
            lines.append(f'Most ambiguous tag: "{top.substring}" (substring of {top.collisions} other tags)')
    return lines


def render_text(
    report: TreeReport,
    root: Path | None = None,
    kind: ReportKind = "scan",
    max_examples: int = 3,
) -> str:
    lines: list[str] = []
    if root is not None:
        lines.append(f"Scanning directory: {root}")
        lines.append("")
    if kind != "substrings":
        lines.extend(render_nesting(report, root, max_examples))
    if kind != "nesting":
        lines.extend(render_substrings(report, root, max_examples))
    lines.extend(render_summary(report, kind))
    return "\n".join(lines)
