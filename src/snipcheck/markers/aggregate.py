from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable

from .ambiguity import AmbiguityGroup, TagIndex, find_substring_pairs, group_by_substring
from .model import FileReport, NestedPair, StructuralError, SubstringPair
from .nesting import MismatchPolicy, validate_nesting
from .tokenizer import tokenize

Source = tuple[Path | str, str | None]


@dataclass(frozen=True)
class TreeSummary:
    files_scanned: int
    files_with_tags: int
    files_skipped: int
    total_start_tags: int
    unique_tags: int
    nested_pairs: int
    files_with_nesting: int
    max_depth: int
    errors: int
    substring_relationships: int
    ambiguous_tags: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class TreeReport:
    files: tuple[FileReport, ...]
    substring_pairs: tuple[SubstringPair, ...]
    tag_index: TagIndex
    files_scanned: int = 0
    files_skipped: int = 0

    @property
    def ambiguity_groups(self) -> list[AmbiguityGroup]:
        return group_by_substring(self.substring_pairs, self.tag_index)

    @property
    def nested_pairs(self) -> list[tuple[str, NestedPair]]:
        return [(report.file, pair) for report in self.files for pair in report.nested_pairs]

    @property
    def errors(self) -> list[tuple[str, StructuralError]]:
        return [(report.file, error) for report in self.files for error in report.errors]

    @property
    def max_depth(self) -> int:
        return max((report.max_depth for report in self.files), default=0)

    @property
    def has_errors(self) -> bool:
        return any(report.errors for report in self.files)

    def files_by_nesting(self) -> list[FileReport]:
        """Files with nesting, most nested pairs first."""
        nesting = [report for report in self.files if report.has_nesting]
        return sorted(nesting, key=lambda report: (-len(report.nested_pairs), report.file))

    def deep_nesting(self, min_depth: int = 3) -> list[tuple[str, NestedPair]]:
        deep = [(file, pair) for file, pair in self.nested_pairs if pair.depth >= min_depth]
        return sorted(deep, key=lambda row: (-row[1].depth, row[0], row[1].inner.line))

    def summary(self) -> TreeSummary:
        groups = self.ambiguity_groups
        return TreeSummary(
            files_scanned=self.files_scanned,
            files_with_tags=len(self.files),
            files_skipped=self.files_skipped,
            total_start_tags=self.tag_index.total_occurrences,
            unique_tags=len(self.tag_index),
            nested_pairs=len(self.nested_pairs),
            files_with_nesting=sum(1 for report in self.files if report.has_nesting),
            max_depth=self.max_depth,
            errors=len(self.errors),
            substring_relationships=len(self.substring_pairs),
            ambiguous_tags=len(groups),
        )


def build_file_report(
    path: Path | str,
    text: str | None,
    policy: MismatchPolicy | str = MismatchPolicy.POP,
) -> FileReport | None:
    """Tokenize and validate one file; ``None`` when it holds no markers."""
    if text is None:
        return None
    file = str(path)
    events = tokenize(text, file)
    if not events:
        return None
    result = validate_nesting(events, policy)
    return FileReport(
        file=file,
        events=events,
        nested_pairs=result.nested_pairs,
        errors=result.errors,
        max_depth=result.max_depth,
    )


def build_tree_report(
    sources: Iterable[Source],
    policy: MismatchPolicy | str = MismatchPolicy.POP,
    jobs: int = 1,
) -> TreeReport:
    """Run the per-file phase over ``sources`` and the substring pass over all START tags.

    ``sources`` yields ``(path, text)`` pairs where ``text`` is ``None`` for files
    that could not be read. With ``jobs > 1`` files are processed on a thread
    pool; reports keep the input order either way.
    """
    rows = list(sources)
    skipped = sum(1 for _, text in rows if text is None)

    def _one(row: Source) -> FileReport | None:
        return build_file_report(row[0], row[1], policy)

    if jobs > 1 and len(rows) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as ex:
            produced = list(ex.map(_one, rows))
    else:
        produced = [_one(row) for row in rows]
    reports = tuple(report for report in produced if report is not None)

    index = TagIndex()
    for report in reports:
        index.add_events(report.events)
    pairs = tuple(find_substring_pairs(index.tags()))
    return TreeReport(
        files=reports,
        substring_pairs=pairs,
        tag_index=index,
        files_scanned=len(rows),
        files_skipped=skipped,
    )


__all__ = ["TreeReport", "TreeSummary", "build_file_report", "build_tree_report"]
