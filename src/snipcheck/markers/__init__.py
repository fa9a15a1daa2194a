"""Snippet marker analysis: tokenizer, nesting validator and substring detector."""

from .aggregate import TreeReport, TreeSummary, build_file_report, build_tree_report
from .ambiguity import AmbiguityGroup, TagIndex, find_substring_pairs, group_by_substring
from .model import (
    FileReport,
    MarkerEvent,
    MarkerKind,
    MismatchedEnd,
    NestedPair,
    StructuralError,
    SubstringPair,
    UnclosedStart,
    UnmatchedEnd,
)
from .nesting import MismatchPolicy, NestingResult, validate_nesting
from .tokenizer import tokenize

__all__ = [
    "AmbiguityGroup",
    "FileReport",
    "MarkerEvent",
    "MarkerKind",
    "MismatchPolicy",
    "MismatchedEnd",
    "NestedPair",
    "NestingResult",
    "StructuralError",
    "SubstringPair",
    "TagIndex",
    "TreeReport",
    "TreeSummary",
    "UnclosedStart",
    "UnmatchedEnd",
    "build_file_report",
    "build_tree_report",
    "find_substring_pairs",
    "group_by_substring",
    "tokenize",
    "validate_nesting",
]
