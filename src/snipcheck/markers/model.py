from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class MarkerKind(str, Enum):
    START = "START"
    END = "END"


@dataclass(frozen=True)
class MarkerEvent:
    kind: MarkerKind
    tag: str
    line: int
    file: str = ""

    def __post_init__(self) -> None:
        kind = self.kind if isinstance(self.kind, MarkerKind) else MarkerKind(str(self.kind).strip().upper())
        tag = str(self.tag).strip()
        if not tag:
            raise ValueError("marker tag cannot be empty")
        if int(self.line) < 1:
            raise ValueError(f"marker line must be 1-based, got {self.line}")
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "line", int(self.line))
        object.__setattr__(self, "file", str(self.file))

    @property
    def is_start(self) -> bool:
        return self.kind is MarkerKind.START


@dataclass(frozen=True)
class RegionFrame:
    """An open START marker waiting for its END."""

    tag: str
    line: int
    file: str = ""

    @classmethod
    def opened_by(cls, event: MarkerEvent) -> "RegionFrame":
        return cls(tag=event.tag, line=event.line, file=event.file)

    def as_event(self) -> MarkerEvent:
        return MarkerEvent(MarkerKind.START, self.tag, self.line, self.file)


@dataclass(frozen=True)
class NestedPair:
    outer: MarkerEvent
    inner: MarkerEvent
    depth: int

    def __post_init__(self) -> None:
        if int(self.depth) < 2:
            raise ValueError(f"nested pair depth must be >= 2, got {self.depth}")
        object.__setattr__(self, "depth", int(self.depth))

    def to_dict(self) -> dict[str, object]:
        return {
            "outer": {"tag": self.outer.tag, "line": self.outer.line},
            "inner": {"tag": self.inner.tag, "line": self.inner.line},
            "depth": self.depth,
        }


@dataclass(frozen=True)
class StructuralError:
    """Base of the structural findings; every variant exposes a `line` that locates it."""

    code: ClassVar[str] = "STRUCTURAL_ERROR"

    @property
    def message(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, object]:
        raise NotImplementedError


@dataclass(frozen=True)
class UnmatchedEnd(StructuralError):
    code: ClassVar[str] = "UNMATCHED_END"
    tag: str = ""
    line: int = 0

    @property
    def message(self) -> str:
        return f"UNMATCHED END: [END {self.tag}] has no corresponding START"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.code, "tag": self.tag, "line": self.line}


@dataclass(frozen=True)
class MismatchedEnd(StructuralError):
    code: ClassVar[str] = "MISMATCHED_END"
    expected_tag: str = ""
    got_tag: str = ""
    start_line: int = 0
    end_line: int = 0

    @property
    def line(self) -> int:
        return self.end_line

    @property
    def message(self) -> str:
        return (
            f"MISMATCHED: Expected [END {self.expected_tag}] but got [END {self.got_tag}] "
            f"(START was at line {self.start_line})"
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.code,
            "expected": self.expected_tag,
            "got": self.got_tag,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }


@dataclass(frozen=True)
class UnclosedStart(StructuralError):
    code: ClassVar[str] = "UNCLOSED_START"
    tag: str = ""
    line: int = 0

    @property
    def message(self) -> str:
        return f"UNCLOSED: [START {self.tag}] has no corresponding END"

    def to_dict(self) -> dict[str, object]:
        return {"type": self.code, "tag": self.tag, "line": self.line}


@dataclass(frozen=True, order=True)
class SubstringPair:
    substring: str
    superstring: str

    def __post_init__(self) -> None:
        if not self.substring:
            raise ValueError("substring cannot be empty")
        if self.substring == self.superstring or self.substring not in self.superstring:
            raise ValueError(f"`{self.substring}` is not a proper substring of `{self.superstring}`")

    def to_dict(self) -> dict[str, object]:
        return {"substring": self.substring, "superstring": self.superstring}


@dataclass(frozen=True)
class FileReport:
    file: str
    events: tuple[MarkerEvent, ...]
    nested_pairs: tuple[NestedPair, ...] = ()
    errors: tuple[StructuralError, ...] = ()
    max_depth: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "nested_pairs", tuple(self.nested_pairs))
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def start_tags(self) -> tuple[str, ...]:
        return tuple(event.tag for event in self.events if event.is_start)

    @property
    def has_nesting(self) -> bool:
        return bool(self.nested_pairs)

    @property
    def is_clean(self) -> bool:
        return not self.errors


__all__ = [
    "FileReport",
    "MarkerEvent",
    "MarkerKind",
    "MismatchedEnd",
    "NestedPair",
    "RegionFrame",
    "StructuralError",
    "SubstringPair",
    "UnclosedStart",
    "UnmatchedEnd",
]
