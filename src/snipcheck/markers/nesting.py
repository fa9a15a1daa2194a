"""Stack-based nesting validator for one file's marker events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .model import (
    MarkerEvent,
    MarkerKind,
    MismatchedEnd,
    NestedPair,
    RegionFrame,
    StructuralError,
    UnclosedStart,
    UnmatchedEnd,
)


class MismatchPolicy(str, Enum):
    """How an END whose tag differs from the innermost open region is resolved.

    ``POP`` treats the END as closing the innermost region whatever its name.
    ``SEARCH`` closes down to the nearest open region with the same tag, and
    reports an unmatched END when no open region carries that tag.
    """

    POP = "pop"
    SEARCH = "search"


@dataclass(frozen=True)
class NestingResult:
    nested_pairs: tuple[NestedPair, ...] = ()
    errors: tuple[StructuralError, ...] = ()
    max_depth: int = 0

    @property
    def is_clean(self) -> bool:
        return not self.errors


@dataclass
class _RegionStack:
    """Open regions of a single file, innermost last."""

    frames: list[RegionFrame] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def top(self) -> RegionFrame:
        return self.frames[-1]

    def push(self, frame: RegionFrame) -> int:
        self.frames.append(frame)
        return len(self.frames)

    def pop(self) -> RegionFrame:
        return self.frames.pop()

    def find(self, tag: str) -> int:
        """Index of the innermost open frame named ``tag``, or -1."""
        for index in range(len(self.frames) - 1, -1, -1):
            if self.frames[index].tag == tag:
                return index
        return -1


def _close_popping(stack: _RegionStack, event: MarkerEvent, errors: list[StructuralError]) -> None:
    if not stack:
        errors.append(UnmatchedEnd(tag=event.tag, line=event.line))
        return
    top = stack.pop()
    if top.tag != event.tag:
        errors.append(MismatchedEnd(expected_tag=top.tag, got_tag=event.tag, start_line=top.line, end_line=event.line))


def _close_searching(stack: _RegionStack, event: MarkerEvent, errors: list[StructuralError]) -> None:
    index = stack.find(event.tag)
    if index < 0:
        errors.append(UnmatchedEnd(tag=event.tag, line=event.line))
        return
    while len(stack) > index + 1:
        skipped = stack.pop()
        errors.append(
            MismatchedEnd(expected_tag=skipped.tag, got_tag=event.tag, start_line=skipped.line, end_line=event.line)
        )
    stack.pop()


_CLOSERS = {
    MismatchPolicy.POP: _close_popping,
    MismatchPolicy.SEARCH: _close_searching,
}


def validate_nesting(events: Iterable[MarkerEvent], policy: MismatchPolicy | str = MismatchPolicy.POP) -> NestingResult:
    """Walk ``events`` in file order and report nesting and pairing problems.

    Every START nested inside an open region yields a ``NestedPair`` whose
    ``outer`` is the innermost open region at that moment and whose ``depth``
    counts all open regions including the new one. Regions still open at the
    end become ``UnclosedStart`` errors, outermost first. The stack is local to
    the call, so files can be validated concurrently.
    """
    close = _CLOSERS[MismatchPolicy(policy)]
    stack = _RegionStack()
    nested: list[NestedPair] = []
    errors: list[StructuralError] = []
    max_depth = 0

    for event in events:
        if event.kind is MarkerKind.START:
            if stack:
                nested.append(NestedPair(outer=stack.top.as_event(), inner=event, depth=len(stack) + 1))
            # duplicate open tags nest like any other
            max_depth = max(max_depth, stack.push(RegionFrame.opened_by(event)))
        else:
            close(stack, event, errors)

    errors.extend(UnclosedStart(tag=frame.tag, line=frame.line) for frame in stack.frames)
    return NestingResult(nested_pairs=tuple(nested), errors=tuple(errors), max_depth=max_depth)


__all__ = ["MismatchPolicy", "NestingResult", "validate_nesting"]
