"""Marker tokenizer: raw file text to an ordered sequence of START/END events."""

from __future__ import annotations

import re
from typing import Iterator

from ..core.fs import looks_binary
from .model import MarkerEvent, MarkerKind

# One pattern for both keywords so markers sharing a line keep their reading order.
MARKER_PATTERN = re.compile(r"\[(START|END)\s+([^\]]+)\]")


def iter_line_markers(line: str) -> Iterator[tuple[MarkerKind, str]]:
    for match in MARKER_PATTERN.finditer(line):
        tag = match.group(2).strip()
        if tag:
            yield MarkerKind(match.group(1)), tag


def tokenize(text: str, file: str = "") -> tuple[MarkerEvent, ...]:
    """Return the markers found in ``text`` ordered by line, then by position within the line.

    Tag names are kept verbatim after trimming: no case folding and no
    whitespace collapsing, so ``[START a b]`` and ``[START a  b]`` are
    distinct tags. Binary content yields no events.
    """
    if not text or looks_binary(text):
        return ()
    events: list[MarkerEvent] = []
    for lineno, line in enumerate(text.split("\n"), start=1):
        if "[" not in line:
            continue
        for kind, tag in iter_line_markers(line):
            events.append(MarkerEvent(kind=kind, tag=tag, line=lineno, file=file))
    return tuple(events)
