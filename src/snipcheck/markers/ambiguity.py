"""Detect tag names that are literal substrings of other tag names.

A search for ``[START foo`` also hits ``[START foo_bar]``; the detector lists
every such collision so refactors can account for it. Containment is exact and
case-sensitive, matching what a plain text search would hit.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from .model import MarkerEvent, MarkerKind, SubstringPair


@dataclass(frozen=True)
class TagLocations:
    tag: str
    files: tuple[str, ...]
    occurrences: int


@dataclass
class TagIndex:
    """Where each START tag occurs, files kept in first-seen order."""

    _files: dict[str, list[str]] = field(default_factory=dict)
    _counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def add(self, tag: str, file: str) -> None:
        files = self._files.setdefault(tag, [])
        if file not in files:
            files.append(file)
        self._counts[tag] += 1

    def add_events(self, events: Iterable[MarkerEvent]) -> None:
        for event in events:
            if event.kind is MarkerKind.START:
                self.add(event.tag, event.file)

    def tags(self) -> list[str]:
        return sorted(self._files)

    def locations(self, tag: str) -> TagLocations:
        return TagLocations(tag=tag, files=tuple(self._files.get(tag, ())), occurrences=self._counts.get(tag, 0))

    @property
    def total_occurrences(self) -> int:
        return sum(self._counts.values())

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, tag: object) -> bool:
        return tag in self._files


@dataclass(frozen=True)
class AmbiguityGroup:
    substring: str
    superstrings: tuple[str, ...]
    locations: TagLocations | None = None

    @property
    def collisions(self) -> int:
        return len(self.superstrings)


def find_substring_pairs(tags: Iterable[str]) -> list[SubstringPair]:
    """Return every ``(substring, superstring)`` pair among the distinct ``tags``.

    Quadratic in the number of distinct tags, which stays small for snippet
    identifiers.
    """
    unique = sorted({tag for tag in tags if tag})
    pairs: list[SubstringPair] = []
    for shorter in unique:
        for longer in unique:
            if len(longer) > len(shorter) and shorter in longer:
                pairs.append(SubstringPair(substring=shorter, superstring=longer))
    pairs.sort()
    return pairs


def group_by_substring(
    pairs: Iterable[SubstringPair],
    index: TagIndex | None = None,
) -> list[AmbiguityGroup]:
    """Collect superstrings per substring, most colliding substring first."""
    grouped: dict[str, set[str]] = defaultdict(set)
    for pair in pairs:
        grouped[pair.substring].add(pair.superstring)
    groups = [
        AmbiguityGroup(
            substring=sub,
            superstrings=tuple(sorted(supers)),
            locations=index.locations(sub) if index is not None else None,
        )
        for sub, supers in grouped.items()
    ]
    groups.sort(key=lambda group: (-group.collisions, group.substring))
    return groups


def most_ambiguous(groups: list[AmbiguityGroup]) -> AmbiguityGroup | None:
    return groups[0] if groups else None


__all__ = [
    "AmbiguityGroup",
    "TagIndex",
    "TagLocations",
    "find_substring_pairs",
    "group_by_substring",
    "most_ambiguous",
]
