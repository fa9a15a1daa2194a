from __future__ import annotations

import pytest

from snipcheck.markers.ambiguity import TagIndex, find_substring_pairs, group_by_substring, most_ambiguous
from snipcheck.markers.model import SubstringPair
from snipcheck.markers.tokenizer import tokenize


def test_single_substring_pair_is_reported() -> None:
    assert find_substring_pairs({"foo", "foo_bar", "baz"}) == [SubstringPair("foo", "foo_bar")]


def test_containment_is_anywhere_in_the_superstring() -> None:
    pairs = find_substring_pairs(["tile", "animated_tile_list", "m3_tile"])
    assert pairs == [
        SubstringPair("tile", "animated_tile_list"),
        SubstringPair("tile", "m3_tile"),
    ]


def test_comparison_is_case_sensitive_and_exact() -> None:
    assert find_substring_pairs(["Foo", "foo_bar", "foo bar", "foo  bar"]) == []


def test_duplicate_tags_collapse_and_identical_names_never_pair() -> None:
    assert find_substring_pairs(["a", "a", "a"]) == []


def test_chains_report_every_containment() -> None:
    pairs = find_substring_pairs(["a", "ab", "abc"])
    assert pairs == [SubstringPair("a", "ab"), SubstringPair("a", "abc"), SubstringPair("ab", "abc")]


def test_groups_rank_by_collision_count() -> None:
    pairs = find_substring_pairs(["tile", "tile_a", "tile_b", "x", "x_y", "b"])
    groups = group_by_substring(pairs)
    assert [(g.substring, g.superstrings) for g in groups] == [
        ("tile", ("tile_a", "tile_b")),
        ("b", ("tile_b",)),
        ("x", ("x_y",)),
    ]
    top = most_ambiguous(groups)
    assert top is not None and top.substring == "tile" and top.collisions == 2


def test_most_ambiguous_of_nothing_is_none() -> None:
    assert most_ambiguous([]) is None


def test_tag_index_tracks_files_and_occurrences() -> None:
    index = TagIndex()
    index.add_events(tokenize("[START foo]\n[END foo]\n[START foo]\n[END foo]\n", "A.java"))
    index.add_events(tokenize("[START foo]\n[END foo]\n[END only_end]\n", "A.kt"))
    loc = index.locations("foo")
    assert loc.files == ("A.java", "A.kt")
    assert loc.occurrences == 3
    assert "only_end" not in index
    assert index.tags() == ["foo"]
    assert index.total_occurrences == 3


def test_groups_carry_locations_when_given_an_index() -> None:
    index = TagIndex()
    index.add_events(tokenize("[START foo]\n[START foo_bar]\n", "one.py"))
    (group,) = group_by_substring(find_substring_pairs(index.tags()), index)
    assert group.locations is not None
    assert group.locations.files == ("one.py",)


def test_substring_pair_rejects_non_containment() -> None:
    with pytest.raises(ValueError):
        SubstringPair("foo", "foo")
    with pytest.raises(ValueError):
        SubstringPair("zzz", "foo")
    with pytest.raises(ValueError):
        SubstringPair("", "foo")
