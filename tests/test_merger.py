"""
Unit tests for ResultMerger.
Verifies union across units, duplicate filtering and order independence.
"""
import itertools

from dupcheck.core.merger import ResultMerger
from dupcheck.core.models import FileRef

H1 = b"\x01" * 16
H2 = b"\x02" * 16
H3 = b"\x03" * 16


def unit_maps():
    return [
        {H1: {FileRef("/a/1", 10)}, H2: {FileRef("/a/2", 20)}},
        {H1: {FileRef("/b/1", 10)}, H3: {FileRef("/b/3", 30)}},
        {H1: {FileRef("/top/1", 10)}, H2: {FileRef("/top/2", 20)}},
    ]


class TestResultMerger:

    def test_merge_unions_files_per_hash(self):
        merged = ResultMerger.merge(unit_maps())
        assert merged[H1] == frozenset({FileRef("/a/1"), FileRef("/b/1"), FileRef("/top/1")})
        assert merged[H2] == frozenset({FileRef("/a/2"), FileRef("/top/2")})
        assert merged[H3] == frozenset({FileRef("/b/3")})

    def test_filter_keeps_groups_of_two_or_more(self):
        duplicates = ResultMerger.merge_duplicates(unit_maps())
        assert set(duplicates) == {H1, H2}
        assert all(len(files) >= 2 for files in duplicates.values())

    def test_merge_is_commutative(self):
        maps = unit_maps()
        expected = ResultMerger.merge_duplicates(maps)
        for permutation in itertools.permutations(maps):
            assert ResultMerger.merge_duplicates(permutation) == expected

    def test_merge_is_idempotent(self):
        maps = unit_maps()
        assert ResultMerger.merge(maps + maps) == ResultMerger.merge(maps)

    def test_same_file_from_two_units_counts_once(self):
        """A path seen twice under one hash is still a single file, not a duplicate."""
        maps = [{H1: {FileRef("/x")}}, {H1: {FileRef("/x")}}]
        assert ResultMerger.merge_duplicates(maps) == {}

    def test_empty_input(self):
        assert ResultMerger.merge([]) == {}
        assert ResultMerger.merge_duplicates([{}, {}]) == {}

    def test_merge_does_not_mutate_inputs(self):
        maps = unit_maps()
        ResultMerger.merge(maps)
        assert maps == unit_maps()
