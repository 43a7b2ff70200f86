"""Tests for the cut algebra."""

import pytest

from textcut.models.clip import Interval
from textcut.services.cut_algebra import processed_zones, subtract_cut


class TestSubtractCut:
    def test_no_overlap(self):
        assert subtract_cut(Interval(0, 10), Interval(20, 30)) == [Interval(0, 10)]

    def test_touching_edge_keeps_fragment(self):
        assert subtract_cut(Interval(0, 10), Interval(10, 20)) == [Interval(0, 10)]

    def test_middle(self):
        assert subtract_cut(Interval(0, 10), Interval(3, 6)) == [Interval(0, 3), Interval(6, 10)]

    def test_covering(self):
        assert subtract_cut(Interval(5, 10), Interval(0, 20)) == []


class TestProcessedZones:
    def test_two_cuts_in_one_source(self):
        assert processed_zones([(0, 100)], [(20, 40), (60, 80)]) == [
            (0, 20), (40, 60), (80, 100),
        ]

    def test_cut_spanning_two_sources(self):
        assert processed_zones([(0, 50), (60, 100)], [(40, 70)]) == [(0, 40), (70, 100)]

    def test_no_cuts(self):
        assert processed_zones([(10, 20), (30, 40)], []) == [(10, 20), (30, 40)]

    def test_cut_removes_everything(self):
        assert processed_zones([(10, 20)], [(0, 100)]) == []

    def test_unsorted_overlapping_cuts(self):
        assert processed_zones([(0, 100)], [(50, 70), (10, 30), (25, 55)]) == [(0, 10), (70, 100)]

    def test_empty_source_and_cut_ignored(self):
        assert processed_zones([(5, 5), (0, 10)], [(3, 3)]) == [(0, 10)]

    def test_source_order_preserved(self):
        assert processed_zones([(60, 100), (0, 50)], [(40, 70)]) == [(70, 100), (0, 40)]

    @pytest.mark.parametrize(
        "sources,cuts",
        [
            ([(0, 100)], [(20, 40), (60, 80)]),
            ([(0, 50), (60, 100)], [(40, 70)]),
            ([(0, 30), (30, 90)], [(10, 15), (25, 35), (80, 120)]),
        ],
    )
    def test_containment_and_coverage(self, sources, cuts):
        """출력 ⊆ 소스, 출력 ∩ 컷 = ∅, 출력 ∪ (컷 ∩ 소스) = 소스."""
        result = processed_zones(sources, cuts)
        for start, end in result:
            assert any(s <= start and end <= e for s, e in sources)
            assert all(end <= cs or start >= ce for cs, ce in cuts)
        for s, e in sources:
            for frame in range(s, e):
                kept = any(a <= frame < b for a, b in result)
                cut = any(a <= frame < b for a, b in cuts)
                assert kept != cut
