"""Tests for map invariant checks."""

import numpy as np

from py_gm.core.gm import GM, FaceType, GMMode
from py_gm.core.gm_analysis import (
    analyze_gm, check_gm, count_components, has_adjacent_cities, is_symmetric,
)
from py_gm.core.topology import build


def make_gm(face_types, regions, edges, players=2, seeds=(0, 1)):
    return GM.from_arrays(
        mode=GMMode.SQUARE,
        width=2,
        height=2,
        players=players,
        seed="analysis",
        face_types=np.array(face_types),
        regions=np.array(regions),
        edges=edges,
        seeds=seeds,
    )


class TestGraphHelpers:
    """Test low level graph checks."""

    def test_components(self):
        """Test component counts with and without a mask."""
        edges = [[1], [0], [3], [2]]
        assert count_components(edges) == 2
        assert count_components(edges, np.array([True, True, False, False])) == 1
        assert count_components(edges, np.array([True, False, True, False])) == 2

    def test_symmetry(self):
        """Test one-way edges are detected."""
        assert is_symmetric([[1], [0]])
        assert not is_symmetric([[1], []])

    def test_adjacent_cities(self):
        edges = [[1], [0, 2], [1]]
        assert has_adjacent_cities(np.array([1, 1, 0]), edges)
        assert not has_adjacent_cities(np.array([1, 0, 1]), edges)


class TestCheckGM:
    """Test invariant reporting."""

    def setup_method(self):
        # 2x2 square: 0-1, 0-2, 1-3, 2-3
        self.edges = build(GMMode.SQUARE, 4).edges

    def test_sound_map(self):
        """Test a valid map reports no problems."""
        gm = make_gm([0, 0, 0, 1], [0, 1, 0, -1], self.edges, seeds=(0, 1))
        assert check_gm(gm) == []

    def test_adjacent_cities_flagged(self):
        """Test touching cities are reported."""
        gm = make_gm([0, 1, 0, 1], [0, -1, 0, -1], self.edges, players=1, seeds=(0,))
        assert "two cities share an edge" in check_gm(gm)

    def test_region_gap_flagged(self):
        """Test uneven regions are reported."""
        gm = make_gm([0, 0, 0, 0], [0, 0, 0, 1], self.edges, seeds=(0, 3))
        assert "region sizes differ by 2" in check_gm(gm)

    def test_split_region_flagged(self):
        """Test split regions are reported."""
        gm = make_gm([0, 0, 0, 0], [0, 1, 1, 0], self.edges, seeds=(0, 1))
        assert "a region is not contiguous" in check_gm(gm)

    def test_asymmetric_edges_flagged(self):
        """Test one-way edges are reported."""
        gm = make_gm([0, 0, 0, 0], [0, 0, 1, 1], [[1, 2], [0, 3], [0, 3], [2]], seeds=(0, 2))
        assert "adjacency is not symmetric" in check_gm(gm)

    def test_bad_neighbor_index(self):
        """Test out-of-range neighbors are reported."""
        gm = make_gm([0, 0, 0, 0], [0, 0, 1, 1], [[1, 9], [0], [3], [2]], seeds=(0, 2))
        assert "face 0 lists a neighbor outside the map" in check_gm(gm)

    def test_report(self):
        """Test the summary report fields."""
        gm = make_gm([0, 0, 0, 1], [0, 1, 0, -1], self.edges, seeds=(0, 1))
        report = analyze_gm(gm)
        assert report.faces == 4
        assert report.edges == 4
        assert report.cities == [3]
        assert report.region_sizes == [2, 1]
        assert report.region_gap == 1
        assert report.mode == "SQUARE"
        assert gm.face(3).type == FaceType.CITY
