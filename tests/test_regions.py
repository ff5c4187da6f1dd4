"""Tests for region assignment."""

import numpy as np
import pytest

from py_gm.core.alea_prng import AleaPRNG
from py_gm.core.cities import place_cities
from py_gm.core.errors import InsufficientFaces, RegionImbalance
from py_gm.core.gm import NO_REGION, FaceType, GMMode
from py_gm.core.gm_analysis import count_components
from py_gm.core.regions import (
    RegionOptions, assign_regions, grow_regions, pick_seeds,
    rebalance_regions, region_sizes,
)
from py_gm.core.topology import build

LINE_10 = [[1]] + [[i - 1, i + 1] for i in range(1, 9)] + [[8]]
STAR_4 = [[1, 2, 3], [0], [0], [0]]


class TestPickSeeds:
    """Test farthest-point seeding."""

    def test_line_seeds(self):
        """Test seeds spread to the ends and then the middle."""
        types = np.zeros(10, dtype=np.uint8)
        assert pick_seeds(types, LINE_10, 3, 0) == [0, 9, 4]

    def test_single_player(self):
        """Test one player keeps the first seed."""
        types = np.zeros(10, dtype=np.uint8)
        assert pick_seeds(types, LINE_10, 1, 3) == [3]

    def test_seeds_skip_cities(self):
        """Test a city is never chosen as a seed."""
        lattice = build(GMMode.SQUARE, 25)
        types = lattice.face_types.copy()
        types[24] = FaceType.CITY
        seeds = pick_seeds(types, lattice.edges, 2, 0)
        # The far corner is a city, so the next farthest faces are its neighbors
        assert seeds[1] in (19, 23)

    def test_seeds_distinct(self):
        lattice = build(GMMode.HEXAGON, 60)
        seeds = pick_seeds(lattice.face_types, lattice.edges, 6, 10)
        assert len(set(seeds)) == 6


class TestGrowRegions:
    """Test round-robin flood fill."""

    def test_line_split_evenly(self):
        """Test two seeds at the ends split a line in half."""
        types = np.zeros(10, dtype=np.uint8)
        regions = grow_regions(types, LINE_10, [0, 9])
        np.testing.assert_array_equal(regions, [0, 0, 0, 0, 0, 1, 1, 1, 1, 1])

    def test_cities_left_unassigned(self):
        """Test cities keep NO_REGION."""
        types = np.zeros(10, dtype=np.uint8)
        types[9] = FaceType.CITY
        regions = grow_regions(types, LINE_10, [0, 8])
        assert regions[9] == NO_REGION
        assert np.all(regions[:9] != NO_REGION)

    def test_claims_every_plain_face(self):
        """Test no plain face is left over."""
        lattice = build(GMMode.TRIANGLE, 50)
        seeds = pick_seeds(lattice.face_types, lattice.edges, 4, 0)
        regions = grow_regions(lattice.face_types, lattice.edges, seeds)
        assert np.all(regions != NO_REGION)


class TestRebalanceRegions:
    """Test moving faces between bordering regions."""

    def test_single_donor(self):
        """Test a large region hands faces to a small neighbor."""
        # 4x3 square grid, one region squeezed into the far corner
        lattice = build(GMMode.SQUARE, 12)
        regions = np.zeros(12, dtype=np.int16)
        regions[11] = 1
        seeds = [0, 11]

        assert rebalance_regions(regions, lattice.edges, seeds, 2)
        np.testing.assert_array_equal(region_sizes(regions, 2), [6, 6])
        for region in range(2):
            assert count_components(lattice.edges, regions == region) == 1
        assert regions[0] == 0
        assert regions[11] == 1

    def test_already_balanced(self):
        """Test balanced regions are left alone."""
        types = np.zeros(10, dtype=np.uint8)
        regions = grow_regions(types, LINE_10, [0, 9])
        before = regions.copy()
        assert rebalance_regions(regions, LINE_10, [0, 9], 2)
        np.testing.assert_array_equal(regions, before)

    def test_no_movable_face(self):
        """Test a donor that can only give up its seed cannot rebalance."""
        # Star: the hub is region 0's seed and leaves only touch the hub
        regions = np.array([0, 0, 0, 1], dtype=np.int16)
        assert not rebalance_regions(regions, STAR_4, [0, 3], 2)
        np.testing.assert_array_equal(regions, [0, 0, 0, 1])


class TestAssignRegions:
    """Test the full assignment."""

    def setup_method(self):
        self.lattice = build(GMMode.SQUARE, 49)
        self.types = place_cities(self.lattice.face_types, self.lattice.edges, 3, AleaPRNG("regions"))

    def test_assignment(self):
        """Test regions cover the plain faces, balanced and contiguous."""
        regions, seeds = assign_regions(self.types, self.lattice.edges, 3, AleaPRNG("regions"))

        sizes = region_sizes(regions, 3)
        assert sizes.sum() == int(np.sum(self.types == FaceType.PLAIN))
        assert sizes.max() - sizes.min() <= 1
        for region in range(3):
            assert count_components(self.lattice.edges, regions == region) == 1
            assert regions[seeds[region]] == region

    def test_cities_have_no_region(self):
        """Test cities are not owned."""
        regions, _ = assign_regions(self.types, self.lattice.edges, 3, AleaPRNG("regions"))
        assert np.all(regions[self.types == FaceType.CITY] == NO_REGION)

    def test_input_untouched(self):
        """Test face types are not modified."""
        before = self.types.copy()
        assign_regions(self.types, self.lattice.edges, 3, AleaPRNG("regions"))
        np.testing.assert_array_equal(self.types, before)

    def test_insufficient_faces(self):
        """Test more players than plain faces is rejected."""
        lattice = build(GMMode.SQUARE, 4)
        types = lattice.face_types.copy()
        types[0] = FaceType.CITY
        with pytest.raises(InsufficientFaces) as exc_info:
            assign_regions(types, lattice.edges, 4, AleaPRNG("few"))
        assert exc_info.value.available == 3

    def test_one_face_per_player(self):
        """Test every face becomes its own region."""
        lattice = build(GMMode.SQUARE, 4)
        regions, seeds = assign_regions(lattice.face_types, lattice.edges, 4, AleaPRNG("exact"))
        assert sorted(regions.tolist()) == [0, 1, 2, 3]
        assert sorted(seeds) == [0, 1, 2, 3]

    def test_unbalanceable_graph(self):
        """Test a graph with no even contiguous split raises RegionImbalance."""
        types = np.zeros(4, dtype=np.uint8)
        with pytest.raises(RegionImbalance) as exc_info:
            assign_regions(types, STAR_4, 2, AleaPRNG("star"))
        assert sorted(exc_info.value.sizes) == [1, 3]

    def test_default_options(self):
        """Test default option values."""
        assert RegionOptions().region_attempts == 8


@pytest.mark.parametrize("mode", list(GMMode))
@pytest.mark.parametrize("players", [2, 3, 5, 7])
def test_regions_balanced_and_contiguous(mode, players):
    """Sizes within one face and every region in one piece."""
    lattice = build(mode, 16 + 24 * players)
    prng = AleaPRNG(f"balance-{mode}-{players}")
    types = place_cities(lattice.face_types, lattice.edges, players, prng)
    regions, seeds = assign_regions(types, lattice.edges, players, prng)

    sizes = region_sizes(regions, players)
    assert sizes.max() - sizes.min() <= 1
    for region in range(players):
        assert count_components(lattice.edges, regions == region) == 1
