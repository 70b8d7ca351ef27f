"""
Tests for the 2-D k-d tree.
"""

import math
import random
import unittest

from GeoReverse.spatial import SpatialIndex


def brute_force(points, lat, lon, k):
    distances = sorted(
        ((p_lat - lat) ** 2 + (p_lon - lon) ** 2, idx) for idx, (p_lat, p_lon) in enumerate(points)
    )
    return distances[:k]


class TestSpatialIndex(unittest.TestCase):

    def setUp(self):
        rng = random.Random(42)
        self.points = [(rng.uniform(-90, 90), rng.uniform(-180, 180)) for _ in range(2000)]
        self.index = SpatialIndex(self.points, seed=7)
        self.queries = [(rng.uniform(-90, 90), rng.uniform(-180, 180)) for _ in range(200)]

    def test_nearest_matches_brute_force(self):
        for lat, lon in self.queries:
            distance, idx = self.index.nearest(lat, lon)[0]
            expected_distance, _ = brute_force(self.points, lat, lon, 1)[0]
            self.assertAlmostEqual(distance, expected_distance)
            p_lat, p_lon = self.points[idx]
            self.assertAlmostEqual((p_lat - lat) ** 2 + (p_lon - lon) ** 2, distance)

    def test_k_nearest_sorted_and_exact(self):
        for lat, lon in self.queries[:50]:
            result = self.index.nearest(lat, lon, k=10)
            self.assertEqual(len(result), 10)
            distances = [d for d, _ in result]
            self.assertEqual(distances, sorted(distances))
            expected = [d for d, _ in brute_force(self.points, lat, lon, 10)]
            for got, want in zip(distances, expected):
                self.assertAlmostEqual(got, want)

    def test_stored_point_is_its_own_nearest(self):
        for idx in (0, 17, 999, 1999):
            lat, lon = self.points[idx]
            distance, found = self.index.nearest(lat, lon)[0]
            self.assertEqual(distance, 0.0)
            self.assertEqual(self.index.point(found), self.points[idx])

    def test_k_larger_than_size_returns_everything(self):
        index = SpatialIndex([(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)])
        result = index.nearest(0.1, 0.1, k=10)
        self.assertEqual([idx for _, idx in result], [0, 1, 2])

    def test_invalid_k(self):
        with self.assertRaises(ValueError):
            self.index.nearest(0.0, 0.0, k=0)

    def test_empty_index(self):
        index = SpatialIndex([])
        self.assertEqual(len(index), 0)
        self.assertEqual(index.depth, 0)
        self.assertEqual(index.nearest(10.0, 10.0), [])

    def test_single_point(self):
        index = SpatialIndex.build([(48.85, 2.35)])
        self.assertEqual(index.nearest(-40.0, 170.0), [((48.85 + 40.0) ** 2 + (2.35 - 170.0) ** 2, 0)])

    def test_duplicates_and_ties(self):
        points = [(1.0, 1.0)] * 50 + [(-1.0, -1.0)] * 50
        index = SpatialIndex(points)
        result = index.nearest(0.0, 0.0, k=100)
        self.assertEqual(len(result), 100)
        self.assertEqual(sorted(idx for _, idx in result), list(range(100)))
        distance, idx = index.nearest(0.9, 0.9)[0]
        self.assertLess(idx, 50)

    def test_brute_force_agreement_across_sizes(self):
        rng = random.Random(11)
        for size in (1, 2, 3, 7, 100, 10000):
            points = [(rng.uniform(-90, 90), rng.uniform(-180, 180)) for _ in range(size)]
            index = SpatialIndex(points, seed=size)
            for _ in range(25):
                lat, lon = rng.uniform(-90, 90), rng.uniform(-180, 180)
                distance, idx = index.nearest(lat, lon)[0]
                expected_distance, _ = brute_force(points, lat, lon, 1)[0]
                self.assertAlmostEqual(distance, expected_distance)
                p_lat, p_lon = points[idx]
                self.assertAlmostEqual((p_lat - lat) ** 2 + (p_lon - lon) ** 2, expected_distance)

    def test_balanced_depth(self):
        self.assertEqual(len(self.index), 2000)
        self.assertEqual(self.index.depth, math.floor(math.log2(2000)) + 1)

    def test_accepts_a_generator(self):
        index = SpatialIndex((lat, lon) for lat, lon in self.points[:10])
        self.assertEqual(len(index), 10)


if __name__ == "__main__":
    unittest.main()
