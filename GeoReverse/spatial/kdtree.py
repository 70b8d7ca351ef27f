"""
Two-dimensional k-d tree over (latitude, longitude) points.

The tree is implicit: construction permutes an array of point indices so
that every segment ``[lo, hi)`` has its median at ``(lo + hi) // 2``,
split on latitude at even depths and longitude at odd depths. The index
stores only coordinates and positions; callers keep their own record list
and map the returned positions back to it.

Distances are squared Euclidean on raw degrees. This is adequate for
picking the nearest city but is not a great-circle distance: it overstates
east-west separation away from the equator and ignores the antimeridian.
"""

import heapq
import random
import time
from typing import Iterable, List, Optional, Sequence, Tuple

from GeoReverse.utils.logging import get_logger

logger = get_logger(__name__)

Point = Tuple[float, float]


class SpatialIndex:
    """
    Immutable k-d tree supporting k-nearest-neighbour queries.

    Args:
        points: (latitude, longitude) pairs. Position ``i`` in this sequence
            is the index reported by ``nearest``.
        seed: Optional seed for the pivot choice during construction
    """

    def __init__(self, points: Iterable[Sequence[float]], seed: Optional[int] = None):
        start_time = time.time()
        self._lats: List[float] = []
        self._lons: List[float] = []
        for lat, lon in points:
            self._lats.append(float(lat))
            self._lons.append(float(lon))

        self._order: List[int] = list(range(len(self._lats)))
        self._rng = random.Random(seed)
        self._depth = self._build()
        del self._rng

        if self._order:
            logger.info(f"Built spatial index over {len(self)} points "
                        f"(depth {self._depth}) in {time.time() - start_time:.2f} seconds")

    @classmethod
    def build(cls, points: Iterable[Sequence[float]], seed: Optional[int] = None) -> 'SpatialIndex':
        return cls(points, seed=seed)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"SpatialIndex(size={len(self)}, depth={self._depth})"

    @property
    def depth(self) -> int:
        """Number of levels in the tree (0 when empty)."""
        return self._depth

    def point(self, index: int) -> Point:
        return self._lats[index], self._lons[index]

    def _axis(self, depth: int) -> List[float]:
        return self._lats if depth % 2 == 0 else self._lons

    def _build(self) -> int:
        max_depth = 0
        stack = [(0, len(self._order), 0)]
        while stack:
            lo, hi, depth = stack.pop()
            if lo >= hi:
                continue
            max_depth = max(max_depth, depth + 1)
            mid = (lo + hi) // 2
            self._select(lo, hi, mid, self._axis(depth))
            stack.append((lo, mid, depth + 1))
            stack.append((mid + 1, hi, depth + 1))
        return max_depth

    def _select(self, lo: int, hi: int, nth: int, coords: List[float]) -> None:
        """Randomized quickselect: place the nth smallest of order[lo:hi] at nth."""
        order = self._order
        while hi - lo > 1:
            pivot = coords[order[self._rng.randrange(lo, hi)]]
            # Three-way partition keeps runs of equal coordinates linear
            lt, i, gt = lo, lo, hi
            while i < gt:
                value = coords[order[i]]
                if value < pivot:
                    order[lt], order[i] = order[i], order[lt]
                    lt += 1
                    i += 1
                elif value > pivot:
                    gt -= 1
                    order[i], order[gt] = order[gt], order[i]
                else:
                    i += 1
            if nth < lt:
                hi = lt
            elif nth >= gt:
                lo = gt
            else:
                return

    def nearest(self, lat: float, lon: float, k: int = 1) -> List[Tuple[float, int]]:
        """
        Find the ``k`` points closest to (lat, lon).

        Returns:
            Up to ``k`` (squared_distance, point_index) pairs, closest first.
            Equidistant points may come back in any order.

        Raises:
            ValueError: If k is less than 1
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        if not self._order:
            return []

        # Max-heap of the best k so far, stored as (-distance, index)
        best: List[Tuple[float, int]] = []
        lats, lons, order = self._lats, self._lons, self._order

        def visit(lo: int, hi: int, depth: int) -> None:
            if lo >= hi:
                return
            mid = (lo + hi) // 2
            idx = order[mid]
            d_lat = lat - lats[idx]
            d_lon = lon - lons[idx]
            distance = d_lat * d_lat + d_lon * d_lon

            if len(best) < k:
                heapq.heappush(best, (-distance, idx))
            elif distance < -best[0][0]:
                heapq.heapreplace(best, (-distance, idx))

            diff = d_lat if depth % 2 == 0 else d_lon
            if diff < 0:
                near, far = (lo, mid), (mid + 1, hi)
            else:
                near, far = (mid + 1, hi), (lo, mid)

            visit(near[0], near[1], depth + 1)
            if len(best) < k or diff * diff < -best[0][0]:
                visit(far[0], far[1], depth + 1)

        visit(0, len(order), 0)
        return sorted((-neg_distance, idx) for neg_distance, idx in best)
