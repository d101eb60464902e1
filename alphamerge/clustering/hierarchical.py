"""Agglomerative hierarchical clustering over an arbitrary similarity measure.

Points are clustered bottom-up on a dense distance matrix, where
``distance = 1 - similarity``. Pairs at distance >= 1.0 (similarity 0) are
never merged; the remaining tree nodes are emitted with a distance of -1 to
mark them as disconnected, so a tree over n points always has n - 1 nodes.

Performance
-----------
- Distance matrix: O(n^2) memory
- Merging: nearest-neighbour cache per row, O(n^2) typical and O(n^3)
  worst case (complete linkage), Numba-compiled

Examples
--------
>>> import numpy as np
>>> dist = np.array([[0.0, 0.2, 1.0],
...                  [0.2, 0.0, 1.0],
...                  [1.0, 1.0, 0.0]])
>>> clusterer = HierarchicalClusterer()
>>> tree = clusterer.cluster_distance_matrix(dist)
>>> tree
[BinaryTreeNode(left=0, right=1, distance=0.2), BinaryTreeNode(left=0, right=2, distance=-1.0)]
>>> clusterer.extract_clusters(tree)
[[0, 1], [2]]
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple, TypeVar

import numpy as np
from numba import njit

from ..constants import CLUSTER_DISTANCE_THRESHOLD, DISCONNECTED_DISTANCE
from ..exceptions import InvalidInput

T = TypeVar("T")


class Linkage(Enum):
    """Rule for the distance between a merged cluster and the others."""
    SINGLE = "single"      # minimum pairwise distance
    COMPLETE = "complete"  # maximum pairwise distance


@dataclass
class BinaryTreeNode:
    """One merge step of the clustering.

    ``left`` and ``right`` are the smallest original point index of the two
    merged clusters (left < right). ``distance`` is -1 for disconnected nodes.
    """

    left: int
    right: int
    distance: float

    @property
    def is_connected(self) -> bool:
        return self.distance != DISCONNECTED_DISTANCE


@njit
def _nearest_neighbour(dist: np.ndarray, active: np.ndarray, a: int) -> Tuple[int, float]:
    """Closest active index b > a (smallest b on ties), or (-1, inf)."""
    best_b = -1
    best = np.inf
    for b in range(a + 1, dist.shape[0]):
        if active[b] and dist[a, b] < best:
            best = dist[a, b]
            best_b = b
    return best_b, best


@njit
def agglomerate(
    distance_matrix: np.ndarray,
    complete_linkage: bool,
    threshold: float,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Run agglomerative clustering on a dense distance matrix.

    Parameters
    ----------
    distance_matrix : np.ndarray
        Symmetric (n, n) float64 matrix, not modified
    complete_linkage : bool
        Use maximum (complete) instead of minimum (single) linkage
    threshold : float
        Pairs at or above this distance are not merged

    Returns
    -------
    left : np.ndarray (int64)
    right : np.ndarray (int64)
    distance : np.ndarray (float64)
        n - 1 tree nodes in merge order; disconnected nodes have distance -1

    Notes
    -----
    - Ties on the minimum distance go to the lexicographically smallest
      pair (a, b), a < b
    - Cluster b is merged into slot a, so slot a keeps a as its smallest
      member index
    """
    n = distance_matrix.shape[0]
    n_nodes = max(n - 1, 0)

    left = np.empty(n_nodes, dtype=np.int64)
    right = np.empty(n_nodes, dtype=np.int64)
    distance = np.empty(n_nodes, dtype=np.float64)

    dist = distance_matrix.copy()
    active = np.ones(n, dtype=np.bool_)

    # Per row: closest active partner with a higher index, and its distance
    nn = np.full(n, -1, dtype=np.int64)
    nn_dist = np.full(n, np.inf, dtype=np.float64)
    for a in range(n):
        b, d = _nearest_neighbour(dist, active, a)
        nn[a] = b
        nn_dist[a] = d

    n_merged = 0
    while n_merged < n_nodes:
        best = np.inf
        best_a = -1
        for a in range(n):
            if active[a] and nn_dist[a] < best:
                best = nn_dist[a]
                best_a = a

        if best_a < 0 or best >= threshold:
            break
        best_b = nn[best_a]

        left[n_merged] = best_a
        right[n_merged] = best_b
        distance[n_merged] = best
        n_merged += 1

        # Fold cluster b into cluster a
        active[best_b] = False
        nn[best_b] = -1
        nn_dist[best_b] = np.inf
        for k in range(n):
            if active[k] and k != best_a:
                d_a = dist[best_a, k]
                d_b = dist[best_b, k]
                if complete_linkage:
                    new_dist = max(d_a, d_b)
                else:
                    new_dist = min(d_a, d_b)
                dist[best_a, k] = new_dist
                dist[k, best_a] = new_dist

        # Only rows pointing at a or b, and column a, can change
        for k in range(n):
            if not active[k]:
                continue
            if k == best_a or nn[k] == best_a or nn[k] == best_b:
                b, d = _nearest_neighbour(dist, active, k)
                nn[k] = b
                nn_dist[k] = d
            elif k < best_a:
                d = dist[k, best_a]
                if d < nn_dist[k] or (d == nn_dist[k] and best_a < nn[k]):
                    nn[k] = best_a
                    nn_dist[k] = d

    # Join the remaining disconnected clusters to the first one
    first = -1
    for k in range(n):
        if active[k]:
            if first < 0:
                first = k
            else:
                left[n_merged] = first
                right[n_merged] = k
                distance[n_merged] = -1.0
                n_merged += 1

    return left, right, distance


def build_distance_matrix(
    points: Sequence[T],
    similarity: Callable[[T, T], float],
) -> np.ndarray:
    """Dense distance matrix ``1 - similarity(p_i, p_j)`` with zero diagonal.

    Raises
    ------
    InvalidInput
        If ``points`` is empty
    """
    n = len(points)
    if n == 0:
        raise InvalidInput("Cannot cluster an empty set of points")

    dist = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            d = 1.0 - similarity(points[i], points[j])
            dist[i, j] = d
            dist[j, i] = d
    return dist


class HierarchicalClusterer:
    """Agglomerative clustering with a configurable linkage rule.

    Parameters
    ----------
    linkage : Linkage
        Cluster distance rule (default: single linkage)
    threshold : float
        Distances at or above this value are never merged (default 1.0,
        i.e. similarity 0 means disconnected)
    """

    def __init__(
        self,
        linkage: Linkage = Linkage.SINGLE,
        threshold: float = CLUSTER_DISTANCE_THRESHOLD,
    ):
        self.linkage = linkage
        self.threshold = threshold

    def cluster(
        self,
        points: Sequence[T],
        similarity: Callable[[T, T], float],
    ) -> List[BinaryTreeNode]:
        """Cluster points with a pairwise similarity callable."""
        return self.cluster_distance_matrix(build_distance_matrix(points, similarity))

    def cluster_distance_matrix(self, distance_matrix: np.ndarray) -> List[BinaryTreeNode]:
        """Cluster points given their (n, n) distance matrix.

        Raises
        ------
        InvalidInput
            If the matrix is empty or not square
        """
        distance_matrix = np.asarray(distance_matrix, dtype=np.float64)
        if distance_matrix.ndim != 2 or distance_matrix.shape[0] != distance_matrix.shape[1]:
            raise InvalidInput(
                f"Distance matrix must be square, got shape {distance_matrix.shape}"
            )
        if distance_matrix.shape[0] == 0:
            raise InvalidInput("Cannot cluster an empty set of points")

        left, right, distance = agglomerate(
            distance_matrix, self.linkage == Linkage.COMPLETE, float(self.threshold)
        )
        return [
            BinaryTreeNode(int(left[i]), int(right[i]), float(distance[i]))
            for i in range(len(left))
        ]

    def extract_clusters(self, tree: List[BinaryTreeNode]) -> List[List[int]]:
        """Flat clusters made of all connected merges of ``tree``."""
        n_points = len(tree) + 1
        return cut(n_points - count_connected_nodes(tree), tree)


def count_connected_nodes(tree: List[BinaryTreeNode]) -> int:
    """Number of tree nodes that are real merges (distance != -1)."""
    return sum(1 for node in tree if node.is_connected)


def cut(n_clusters: int, tree: List[BinaryTreeNode]) -> List[List[int]]:
    """Cut a merge tree into ``n_clusters`` flat clusters.

    The first ``n - n_clusters`` nodes are applied in order, where
    ``n = len(tree) + 1`` is the number of points.

    Returns
    -------
    List[List[int]]
        Clusters of original point indices, each sorted ascending, ordered
        by their smallest member

    Raises
    ------
    InvalidInput
        If ``n_clusters`` is not in [1, n]
    """
    n_points = len(tree) + 1
    if not 1 <= n_clusters <= n_points:
        raise InvalidInput(f"Cannot cut {n_points} points into {n_clusters} clusters")

    clusters: Dict[int, List[int]] = {i: [i] for i in range(n_points)}
    for node in tree[:n_points - n_clusters]:
        clusters[node.left].extend(clusters.pop(node.right))

    return [sorted(clusters[rep]) for rep in sorted(clusters)]


def newick_tree(tree: List[BinaryTreeNode], include_distance: bool = False) -> str:
    """Render a merge tree in Newick format, e.g. ``((0, 1), 2)``.

    Disconnected nodes are rendered like any other node; with
    ``include_distance`` their distance shows as -1.
    """
    n_points = len(tree) + 1
    subtrees: Dict[int, str] = {i: str(i) for i in range(n_points)}
    for node in tree:
        merged = f"({subtrees[node.left]}, {subtrees.pop(node.right)})"
        if include_distance:
            merged += f":{node.distance:g}"
        subtrees[node.left] = merged
    return subtrees[0]
