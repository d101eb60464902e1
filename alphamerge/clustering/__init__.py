"""Precursor similarity and hierarchical clustering.

This module provides:
- PrecursorSimilarity functor over (RT, m/z) points
- Agglomerative single/complete linkage clustering with a disconnect threshold
- Tree cutting into flat clusters and Newick rendering
"""

from .similarity import (
    PrecursorSimilarity,
    precursor_similarity,
    precursor_similarity_matrix,
)

from .hierarchical import (
    BinaryTreeNode,
    HierarchicalClusterer,
    Linkage,
    agglomerate,
    build_distance_matrix,
    count_connected_nodes,
    cut,
    newick_tree,
)

__all__ = [
    # Similarity
    'PrecursorSimilarity',
    'precursor_similarity',
    'precursor_similarity_matrix',

    # Hierarchical clustering
    'BinaryTreeNode',
    'HierarchicalClusterer',
    'Linkage',
    'agglomerate',
    'build_distance_matrix',
    'count_connected_nodes',
    'cut',
    'newick_tree',
]
