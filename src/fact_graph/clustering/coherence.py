"""Cohesion checks for predicted clusters.

A cluster is "cohesive" when its documents are genuinely close to each
other.  Over-large or loose clusters are flagged for inspection; the
flag is diagnostic and never changes the assignment.
"""

from __future__ import annotations

from fact_graph.distance.matrix import DistanceMatrix
from fact_graph.pipeline.config import ClusterConfig


def mean_internal_distance(cluster: list[int], matrix: DistanceMatrix) -> float:
    """Average pairwise distance between members; 0.0 for singletons."""
    pairs = [
        matrix[a, b]
        for i, a in enumerate(cluster)
        for b in cluster[i + 1 :]
    ]
    if not pairs:
        return 0.0
    return sum(pairs) / len(pairs)


def is_cluster_cohesive(
    cluster: list[int],
    matrix: DistanceMatrix,
    config: ClusterConfig,
) -> bool:
    """Check whether a cluster passes all cohesion checks.

    Checks performed (in order, short-circuiting on first failure):

    1. **Size check** -- cluster must not exceed ``max_cluster_size``
       (skipped when unset).
    2. **Internal distance** -- mean pairwise distance between members
       must be at most ``max_internal_distance``.

    Args:
        cluster: Document indices forming the cluster.
        matrix: The corpus distance matrix.
        config: Clustering constraints.

    Returns:
        ``True`` if the cluster is cohesive, ``False`` otherwise.
    """
    # Size check
    if config.max_cluster_size is not None and len(cluster) > config.max_cluster_size:
        return False

    # Internal distance check
    return mean_internal_distance(cluster, matrix) <= config.max_internal_distance
