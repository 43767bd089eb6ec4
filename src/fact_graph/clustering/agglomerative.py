"""Hierarchical agglomerative clustering over a precomputed distance matrix.

Clusters are identified by their representative, the lowest document
index they contain.  Each step merges the closest pair of clusters;
equally close candidates are ordered by ``(lower representative, higher
representative)`` so the lowest index pair wins.  Cluster-to-cluster
distances are updated with the Lance-Williams formula of the chosen
linkage.  The merge loop is sequential.
"""

from __future__ import annotations

from fact_graph.distance.matrix import DistanceMatrix
from fact_graph.pipeline.config import Linkage

# (distance, lower representative, higher representative)
_Candidate = tuple[float, int, int]


def _linkage_update(
    linkage: Linkage, d_ax: float, d_bx: float, size_a: int, size_b: int
) -> float:
    if linkage == "single":
        return min(d_ax, d_bx)
    if linkage == "complete":
        return max(d_ax, d_bx)
    return (size_a * d_ax + size_b * d_bx) / (size_a + size_b)


def _candidate(dist: list[list[float]], a: int, b: int) -> _Candidate:
    lo, hi = (a, b) if a < b else (b, a)
    return (dist[lo][hi], lo, hi)


def _nearest(dist: list[list[float]], a: int, active: list[int]) -> _Candidate | None:
    best: _Candidate | None = None
    for b in active:
        if b == a:
            continue
        cand = _candidate(dist, a, b)
        if best is None or cand < best:
            best = cand
    return best


def agglomerative_labels(
    matrix: DistanceMatrix, k: int, linkage: Linkage = "average"
) -> list[int]:
    """Merge clusters until ``k`` remain and label every document.

    Args:
        matrix: Pairwise document distances in corpus order.
        k: Target number of clusters, ``1 <= k <= len(matrix)``.
        linkage: ``"single"``, ``"complete"`` or ``"average"``.

    Returns:
        One cluster id per document.  Ids are numbered by the lowest
        document index in each cluster, so the first document is always
        in cluster 0.
    """
    n = len(matrix)
    if not 1 <= k <= n:
        raise ValueError(f"k must be between 1 and {n}, got {k}")

    dist = matrix.to_lists()
    active = list(range(n))
    sizes = [1] * n
    members: list[list[int]] = [[i] for i in range(n)]
    nearest: dict[int, _Candidate | None] = {a: _nearest(dist, a, active) for a in active}

    while len(active) > k:
        _, a, b = min(c for c in (nearest[x] for x in active) if c is not None)

        # merge b into a; a < b so the representative stays the lowest index
        active.remove(b)
        del nearest[b]
        for x in active:
            if x == a:
                continue
            d = _linkage_update(linkage, dist[a][x], dist[b][x], sizes[a], sizes[b])
            dist[a][x] = dist[x][a] = d
        sizes[a] += sizes[b]
        members[a].extend(members[b])

        nearest[a] = _nearest(dist, a, active)
        for x in active:
            if x == a:
                continue
            current = nearest[x]
            if current is not None and (current[1] in (a, b) or current[2] in (a, b)):
                nearest[x] = _nearest(dist, x, active)
            else:
                cand = _candidate(dist, x, a)
                if current is None or cand < current:
                    nearest[x] = cand

    labels = [0] * n
    for cluster_id, rep in enumerate(active):
        for doc in members[rep]:
            labels[doc] = cluster_id
    return labels
