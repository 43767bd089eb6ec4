"""Distance-threshold clustering using networkx connected components.

Builds an undirected graph whose nodes are document indices and whose
edges join documents at distance ``<= max_distance``.  Connected
components become clusters, so no cluster count is needed up front.
"""

from __future__ import annotations

import networkx as nx

from fact_graph.distance.matrix import DistanceMatrix


def threshold_labels(matrix: DistanceMatrix, max_distance: float) -> list[int]:
    """Label documents by connected component of the threshold graph.

    Args:
        matrix: Pairwise document distances in corpus order.
        max_distance: Largest distance that still links two documents.

    Returns:
        One cluster id per document, numbered by the lowest document
        index in each component.
    """
    n = len(matrix)
    G = nx.Graph()

    # Add all nodes first (documents with no close neighbour stay singletons)
    G.add_nodes_from(range(n))

    for i in range(n):
        for j in range(i + 1, n):
            d = matrix[i, j]
            if d <= max_distance:
                G.add_edge(i, j, weight=d)

    components = sorted((min(c), c) for c in nx.connected_components(G))
    labels = [0] * n
    for cluster_id, (_, component) in enumerate(components):
        for doc in component:
            labels[doc] = cluster_id
    return labels
