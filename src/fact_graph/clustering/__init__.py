"""Clustering of fact graphs over a precomputed distance matrix.

Agglomerative clustering cut at a configured cluster count,
distance-threshold clustering via networkx connected components, or
k-means over the feature vectors, with cohesion checks to flag loose
clusters.
"""

from .engine import ClusterResult, cluster, resolve_k, validate_cluster_config

__all__ = ["cluster", "resolve_k", "validate_cluster_config", "ClusterResult"]
