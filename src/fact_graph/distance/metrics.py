"""Graph distance metrics over edge-feature vectors.

Every metric is symmetric, non-negative, exactly zero for equal
histograms, and finite for empty graphs.  Pairwise distances are
computed with ``sklearn.metrics.pairwise_distances`` over the
``documents x features`` matrix built by ``vectorize``.

Empty graphs are maximal-distance outliers: two empty graphs are at
distance 0, and an empty graph is at the metric's maximum distance from
every non-empty graph (1.0 for the bounded metrics, the other graph's
norm for Euclidean distance).
"""

from __future__ import annotations

from typing import Protocol

import numpy as np
from sklearn.metrics import pairwise_distances

from fact_graph.distance.features import edge_histogram, vectorize
from fact_graph.errors import ConfigurationError
from fact_graph.graph.model import FactGraph
from fact_graph.pipeline.config import DistanceConfig


class DistanceMetric(Protocol):
    """Capability interface for graph distances."""

    name: str
    is_metric: bool

    def distance(self, g1: FactGraph, g2: FactGraph) -> float: ...

    def pairwise(self, X, n_jobs: int = 1) -> np.ndarray: ...


class _VectorMetric:
    name = ""
    is_metric = True

    def distance(self, g1: FactGraph, g2: FactGraph) -> float:
        h1, h2 = edge_histogram(g1), edge_histogram(g2)
        if h1 == h2:
            return 0.0
        # a fixed row order keeps d(g1, g2) == d(g2, g1) bit for bit
        pair = sorted((h1, h2), key=lambda h: sorted(h.items()))
        X, _ = vectorize(pair)
        return float(self.pairwise(X)[0, 1])

    def pairwise(self, X, n_jobs: int = 1) -> np.ndarray:
        """All-pairs distances between the rows of ``X``."""
        raise NotImplementedError


class WeightedJaccardDistance(_VectorMetric):
    """``1 - sum(min) / sum(max)`` over histogram features (Ruzicka distance).

    For non-negative vectors ``sum(min) = (|x| + |y| - L1) / 2`` and
    ``sum(max) = (|x| + |y| + L1) / 2``, so the distance is
    ``2 * L1 / (|x| + |y| + L1)`` with ``L1`` the Manhattan distance.
    A true metric bounded in [0, 1].
    """

    name = "weighted_jaccard"

    def pairwise(self, X, n_jobs: int = 1) -> np.ndarray:
        l1 = pairwise_distances(X, metric="manhattan", n_jobs=n_jobs)
        sums = np.asarray(X.sum(axis=1), dtype=np.float64).ravel()
        upper = sums[:, None] + sums[None, :] + l1
        d = np.divide(2.0 * l1, upper, out=np.zeros_like(l1), where=upper > 0)
        return np.clip(d, 0.0, 1.0)


class CosineDistance(_VectorMetric):
    """``1 - cos(h1, h2)``, clamped to [0, 1].

    Histograms that differ only by a positive scale factor are at
    distance 0 (up to rounding).  Not a metric, but close enough for
    clustering.
    """

    name = "cosine"
    is_metric = False

    def pairwise(self, X, n_jobs: int = 1) -> np.ndarray:
        return np.clip(pairwise_distances(X, metric="cosine", n_jobs=n_jobs), 0.0, 1.0)


class EuclideanDistance(_VectorMetric):
    """L2 distance between histograms.  A metric, unbounded above."""

    name = "euclidean"

    def pairwise(self, X, n_jobs: int = 1) -> np.ndarray:
        return pairwise_distances(X, metric="euclidean", n_jobs=n_jobs)


_METRICS: dict[str, type[_VectorMetric]] = {
    WeightedJaccardDistance.name: WeightedJaccardDistance,
    CosineDistance.name: CosineDistance,
    EuclideanDistance.name: EuclideanDistance,
}


def make_metric(config: DistanceConfig | str) -> DistanceMetric:
    """Instantiate the metric named in ``config`` (or by a bare name).

    Raises:
        ConfigurationError: If the metric name is unknown.
    """
    name = config if isinstance(config, str) else config.metric
    try:
        return _METRICS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown distance metric: {name!r} (expected one of {sorted(_METRICS)})"
        ) from None
