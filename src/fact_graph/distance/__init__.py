"""Graph distance engine: edge-feature histograms, metrics, and matrices."""

from fact_graph.distance.features import corpus_histograms, edge_histogram, vectorize
from fact_graph.distance.matrix import (
    CorpusFeatures,
    DistanceMatrix,
    compute_distance_matrix,
    corpus_features,
)
from fact_graph.distance.metrics import (
    CosineDistance,
    DistanceMetric,
    EuclideanDistance,
    WeightedJaccardDistance,
    make_metric,
)
from fact_graph.distance.reduction import project, trim_features

__all__ = [
    "CorpusFeatures",
    "CosineDistance",
    "DistanceMatrix",
    "DistanceMetric",
    "EuclideanDistance",
    "WeightedJaccardDistance",
    "compute_distance_matrix",
    "corpus_features",
    "corpus_histograms",
    "edge_histogram",
    "make_metric",
    "project",
    "trim_features",
    "vectorize",
]
