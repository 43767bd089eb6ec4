"""Edge-feature histograms of fact graphs.

A graph is summarised by the weighted multiset of its predicate-labeled
edges: each edge contributes its weight to the feature
``(predicate, subject_label, object_label)``.  Endpoints of symmetric
predicates are sorted so a feature never depends on fact direction.
Features whose total weight is not positive are left out, so two graphs
are structurally identical exactly when their histograms are equal.

``vectorize`` turns a corpus of histograms into a sparse document-feature
matrix for the numeric stages (distances, feature reduction, k-means).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

import numpy as np
from scipy import sparse
from sklearn.feature_extraction import DictVectorizer

from fact_graph.graph.extractors import SYMMETRIC_PREDICATES
from fact_graph.graph.model import FactGraph

Feature = tuple[str, str, str]
Histogram = dict[Feature, float]

# Joins the parts of a feature into one DictVectorizer key
_KEY_SEPARATOR = "\x1f"


def edge_histogram(graph: FactGraph) -> Histogram:
    """Compute the weighted edge-feature histogram of ``graph``."""
    histogram: Counter[Feature] = Counter()
    for subject, predicate, obj, weight in graph.labeled_edges():
        if predicate in SYMMETRIC_PREDICATES and obj < subject:
            subject, obj = obj, subject
        histogram[(predicate, subject, obj)] += weight
    return {feature: weight for feature, weight in histogram.items() if weight > 0}


def document_frequencies(graphs: Iterable[FactGraph]) -> Counter[str]:
    """Count, per entity label, the number of graphs mentioning it."""
    counts: Counter[str] = Counter()
    for graph in graphs:
        counts.update(set(graph.node_labels()))
    return counts


def restrict_histogram(histogram: Histogram, vocabulary: frozenset[str]) -> Histogram:
    """Drop features touching an entity outside ``vocabulary``."""
    return {
        feature: weight
        for feature, weight in histogram.items()
        if feature[1] in vocabulary and feature[2] in vocabulary
    }


def corpus_histograms(
    graphs: list[FactGraph], min_document_frequency: int = 1
) -> list[Histogram]:
    """Histograms for a whole corpus, applying the vocabulary filter.

    Entities found in fewer than ``min_document_frequency`` graphs are
    dropped corpus-wide before comparison.
    """
    histograms = [edge_histogram(g) for g in graphs]
    if min_document_frequency <= 1:
        return histograms

    frequencies = document_frequencies(graphs)
    vocabulary = frozenset(
        label for label, count in frequencies.items() if count >= min_document_frequency
    )
    return [restrict_histogram(h, vocabulary) for h in histograms]


def vectorize(histograms: list[Histogram]) -> tuple[sparse.csr_matrix, list[Feature]]:
    """Stack histograms into a sparse ``documents x features`` matrix.

    Columns are the features of the whole corpus in sorted order, so the
    same corpus always yields the same matrix.

    Returns:
        The CSR matrix and the feature of each column.
    """
    if not any(histograms):
        return sparse.csr_matrix((len(histograms), 0), dtype=np.float64), []

    vectorizer = DictVectorizer(dtype=np.float64, sparse=True, sort=True)
    matrix = vectorizer.fit_transform(
        [{_KEY_SEPARATOR.join(f): w for f, w in h.items()} for h in histograms]
    )
    features = [
        tuple(name.split(_KEY_SEPARATOR)) for name in vectorizer.get_feature_names_out()
    ]
    return sparse.csr_matrix(matrix), features
