"""Pairwise distance matrix over a corpus of fact graphs.

Graphs are reduced to edge-feature histograms once, stacked into a
sparse ``documents x features`` matrix, optionally trimmed and projected
(``fact_graph.distance.reduction``), and compared all-pairs with the
configured metric.  With ``workers > 1`` scikit-learn spreads the row
blocks over ``workers`` jobs.  The upper triangle of the result is
mirrored onto the lower one, so the matrix is exactly symmetric.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import structlog
from scipy import sparse

from fact_graph.distance.features import Histogram, corpus_histograms, vectorize
from fact_graph.distance.metrics import make_metric
from fact_graph.distance.reduction import project, trim_features
from fact_graph.graph.model import FactGraph
from fact_graph.pipeline.config import DistanceConfig

logger = structlog.get_logger()

# Metric asymmetries below this are rounding noise
_TRIANGLE_TOLERANCE = 1e-9
# Triangle checks are cubic; larger corpora skip them
_TRIANGLE_CHECK_LIMIT = 200


class DistanceMatrix:
    """Symmetric, zero-diagonal, read-only N x N distance matrix."""

    def __init__(self, rows: Sequence[Sequence[float]] | np.ndarray) -> None:
        if not isinstance(rows, np.ndarray):
            n = len(rows)
            for i, row in enumerate(rows):
                if len(row) != n:
                    raise ValueError(f"Row {i} has {len(row)} entries, expected {n}")
        data = np.array(rows, dtype=np.float64)
        if data.size == 0:
            data = data.reshape(0, 0)
        if data.ndim != 2 or data.shape[0] != data.shape[1]:
            raise ValueError(f"Matrix has shape {data.shape}, expected a square matrix")

        diagonal = np.flatnonzero(np.diag(data) != 0.0)
        if diagonal.size:
            i = int(diagonal[0])
            raise ValueError(f"Diagonal entry ({i}, {i}) is {data[i, i]}, expected 0")
        invalid = np.argwhere(np.isnan(data) | (data < 0))
        if invalid.size:
            i, j = invalid[0]
            raise ValueError(f"Invalid distance {data[i, j]} at ({i}, {j})")
        asymmetric = np.argwhere(np.triu(data != data.T, 1))
        if asymmetric.size:
            i, j = asymmetric[0]
            raise ValueError(f"Matrix is not symmetric at ({i}, {j})")

        data.setflags(write=False)
        self._data = data

    def __len__(self) -> int:
        return self._data.shape[0]

    def __getitem__(self, index: tuple[int, int]) -> float:
        i, j = index
        return float(self._data[i, j])

    @property
    def values(self) -> np.ndarray:
        """The underlying read-only array."""
        return self._data

    def row(self, i: int) -> tuple[float, ...]:
        return tuple(self._data[i].tolist())

    def to_lists(self) -> list[list[float]]:
        return self._data.tolist()

    def triangle_violations(self, tolerance: float = _TRIANGLE_TOLERANCE) -> int:
        """Count ordered triples with ``d(i, k) > d(i, j) + d(j, k)``, ``i < k``.

        Cubic in the corpus size; intended for diagnostics on small corpora.
        """
        d = self._data
        count = 0
        for j in range(len(self)):
            detour = d[:, j][:, None] + d[j, :][None, :] + tolerance
            count += int(np.triu(d > detour, 1).sum())
        return count


@dataclass(frozen=True)
class CorpusFeatures:
    """Feature vectors of a corpus, one row per graph in corpus order.

    Attributes:
        histograms: Edge-feature histograms after the vocabulary filter.
        vectors: The (possibly trimmed and projected) feature matrix,
            sparse unless it was projected.
    """

    histograms: list[Histogram]
    vectors: sparse.csr_matrix | np.ndarray

    def __len__(self) -> int:
        return len(self.histograms)

    @property
    def n_features(self) -> int:
        return self.vectors.shape[1]

    def identical(self) -> np.ndarray:
        """Boolean N x N mask of graph pairs with equal histograms."""
        index: dict[tuple, int] = {}
        groups = np.array(
            [index.setdefault(tuple(sorted(h.items())), len(index)) for h in self.histograms],
            dtype=np.intp,
        )
        return groups[:, None] == groups[None, :]

    def dense(self) -> np.ndarray:
        """Dense feature rows with at least one column."""
        X = self.vectors.toarray() if sparse.issparse(self.vectors) else self.vectors
        if X.shape[1] == 0:
            return np.zeros((X.shape[0], 1))
        return np.asarray(X, dtype=np.float64)


def corpus_features(
    graphs: Sequence[FactGraph], config: DistanceConfig | None = None
) -> CorpusFeatures:
    """Vectorise ``graphs`` and apply the configured feature reduction."""
    if config is None:
        config = DistanceConfig()

    histograms = corpus_histograms(list(graphs), config.min_document_frequency)
    vectors, columns = vectorize(histograms)
    vectors, kept = trim_features(
        vectors, config.min_feature_std, config.min_feature_mean_std_ratio
    )
    if config.pca_components is not None:
        vectors = project(vectors, config.pca_components)

    if len(kept) != len(columns) or config.pca_components is not None:
        logger.info(
            "features_reduced",
            features=len(columns),
            kept=len(kept),
            dimensions=vectors.shape[1],
        )
    return CorpusFeatures(histograms=histograms, vectors=vectors)


def compute_distance_matrix(
    graphs: Sequence[FactGraph],
    config: DistanceConfig | None = None,
    workers: int = 1,
    features: CorpusFeatures | None = None,
) -> DistanceMatrix:
    """Compute all pairwise distances between ``graphs``.

    Args:
        graphs: Fact graphs in corpus order.
        config: Distance metric, vocabulary filter, and reduction settings.
        workers: Number of parallel jobs (1 = compute in-process).
        features: Precomputed ``corpus_features(graphs, config)``.

    Returns:
        The distance matrix, rows and columns in corpus order.
    """
    if config is None:
        config = DistanceConfig()
    if features is None:
        features = corpus_features(graphs, config)

    metric = make_metric(config)
    n = len(features)
    if n == 0 or features.n_features == 0:
        full = np.zeros((n, n))
    else:
        full = metric.pairwise(features.vectors, n_jobs=workers)

    upper = np.triu(full, 1)
    distances = upper + upper.T
    distances[features.identical()] = 0.0

    matrix = DistanceMatrix(distances)
    logger.info(
        "distance_matrix_computed",
        documents=n,
        metric=metric.name,
        features=features.n_features,
        empty_histograms=sum(1 for h in features.histograms if not h),
    )
    if not metric.is_metric and n <= _TRIANGLE_CHECK_LIMIT:
        violations = matrix.triangle_violations()
        if violations:
            logger.warning(
                "triangle_inequality_violations", metric=metric.name, count=violations
            )
    return matrix
