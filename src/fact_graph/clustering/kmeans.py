"""K-means clustering over document feature vectors.

Unlike the other policies this one works on the feature matrix rather
than on pairwise distances.  The seed is fixed by configuration, so a
run is reproducible.  Labels are renumbered in order of first
appearance: document 0 is always in cluster 0.
"""

from __future__ import annotations

import numpy as np
import structlog
from sklearn.cluster import KMeans

logger = structlog.get_logger()


def kmeans_labels(
    vectors: np.ndarray,
    k: int,
    random_state: int = 0,
    n_init: int = 10,
) -> list[int]:
    """Partition the rows of ``vectors`` into at most ``k`` clusters.

    Raises:
        ValueError: If ``k`` is not in ``1..len(vectors)``.
    """
    n = vectors.shape[0]
    if not 1 <= k <= n:
        raise ValueError(f"k must be between 1 and {n}, got {k}")

    model = KMeans(n_clusters=k, random_state=random_state, n_init=n_init)
    raw = model.fit_predict(vectors)

    renumbered: dict[int, int] = {}
    labels = [renumbered.setdefault(int(c), len(renumbered)) for c in raw]
    if len(renumbered) < k:
        # fewer distinct points than clusters
        logger.warning("kmeans_fewer_clusters", requested=k, found=len(renumbered))
    return labels
